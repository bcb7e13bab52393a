from rest_framework import serializers

from .models import Property


class HostSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    email = serializers.EmailField(read_only=True)
    display_name = serializers.CharField(read_only=True)


class PropertySerializer(serializers.ModelSerializer):
    host = HostSummarySerializer(read_only=True)

    class Meta:
        model = Property
        fields = [
            "id",
            "title",
            "city",
            "lat",
            "lng",
            "nightly_price",
            "status",
            "host",
            "created_at",
        ]
        read_only_fields = ["id", "host", "created_at"]
