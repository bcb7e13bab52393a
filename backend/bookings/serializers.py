from rest_framework import serializers

from bookings.models import Booking


class BookingCreateSerializer(serializers.Serializer):
    property_id = serializers.UUIDField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()


class PropertySummarySerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    title = serializers.CharField(read_only=True)
    city = serializers.CharField(read_only=True)
    host_id = serializers.IntegerField(read_only=True)


class GuestSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    email = serializers.EmailField(read_only=True)
    display_name = serializers.CharField(read_only=True)


class BookingSerializer(serializers.ModelSerializer):
    property = PropertySummarySerializer(read_only=True)
    guest_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "property",
            "guest_id",
            "start_date",
            "end_date",
            "status",
            "payment_status",
            "payment_ref",
            "amount",
            "currency",
            "created_at",
        ]
        read_only_fields = fields


class HostBookingSerializer(BookingSerializer):
    guest = GuestSummarySerializer(read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ["guest"]
        read_only_fields = fields
