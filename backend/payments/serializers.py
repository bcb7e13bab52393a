from rest_framework import serializers

from payments.models import Payment


class PaymentInitSerializer(serializers.Serializer):
    booking_id = serializers.UUIDField()


class PaymentBookingSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    start_date = serializers.DateField(read_only=True)
    end_date = serializers.DateField(read_only=True)
    payment_status = serializers.CharField(read_only=True)
    property_id = serializers.UUIDField(read_only=True)
    property_title = serializers.CharField(source="property.title", read_only=True)


class PaymentSerializer(serializers.ModelSerializer):
    booking_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "reference",
            "booking_id",
            "amount",
            "currency",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class GuestPaymentSerializer(PaymentSerializer):
    booking = PaymentBookingSummarySerializer(read_only=True)

    class Meta(PaymentSerializer.Meta):
        fields = PaymentSerializer.Meta.fields + ["booking"]
        read_only_fields = fields
