import logging

from django.conf import settings
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.services.lifecycle import can_view_booking, get_booking, get_booking_by_reference
from core.exceptions import BookingError, Forbidden

from .serializers import GuestPaymentSerializer, PaymentInitSerializer, PaymentSerializer
from .services.checkout import initiate_payment
from .services.gateway import get_gateway
from .services.ledger import payments_for_booking, payments_for_guest
from .services.reconciliation import ReconciliationEngine
from .webhooks import PaystackWebhook

logger = logging.getLogger(__name__)


class PaymentInitView(APIView):
    """Start a Paystack charge for one of the caller's bookings."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = PaymentInitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = initiate_payment(
            booking_id=serializer.validated_data["booking_id"],
            payer=request.user,
            gateway=get_gateway(),
        )
        return Response(
            {
                "authorization_url": result.authorization_url,
                "access_code": result.access_code,
                "reference": result.reference,
            }
        )


class PaymentVerifyView(APIView):
    """Ask the provider about a reference and sync the booking if it was paid."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, reference, *args, **kwargs):
        booking = get_booking_by_reference(reference)
        if booking is not None and not can_view_booking(request.user, booking):
            raise Forbidden("Not your booking.")

        engine = ReconciliationEngine(gateway=get_gateway())
        outcome = engine.verify(reference)
        return Response(
            {
                "reference": outcome.reference,
                "provider_status": outcome.provider_status,
                "synced": outcome.synced,
            }
        )


class MyPaymentsView(generics.ListAPIView):
    serializer_class = GuestPaymentSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return payments_for_guest(self.request.user)


class BookingPaymentsView(generics.ListAPIView):
    serializer_class = PaymentSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        booking = get_booking(self.kwargs["booking_id"])
        if not can_view_booking(self.request.user, booking):
            raise Forbidden("Not your booking.")
        return payments_for_booking(booking.pk)


class PaystackWebhookView(APIView):
    """
    Receive Paystack events.

    Reads ``request.body`` before anything touches ``request.data`` so the
    HMAC is computed over the exact bytes Paystack signed.
    """

    permission_classes: list = []
    authentication_classes: list = []
    throttle_classes: list = []

    def post(self, request, *args, **kwargs):
        payload = request.body
        signature = request.META.get("HTTP_X_PAYSTACK_SIGNATURE", "")
        if not settings.PAYSTACK_SECRET_KEY:
            logger.error("Paystack webhook secret not configured.")
            return Response(status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        webhook = PaystackWebhook(
            secret=settings.PAYSTACK_SECRET_KEY,
            engine=ReconciliationEngine(),
        )
        try:
            outcome = webhook.handle(payload, signature)
        except BookingError:
            raise
        except Exception:
            logger.exception("Paystack webhook processing failed")
            return Response(status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({"received": True, "outcome": outcome}, status=status.HTTP_200_OK)
