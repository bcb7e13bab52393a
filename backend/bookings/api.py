from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsHostOrAdmin
from bookings.models import Booking
from bookings.serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    HostBookingSerializer,
)
from bookings.services.lifecycle import (
    bookings_for_guest,
    bookings_for_host,
    create_booking,
    transition_status,
)


class BookingCreateView(APIView):
    """Request a stay; the booking starts PENDING with no payment."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = create_booking(
            guest=request.user,
            property_id=data["property_id"],
            start_date=data["check_in"],
            end_date=data["check_out"],
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class MyBookingsView(generics.ListAPIView):
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return bookings_for_guest(self.request.user)


class HostBookingsView(generics.ListAPIView):
    """Bookings on the host's own properties; admins see everything."""

    serializer_class = HostBookingSerializer
    permission_classes = [permissions.IsAuthenticated, IsHostOrAdmin]
    filterset_fields = ["status", "payment_status"]
    ordering_fields = ["created_at", "start_date"]

    def get_queryset(self):
        return bookings_for_host(self.request.user)


class BookingTransitionView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    target_status: str = ""

    def patch(self, request, booking_id, *args, **kwargs):
        booking = transition_status(booking_id, self.target_status, request.user)
        return Response(BookingSerializer(booking).data)


class BookingApproveView(BookingTransitionView):
    permission_classes = [permissions.IsAuthenticated, IsHostOrAdmin]
    target_status = Booking.APPROVED


class BookingRejectView(BookingTransitionView):
    permission_classes = [permissions.IsAuthenticated, IsHostOrAdmin]
    target_status = Booking.REJECTED


class BookingCancelView(BookingTransitionView):
    target_status = Booking.CANCELLED
