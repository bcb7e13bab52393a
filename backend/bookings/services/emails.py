from __future__ import annotations

import logging
from typing import Callable

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction

from bookings.models import Booking

logger = logging.getLogger(__name__)


def _format_dates(booking: Booking) -> str:
    return f"{booking.start_date:%Y-%m-%d} to {booking.end_date:%Y-%m-%d}"


def _format_amount(amount: int, currency: str) -> str:
    return f"{amount / 100:.2f} {currency}"


def _send(subject: str, lines: list[str], recipient: str | None):
    if not recipient:
        logger.info("Skipping notification %r: no recipient", subject)
        return
    send_mail(
        subject,
        "\n".join(lines),
        settings.DEFAULT_FROM_EMAIL,
        [recipient],
        fail_silently=False,
    )


class BookingNotifier:
    """
    Email the counterparty when a booking or its payment changes state.

    Delivery is best effort: every message is sent after the surrounding
    transaction commits and a failure is logged, never raised.
    """

    def dispatch(self, callback: Callable[..., None], *args) -> None:
        def _deliver():
            try:
                callback(*args)
            except Exception as exc:
                logger.warning(
                    "Notification %s failed: %s",
                    getattr(callback, "__name__", callback),
                    exc,
                    exc_info=True,
                )

        transaction.on_commit(_deliver)

    def booking_requested(self, booking: Booking) -> None:
        self.dispatch(self.send_booking_requested, booking)

    def booking_status_changed(self, booking: Booking) -> None:
        if booking.status == Booking.CANCELLED:
            self.dispatch(self.send_booking_cancelled, booking)
        else:
            self.dispatch(self.send_booking_status, booking)

    def payment_succeeded(self, booking: Booking, amount: int, currency: str, reference: str) -> None:
        self.dispatch(self.send_payment_success, booking, amount, currency, reference)

    def send_booking_requested(self, booking: Booking):
        prop = booking.property
        _send(
            f"New booking request for {prop.title}",
            [
                f"You have a new booking from {booking.guest.email} for {prop.title}.",
                f"Dates: {_format_dates(booking)}.",
            ],
            prop.host.email,
        )

    def send_booking_status(self, booking: Booking):
        prop = booking.property
        _send(
            f"Your booking was {booking.status}",
            [f"Your booking for {prop.title} ({_format_dates(booking)}) is now {booking.status}."],
            booking.guest.email,
        )

    def send_booking_cancelled(self, booking: Booking):
        prop = booking.property
        _send(
            f"Booking cancelled for {prop.title}",
            [f"{booking.guest.email} cancelled their booking for {prop.title} ({_format_dates(booking)})."],
            prop.host.email,
        )

    def send_payment_success(self, booking: Booking, amount: int, currency: str, reference: str):
        prop = booking.property
        _send(
            f"Payment successful for {prop.title}",
            [
                f"Your payment of {_format_amount(amount, currency)} for {prop.title} succeeded.",
                f"Ref: {reference}",
            ],
            booking.guest.email,
        )
