from __future__ import annotations

import logging
import time
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings

from bookings.models import Booking
from bookings.services.lifecycle import get_booking, set_payment_init
from core.exceptions import AlreadyInitiated, Forbidden, InvalidRange, InvalidTransition

from .gateway import Initialization

logger = logging.getLogger(__name__)

MINOR_UNITS = Decimal("100")


def to_minor_units(amount: Decimal) -> int:
    return int((Decimal(amount) * MINOR_UNITS).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def booking_total_minor(booking: Booking) -> int:
    """Nightly price times nights, in minor units."""
    nights = booking.nights
    if nights <= 0:
        raise InvalidRange("Invalid dates.")
    return to_minor_units(booking.property.nightly_price * nights)


def build_reference(booking: Booking) -> str:
    return f"pay_{booking.pk}_{int(time.time() * 1000)}"


def initiate_payment(*, booking_id, payer, gateway) -> Initialization:
    """
    Start a provider charge for the payer's own PENDING booking.

    The provider is called before anything is written, so a failed call leaves
    the booking untouched; the reference is persisted only after the provider
    accepted it and before the result is returned.
    """
    booking = get_booking(booking_id)
    if booking.guest_id != payer.pk:
        raise Forbidden("Not your booking.")
    if booking.status != Booking.PENDING:
        raise InvalidTransition(f"Cannot pay for a {booking.status} booking.")
    if booking.payment_ref:
        raise AlreadyInitiated()

    amount = booking_total_minor(booking)
    currency = settings.PAYSTACK_CURRENCY
    reference = build_reference(booking)

    result = gateway.initiate(
        reference=reference,
        amount=amount,
        currency=currency,
        email=booking.guest.email,
        callback_url=settings.PAYSTACK_CALLBACK_URL or None,
    )
    set_payment_init(booking.pk, reference=result.reference, amount=amount, currency=currency)
    logger.info("Payment %s initiated for booking %s (%s %s)", result.reference, booking.pk, amount, currency)
    return result
