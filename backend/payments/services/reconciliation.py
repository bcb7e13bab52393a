"""
Settlement of provider-confirmed charges.

Both the webhook and the on-demand verify endpoint end up in
``ReconciliationEngine.settle``, the only code that writes a ledger row and
the matching booking state. It is safe to call any number of times, in any
order, from either path.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.conf import settings
from django.db import transaction

from bookings.models import Booking
from bookings.services.emails import BookingNotifier
from bookings.services.lifecycle import get_booking_by_reference
from core.exceptions import NotFound
from payments.models import Payment

from . import ledger
from .gateway import STATUS_SUCCESS

logger = logging.getLogger(__name__)


@dataclass
class Settlement:
    booking: Booking
    payment: Payment
    newly_settled: bool


@dataclass
class VerifyOutcome:
    reference: str
    provider_status: str
    synced: bool


class ReconciliationEngine:
    def __init__(self, *, gateway=None, notifier: BookingNotifier | None = None):
        self.gateway = gateway
        self.notifier = notifier or BookingNotifier()

    def settle(
        self,
        *,
        reference: str,
        booking_id=None,
        amount: int | None = None,
        currency: str | None = None,
        raw_payload: dict | None = None,
    ) -> Settlement:
        """
        Mark the booking paid and approved and record the ledger row, atomically.

        The booking row is locked first so concurrent settles for the same
        reference serialize; the booking write sets a fixed target state and the
        ledger insert is keyed on ``reference``, so repeats converge.
        """
        with transaction.atomic():
            lookup = {"pk": booking_id} if booking_id is not None else {"payment_ref": reference}
            booking = (
                Booking.objects.select_for_update(of=("self",))
                .select_related("property", "guest")
                .filter(**lookup)
                .first()
            )
            if booking is None:
                raise NotFound(f"No booking for reference {reference}.")

            was_settled = booking.payment_status == Booking.PAYMENT_SUCCESS
            if ledger.exists(reference) and not was_settled:
                logger.warning("Ledger already has %s but booking %s is not settled; repairing", reference, booking.pk)

            Booking.objects.filter(pk=booking.pk).update(
                payment_status=Booking.PAYMENT_SUCCESS,
                status=Booking.APPROVED,
            )
            booking.payment_status = Booking.PAYMENT_SUCCESS
            booking.status = Booking.APPROVED

            payment, created = ledger.record_settlement(
                reference=reference,
                booking=booking,
                amount=amount if amount is not None else (booking.amount or 0),
                currency=currency or booking.currency or settings.PAYSTACK_CURRENCY,
                raw_payload=raw_payload,
            )

            newly_settled = created or not was_settled
            if newly_settled:
                logger.info("Settled %s for booking %s", reference, booking.pk)
                self.notifier.payment_succeeded(booking, payment.amount, payment.currency, reference)
            else:
                logger.info("Settlement %s already recorded; nothing to do", reference)

        return Settlement(booking=booking, payment=payment, newly_settled=newly_settled)

    def verify(self, reference: str) -> VerifyOutcome:
        """
        Poll the provider for ``reference`` and settle locally when it reports
        success and the booking has not caught up yet. Otherwise this is a read.
        """
        result = self.gateway.verify(reference)
        booking = get_booking_by_reference(reference)

        if (
            result.provider_status == STATUS_SUCCESS
            and booking is not None
            and booking.payment_status != Booking.PAYMENT_SUCCESS
        ):
            self.settle(
                reference=reference,
                booking_id=booking.pk,
                amount=result.amount,
                currency=result.currency,
                raw_payload=result.raw,
            )

        return VerifyOutcome(
            reference=reference,
            provider_status=result.provider_status,
            synced=booking is not None,
        )
