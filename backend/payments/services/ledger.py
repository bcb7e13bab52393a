from __future__ import annotations

from django.db.models import QuerySet

from payments.models import Payment


def record_settlement(
    *,
    reference: str,
    booking,
    amount: int,
    currency: str,
    raw_payload: dict | None = None,
) -> tuple[Payment, bool]:
    """
    Insert the ledger row for ``reference`` unless one already exists.

    ``get_or_create`` runs the insert in a savepoint and falls back to a read
    when the unique constraint rejects a concurrent duplicate, so callers get
    the surviving row either way.
    """
    return Payment.objects.get_or_create(
        reference=reference,
        defaults={
            "booking": booking,
            "amount": amount,
            "currency": currency,
            "status": Payment.SUCCESS,
            "raw": raw_payload or {},
        },
    )


def exists(reference: str) -> bool:
    return Payment.objects.filter(reference=reference).exists()


def payments_for_guest(guest) -> QuerySet:
    return (
        Payment.objects.filter(booking__guest=guest)
        .select_related("booking__property")
        .order_by("-created_at")
    )


def payments_for_booking(booking_id) -> QuerySet:
    return Payment.objects.filter(booking_id=booking_id).order_by("-created_at")
