"""
Booking store operations.

All status changes go through :func:`transition_status`, which only moves a
booking out of PENDING and never back. Payment fields are written once by
:func:`set_payment_init`; settlement lives in ``payments.services``.
"""
from __future__ import annotations

import logging
from datetime import date

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import QuerySet

from bookings.models import Booking
from bookings.services.emails import BookingNotifier
from core.exceptions import (
    AlreadyInitiated,
    Forbidden,
    InvalidRange,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from properties.models import Property

logger = logging.getLogger(__name__)

HOST_DECISIONS = {Booking.APPROVED, Booking.REJECTED}
TARGET_STATUSES = HOST_DECISIONS | {Booking.CANCELLED}


def _lookup(queryset: QuerySet, **filters):
    try:
        return queryset.get(**filters)
    except (queryset.model.DoesNotExist, DjangoValidationError, ValueError):
        return None


def create_booking(
    *,
    guest,
    property_id,
    start_date: date,
    end_date: date,
    notifier: BookingNotifier | None = None,
) -> Booking:
    if end_date <= start_date:
        raise InvalidRange()

    prop = _lookup(Property.objects.select_related("host"), pk=property_id)
    if prop is None:
        raise NotFound("Property not found.")
    if not prop.is_bookable:
        raise ValidationError("Property is not bookable.")

    booking = Booking.objects.create(
        property=prop,
        guest=guest,
        start_date=start_date,
        end_date=end_date,
        status=Booking.PENDING,
        payment_status=Booking.PAYMENT_NONE,
    )
    logger.info("Booking %s created by %s for property %s", booking.pk, guest.pk, prop.pk)
    (notifier or BookingNotifier()).booking_requested(booking)
    return booking


def get_booking(booking_id) -> Booking:
    booking = _lookup(Booking.objects.select_related("property__host", "guest"), pk=booking_id)
    if booking is None:
        raise NotFound("Booking not found.")
    return booking


def get_booking_by_reference(reference: str) -> Booking | None:
    if not reference:
        return None
    return _lookup(Booking.objects.select_related("property__host", "guest"), payment_ref=reference)


def bookings_for_guest(guest) -> QuerySet:
    return (
        Booking.objects.filter(guest=guest)
        .select_related("property")
        .order_by("-created_at")
    )


def bookings_for_host(user) -> QuerySet:
    """Bookings on the user's properties, or every booking for admins."""
    queryset = Booking.objects.select_related("property", "guest").order_by("-created_at")
    if user.is_admin:
        return queryset
    return queryset.filter(property__host=user)


def can_view_booking(user, booking: Booking) -> bool:
    return user.is_admin or booking.guest_id == user.pk or booking.property.host_id == user.pk


def _ensure_actor_may(booking: Booking, target: str, actor) -> None:
    if target == Booking.CANCELLED:
        if booking.guest_id != actor.pk:
            raise Forbidden("Not your booking.")
        return
    if actor.is_admin:
        return
    if not actor.is_host or booking.property.host_id != actor.pk:
        raise Forbidden("Not your property.")


def transition_status(
    booking_id,
    target: str,
    actor,
    *,
    notifier: BookingNotifier | None = None,
) -> Booking:
    """Move a PENDING booking to APPROVED, REJECTED or CANCELLED."""
    if target not in TARGET_STATUSES:
        raise ValidationError(f"Unsupported status {target!r}.")

    with transaction.atomic():
        booking = _lookup(
            Booking.objects.select_for_update(of=("self",)).select_related("property__host", "guest"),
            pk=booking_id,
        )
        if booking is None:
            raise NotFound("Booking not found.")

        _ensure_actor_may(booking, target, actor)
        if booking.status != Booking.PENDING:
            raise InvalidTransition(
                f"Only PENDING bookings can be moved to {target}; this one is {booking.status}."
            )

        booking.status = target
        booking.save(update_fields=["status"])
        logger.info("Booking %s moved to %s by %s", booking.pk, target, actor.pk)
        (notifier or BookingNotifier()).booking_status_changed(booking)

    return booking


def set_payment_init(booking_id, *, reference: str, amount: int, currency: str) -> Booking:
    """
    Record the charge reference once, and only while the booking is PENDING.

    A second call fails with AlreadyInitiated; a booking that left PENDING
    meanwhile fails with InvalidTransition and keeps its payment fields empty.
    """
    updated = Booking.objects.filter(
        pk=booking_id,
        status=Booking.PENDING,
        payment_ref__isnull=True,
    ).update(
        payment_ref=reference,
        amount=amount,
        currency=currency,
        payment_status=Booking.PAYMENT_INITIATED,
    )
    if not updated:
        current = Booking.objects.filter(pk=booking_id).values("status", "payment_ref").first()
        if current is None:
            raise NotFound("Booking not found.")
        if current["payment_ref"]:
            raise AlreadyInitiated()
        logger.warning("Payment %s not recorded: booking %s is %s", reference, booking_id, current["status"])
        raise InvalidTransition(f"Cannot pay for a {current['status']} booking.")
    return get_booking(booking_id)
