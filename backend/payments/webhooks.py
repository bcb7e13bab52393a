from __future__ import annotations

import hashlib
import hmac
import json
import logging

from bookings.services.lifecycle import get_booking_by_reference
from core.exceptions import Unauthorized, ValidationError

from .services.reconciliation import ReconciliationEngine

logger = logging.getLogger(__name__)

CHARGE_SUCCESS = "charge.success"

ACK_SETTLED = "settled"
ACK_UNMATCHED = "unmatched"
ACK_IGNORED = "ignored"


def compute_signature(secret: str, payload: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha512).hexdigest()


class PaystackWebhook:
    """
    Authenticate and apply a Paystack event.

    The signature is checked against the exact bytes received before anything
    is parsed. Once authenticated, every outcome short of an internal failure
    is acknowledged so the provider stops retrying; internal failures bubble
    up and the provider redelivers, which ``settle`` tolerates.
    """

    def __init__(self, *, secret: str, engine: ReconciliationEngine):
        self.secret = secret
        self.engine = engine

    def authenticate(self, payload: bytes, signature: str | None) -> None:
        expected = compute_signature(self.secret, payload).encode("ascii")
        supplied = (signature or "").strip().lower().encode("utf-8", "replace")
        if not supplied or not hmac.compare_digest(expected, supplied):
            logger.warning("Rejected Paystack webhook with bad signature")
            raise Unauthorized()

    def handle(self, payload: bytes, signature: str | None) -> str:
        self.authenticate(payload, signature)

        try:
            event = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise ValidationError("Malformed webhook payload.") from exc
        if not isinstance(event, dict):
            raise ValidationError("Malformed webhook payload.")

        data = event.get("data") if isinstance(event.get("data"), dict) else {}
        reference = data.get("reference")
        if not reference:
            raise ValidationError("Missing reference.")

        booking = get_booking_by_reference(reference)
        if booking is None:
            logger.warning("Paystack webhook reference not found: %s", reference)
            return ACK_UNMATCHED

        event_type = event.get("event")
        if event_type == CHARGE_SUCCESS and data.get("status") == "success":
            self.engine.settle(
                reference=reference,
                booking_id=booking.pk,
                amount=data.get("amount"),
                currency=data.get("currency"),
                raw_payload=event,
            )
            return ACK_SETTLED

        logger.info("Ignoring Paystack event %s for %s", event_type, reference)
        return ACK_IGNORED
