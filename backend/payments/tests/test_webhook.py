import json

import pytest
from django.db import DatabaseError

from bookings.models import Booking
from bookings.services import lifecycle
from payments.models import Payment
from payments.services.reconciliation import ReconciliationEngine
from payments.webhooks import compute_signature

SECRET = "sk_test_webhook_secret"
URL = "/api/payments/webhook/paystack/"
REFERENCE = "pay_hook_1"


def charge_event(reference=REFERENCE, event="charge.success", status="success", amount=30000):
    return {
        "event": event,
        "data": {"reference": reference, "status": status, "amount": amount, "currency": "NGN"},
    }


def post_signed(client, body, signature=None):
    raw = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
    return client.post(
        URL,
        data=raw,
        content_type="application/json",
        HTTP_X_PAYSTACK_SIGNATURE=signature if signature is not None else compute_signature(SECRET, raw),
    )


@pytest.fixture
def initiated(booking):
    return lifecycle.set_payment_init(booking.pk, reference=REFERENCE, amount=30000, currency="NGN")


@pytest.mark.django_db
def test_signed_charge_success_settles(api_client, initiated):
    response = post_signed(api_client, charge_event())

    assert response.status_code == 200
    assert response.json() == {"received": True, "outcome": "settled"}
    initiated.refresh_from_db()
    assert initiated.payment_status == Booking.PAYMENT_SUCCESS
    assert initiated.status == Booking.APPROVED
    payment = Payment.objects.get(reference=REFERENCE)
    assert payment.raw["event"] == "charge.success"


@pytest.mark.django_db
def test_tampered_body_is_rejected_without_changes(api_client, initiated):
    signed = json.dumps(charge_event(amount=1)).encode("utf-8")
    tampered = json.dumps(charge_event()).encode("utf-8")

    response = post_signed(api_client, tampered, signature=compute_signature(SECRET, signed))

    assert response.status_code == 401
    initiated.refresh_from_db()
    assert initiated.payment_status == Booking.PAYMENT_INITIATED
    assert not Payment.objects.exists()


@pytest.mark.django_db
def test_missing_signature_is_rejected(api_client, initiated):
    response = post_signed(api_client, charge_event(), signature="")

    assert response.status_code == 401


@pytest.mark.django_db
@pytest.mark.parametrize("signature", ["é" * 128, "not-hex", "  "])
def test_non_hex_signature_is_rejected(api_client, initiated, signature):
    response = post_signed(api_client, charge_event(), signature=signature)

    assert response.status_code == 401
    initiated.refresh_from_db()
    assert initiated.payment_status == Booking.PAYMENT_INITIATED
    assert not Payment.objects.exists()


@pytest.mark.django_db
def test_signature_over_unparseable_body_is_rejected_before_parsing(api_client):
    response = post_signed(api_client, b"not json", signature="0" * 128)

    assert response.status_code == 401


@pytest.mark.django_db
def test_signed_malformed_body_is_400(api_client):
    response = post_signed(api_client, b"not json")

    assert response.status_code == 400


@pytest.mark.django_db
def test_missing_reference_is_400(api_client):
    response = post_signed(api_client, {"event": "charge.success", "data": {"status": "success"}})

    assert response.status_code == 400


@pytest.mark.django_db
def test_unknown_reference_is_acknowledged(api_client, initiated, caplog):
    response = post_signed(api_client, charge_event(reference="pay_unknown"))

    assert response.status_code == 200
    assert response.json()["outcome"] == "unmatched"
    assert "pay_unknown" in caplog.text
    initiated.refresh_from_db()
    assert initiated.payment_status == Booking.PAYMENT_INITIATED
    assert not Payment.objects.exists()


@pytest.mark.django_db
@pytest.mark.parametrize(
    "event",
    [
        charge_event(event="charge.failed", status="failed"),
        charge_event(status="failed"),
        charge_event(event="transfer.success"),
    ],
)
def test_other_events_are_ignored(api_client, initiated, event):
    response = post_signed(api_client, event)

    assert response.status_code == 200
    assert response.json()["outcome"] == "ignored"
    initiated.refresh_from_db()
    assert initiated.payment_status == Booking.PAYMENT_INITIATED
    assert not Payment.objects.exists()


@pytest.mark.django_db
def test_duplicate_delivery_then_verify_settles_once(client_for, api_client, guest, initiated, monkeypatch):
    calls = []
    original = ReconciliationEngine.settle

    def counting_settle(self, **kwargs):
        result = original(self, **kwargs)
        calls.append(result.newly_settled)
        return result

    monkeypatch.setattr(ReconciliationEngine, "settle", counting_settle)

    assert post_signed(api_client, charge_event()).status_code == 200
    assert post_signed(api_client, charge_event()).status_code == 200
    verify = client_for(guest).get(f"/api/payments/verify/{REFERENCE}/")

    assert verify.status_code == 200
    assert verify.json()["synced"] is True
    assert calls == [True, False]
    assert Payment.objects.filter(reference=REFERENCE).count() == 1
    initiated.refresh_from_db()
    assert (initiated.status, initiated.payment_status) == (Booking.APPROVED, Booking.PAYMENT_SUCCESS)


@pytest.mark.django_db
def test_internal_failure_returns_500_for_redelivery(api_client, initiated, monkeypatch):
    def broken_settle(self, **kwargs):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(ReconciliationEngine, "settle", broken_settle)

    response = post_signed(api_client, charge_event())

    assert response.status_code == 500
    initiated.refresh_from_db()
    assert initiated.payment_status == Booking.PAYMENT_INITIATED


@pytest.mark.django_db
def test_unconfigured_secret_returns_500(api_client, initiated, settings):
    settings.PAYSTACK_SECRET_KEY = ""

    response = post_signed(api_client, charge_event())

    assert response.status_code == 500
    assert not Payment.objects.exists()
