import pytest
import requests

from core.exceptions import ProviderError
from payments.services import gateway


class FakeResponse:
    def __init__(self, body=None, status_code=200):
        self._body = body
        self.status_code = status_code

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def make_gateway(session):
    return gateway.PaystackGateway(
        secret_key="sk_test_123",
        base_url="https://paystack.test/",
        timeout=5,
        session=session,
    )


def test_initiate_posts_minor_units_with_bearer_auth():
    session = FakeSession(
        FakeResponse(
            {
                "status": True,
                "data": {
                    "authorization_url": "https://checkout.paystack.test/abc",
                    "access_code": "abc",
                    "reference": "pay_1",
                },
            }
        )
    )

    result = make_gateway(session).initiate(
        reference="pay_1", amount=30000, currency="NGN", email="guest@example.com"
    )

    assert result == gateway.Initialization("https://checkout.paystack.test/abc", "abc", "pay_1")
    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url == "https://paystack.test/transaction/initialize"
    assert kwargs["timeout"] == 5
    assert kwargs["json"] == {
        "reference": "pay_1",
        "amount": 30000,
        "currency": "NGN",
        "email": "guest@example.com",
    }
    assert session.headers["Authorization"] == "Bearer sk_test_123"


def test_initiate_passes_callback_url_when_given():
    session = FakeSession(FakeResponse({"status": True, "data": {"reference": "pay_1"}}))

    make_gateway(session).initiate(
        reference="pay_1",
        amount=100,
        currency="NGN",
        email="guest@example.com",
        callback_url="https://app.test/done",
    )

    assert session.calls[0][2]["json"]["callback_url"] == "https://app.test/done"


def test_provider_rejection_raises_provider_error():
    session = FakeSession(FakeResponse({"status": False, "message": "Invalid key"}, status_code=401))

    with pytest.raises(ProviderError) as excinfo:
        make_gateway(session).initiate(reference="pay_1", amount=100, currency="NGN", email="g@example.com")

    assert "Invalid key" in str(excinfo.value.detail)
    assert excinfo.value.status_code == 502


@pytest.mark.parametrize(
    "error",
    [requests.Timeout("slow"), requests.ConnectionError("refused")],
)
def test_transport_failures_raise_provider_error(error):
    with pytest.raises(ProviderError):
        make_gateway(FakeSession(error=error)).verify("pay_1")


def test_non_json_body_raises_provider_error():
    with pytest.raises(ProviderError):
        make_gateway(FakeSession(FakeResponse(None, status_code=503))).verify("pay_1")


def test_verify_maps_provider_status():
    session = FakeSession(
        FakeResponse(
            {"status": True, "data": {"status": "success", "amount": 30000, "currency": "NGN", "reference": "pay_1"}}
        )
    )

    result = make_gateway(session).verify("pay_1")

    assert result.provider_status == gateway.STATUS_SUCCESS
    assert result.amount == 30000
    assert result.currency == "NGN"
    assert session.calls[0][:2] == ("GET", "https://paystack.test/transaction/verify/pay_1")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("success", gateway.STATUS_SUCCESS),
        ("failed", gateway.STATUS_FAILED),
        ("reversed", gateway.STATUS_FAILED),
        ("abandoned", gateway.STATUS_ABANDONED),
        ("ongoing", gateway.STATUS_PENDING),
        ("queued", gateway.STATUS_PENDING),
        ("SUCCESS", gateway.STATUS_SUCCESS),
        ("mystery", gateway.STATUS_UNKNOWN),
        (None, gateway.STATUS_UNKNOWN),
    ],
)
def test_normalize_status(raw, expected):
    assert gateway.normalize_status(raw) == expected


def test_missing_secret_key_is_rejected():
    with pytest.raises(ProviderError):
        gateway.PaystackGateway(secret_key="")


def test_get_gateway_prefers_stub_when_flagged(settings):
    settings.PAYSTACK_USE_STUB = True
    settings.PAYSTACK_SECRET_KEY = "sk_live_x"

    assert isinstance(gateway.get_gateway(), gateway.StubGateway)


def test_get_gateway_falls_back_to_stub_without_key(settings):
    settings.PAYSTACK_USE_STUB = False
    settings.PAYSTACK_SECRET_KEY = ""

    assert isinstance(gateway.get_gateway(), gateway.StubGateway)


def test_get_gateway_uses_paystack_when_configured(settings):
    settings.PAYSTACK_USE_STUB = False
    settings.PAYSTACK_SECRET_KEY = "sk_test_123"
    settings.PAYSTACK_BASE_URL = "https://paystack.test"
    settings.PAYSTACK_TIMEOUT_SECONDS = 7

    client = gateway.get_gateway()

    assert isinstance(client, gateway.PaystackGateway)
    assert client.timeout == 7


def test_stub_initiate_returns_preview_link():
    result = gateway.StubGateway(frontend_url="https://app.test/").initiate(
        reference="pay_1", amount=30000, currency="NGN", email="g@example.com"
    )

    assert result.reference == "pay_1"
    assert result.access_code.startswith("ac_test_")
    assert result.authorization_url == "https://app.test/payments/preview?reference=pay_1&amount=30000"
