from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote
from uuid import uuid4

import requests
from django.conf import settings

from core.exceptions import ProviderError

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"
STATUS_PENDING = "pending"
STATUS_ABANDONED = "abandoned"
STATUS_UNKNOWN = "unknown"

_PROVIDER_STATUS_MAP = {
    "success": STATUS_SUCCESS,
    "failed": STATUS_FAILED,
    "reversed": STATUS_FAILED,
    "abandoned": STATUS_ABANDONED,
    "pending": STATUS_PENDING,
    "ongoing": STATUS_PENDING,
    "processing": STATUS_PENDING,
    "queued": STATUS_PENDING,
}


def normalize_status(value: str | None) -> str:
    return _PROVIDER_STATUS_MAP.get((value or "").lower(), STATUS_UNKNOWN)


@dataclass
class Initialization:
    authorization_url: str
    access_code: str
    reference: str


@dataclass
class Verification:
    provider_status: str
    amount: Optional[int]
    currency: Optional[str]
    raw: dict = field(default_factory=dict)


class PaystackGateway:
    """
    Blocking client for the Paystack transaction API.

    Every call carries an explicit timeout and is attempted once; transport
    errors, timeouts and ``status: false`` envelopes all surface as
    ``ProviderError``.
    """

    def __init__(
        self,
        *,
        secret_key: str,
        base_url: str = "https://api.paystack.co",
        timeout: float = 10,
        session: requests.Session | None = None,
    ):
        if not secret_key:
            raise ProviderError("Paystack secret key is not configured.")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {secret_key}"})

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as exc:
            logger.warning("Paystack %s %s timed out after %ss", method, path, self.timeout)
            raise ProviderError("Payment provider timed out.") from exc
        except requests.RequestException as exc:
            logger.warning("Paystack %s %s failed: %s", method, path, exc)
            raise ProviderError("Payment provider is unreachable.") from exc

        try:
            body = response.json()
        except ValueError as exc:
            logger.warning("Paystack %s %s returned non-JSON (HTTP %s)", method, path, response.status_code)
            raise ProviderError("Payment provider returned an unreadable response.") from exc

        if not body.get("status"):
            message = body.get("message") or f"HTTP {response.status_code}"
            logger.warning("Paystack %s %s rejected: %s", method, path, message)
            raise ProviderError(f"Payment provider rejected the request: {message}")
        return body.get("data") or {}

    def initiate(
        self,
        *,
        reference: str,
        amount: int,
        currency: str,
        email: str,
        callback_url: str | None = None,
    ) -> Initialization:
        payload = {
            "reference": reference,
            "amount": amount,
            "currency": currency,
            "email": email,
        }
        if callback_url:
            payload["callback_url"] = callback_url
        data = self._request("POST", "/transaction/initialize", json=payload)
        return Initialization(
            authorization_url=data.get("authorization_url", ""),
            access_code=data.get("access_code", ""),
            reference=data.get("reference") or reference,
        )

    def verify(self, reference: str) -> Verification:
        data = self._request("GET", f"/transaction/verify/{quote(reference, safe='')}")
        return Verification(
            provider_status=normalize_status(data.get("status")),
            amount=data.get("amount"),
            currency=data.get("currency"),
            raw=data,
        )


class StubGateway:
    """
    Stand-in for Paystack when running in stub mode.

    Local development and tests do not hit the network; initiation returns a
    predictable preview link and verification reports the charge as pending,
    so settlement only happens through a signed webhook.
    """

    def __init__(self, *, frontend_url: str = ""):
        self.frontend_url = frontend_url.rstrip("/")

    def initiate(self, *, reference, amount, currency, email, callback_url=None) -> Initialization:
        access_code = f"ac_test_{uuid4().hex[:12]}"
        return Initialization(
            authorization_url=(
                f"{self.frontend_url}/payments/preview?reference={quote(reference)}&amount={amount}"
            ),
            access_code=access_code,
            reference=reference,
        )

    def verify(self, reference: str) -> Verification:
        return Verification(provider_status=STATUS_PENDING, amount=None, currency=None, raw={})


def _should_use_stub() -> bool:
    if getattr(settings, "PAYSTACK_USE_STUB", False):
        return True
    return not getattr(settings, "PAYSTACK_SECRET_KEY", "")


def get_gateway():
    if _should_use_stub():
        return StubGateway(frontend_url=settings.FRONTEND_URL)
    return PaystackGateway(
        secret_key=settings.PAYSTACK_SECRET_KEY,
        base_url=settings.PAYSTACK_BASE_URL,
        timeout=settings.PAYSTACK_TIMEOUT_SECONDS,
    )
