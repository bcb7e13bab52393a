"""
One-time login codes bound to an email address.

Codes live in Django's cache, which acts as the keyed expiring-value store;
nothing about them is durable.
"""
from __future__ import annotations

import hmac
import secrets

from django.conf import settings
from django.core.cache import cache
from django.core.mail import send_mail

CACHE_PREFIX = "otp:"


class OtpError(ValueError):
    pass


def _cache_key(email: str) -> str:
    return f"{CACHE_PREFIX}{email.strip().lower()}"


def generate_code() -> str:
    return f"{secrets.randbelow(900000) + 100000}"


def issue_code(email: str) -> str:
    code = generate_code()
    cache.set(_cache_key(email), code, timeout=settings.OTP_TTL_SECONDS)
    return code


def send_code(email: str, code: str) -> None:
    send_mail(
        "Your login code",
        f"Your one-time login code is {code}. It expires in {settings.OTP_TTL_SECONDS // 60} minutes.",
        settings.DEFAULT_FROM_EMAIL,
        [email],
        fail_silently=False,
    )


def consume_code(email: str, code: str) -> None:
    """Validate and burn the stored code; raise OtpError when it does not match."""
    key = _cache_key(email)
    stored = cache.get(key)
    if stored is None:
        raise OtpError("No active code for this email. Request a new one.")
    if not hmac.compare_digest(stored, code):
        raise OtpError("Invalid code.")
    cache.delete(key)
