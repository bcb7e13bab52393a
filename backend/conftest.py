"""Shared pytest configuration and fixtures."""
from datetime import date
from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from accounts.models import User
from bookings.models import Booking
from properties.models import Property


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """DRF API client for request/response helpers."""
    return APIClient()


def _make_user(email: str, role: str = User.USER, **extra) -> User:
    return User.objects.create_user(
        username=email,
        email=email,
        password="examplepass",
        role=role,
        **extra,
    )


@pytest.fixture
def host(db):
    return _make_user("host@example.com", User.HOST)


@pytest.fixture
def other_host(db):
    return _make_user("other-host@example.com", User.HOST)


@pytest.fixture
def guest(db):
    return _make_user("guest@example.com")


@pytest.fixture
def other_guest(db):
    return _make_user("other-guest@example.com")


@pytest.fixture
def admin_user(db):
    return _make_user("admin@example.com", User.ADMIN)


@pytest.fixture
def listing(host):
    return Property.objects.create(
        host=host,
        title="Lekki Loft",
        city="Lagos",
        nightly_price=Decimal("100.00"),
    )


@pytest.fixture
def booking(listing, guest):
    return Booking.objects.create(
        property=listing,
        guest=guest,
        start_date=date(2024, 3, 1),
        end_date=date(2024, 3, 4),
    )


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user)
        return client

    return _client


class RecordingNotifier:
    """Notifier double that records calls instead of sending email."""

    def __init__(self):
        self.calls = []

    def booking_requested(self, booking):
        self.calls.append(("booking_requested", booking.pk))

    def booking_status_changed(self, booking):
        self.calls.append(("booking_status_changed", booking.pk, booking.status))

    def payment_succeeded(self, booking, amount, currency, reference):
        self.calls.append(("payment_succeeded", booking.pk, amount, currency, reference))


@pytest.fixture
def notifier():
    return RecordingNotifier()
