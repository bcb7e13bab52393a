from django.db import IntegrityError
from rest_framework.test import APIRequestFactory

from core.exceptions import InvalidTransition, NotFound, api_exception_handler


def _context():
    return {"request": APIRequestFactory().get("/"), "view": None}


def test_domain_errors_carry_code():
    response = api_exception_handler(InvalidTransition(), _context())

    assert response.status_code == 400
    assert response.data == {"detail": "Only PENDING bookings can change status.", "code": "invalid_transition"}


def test_custom_detail_keeps_default_code():
    response = api_exception_handler(NotFound("Booking not found."), _context())

    assert response.status_code == 404
    assert response.data["code"] == "not_found"


def test_integrity_error_becomes_conflict():
    response = api_exception_handler(IntegrityError("duplicate key"), _context())

    assert response.status_code == 409
    assert response.data["code"] == "conflict"


def test_unhandled_errors_pass_through():
    assert api_exception_handler(ValueError("boom"), _context()) is None
