from django.db import IntegrityError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler


class BookingError(APIException):
    """Base class for booking and payment domain failures rendered by DRF."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be completed."
    default_code = "error"


class NotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class Forbidden(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not permitted."
    default_code = "forbidden"


class InvalidTransition(BookingError):
    default_detail = "Only PENDING bookings can change status."
    default_code = "invalid_transition"


class InvalidRange(BookingError):
    default_detail = "Check-out must be after check-in."
    default_code = "invalid_range"


class AlreadyInitiated(BookingError):
    default_detail = "Payment has already been initiated for this booking."
    default_code = "already_initiated"


class ProviderError(BookingError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Payment provider request failed."
    default_code = "provider_error"


class Unauthorized(BookingError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Bad signature."
    default_code = "unauthorized"


class ValidationError(BookingError):
    default_detail = "Invalid input."
    default_code = "invalid"


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None and isinstance(exc, IntegrityError):
        return Response(
            {"detail": "Conflicting write, retry the request.", "code": "conflict"},
            status=status.HTTP_409_CONFLICT,
        )

    if response is not None and isinstance(exc, BookingError):
        response.data["code"] = exc.get_codes()
    return response
