"""Error taxonomy and the exception handler enforcing the API error envelope."""

import functools
import logging
from typing import Any, Callable, TypeVar

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.db import DatabaseError
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class ServiceError(drf_exceptions.APIException):
    """Base class for domain failures; ``category`` is the stable error key."""

    category = "error"


class ValidationFailed(ServiceError):
    """Missing or malformed input, optionally with per-field messages."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "validation_error"
    category = "validation_error"

    def __init__(self, fields: dict[str, str] | None = None, detail: str | None = None):
        super().__init__(detail)
        self.fields = fields or {}


class Unauthenticated(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication credentials were not provided."
    default_code = "unauthenticated"
    category = "unauthenticated"


class InvalidCredentials(ServiceError):
    """Login failure; deliberately identical for unknown users and bad passwords."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials"
    default_code = "invalid_credentials"
    category = "invalid_credentials"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    default_code = "forbidden"
    category = "forbidden"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."
    default_code = "not_found"
    category = "not_found"


class DuplicateEmail(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Email already registered"
    default_code = "duplicate_email"
    category = "duplicate_email"


class TransitionNotAllowed(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Status transition is not allowed."
    default_code = "invalid_transition"
    category = "invalid_transition"


class StorageFailure(ServiceError):
    """The backing store failed; details stay in the server log."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Service temporarily unavailable."
    default_code = "storage_failure"
    category = "storage_failure"


def storage_boundary(operation: str) -> Callable[[F], F]:
    """Map ``DatabaseError`` raised by ``func`` to ``StorageFailure``.

    The original error (including query text) is only logged, never surfaced.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DatabaseError as exc:
                logger.exception("Storage failure during %s", operation)
                raise StorageFailure() from exc

        return wrapper  # type: ignore[return-value]

    return decorator


def _flatten_field_errors(detail: Any, prefix: str = "") -> list[dict[str, str]]:
    """Turn DRF's nested ValidationError detail into envelope entries."""

    if isinstance(detail, dict):
        errors: list[dict[str, str]] = []
        for key, value in detail.items():
            field = f"{prefix}.{key}" if prefix else str(key)
            if key == "non_field_errors":
                field = prefix
            errors.extend(_flatten_field_errors(value, field))
        return errors
    if isinstance(detail, list):
        errors = []
        for item in detail:
            errors.extend(_flatten_field_errors(item, prefix))
        return errors
    entry = {"category": "validation_error", "message": str(detail)}
    if prefix:
        entry["field"] = prefix
    return [entry]


def error_entries(exc: drf_exceptions.APIException) -> list[dict[str, str]]:
    """Build the ``errors`` list for an API exception."""

    if isinstance(exc, ValidationFailed) and exc.fields:
        return [
            {"category": exc.category, "message": message, "field": field}
            for field, message in exc.fields.items()
        ]
    if isinstance(exc, drf_exceptions.ValidationError):
        return _flatten_field_errors(exc.detail)
    if isinstance(exc, ServiceError):
        return [{"category": exc.category, "message": str(exc.detail)}]
    if isinstance(exc, drf_exceptions.NotAuthenticated):
        return [{"category": Unauthenticated.category, "message": str(exc.detail)}]
    if isinstance(exc, (drf_exceptions.AuthenticationFailed, drf_exceptions.PermissionDenied)):
        return [{"category": Forbidden.category, "message": str(exc.detail)}]
    if isinstance(exc, drf_exceptions.NotFound):
        return [{"category": NotFound.category, "message": str(exc.detail)}]
    return [{"category": exc.default_code, "message": str(exc.detail)}]


def custom_exception_handler(exc: Exception, context: dict[str, Any]):
    """Wrap DRF errors in the ``{ "data": null, "errors": [...] }`` shape.

    Database errors that escaped a service boundary are logged and reported
    as a generic storage failure instead of Django's HTML 500 page.
    """

    if isinstance(exc, DatabaseError):
        logger.exception("Unhandled storage failure in %s", context.get("view").__class__.__name__)
        exc = StorageFailure()
    elif isinstance(exc, Http404):
        exc = NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = Forbidden()

    response = drf_exception_handler(exc, context)
    if response is None:
        return response

    # NotAuthenticated without a WWW-Authenticate header is downgraded by DRF;
    # keep missing credentials on 401.
    if isinstance(exc, drf_exceptions.NotAuthenticated):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    response.data = {"data": None, "errors": error_entries(exc)}
    return response


__all__ = [
    "ServiceError",
    "ValidationFailed",
    "Unauthenticated",
    "InvalidCredentials",
    "Forbidden",
    "NotFound",
    "DuplicateEmail",
    "TransitionNotAllowed",
    "StorageFailure",
    "storage_boundary",
    "error_entries",
    "custom_exception_handler",
]
