"""API errors and the project-wide DRF exception handler.

Every error leaves the API as ``{"message": ..., "errors": {...}}``. Domain
errors raised by the services carry their own message and optional
field map; DRF's built-in exceptions are reshaped into the same envelope.
Anything else is logged and returned as a plain 500.
"""

from __future__ import annotations

import logging
from typing import Any

from rest_framework import exceptions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler, set_rollback  # type: ignore

logger = logging.getLogger(__name__)


class ApiError(exceptions.APIException):
    """Base error with a human readable message and per-field details."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad Request"

    def __init__(self, message: str | None = None, errors: dict[str, Any] | None = None):
        super().__init__(detail=message or self.default_detail)
        self.errors = errors or {}


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "The requested resource couldn't be found."


class AuthorizationError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class OwnSpotBookingError(AuthorizationError):
    default_detail = "Spot owners cannot book their own spot"


class BookingConflictError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Sorry, this spot is already booked for the specified dates"


class ReviewExistsError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "User already has a review for this spot"


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.error(
            f"Unhandled error in {view.__class__.__name__ if view else 'API'}: {exc}",
            exc_info=exc,
        )
        set_rollback()
        return Response(
            {"message": "Internal Server Error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    response.data = _error_body(exc, response.data)
    return response


def _error_body(exc: Exception, data: Any) -> dict[str, Any]:
    if isinstance(exc, ApiError):
        body: dict[str, Any] = {"message": str(exc.detail)}
        if exc.errors:
            body["errors"] = exc.errors
        return body
    if isinstance(exc, exceptions.ValidationError):
        return {"message": "Bad Request", "errors": _flatten(exc.detail)}
    if isinstance(exc, exceptions.NotAuthenticated):
        return {"message": "Authentication required"}
    detail = data.get("detail", data) if isinstance(data, dict) else data
    return {"message": str(detail)}


def _flatten(detail: Any) -> dict[str, Any]:
    """Collapse DRF's list-valued errors to one message per field."""
    if isinstance(detail, dict):
        return {key: _first_message(value) for key, value in detail.items()}
    return {"non_field_errors": _first_message(detail)}


def _first_message(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _first_message(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        # nested list serializers report ``{}`` for items that passed
        for item in value:
            if item:
                return _first_message(item)
        return ""
    return str(value)
