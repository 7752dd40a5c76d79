"""Translate domain errors into HTTP status codes for the route layer."""

from __future__ import annotations

from http import HTTPStatus
from typing import Final

from pydantic import ValidationError

from releasedesk.api.schema import ErrorResponse
from releasedesk.domain.errors import (
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    TransientStoreError,
)

# Checked in order; the first matching class wins.
STATUS_BY_ERROR: Final[tuple[tuple[type[Exception], HTTPStatus], ...]] = (
    (NotFoundError, HTTPStatus.NOT_FOUND),
    (InvalidStateError, HTTPStatus.CONFLICT),
    (PermissionDeniedError, HTTPStatus.FORBIDDEN),
    (TransientStoreError, HTTPStatus.SERVICE_UNAVAILABLE),
    (ValidationError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (ValueError, HTTPStatus.BAD_REQUEST),
)


def status_code_for(exc: Exception) -> HTTPStatus:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return HTTPStatus.INTERNAL_SERVER_ERROR


def error_response(exc: Exception) -> tuple[HTTPStatus, ErrorResponse]:
    """Return the status code and body the route layer should send for ``exc``."""

    status = status_code_for(exc)
    if status is HTTPStatus.INTERNAL_SERVER_ERROR:
        return status, ErrorResponse(message="Internal server error")
    return status, ErrorResponse(message=str(exc) or status.phrase)
