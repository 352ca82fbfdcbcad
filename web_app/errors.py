"""Mapping from service exceptions to HTTP responses."""

from fastapi import status
from fastapi.responses import JSONResponse

from snaplink.exceptions import (
    CapacityExhaustedError,
    InvalidInputError,
    ShortCodeConflictError,
    SnaplinkError,
    StoreError,
)

from .api.schemas import ErrorResponse

STATUS_CODES = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    ShortCodeConflictError: status.HTTP_409_CONFLICT,
    CapacityExhaustedError: status.HTTP_503_SERVICE_UNAVAILABLE,
    StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: SnaplinkError) -> int:
    for exc_type, code in STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def public_message(exc: SnaplinkError) -> str:
    """Message safe to show to clients; store internals stay in the logs."""
    if isinstance(exc, StoreError):
        return "Server error while accessing the URL store"
    if isinstance(exc, CapacityExhaustedError):
        return "Failed to generate a unique short code, try again later"
    return str(exc)


def error_response(exc: SnaplinkError) -> JSONResponse:
    """Build the structured JSON error body for a service exception."""
    body = ErrorResponse(error=exc.error_code, detail=public_message(exc))
    return JSONResponse(status_code=status_for(exc), content=body.model_dump())
