"""Exceptions raised by the URL shortener core.

Classes:
    SnaplinkError:
        Base class for all application-specific errors.

    InvalidInputError:
        Raised when a long URL or short code is missing or malformed.

    CapacityExhaustedError:
        Raised when no free short code was found within the attempt ceiling.

    ShortCodeConflictError:
        Raised when the store rejects an insert because the short code is taken.

    StoreError:
        Raised when the underlying store is unavailable or fails.

Unknown short codes are not an error: lookups return None.
"""


class SnaplinkError(Exception):
    """Base exception for all application-specific errors."""

    error_code = "app:snaplink_error"


class InvalidInputError(SnaplinkError):
    """Raised when request input is missing or malformed."""

    error_code = "request:invalid_input"


class CapacityExhaustedError(SnaplinkError):
    """Raised when every allocation attempt collided with an existing code."""

    error_code = "allocator:capacity_exhausted"

    def __init__(self, attempts: int):
        super().__init__(f"Could not allocate a unique short code after {attempts} attempts")
        self.attempts = attempts


class ShortCodeConflictError(SnaplinkError):
    """Raised when an insert loses the race for a short code."""

    error_code = "store:short_code_conflict"

    def __init__(self, short_code: str):
        super().__init__(f"Short code '{short_code}' already exists")
        self.short_code = short_code


class StoreError(SnaplinkError):
    """Raised when the data store fails.

    e.g. connection issues, locked database, timeouts.
    """

    error_code = "store:store_failure"
