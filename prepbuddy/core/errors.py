"""
Centralized error handling for relay, tracker, quiz and interview failures.
Domain exceptions plus a reusable helper so routes stay thin and new error types are easy to add.
"""
from __future__ import annotations

from fastapi import HTTPException

# ---------------------------------------------------------------------------
# Status codes for known error categories
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_INTERNAL_ERROR = 500


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------


class PrepBuddyError(Exception):
    """Base class for errors raised by services."""


class ValidationError(PrepBuddyError):
    """A required request field is missing or blank. Surfaced to the caller as 400."""


class NotFoundError(PrepBuddyError):
    """The requested row does not exist for this user."""


class ConfirmationRequired(PrepBuddyError):
    """The operation needs explicit confirmation (e.g. advancing an unfinished day)."""


class ProviderError(PrepBuddyError):
    """An upstream AI call failed (network, non-2xx, malformed body). Triggers the next fallback tier."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class TransportAbort(PrepBuddyError):
    """The user cancelled an in-flight stream. A clean stop, not a failure."""


class PersistenceError(PrepBuddyError):
    """Writing chat history failed. Logged and swallowed by the relay."""


# ---------------------------------------------------------------------------
# Error rules: (exception type, status_code). First match wins.
# Add new rules here instead of scattering checks in routes.
# ---------------------------------------------------------------------------

ERROR_RULES: list[tuple[type[Exception], int]] = [
    (ValidationError, STATUS_BAD_REQUEST),
    (NotFoundError, STATUS_NOT_FOUND),
    (ConfirmationRequired, STATUS_CONFLICT),
]


def service_error_to_http(exc: Exception) -> HTTPException:
    """
    Map an exception raised by a service into an HTTPException.
    Uses ERROR_RULES for known error types; otherwise returns 500 with the exception message.
    """
    for exc_type, status_code in ERROR_RULES:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=str(exc))
