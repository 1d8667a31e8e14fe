"""Domain error types.

Each error carries a stable ``code`` and a client-safe ``message``; the HTTP
status is decided once, in ``course_api.main``, from the error class.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

ACCESS_DENIED_MESSAGE = "Access Denied"


class DomainError(Exception):
    """Base class for errors surfaced to API clients."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class AuthFailureReason(str, Enum):
    MISSING_CREDENTIALS = "missing_credentials"
    UNKNOWN_PRINCIPAL = "unknown_principal"
    BAD_SECRET = "bad_secret"


class AuthenticationFailure(DomainError):
    """Credentials were absent or did not match a principal.

    The reason is kept for diagnostics only; the client always sees the same
    generic denial.
    """

    code = "UNAUTHORIZED"

    def __init__(self, reason: AuthFailureReason) -> None:
        self.reason = reason
        super().__init__(ACCESS_DENIED_MESSAGE)


class AuthorizationFailure(DomainError):
    code = "FORBIDDEN"


class NotFoundError(DomainError):
    code = "RESOURCE_NOT_FOUND"


class ValidationFailure(DomainError):
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, errors: list[dict[str, str]] | None = None) -> None:
        super().__init__(message, details={"errors": errors} if errors else None)


class DuplicateAccountError(ValidationFailure):
    code = "ACCOUNT_EXISTS"


__all__ = [
    "ACCESS_DENIED_MESSAGE",
    "AuthFailureReason",
    "AuthenticationFailure",
    "AuthorizationFailure",
    "DomainError",
    "DuplicateAccountError",
    "NotFoundError",
    "ValidationFailure",
]
