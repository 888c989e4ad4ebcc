"""
Client-visible error kinds.

Every error carries an ``extensions`` dict with a stable ``code``. When a
resolver raises one of these, graphql-core copies ``extensions`` onto the
error that is returned to the client.
"""

from __future__ import annotations

from typing import Any

SENSITIVE_ARGUMENTS = frozenset({"password"})


class CatalogError(Exception):
    """Base class for errors that are reported to API clients."""

    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, **extensions: Any):
        super().__init__(message)
        self.message = message
        self.extensions: dict[str, Any] = {"code": self.code, **extensions}


class ValidationError(CatalogError):
    """Malformed or missing arguments, rejected before touching the store."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        if field is None:
            super().__init__(message)
        else:
            super().__init__(message, field=field)
        self.field = field


class InvalidInputError(CatalogError):
    """A persistence constraint rejected the arguments."""

    code = "INVALID_INPUT"

    def __init__(self, message: str, invalid_args: dict[str, Any]):
        self.invalid_args = redact_arguments(invalid_args)
        super().__init__(message, invalidArgs=self.invalid_args)


class UnauthenticatedError(CatalogError):
    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "not authenticated"):
        super().__init__(message)


class InvalidCredentialsError(CatalogError):
    """Login failure. Deliberately identical for unknown users and bad passwords."""

    code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "wrong credentials"):
        super().__init__(message)


class InvalidTokenError(CatalogError):
    code = "INVALID_TOKEN"

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


def redact_arguments(arguments: dict[str, Any]) -> dict[str, Any]:
    """Copy resolver arguments, masking values that must never be echoed back."""
    return {
        key: "[REDACTED]" if key in SENSITIVE_ARGUMENTS and value is not None else value
        for key, value in arguments.items()
    }
