"""Custom exception classes for the pagination engine."""

from __future__ import annotations

from typing import Any


class TableRelayError(Exception):
    """Base exception for tablerelay.

    All custom exceptions inherit from this class. The ``extensions``
    property is picked up by graphql-core when the exception is raised
    inside a resolver, so the error code travels with the field error.

    Attributes:
        message: Human-readable error message.
        code: Machine-readable error code (exposed as ``extensions.code``).
        extra: Additional context-specific information about the error.

    Example:
        raise TableRelayError(
            "Something went wrong",
            code="INTERNAL_ERROR",
            extra={"type_name": "Foo"},
        )
    """

    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            code: Error code, defaults to the class-level code.
            extra: Additional context about the error.
        """
        self.message = message
        if code is not None:
            self.code = code
        self.extra = extra or {}
        super().__init__(message)

    @property
    def extensions(self) -> dict[str, Any]:
        """GraphQL error extensions for this exception."""
        return {"code": self.code, **self.extra}


class InvalidArgumentError(TableRelayError):
    """Raised when connection arguments are out of range.

    Example:
        raise InvalidArgumentError(
            "first and last must be greater than 0",
            extra={"first": 0},
        )
    """

    code = "INVALID_ARGUMENT"


class DecodeError(TableRelayError):
    """Raised when a cursor or global id is not validly formed."""

    code = "INVALID_CURSOR"


class StaleCursorError(TableRelayError):
    """Raised when a well-formed cursor no longer matches a record.

    Only raised when the stale cursor policy is ``"error"``; the default
    policy falls back to a window boundary instead.
    """

    code = "STALE_CURSOR"


__all__ = [
    "DecodeError",
    "InvalidArgumentError",
    "StaleCursorError",
    "TableRelayError",
]
