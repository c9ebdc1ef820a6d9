"""GraphQL error classification, logging and masking.

Every error produced while executing an operation is logged with its
operation context through ``Schema.process_errors``. Errors raised on
purpose (bad connection arguments, malformed cursors, query validation
failures) are user-facing and always returned as-is, with their
``extensions.code``. Anything else is internal and, when
``RELAY_MASK_INTERNAL_ERRORS`` is on, replaced by a generic message.

Usage:
    schema = build_schema(Query, registry=registry)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from graphql import GraphQLError
from strawberry.extensions import MaskErrors

from tablerelay.core.exceptions import TableRelayError

if TYPE_CHECKING:
    from strawberry.types import ExecutionContext

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."


class ErrorCategory:
    """Error codes exposed in ``extensions.code``."""

    VALIDATION = "VALIDATION_ERROR"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INVALID_CURSOR = "INVALID_CURSOR"
    STALE_CURSOR = "STALE_CURSOR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL_ERROR"


USER_FACING_CODES = frozenset(
    {
        ErrorCategory.VALIDATION,
        ErrorCategory.INVALID_ARGUMENT,
        ErrorCategory.INVALID_CURSOR,
        ErrorCategory.STALE_CURSOR,
        ErrorCategory.NOT_FOUND,
    },
)


def is_user_facing_error(error: GraphQLError) -> bool:
    """Determine if error should be shown to user as-is.

    User-facing errors are:
    - errors without an original exception (syntax and query validation)
    - tablerelay errors (invalid arguments, malformed or stale cursors)
    - errors whose ``extensions.code`` is a user-facing category

    Args:
        error: GraphQL error to check

    Returns:
        True if error is safe to show to user, False if it should be masked
    """
    original = error.original_error
    if original is None or isinstance(original, TableRelayError):
        return True
    extensions = error.extensions or {}
    return extensions.get("code") in USER_FACING_CODES


def mask_internal_error(error: GraphQLError) -> GraphQLError:
    """Replace an internal error with a generic one.

    The location and path are preserved so clients can still tell which
    field failed.
    """
    return GraphQLError(
        INTERNAL_ERROR_MESSAGE,
        nodes=error.nodes,
        source=error.source,
        positions=error.positions,
        path=error.path,
        extensions={"code": ErrorCategory.INTERNAL},
    )


def log_graphql_error(error: GraphQLError, execution_context: ExecutionContext | None = None) -> None:
    """Log error with full details for server-side debugging.

    User-facing errors are expected and logged at INFO; internal errors
    are logged at ERROR with the original traceback.
    """
    log_context: dict[str, Any] = {
        "error_message": error.message,
        "error_path": error.path,
    }
    if execution_context is not None and execution_context.operation_name:
        log_context["operation_name"] = execution_context.operation_name

    original = error.original_error
    if original is not None:
        log_context["exception_type"] = type(original).__name__

    if is_user_facing_error(error):
        logger.info("GraphQL user-facing error", extra=log_context)
    else:
        logger.error(
            "GraphQL internal error",
            extra=log_context,
            exc_info=(type(original), original, original.__traceback__) if original is not None else None,
        )


class MaskInternalErrors(MaskErrors):
    """MaskErrors that keeps user-facing errors and tags masked ones."""

    def __init__(self) -> None:
        super().__init__(
            should_mask_error=lambda error: not is_user_facing_error(error),
            error_message=INTERNAL_ERROR_MESSAGE,
        )

    def anonymise_error(self, error: GraphQLError) -> GraphQLError:
        return mask_internal_error(error)


__all__ = [
    "INTERNAL_ERROR_MESSAGE",
    "ErrorCategory",
    "MaskInternalErrors",
    "is_user_facing_error",
    "log_graphql_error",
    "mask_internal_error",
]
