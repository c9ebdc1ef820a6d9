"""Pagination engine settings.

Environment variables use RELAY_ prefix.
Example: RELAY_STALE_CURSOR_POLICY=error, RELAY_REQUIRE_FIRST_OR_LAST=true
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

StaleCursorPolicy = Literal["boundary", "error"]


class RelaySettings(BaseSettings):
    """Connection and cursor behaviour.

    Attributes:
        stale_cursor_policy: What to do when a well-formed cursor points at a
            record that is no longer in the filtered view. ``"boundary"``
            falls back to the start (``after``) or ``0`` (``before``);
            ``"error"`` raises StaleCursorError.
        require_first_or_last: Reject connection requests that supply
            neither ``first`` nor ``last``.
        default_order_field: Column used for the default reverse-chronological
            ordering of a table's connection.
        mask_internal_errors: Hide non user-facing error messages in GraphQL
            responses.
    """

    stale_cursor_policy: StaleCursorPolicy = Field(
        default="boundary",
        description="Stale cursor handling (boundary|error)",
    )
    require_first_or_last: bool = Field(
        default=False,
        description="Require first or last on every connection request",
    )
    default_order_field: str = Field(
        default="created_at",
        min_length=1,
        max_length=255,
        description="Column used for default reverse-chronological ordering",
    )
    mask_internal_errors: bool = Field(
        default=False,
        description="Mask internal error messages in GraphQL responses",
    )

    model_config = SettingsConfigDict(
        env_prefix="RELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
