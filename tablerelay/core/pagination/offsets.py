"""Cursor-to-offset translation and Relay edge windows.

Implements the two algorithms of the Relay Cursor Connections
specification over an OrderedSource:

- ApplyCursorsToEdgeOffsets: ``after``/``before`` cursors become an
  inclusive ``[after_offset, before_offset]`` zone of eligible edges.
- EdgesToReturn: ``first``/``last`` truncate that zone to the inclusive
  ``[start_offset, end_offset]`` window that is materialized.

Offsets are always relative to the source as given, i.e. after the
caller's filters have been applied.

References:
    https://relay.dev/graphql/connections.htm#ApplyCursorsToEdgeOffsets()
    https://relay.dev/graphql/connections.htm#EdgesToReturn()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from tablerelay.core.exceptions import InvalidArgumentError, StaleCursorError
from tablerelay.core.pagination.cursor import cursor_to_pk
from tablerelay.core.pagination.schemas import EdgeOffsets

if TYPE_CHECKING:
    from tablerelay.core.database.source import OrderedSource
    from tablerelay.core.pagination.schemas import ConnectionArguments
    from tablerelay.core.settings import RelaySettings

logger = logging.getLogger(__name__)


async def locate_offset(source: OrderedSource, pk: Any) -> int | None:
    """Zero-based offset of the record with primary key ``pk``, or None."""
    return await source.locate(pk)


async def cursor_to_offset(source: OrderedSource, cursor: str) -> int | None:
    """Decode ``cursor`` and locate its record in ``source``.

    Raises:
        DecodeError: If the cursor is malformed.
    """
    return await locate_offset(source, cursor_to_pk(cursor))


def _stale_cursor(name: str, cursor: str, policy: str) -> None:
    if policy == "error":
        raise StaleCursorError(
            f"Cursor passed as '{name}' does not match any record",
            extra={"argument": name},
        )
    logger.warning(
        "Stale %s cursor, falling back to window boundary",
        name,
        extra={"argument": name, "cursor": cursor},
    )


async def apply_cursors_to_edge_offsets(
    source: OrderedSource,
    *,
    after: str | None = None,
    before: str | None = None,
    stale_cursor_policy: str = "boundary",
) -> tuple[int, int]:
    """Translate ``after``/``before`` cursors into inclusive offsets.

    - ``after`` at offset ``o`` gives ``after_offset = o + 1``; absent or
      stale gives ``0``.
    - ``before`` at offset ``o`` gives ``max(o, after_offset, 0) - 1``;
      stale gives ``0``; absent gives the offset of the last record
      (``0`` when the source is empty).

    Args:
        source: Filtered, ordered source
        after: Cursor the window starts after
        before: Cursor the window ends before
        stale_cursor_policy: ``"boundary"`` (fall back as above) or
            ``"error"`` (raise StaleCursorError)

    Returns:
        ``(after_offset, before_offset)``
    """
    after_offset = 0
    if after:
        offset = await cursor_to_offset(source, after)
        if offset is None:
            _stale_cursor("after", after, stale_cursor_policy)
        else:
            after_offset = offset + 1

    if before:
        offset = await cursor_to_offset(source, before)
        if offset is None:
            _stale_cursor("before", before, stale_cursor_policy)
            before_offset = 0
        else:
            before_offset = max(offset, after_offset, 0) - 1
    else:
        total = await source.count()
        before_offset = total - 1 if total > 0 else 0

    return after_offset, before_offset


def assert_connection_args(
    *,
    first: int | None = None,
    last: int | None = None,
    require_first_or_last: bool = False,
) -> None:
    """Validate ``first``/``last``.

    Raises:
        InvalidArgumentError: If either is ``<= 0``, or when
            ``require_first_or_last`` is set and neither is given.
    """
    for name, amount in (("first", first), ("last", last)):
        if amount is not None and amount <= 0:
            raise InvalidArgumentError(
                "first and last must be greater than 0",
                extra={"argument": name, "value": amount},
            )
    if require_first_or_last and first is None and last is None:
        raise InvalidArgumentError("Either first or last must be provided")


def edge_offsets_to_return(
    after_offset: int,
    before_offset: int,
    *,
    first: int | None = None,
    last: int | None = None,
) -> tuple[int, int]:
    """Truncate the eligible zone with ``first`` then ``last``.

    Returns:
        Inclusive ``(start_offset, end_offset)``. When ``end_offset <
        start_offset`` the window is empty.
    """
    assert_connection_args(first=first, last=last)

    start_offset = after_offset
    end_offset = before_offset

    if first is not None and end_offset - start_offset + 1 > first:
        end_offset = start_offset + first - 1

    if last is not None and end_offset - start_offset + 1 > last:
        start_offset = max(end_offset - last + 1, start_offset, 0)

    return start_offset, end_offset


async def connection_args_to_offsets(
    source: OrderedSource,
    args: ConnectionArguments,
    settings: RelaySettings | None = None,
) -> EdgeOffsets:
    """Validate ``args`` and compute the full offset window for ``source``."""
    if settings is None:
        from tablerelay.core.settings import get_relay_settings

        settings = get_relay_settings()

    assert_connection_args(
        first=args.first,
        last=args.last,
        require_first_or_last=settings.require_first_or_last,
    )

    after_offset, before_offset = await apply_cursors_to_edge_offsets(
        source,
        after=args.after,
        before=args.before,
        stale_cursor_policy=settings.stale_cursor_policy,
    )
    start_offset, end_offset = edge_offsets_to_return(
        after_offset,
        before_offset,
        first=args.first,
        last=args.last,
    )

    return EdgeOffsets(after_offset, before_offset, start_offset, end_offset)


__all__ = [
    "apply_cursors_to_edge_offsets",
    "assert_connection_args",
    "connection_args_to_offsets",
    "cursor_to_offset",
    "edge_offsets_to_return",
    "locate_offset",
]
