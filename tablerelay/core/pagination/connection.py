"""Connection resolution over an ordered source.

``resolve_connection`` runs the whole pipeline for one connection
request: validate arguments, filter, compute the offset window, slice,
build edges and page info.

Page info uses a count-then-slice strategy: when no ``before`` cursor is
given the source is counted to find the last offset, and
``has_next_page``/``has_previous_page`` compare the size of the eligible
zone against ``first``/``last``. That costs one COUNT per request but
keeps page info exact for every combination of arguments, including
``first`` and ``last`` together. Over-fetching one extra row would save
the COUNT only for the plain ``first``/``after`` case.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace

from tablerelay.core.database.source import record_key
from tablerelay.core.pagination.cursor import pk_to_cursor
from tablerelay.core.pagination.offsets import connection_args_to_offsets
from tablerelay.core.pagination.schemas import Connection, PageInfo

if TYPE_CHECKING:
    from tablerelay.core.database.source import OrderedSource, Relations
    from tablerelay.core.pagination.schemas import ConnectionArguments
    from tablerelay.core.settings import RelaySettings

logger = logging.getLogger(__name__)

tracer = trace.get_tracer("tablerelay")


async def resolve_connection(
    source: OrderedSource,
    args: ConnectionArguments,
    *,
    type_name: str,
    pk: str = "id",
    relations: Relations | None = None,
    settings: RelaySettings | None = None,
) -> Connection[Any]:
    """Resolve a Relay connection over ``source``.

    Args:
        source: Ordered source with the caller's base query applied
        args: Connection arguments (cursors, counts and filters)
        type_name: Type name embedded in edge cursors
        pk: Primary key field of the records
        relations: Relations to load eagerly for the returned records
        settings: Engine settings, loaded from the environment when omitted

    Returns:
        Connection with edges in source order and its page info

    Raises:
        InvalidArgumentError: If ``first``/``last`` are out of range.
        DecodeError: If a cursor is malformed.
        StaleCursorError: If a cursor is stale and the policy is ``"error"``.

    Example:
        connection = await resolve_connection(
            SequenceSource(records),
            ConnectionArguments(first=2, after=cursor),
            type_name="Foo",
        )
        connection.page_info.has_next_page
    """
    with tracer.start_as_current_span("tablerelay.connection") as span:
        span.set_attribute("tablerelay.type_name", type_name)

        if args.filters:
            source = source.filter(**args.filters)

        offsets = await connection_args_to_offsets(source, args, settings)
        edges_length = offsets.before_offset - offsets.after_offset + 1

        span.set_attribute("tablerelay.start_offset", offsets.start_offset)
        span.set_attribute("tablerelay.end_offset", offsets.end_offset)
        logger.debug(
            "Resolved %s window after=%d before=%d start=%d end=%d",
            type_name,
            offsets.after_offset,
            offsets.before_offset,
            offsets.start_offset,
            offsets.end_offset,
        )

        if relations:
            source = source.with_relations(relations)

        records = await source.slice(offsets.start_offset, offsets.end_offset + 1)

        edges = [
            {"cursor": pk_to_cursor(type_name, record_key(record, pk)), "node": record}
            for record in records
        ]
        page_info = PageInfo(
            start_cursor=edges[0]["cursor"] if edges else None,
            end_cursor=edges[-1]["cursor"] if edges else None,
            has_previous_page=args.last is not None and edges_length > args.last,
            has_next_page=args.first is not None and edges_length > args.first,
        )

        return Connection(edges=edges, page_info=page_info)


__all__ = ["resolve_connection"]
