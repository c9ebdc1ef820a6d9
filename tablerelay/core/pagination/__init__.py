"""Relay cursor pagination.

The engine turns ``first``/``last``/``after``/``before`` into an offset
window over an ordered source and builds edges and page info:

    from tablerelay.core.database.source import SequenceSource
    from tablerelay.core.pagination import ConnectionArguments, resolve_connection

    connection = await resolve_connection(
        SequenceSource(records),
        ConnectionArguments(first=10),
        type_name="Foo",
    )

Cursors are opaque base64 strings that clients pass back unchanged.
"""

from tablerelay.core.pagination.connection import resolve_connection
from tablerelay.core.pagination.cursor import (
    GlobalId,
    cursor_to_pk,
    decode_cursor,
    from_global_id,
    pk_to_cursor,
    to_global_id,
)
from tablerelay.core.pagination.offsets import (
    apply_cursors_to_edge_offsets,
    assert_connection_args,
    connection_args_to_offsets,
    edge_offsets_to_return,
)
from tablerelay.core.pagination.schemas import (
    Connection,
    ConnectionArguments,
    Edge,
    EdgeOffsets,
    PageInfo,
)

__all__ = [
    "Connection",
    "ConnectionArguments",
    "Edge",
    "EdgeOffsets",
    "GlobalId",
    "PageInfo",
    "apply_cursors_to_edge_offsets",
    "assert_connection_args",
    "connection_args_to_offsets",
    "cursor_to_pk",
    "decode_cursor",
    "edge_offsets_to_return",
    "from_global_id",
    "pk_to_cursor",
    "resolve_connection",
    "to_global_id",
]
