"""Cursor and global id encoding for Relay connections.

Cursors are opaque strings that identify a record's position in a
connection. They wrap a global id, which itself encodes the record's
type name and primary key:

    global_id = base64("<TypeName>:<pk>")
    cursor    = base64("arrayconnection:" + global_id)

Both layers use the standard base64 alphabet with padding. Because the
type name is embedded before encoding, a ``Foo`` cursor and a ``Bar``
cursor for the same primary key never collide.

Example:
    cursor = pk_to_cursor("Foo", 42)
    cursor_to_pk(cursor)  # "42"
    decode_cursor(cursor)  # GlobalId(type="Foo", id="42")
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, NamedTuple

from tablerelay.core.exceptions import DecodeError

PREFIX = "arrayconnection:"


class GlobalId(NamedTuple):
    """Decoded global id: the type name and the primary key as a string."""

    type: str
    id: str


def base64_encode(value: str) -> str:
    """Encode text as standard base64."""
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def base64_decode(value: str) -> str:
    """Decode standard base64 text.

    Raises:
        DecodeError: If the value is not valid base64 or not UTF-8 text.
    """
    try:
        return base64.b64decode(value.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise DecodeError(f"Invalid base64 value: {value!r}") from e


def to_global_id(type_name: str, id: Any) -> str:
    """Encode a type name and primary key into a global id."""
    return base64_encode(f"{type_name}:{id}")


def from_global_id(global_id: str) -> GlobalId:
    """Decode a global id into its type name and primary key.

    Raises:
        DecodeError: If the id is not base64, has no ``:`` separator or
            carries an empty type name.
    """
    decoded = base64_decode(global_id)
    type_name, sep, id = decoded.partition(":")
    if not sep or not type_name:
        raise DecodeError(f"Invalid global id: {global_id!r}")
    return GlobalId(type_name, id)


def node_id_to_cursor(node_id: str) -> str:
    """Wrap a global id into an opaque cursor."""
    return base64_encode(PREFIX + node_id)


def cursor_to_node_id(cursor: str) -> str:
    """Unwrap the global id from a cursor.

    Raises:
        DecodeError: If the cursor is not base64 or lacks the cursor prefix.
    """
    decoded = base64_decode(cursor)
    if not decoded.startswith(PREFIX):
        raise DecodeError(f"Invalid cursor: {cursor!r}")
    return decoded[len(PREFIX):]


def pk_to_cursor(type_name: str, pk: Any) -> str:
    """Build the cursor for a record of ``type_name`` with primary key ``pk``."""
    return node_id_to_cursor(to_global_id(type_name, pk))


def decode_cursor(cursor: str) -> GlobalId:
    """Decode a cursor back to its ``(type, id)`` pair."""
    return from_global_id(cursor_to_node_id(cursor))


def cursor_to_pk(cursor: str) -> str:
    """Extract the primary key (as a string) from a cursor."""
    return decode_cursor(cursor).id


__all__ = [
    "PREFIX",
    "GlobalId",
    "base64_decode",
    "base64_encode",
    "cursor_to_node_id",
    "cursor_to_pk",
    "decode_cursor",
    "from_global_id",
    "node_id_to_cursor",
    "pk_to_cursor",
    "to_global_id",
]
