"""Unit tests for cursor and global id encoding."""
from __future__ import annotations

import base64

import pytest

from tablerelay.core.exceptions import DecodeError
from tablerelay.core.pagination.cursor import (
    PREFIX,
    GlobalId,
    base64_decode,
    base64_encode,
    cursor_to_node_id,
    cursor_to_pk,
    decode_cursor,
    from_global_id,
    node_id_to_cursor,
    pk_to_cursor,
    to_global_id,
)


def _b64(text: str) -> str:
    return base64.b64encode(text.encode()).decode()


class TestGlobalId:
    """Tests for global id encoding."""

    def test_to_global_id_encodes_type_and_id(self):
        """Global ids are base64 of '<type>:<id>'."""
        assert to_global_id("Foo", 42) == _b64("Foo:42")

    def test_from_global_id_roundtrip(self):
        """Decoding returns the type name and the id as a string."""
        decoded = from_global_id(to_global_id("Foo", 42))

        assert decoded == GlobalId(type="Foo", id="42")

    def test_from_global_id_keeps_colons_in_id(self):
        """Only the first ':' separates the type name from the id."""
        decoded = from_global_id(to_global_id("Event", "2024:01:01"))

        assert decoded.type == "Event"
        assert decoded.id == "2024:01:01"

    def test_from_global_id_without_separator_raises(self):
        """A global id without ':' is rejected."""
        with pytest.raises(DecodeError):
            from_global_id(_b64("Foo42"))

    def test_from_global_id_with_empty_type_raises(self):
        """A global id with an empty type name is rejected."""
        with pytest.raises(DecodeError):
            from_global_id(_b64(":42"))

    def test_from_global_id_invalid_base64_raises(self):
        """Non-base64 input raises DecodeError with the INVALID_CURSOR code."""
        with pytest.raises(DecodeError) as exc_info:
            from_global_id("not base64!!!")

        assert exc_info.value.code == "INVALID_CURSOR"


class TestCursor:
    """Tests for cursor encoding."""

    def test_cursor_format(self):
        """Cursors are base64('arrayconnection:' + base64('<type>:<pk>'))."""
        cursor = pk_to_cursor("Foo", 7)

        assert cursor == _b64("arrayconnection:" + _b64("Foo:7"))
        assert base64.b64decode(cursor).decode().startswith(PREFIX)

    def test_cursor_roundtrip(self):
        """cursor_to_pk inverts pk_to_cursor (as text)."""
        for pk in (0, 1, 5000, "abc", "550e8400-e29b-41d4-a716-446655440000"):
            assert cursor_to_pk(pk_to_cursor("Foo", pk)) == str(pk)

    def test_decode_cursor_returns_type(self):
        """decode_cursor exposes the type name embedded in the cursor."""
        assert decode_cursor(pk_to_cursor("Bar", 3)) == GlobalId("Bar", "3")

    def test_cursors_differ_across_types(self):
        """The same key under different types yields different cursors."""
        assert pk_to_cursor("Foo", 1) != pk_to_cursor("Bar", 1)

    def test_node_id_cursor_roundtrip(self):
        """node_id_to_cursor and cursor_to_node_id are inverses."""
        node_id = to_global_id("Foo", 9)

        assert cursor_to_node_id(node_id_to_cursor(node_id)) == node_id

    def test_cursor_without_prefix_raises(self):
        """A base64 value without the cursor prefix is rejected."""
        with pytest.raises(DecodeError):
            cursor_to_node_id(_b64("something:else"))

    def test_global_id_is_not_a_cursor(self):
        """A bare global id cannot be used as a cursor."""
        with pytest.raises(DecodeError):
            cursor_to_pk(to_global_id("Foo", 1))

    @pytest.mark.parametrize("cursor", ["", "%%%", "YWJj\n!", "4pyTIMOgIGxhIG1vZGU"])
    def test_malformed_cursor_raises(self, cursor):
        """Malformed cursors raise DecodeError."""
        with pytest.raises(DecodeError):
            cursor_to_pk(cursor)


class TestBase64:
    """Tests for the base64 helpers."""

    def test_unicode_roundtrip(self):
        """Non-ASCII text survives encoding."""
        assert base64_decode(base64_encode("Füü:ключ")) == "Füü:ключ"

    def test_non_utf8_payload_raises(self):
        """Valid base64 that is not UTF-8 text is rejected."""
        with pytest.raises(DecodeError):
            base64_decode(base64.b64encode(b"\xff\xfe").decode())
