"""Pagination schemas for Relay cursor connections.

These are the engine-level (GraphQL-agnostic) shapes: the arguments a
connection is resolved with, the computed offset window, and the
resulting Connection of edges plus PageInfo. The GraphQL layer maps
them onto Strawberry types.
"""

from __future__ import annotations

from typing import Any, Generic, NamedTuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ConnectionArguments(BaseModel):
    """Relay connection arguments for one resolution.

    Attributes:
        first: Number of edges to keep from the start of the window
        after: Cursor the window starts after (exclusive)
        last: Number of edges to keep from the end of the window
        before: Cursor the window ends before (exclusive)
        filters: Equality criteria applied to the source before windowing
    """

    first: int | None = Field(default=None, description="Number of items from the start")
    after: str | None = Field(default=None, description="Cursor to start after (exclusive)")
    last: int | None = Field(default=None, description="Number of items from the end")
    before: str | None = Field(default=None, description="Cursor to end before (exclusive)")
    filters: dict[str, Any] | None = Field(
        default=None,
        description="Equality filters applied before windowing",
    )

    model_config = ConfigDict(frozen=True)


class EdgeOffsets(NamedTuple):
    """Inclusive offset bounds computed for one resolution.

    ``after_offset``/``before_offset`` bound the eligible zone before
    ``first``/``last`` truncation; ``start_offset``/``end_offset`` bound
    the edges actually returned.
    """

    after_offset: int
    before_offset: int
    start_offset: int
    end_offset: int


class PageInfo(BaseModel):
    """Pagination metadata following the Relay specification.

    Attributes:
        has_previous_page: Whether ``last`` truncated the eligible window
        has_next_page: Whether ``first`` truncated the eligible window
        start_cursor: Cursor of the first returned edge
        end_cursor: Cursor of the last returned edge
    """

    has_previous_page: bool = Field(description="Whether previous items exist")
    has_next_page: bool = Field(description="Whether more items exist")
    start_cursor: str | None = Field(default=None, description="Cursor of the first item")
    end_cursor: str | None = Field(default=None, description="Cursor of the last item")


class Edge(BaseModel, Generic[T]):
    """Edge wrapper pairing a record with its cursor."""

    node: T = Field(description="The data item")
    cursor: str = Field(description="Cursor for this item")

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Connection(BaseModel, Generic[T]):
    """A resolved connection: edges in window order plus page info."""

    edges: list[Edge[T]] = Field(
        default_factory=list,
        description="List of edges (items with cursors)",
    )
    page_info: PageInfo = Field(description="Pagination metadata")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def nodes(self) -> list[T]:
        """Get just the nodes without edge wrappers."""
        return [edge.node for edge in self.edges]


__all__ = [
    "Connection",
    "ConnectionArguments",
    "Edge",
    "EdgeOffsets",
    "PageInfo",
]
