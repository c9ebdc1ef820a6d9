"""Base GraphQL types shared by every connection and node.

Provides the Relay PageInfo type and the Node interface implemented by
generated node types.
"""

from __future__ import annotations

import strawberry


@strawberry.type(name="PageInfo", description="Pagination metadata following GraphQL Relay specification")
class PageInfoType:
    """GraphQL Relay PageInfo for cursor-based pagination.

    Mirrors tablerelay.core.pagination.schemas.PageInfo.
    """

    has_previous_page: bool = strawberry.field(description="Whether previous items exist")
    has_next_page: bool = strawberry.field(description="Whether more items exist")
    start_cursor: str | None = strawberry.field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = strawberry.field(
        default=None,
        description="Cursor of the last item",
    )


@strawberry.interface(description="An object with a globally unique ID")
class Node:
    """Relay Node interface.

    ``id`` is the global id (``base64("<TypeName>:<pk>")``) that the
    ``node(id:)`` field resolves.
    """

    id: strawberry.ID = strawberry.field(description="The global ID of the object")


def graphql_name(graphql_type: type) -> str:
    """GraphQL name of a Strawberry type, falling back to the class name."""
    definition = getattr(graphql_type, "__strawberry_definition__", None)
    name = getattr(definition, "name", None)
    return name or graphql_type.__name__


__all__ = ["Node", "PageInfoType", "graphql_name"]
