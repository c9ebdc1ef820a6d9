"""Relay Connection and Edge type factories.

Connection and edge types are generated per node type and cached, so
every connection field over ``Foo`` shares ``FooConnection`` and
``FooEdge``. Types are built with explicit annotations (not class
bodies) because the node type is only known at runtime.

Example:
    FooConnection = create_connection_type(FooType)

    # Produces:
    # type FooConnection {
    #   edges: [FooEdge!]!
    #   pageInfo: PageInfo!
    # }
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import strawberry

from tablerelay.graphql.types.base import PageInfoType, graphql_name

if TYPE_CHECKING:
    from collections.abc import Callable

    from tablerelay.core.pagination.schemas import Connection

__all__ = [
    "create_connection_type",
    "create_edge_type",
    "to_connection_type",
]

_edge_types: dict[type, type] = {}
_connection_types: dict[type, type] = {}


def create_edge_type(node_type: type) -> type:
    """Create (or reuse) the ``<Node>Edge`` type for ``node_type``."""
    if node_type in _edge_types:
        return _edge_types[node_type]

    name = f"{graphql_name(node_type)}Edge"
    namespace: dict[str, Any] = {
        "__annotations__": {"cursor": str, "node": node_type},
        "cursor": strawberry.field(description="Opaque cursor for this edge used in pagination"),
        "node": strawberry.field(description="The item at the end of the edge"),
    }
    edge_type = strawberry.type(
        type(name, (), namespace),
        name=name,
        description=f"An edge in a connection of {graphql_name(node_type)}",
    )
    _edge_types[node_type] = edge_type
    return edge_type


def create_connection_type(node_type: type) -> type:
    """Create (or reuse) the ``<Node>Connection`` type for ``node_type``."""
    if node_type in _connection_types:
        return _connection_types[node_type]

    name = f"{graphql_name(node_type)}Connection"
    edge_type = create_edge_type(node_type)
    namespace: dict[str, Any] = {
        "__annotations__": {"edges": list[edge_type], "page_info": PageInfoType},
        "edges": strawberry.field(description="List of edges containing nodes and their cursors"),
        "page_info": strawberry.field(description="Information to aid in pagination"),
    }
    connection_type = strawberry.type(
        type(name, (), namespace),
        name=name,
        description=f"A Relay connection to a list of {graphql_name(node_type)}",
    )
    _connection_types[node_type] = connection_type
    return connection_type


def to_connection_type(
    connection: Connection[Any],
    node_type: type,
    to_node: Callable[[Any], Any],
) -> Any:
    """Convert an engine Connection into its Strawberry connection type.

    Args:
        connection: Resolved connection with records as nodes
        node_type: Node type the connection was created for
        to_node: Converts one record into a ``node_type`` instance
    """
    edge_type = create_edge_type(node_type)
    connection_type = create_connection_type(node_type)
    return connection_type(
        edges=[edge_type(cursor=edge.cursor, node=to_node(edge.node)) for edge in connection.edges],
        page_info=PageInfoType(**connection.page_info.model_dump()),
    )
