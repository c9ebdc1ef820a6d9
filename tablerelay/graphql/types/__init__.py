"""GraphQL types: base Relay types, connection factories, converters and scalars."""

from tablerelay.graphql.types.base import Node, PageInfoType, graphql_name
from tablerelay.graphql.types.converter import (
    FieldSchema,
    GraphQLField,
    SchemaConverter,
    SchemaKind,
    fields_from_table,
)
from tablerelay.graphql.types.pagination import (
    create_connection_type,
    create_edge_type,
    to_connection_type,
)
from tablerelay.graphql.types.scalars import validated_scalar

__all__ = [
    "FieldSchema",
    "GraphQLField",
    "Node",
    "PageInfoType",
    "SchemaConverter",
    "SchemaKind",
    "create_connection_type",
    "create_edge_type",
    "fields_from_table",
    "graphql_name",
    "to_connection_type",
    "validated_scalar",
]
