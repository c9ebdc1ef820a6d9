"""Strawberry GraphQL layer: connection and node fields over tables.

- connection_field: Relay connection field over a Table
- NodeRegistry: ``node(id:)`` resolution of global ids
- SchemaConverter: object types generated from Pydantic schemas
- build_schema / create_graphql_router: schema and FastAPI wiring
"""

from tablerelay.graphql.connection import connection_field
from tablerelay.graphql.context import GraphQLContext
from tablerelay.graphql.errors import ErrorCategory, is_user_facing_error
from tablerelay.graphql.node import NodeRegistry
from tablerelay.graphql.router import create_graphql_router
from tablerelay.graphql.schema import Schema, build_schema
from tablerelay.graphql.selection import fields_from_selections, relations_from_fields
from tablerelay.graphql.types import (
    Node,
    PageInfoType,
    SchemaConverter,
    SchemaKind,
    fields_from_table,
    validated_scalar,
)

__all__ = [
    "ErrorCategory",
    "GraphQLContext",
    "Node",
    "NodeRegistry",
    "PageInfoType",
    "Schema",
    "SchemaConverter",
    "SchemaKind",
    "build_schema",
    "connection_field",
    "create_graphql_router",
    "fields_from_selections",
    "fields_from_table",
    "is_user_facing_error",
    "relations_from_fields",
    "validated_scalar",
]
