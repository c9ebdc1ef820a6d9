"""tablerelay: Relay cursor connections over SQLAlchemy tables for Strawberry GraphQL.

    from tablerelay import NodeRegistry, SchemaConverter, Table, build_schema, connection_field

    foo_table = Table(name="Foo", model=Foo, schema=FooSchema)
    FooType = SchemaConverter().node_type(foo_table)

    registry = NodeRegistry()
    registry.register_table(foo_table, FooType)

    @strawberry.type
    class Query:
        foos = connection_field(foo_table, FooType)
        node = registry.node_field()

    schema = build_schema(Query, registry=registry)
"""

from tablerelay.core.database import SequenceSource, SQLAlchemySource, Table
from tablerelay.core.exceptions import (
    DecodeError,
    InvalidArgumentError,
    StaleCursorError,
    TableRelayError,
)
from tablerelay.core.pagination import (
    Connection,
    ConnectionArguments,
    PageInfo,
    resolve_connection,
)
from tablerelay.core.settings import RelaySettings, get_relay_settings
from tablerelay.graphql import (
    GraphQLContext,
    Node,
    NodeRegistry,
    SchemaConverter,
    build_schema,
    connection_field,
    create_graphql_router,
    validated_scalar,
)

__version__ = "0.1.0"

__all__ = [
    "Connection",
    "ConnectionArguments",
    "DecodeError",
    "GraphQLContext",
    "InvalidArgumentError",
    "Node",
    "NodeRegistry",
    "PageInfo",
    "RelaySettings",
    "SQLAlchemySource",
    "SchemaConverter",
    "SequenceSource",
    "StaleCursorError",
    "Table",
    "TableRelayError",
    "__version__",
    "build_schema",
    "connection_field",
    "create_graphql_router",
    "get_relay_settings",
    "resolve_connection",
    "validated_scalar",
]
