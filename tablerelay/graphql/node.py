"""Relay node definitions.

A NodeRegistry maps node type names to loaders, and exposes the
``node(id: ID!)`` field that resolves any global id:

    registry = NodeRegistry()
    registry.register_table(foo_table, FooType)

    @strawberry.type
    class Query:
        node = registry.node_field()

    schema = build_schema(Query, registry=registry)

Global ids whose type is not registered, and ids whose record does not
exist, resolve to ``null``. A malformed global id is a field error.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any, Optional

import strawberry
from strawberry.types import Info

from tablerelay.core.pagination.cursor import from_global_id
from tablerelay.graphql.selection import type_relations
from tablerelay.graphql.types.base import Node, graphql_name
from tablerelay.infra.logging.context import log_context

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from contextlib import AbstractAsyncContextManager

    from sqlalchemy.ext.asyncio import AsyncSession

    from tablerelay.core.database.table import Table

    NodeLoader = Callable[[str, Info[Any, Any]], Awaitable[Any]]
    Connect = Callable[[Info[Any, Any]], AbstractAsyncContextManager[AsyncSession]]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeEntry:
    """Registered node type and the loader resolving its ids."""

    node_type: type
    load: NodeLoader


class NodeRegistry:
    """Registry of node types resolvable through ``node(id:)``."""

    def __init__(self) -> None:
        self._entries: dict[str, NodeEntry] = {}

    @property
    def types(self) -> list[type]:
        """Registered node types, in registration order."""
        return [entry.node_type for entry in self._entries.values()]

    def has_type(self, type_name: str) -> bool:
        return type_name in self._entries

    def register(self, node_type: type, load: NodeLoader) -> None:
        """Register a loader for ``node_type``.

        Registering a type name twice keeps the first registration.

        Args:
            node_type: Strawberry type implementing Node
            load: ``async (id, info) -> record | None``; records that are
                not ``node_type`` instances are converted with
                ``node_type.from_record``
        """
        type_name = graphql_name(node_type)
        if type_name in self._entries:
            logger.debug("Node type %s already registered", type_name)
            return
        self._entries[type_name] = NodeEntry(node_type=node_type, load=load)

    def register_table(self, table: Table[Any], node_type: type, *, connect: Connect | None = None) -> None:
        """Register ``node_type`` with a loader reading ``table`` by primary key.

        Relationships selected in a fragment on the node type are loaded
        with the record.
        """
        type_name = graphql_name(node_type)

        async def load(id: str, info: Info[Any, Any]) -> Any:
            relations = type_relations(info, type_name)
            scope = connect(info) if connect is not None else info.context.session_scope()
            async with scope as session:
                record = await table.get(session, id, relations=relations)
                return None if record is None else node_type.from_record(record)

        self.register(node_type, load)

    async def resolve(self, global_id: str, info: Info[Any, Any]) -> Any | None:
        """Resolve a global id to a node, or None.

        Raises:
            DecodeError: If ``global_id`` is not a valid global id.
        """
        type_name, id = from_global_id(global_id)
        entry = self._entries.get(type_name)
        if entry is None:
            logger.debug("No node type registered for %s", type_name)
            return None

        with log_context(node=type_name):
            node = await entry.load(id, info)
        if node is None or isinstance(node, entry.node_type):
            return node
        return entry.node_type.from_record(node)

    def node_field(self, description: str | None = None) -> Any:
        """Create the ``node(id: ID!): Node`` field."""
        registry = self

        async def node(info: Info[Any, Any], id: strawberry.ID) -> Node | None:
            return await registry.resolve(id, info)

        node.__signature__ = inspect.Signature(  # type: ignore[attr-defined]
            [
                inspect.Parameter("info", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Info),
                inspect.Parameter(
                    "id",
                    inspect.Parameter.KEYWORD_ONLY,
                    annotation=Annotated[strawberry.ID, strawberry.argument(description="The ID of an object")],
                ),
            ],
            return_annotation=Optional[Node],  # noqa: UP007
        )
        return strawberry.field(resolver=node, description=description or "Fetches an object given its ID")


__all__ = ["NodeEntry", "NodeRegistry"]
