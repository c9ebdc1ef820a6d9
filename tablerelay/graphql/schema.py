"""GraphQL schema construction.

``build_schema`` assembles a Strawberry schema for connection and node
fields: it registers the node types of a NodeRegistry (so the Node
interface can resolve them even when no field returns them directly),
logs every execution error, and masks internal errors when configured.

Usage:
    schema = build_schema(Query, registry=registry)
    result = await schema.execute(query, context_value=GraphQLContext(session_factory=factory))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import strawberry

from tablerelay.core.settings import get_relay_settings
from tablerelay.graphql.errors import MaskInternalErrors, log_graphql_error

if TYPE_CHECKING:
    from collections.abc import Iterable

    from graphql import GraphQLError
    from strawberry.extensions import SchemaExtension
    from strawberry.types import ExecutionContext

    from tablerelay.core.settings import RelaySettings
    from tablerelay.graphql.node import NodeRegistry

logger = logging.getLogger(__name__)


class Schema(strawberry.Schema):
    """Strawberry schema logging every error with its operation context."""

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        for error in errors:
            log_graphql_error(error, execution_context)


def build_schema(
    query: type,
    *,
    mutation: type | None = None,
    registry: NodeRegistry | None = None,
    types: Iterable[type] = (),
    extensions: Iterable[type[SchemaExtension] | SchemaExtension] = (),
    settings: RelaySettings | None = None,
) -> Schema:
    """Build the GraphQL schema.

    Args:
        query: Root query type
        mutation: Optional root mutation type
        registry: Node registry whose types are added to the schema
        types: Additional types to include
        extensions: Additional Strawberry schema extensions
        settings: Engine settings, loaded from the environment when omitted

    Returns:
        Configured Schema
    """
    settings = settings or get_relay_settings()

    schema_extensions: list[Any] = list(extensions)
    if settings.mask_internal_errors:
        schema_extensions.append(MaskInternalErrors)

    schema_types = [*(registry.types if registry is not None else ()), *types]
    logger.debug(
        "Building GraphQL schema with %d node types, masking=%s",
        len(schema_types),
        settings.mask_internal_errors,
    )
    return Schema(
        query=query,
        mutation=mutation,
        types=schema_types,
        extensions=schema_extensions,
    )


__all__ = ["Schema", "build_schema"]
