"""Relay connection fields over tables.

``connection_field`` builds a Strawberry field resolving a Relay
connection over a Table:

    converter = SchemaConverter()
    FooType = converter.node_type(foo_table)

    @strawberry.type
    class Query:
        foos = connection_field(foo_table, FooType, filter_fields=FooFilters)

    # type Query {
    #   foos(first: Int, last: Int, after: String, before: String,
    #        filters: FooFilterFields): FooConnection
    # }

Each resolution opens one session (from ``connect(info)`` or the
request context's ``session_scope()``), runs the connection engine on it
and converts the returned records with ``node_type.from_record`` before
the session is released.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Annotated, Any, Optional

import strawberry
from strawberry.experimental.pydantic import input as pydantic_input
from strawberry.types import Info

from tablerelay.core.pagination.connection import resolve_connection
from tablerelay.core.pagination.offsets import assert_connection_args
from tablerelay.core.pagination.schemas import ConnectionArguments
from tablerelay.core.settings import get_relay_settings
from tablerelay.graphql.selection import node_relations
from tablerelay.graphql.types.base import graphql_name
from tablerelay.graphql.types.pagination import create_connection_type, to_connection_type
from tablerelay.infra.logging.context import log_context

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from contextlib import AbstractAsyncContextManager

    from pydantic import BaseModel
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from tablerelay.core.database.table import Table
    from tablerelay.core.settings import RelaySettings

    Connect = Callable[[Info[Any, Any]], AbstractAsyncContextManager[AsyncSession]]

logger = logging.getLogger(__name__)

# Annotated connection arguments
FirstArg = Annotated[
    Optional[int],  # noqa: UP007
    strawberry.argument(description="Number of items to return from the start"),
]
LastArg = Annotated[
    Optional[int],  # noqa: UP007
    strawberry.argument(description="Number of items to return from the end"),
]
AfterArg = Annotated[
    Optional[str],  # noqa: UP007
    strawberry.argument(description="Cursor to start after"),
]
BeforeArg = Annotated[
    Optional[str],  # noqa: UP007
    strawberry.argument(description="Cursor to end before"),
]

_filter_inputs: dict[type, type] = {}


def create_filter_input(model: type[BaseModel], type_name: str) -> type:
    """Create (or reuse) the ``<Name>FilterFields`` input for a filter model.

    Every field of ``model`` should be optional; unset fields are not
    applied as criteria.
    """
    if model in _filter_inputs:
        return _filter_inputs[model]

    name = f"{type_name}FilterFields"
    filter_input = pydantic_input(
        model=model,
        all_fields=True,
        name=name,
        description=f"Equality filters for {type_name} connections",
    )(type(name, (), {}))
    _filter_inputs[model] = filter_input
    return filter_input


def filters_to_criteria(filters: Any) -> dict[str, Any] | None:
    """Convert a filter input into equality criteria, dropping unset fields."""
    if filters is None:
        return None
    criteria = filters.to_pydantic().model_dump(exclude_none=True)
    return criteria or None


def connection_field(
    table: Table[Any],
    node_type: type,
    *,
    filter_fields: type[BaseModel] | None = None,
    connect: Connect | None = None,
    query: Callable[[], Select[Any]] | None = None,
    order_by: Sequence[Any] | None = None,
    description: str | None = None,
    settings: RelaySettings | None = None,
) -> Any:
    """Create a Relay connection field over ``table``.

    Args:
        table: Table the connection pages through
        node_type: Node type of the edges; must provide ``from_record``
            (see SchemaConverter)
        filter_fields: Pydantic model whose optional fields become the
            ``filters`` argument, applied as equality criteria
        connect: Opens the session for one resolution; defaults to the
            request context's ``session_scope()``
        query: Builds the base statement (WHERE clauses only); defaults
            to ``table.query()``
        order_by: Total ordering; defaults to the table's ordering
        description: Field description
        settings: Engine settings, loaded from the environment when omitted

    Returns:
        A Strawberry field of type ``<Name>Connection``. The field is
        nullable so an argument error leaves sibling fields intact.
    """
    connection_type = create_connection_type(node_type)
    filter_input = create_filter_input(filter_fields, graphql_name(node_type)) if filter_fields else None

    async def resolve(
        info: Info[Any, Any],
        first: int | None = None,
        last: int | None = None,
        after: str | None = None,
        before: str | None = None,
        filters: Any = None,
    ) -> Any:
        assert_connection_args(
            first=first,
            last=last,
            require_first_or_last=(settings or get_relay_settings()).require_first_or_last,
        )
        args = ConnectionArguments(
            first=first,
            last=last,
            after=after,
            before=before,
            filters=filters_to_criteria(filters),
        )
        relations = node_relations(info)

        scope = connect(info) if connect is not None else info.context.session_scope()
        with log_context(connection=table.name):
            async with scope as session:
                source = table.source(
                    session,
                    statement=query() if query is not None else None,
                    order_by=order_by,
                )
                connection = await resolve_connection(
                    source,
                    args,
                    type_name=table.name,
                    pk=table.pk,
                    relations=relations,
                    settings=settings,
                )
                return to_connection_type(connection, node_type, node_type.from_record)

    parameters = [
        inspect.Parameter("info", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Info),
        inspect.Parameter("first", inspect.Parameter.KEYWORD_ONLY, default=None, annotation=FirstArg),
        inspect.Parameter("last", inspect.Parameter.KEYWORD_ONLY, default=None, annotation=LastArg),
        inspect.Parameter("after", inspect.Parameter.KEYWORD_ONLY, default=None, annotation=AfterArg),
        inspect.Parameter("before", inspect.Parameter.KEYWORD_ONLY, default=None, annotation=BeforeArg),
    ]
    if filter_input is not None:
        parameters.append(
            inspect.Parameter(
                "filters",
                inspect.Parameter.KEYWORD_ONLY,
                default=None,
                annotation=Annotated[
                    Optional[filter_input],  # noqa: UP007
                    strawberry.argument(description="Equality filters applied before paging"),
                ],
            ),
        )
    resolve.__signature__ = inspect.Signature(  # type: ignore[attr-defined]
        parameters,
        return_annotation=Optional[connection_type],  # noqa: UP007
    )

    return strawberry.field(
        resolver=resolve,
        description=description or f"Relay connection over {table.name} records",
    )


__all__ = ["connection_field", "create_filter_input", "filters_to_criteria"]
