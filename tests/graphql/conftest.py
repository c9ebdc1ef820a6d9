"""GraphQL test fixtures.

Provides:
- GraphQL context bound to the test database
- An ``execute`` helper running operations against the sample schema
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from tablerelay.graphql import GraphQLContext
from tests.fixtures.schema import schema

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
    from strawberry.types import ExecutionResult


@pytest.fixture
def graphql_context(session_factory: async_sessionmaker[AsyncSession]) -> GraphQLContext:
    """Create a GraphQL context for testing.

    Args:
        session_factory: Session factory of the test database.

    Returns:
        GraphQLContext resolvers open their sessions from.
    """
    return GraphQLContext(session_factory=session_factory)


@pytest.fixture
def execute(graphql_context: GraphQLContext) -> Callable[..., Awaitable[ExecutionResult]]:
    """Execute an operation against the sample schema."""

    async def run(query: str, **variables: Any) -> ExecutionResult:
        return await schema.execute(
            query,
            variable_values=variables or None,
            context_value=graphql_context,
        )

    return run
