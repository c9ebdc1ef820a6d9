"""GraphQL router for FastAPI integration.

Usage:
    app = FastAPI()
    app.include_router(create_graphql_router(schema, session_factory), prefix="/graphql")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from strawberry.fastapi import GraphQLRouter

from tablerelay.graphql.context import GraphQLContext

if TYPE_CHECKING:
    import strawberry
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


def create_graphql_router(
    schema: strawberry.Schema,
    session_factory: async_sessionmaker[AsyncSession],
    *,
    path: str = "",
    graphql_ide: Literal["graphiql", "apollo-sandbox", "pathfinder"] | None = "graphiql",
) -> GraphQLRouter:
    """Create the GraphQL router.

    Each request gets a fresh GraphQLContext carrying ``session_factory``;
    resolvers open their own sessions from it.

    Args:
        schema: Schema to serve
        session_factory: Factory the context hands to resolvers
        path: Route path inside the router
        graphql_ide: In-browser IDE to serve on GET, or None to disable

    Returns:
        A FastAPI router to include in the application
    """

    async def get_graphql_context() -> GraphQLContext:
        return GraphQLContext(session_factory=session_factory)

    logger.debug("Creating GraphQL router (ide=%s)", graphql_ide)
    return GraphQLRouter(
        schema,
        path=path,
        context_getter=get_graphql_context,
        graphql_ide=graphql_ide,
    )


__all__ = ["create_graphql_router"]
