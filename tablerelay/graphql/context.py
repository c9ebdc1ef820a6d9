"""GraphQL context for request-scoped dependencies.

The context is created fresh for each GraphQL request and carries the
session factory that connection and node resolvers open their sessions
from. Every resolution opens its own session through ``session_scope()``
and releases it when the resolver returns, raises or is cancelled.

Following Strawberry's FastAPI integration pattern:
https://strawberry.rocks/docs/integrations/fastapi#context_getter
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
    from starlette.background import BackgroundTasks
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.websockets import WebSocket


@dataclass
class GraphQLContext(BaseContext):
    """Request context for GraphQL operations.

    Standard fields (per Strawberry docs):
    - request: The HTTP request (or None for WebSocket)
    - response: The HTTP response (for setting headers/cookies)
    - background_tasks: FastAPI BackgroundTasks for async operations

    Custom fields:
    - session_factory: Factory for the sessions resolvers run queries on

    Example usage in resolver:
        async with info.context.session_scope() as session:
            foo = await foo_table.get(session, "1")
    """

    session_factory: async_sessionmaker[AsyncSession] | None = None

    request: Request | WebSocket | None = None
    response: Response | None = None
    background_tasks: BackgroundTasks | None = field(default=None)

    def session_scope(self) -> AbstractAsyncContextManager[AsyncSession]:
        """Open a new session, closed when the ``async with`` block exits.

        Raises:
            RuntimeError: If the context was built without a session factory.
        """
        if self.session_factory is None:
            msg = "GraphQLContext has no session_factory; pass one or give the field a connect callable"
            raise RuntimeError(msg)
        return self.session_factory()


__all__ = ["GraphQLContext"]
