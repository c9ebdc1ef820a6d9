"""Test utilities and helper functions.

Usage:
    from tests.utils import BASE_TIME, insert_foos

    ordered_ids = await insert_foos(session_factory, 20)
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import insert

from tests.fixtures.tables import Foo

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


async def insert_foos(
    session_factory: async_sessionmaker[AsyncSession],
    count: int,
    *,
    bar: str | None = None,
) -> list[int]:
    """Insert ``count`` foos with ids 1..count, each a minute newer than the last.

    Even ids are ``published``, odd ids ``draft``.

    Returns:
        Ids in default connection order (newest first).
    """
    rows = [
        {
            "id": index,
            "bar": bar if bar is not None else f"bar-{index}",
            "status": "published" if index % 2 == 0 else "draft",
            "created_at": BASE_TIME + timedelta(minutes=index),
            "updated_at": BASE_TIME + timedelta(minutes=index),
        }
        for index in range(1, count + 1)
    ]
    async with session_factory() as session:
        await session.execute(insert(Foo), rows)
        await session.commit()
    return [row["id"] for row in reversed(rows)]
