"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: explicit engine settings, cache reset
    - Database Fixtures: SQLite engine, session factory, sample records
    - Data Fixtures: in-memory records for SequenceSource tests
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from tablerelay.core.database import Base
from tablerelay.core.settings import RelaySettings, get_logging_settings, get_relay_settings
from tablerelay.infra.logging import clear_log_context
from tests.fixtures.tables import Author, Book
from tests.utils import BASE_TIME, insert_foos

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Iterator
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_settings_and_context() -> Iterator[None]:
    """Clear cached settings and log context around every test."""
    get_relay_settings.cache_clear()
    get_logging_settings.cache_clear()
    clear_log_context()
    yield
    get_relay_settings.cache_clear()
    get_logging_settings.cache_clear()
    clear_log_context()


@pytest.fixture
def relay_settings() -> RelaySettings:
    """Default engine settings, independent of the environment."""
    return RelaySettings(
        stale_cursor_policy="boundary",
        require_first_or_last=False,
        default_order_field="created_at",
        mask_internal_errors=False,
    )


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine on a temporary SQLite file.

    A file database (rather than ``:memory:``) lets every session open its
    own connection to the same data.

    Yields:
        Async SQLAlchemy engine with all tables created.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'tablerelay.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Provide a session, rolled back after the test."""
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
async def foo_ids(session_factory: async_sessionmaker[AsyncSession]) -> list[int]:
    """Twenty foos; ids listed in connection order (20 down to 1)."""
    return await insert_foos(session_factory, 20)


@pytest.fixture
async def authors(session_factory: async_sessionmaker[AsyncSession]) -> list[int]:
    """Two authors with books; ids listed in connection order."""
    async with session_factory() as session:
        ursula = Author(id=1, name="Ursula", created_at=BASE_TIME)
        ted = Author(id=2, name="Ted", created_at=BASE_TIME + timedelta(days=1))
        session.add_all(
            [
                ursula,
                ted,
                Book(id=1, title="The Dispossessed", author=ursula),
                Book(id=2, title="The Lathe of Heaven", author=ursula),
                Book(id=3, title="Stories of Your Life", author=ted),
            ],
        )
        await session.commit()
    return [2, 1]


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def records() -> list[dict[str, object]]:
    """Twenty in-memory records with ids 0..19, in connection order."""
    return [{"id": index, "bar": f"bar-{index}", "even": index % 2 == 0} for index in range(20)]
