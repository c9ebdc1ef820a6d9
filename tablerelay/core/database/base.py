"""Declarative base and mixins for connection-ready tables.

A table can back a connection field when it has a primary key and a
stable ordering column. The default ordering is reverse-chronological
by ``created_at`` with the primary key as tiebreaker, which
TimestampMixin provides.

Examples:
    Integer PK with timestamps:
    class Foo(Base, IntegerPKMixin, TimestampMixin):
        __tablename__ = "foos"
        bar: Mapped[str] = mapped_column(String(255))

    UUID PK:
    class Document(Base, UUIDPKMixin, TimestampMixin):
        __tablename__ = "documents"
        title: Mapped[str] = mapped_column(String(255))
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

# Consistent naming convention for database constraints
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base with a consistent constraint naming convention."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class IntegerPKMixin:
    """Integer auto-increment primary key."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)


class UUIDPKMixin:
    """UUID v4 primary key.

    Cursors carry the key as text; SQLAlchemySource converts it back to a
    ``uuid.UUID`` before comparing.
    """

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)


class TimestampMixin:
    """Creation and modification timestamps.

    ``created_at`` drives the default connection ordering. Python-side
    defaults keep it populated in SQLite test databases as well.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "IntegerPKMixin",
    "TimestampMixin",
    "UUIDPKMixin",
]
