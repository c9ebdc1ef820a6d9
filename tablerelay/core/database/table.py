"""Table descriptors: a mapped model paired with its validation schema.

A Table ties together everything a connection or node field needs to
know about one record type: the GraphQL/cursor type name, the
SQLAlchemy model that stores it, the Pydantic schema that describes and
validates it, and its primary key.

Example:
    class FooSchema(BaseModel):
        id: int
        created_at: datetime
        bar: str | None = None

    foo_table = Table(name="Foo", model=Foo, schema=FooSchema)

    async with session_factory() as session:
        source = foo_table.source(session)
        foo = await foo_table.get(session, "1")
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import select

from tablerelay.core.database.source import SQLAlchemySource, coerce_key, load_options

if TYPE_CHECKING:
    from pydantic import BaseModel
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

    from tablerelay.core.database.source import Relations
    from tablerelay.core.settings import RelaySettings

logger = logging.getLogger(__name__)

M = TypeVar("M")


@dataclass(frozen=True)
class Table(Generic[M]):
    """Description of one paginated record type.

    Attributes:
        name: Type name used in cursors and global ids
        model: SQLAlchemy mapped class
        schema: Pydantic model describing the record's fields
        pk: Primary key attribute name
        order_by: Explicit ordering; must be total. Defaults to
            ``created_at DESC, <pk> DESC``
    """

    name: str
    model: type[M]
    schema: type[BaseModel]
    pk: str = "id"
    order_by: Sequence[Any] | None = None

    @property
    def pk_column(self) -> InstrumentedAttribute[Any]:
        """Primary key column of the model."""
        return getattr(self.model, self.pk)

    def default_order_by(self, settings: RelaySettings | None = None) -> list[Any]:
        """Ordering used when a field does not supply one.

        Reverse-chronological by the configured order field (when the model
        has it), then by primary key so the order is total.
        """
        if self.order_by is not None:
            return list(self.order_by)

        if settings is None:
            from tablerelay.core.settings import get_relay_settings

            settings = get_relay_settings()

        clauses: list[Any] = []
        order_column = getattr(self.model, settings.default_order_field, None)
        if order_column is not None:
            clauses.append(order_column.desc())
        clauses.append(self.pk_column.desc())
        return clauses

    def query(self) -> Select[Any]:
        """Base statement selecting every record of the table."""
        return select(self.model)

    def source(
        self,
        session: AsyncSession,
        *,
        statement: Select[Any] | None = None,
        order_by: Sequence[Any] | None = None,
    ) -> SQLAlchemySource:
        """Ordered source over this table bound to ``session``."""
        return SQLAlchemySource(
            session=session,
            statement=statement if statement is not None else self.query(),
            order_by=list(order_by) if order_by is not None else self.default_order_by(),
            pk_column=self.pk_column,
        )

    async def get(
        self,
        session: AsyncSession,
        pk: Any,
        *,
        relations: Relations | None = None,
    ) -> M | None:
        """Load one record by primary key, or None if it does not exist.

        ``relations`` are loaded eagerly along with the record, as for
        SQLAlchemySource.with_relations.
        """
        try:
            key = coerce_key(self.pk_column, pk)
        except ValueError:
            logger.debug("Invalid %s key %r", self.name, pk)
            return None
        options = load_options(self.model, relations) if relations else None
        return await session.get(self.model, key, options=options)


__all__ = ["Table"]
