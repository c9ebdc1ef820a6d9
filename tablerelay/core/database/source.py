"""Ordered sources: countable, sliceable, filterable record sequences.

The connection engine only talks to the OrderedSource protocol. Two
implementations ship with the library:

- SQLAlchemySource: an async session plus a base ``Select`` and an
  explicit ordering. Offsets are located with a ``row_number()`` window
  over the same filtered statement that is counted and sliced, so every
  query of one resolution sees the same view.
- SequenceSource: an in-memory list with a stable order, for tests and
  for callers that already hold their records.

Sources are immutable: ``filter()`` and ``with_relations()`` return new
sources, so concurrent resolutions never share a filtered view.

Usage:
    source = SQLAlchemySource(
        session,
        select(Foo),
        order_by=[Foo.created_at.desc(), Foo.id.desc()],
        pk_column=Foo.id,
    )
    total = await source.count()
    rows = await source.slice(0, 10)
    offset = await source.locate("42")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sqlalchemy import func, inspect as sa_inspect, select
from sqlalchemy.orm import selectinload

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute
    from sqlalchemy.orm.strategy_options import _AbstractLoad

logger = logging.getLogger(__name__)

# Nested relation selection: {"books": {"publisher": True}, "tags": True}
Relations = Mapping[str, "Relations | bool"]


@runtime_checkable
class OrderedSource(Protocol):
    """A sequence of records under a stable, total ordering."""

    async def count(self) -> int:
        """Number of records in the current view."""
        ...

    async def slice(self, start: int, stop: int) -> list[Any]:
        """Records at offsets ``[start, stop)`` in order."""
        ...

    async def locate(self, key: Any) -> int | None:
        """Zero-based offset of the record with primary key ``key``, or None."""
        ...

    def filter(self, **criteria: Any) -> OrderedSource:
        """A new source restricted to records matching all criteria."""
        ...

    def with_relations(self, relations: Relations) -> OrderedSource:
        """A new source that eagerly loads the given relations."""
        ...


def record_key(record: Any, pk: str) -> Any:
    """Read the primary key of a mapping or object record."""
    if isinstance(record, Mapping):
        return record[pk]
    return getattr(record, pk)


def record_to_dict(record: Any, _parents: frozenset[int] = frozenset()) -> Any:
    """Convert an ORM instance into a dict of its loaded attributes.

    Unloaded attributes (lazy relationships, deferred columns) are skipped
    so reading a record never triggers IO inside async code. Nested
    relationship values are converted recursively; back-references to a
    record already being converted are left out. Mappings are copied and
    any other value is returned unchanged.
    """
    if isinstance(record, Mapping):
        return dict(record)

    state = sa_inspect(record, raiseerr=False)
    if state is None or not hasattr(state, "unloaded"):
        return record

    parents = _parents | {id(record)}
    unloaded = state.unloaded
    relationships = state.mapper.relationships
    data: dict[str, Any] = {}
    for attr in state.mapper.attrs:
        if attr.key in unloaded:
            continue
        value = state.dict.get(attr.key)
        if attr.key in relationships and value is not None:
            if isinstance(value, (list, tuple, set)):
                value = [record_to_dict(item, parents) for item in value if id(item) not in parents]
            elif id(value) in parents:
                continue
            else:
                value = record_to_dict(value, parents)
        data[attr.key] = value
    return data


def coerce_key(column: Any, key: Any) -> Any:
    """Convert a decoded (string) key to the column's Python type.

    Cursors and global ids carry keys as text; integer and UUID columns
    need the native type for comparison.

    Raises:
        ValueError: If the key is not a valid value for the column.
    """
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return key
    if isinstance(key, python_type):
        return key
    try:
        return python_type(key)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{key!r} is not a valid {python_type.__name__} key") from e


def load_options(
    entity: Any,
    relations: Relations,
    parent: _AbstractLoad | None = None,
) -> list[_AbstractLoad]:
    """Build chained ``selectinload`` options for requested relationships.

    Names that are not relationships of ``entity`` (plain columns, computed
    GraphQL fields) are ignored.
    """
    mapper = sa_inspect(entity)
    options: list[_AbstractLoad] = []
    for name, nested in relations.items():
        relationship = mapper.relationships.get(name)
        if relationship is None:
            continue
        attr = getattr(entity, name)
        loader = parent.selectinload(attr) if parent is not None else selectinload(attr)
        if isinstance(nested, Mapping) and nested:
            children = load_options(relationship.mapper.class_, nested, loader)
            if children:
                options.extend(children)
                continue
        options.append(loader)
    return options


@dataclass(frozen=True)
class SQLAlchemySource:
    """OrderedSource over an async SQLAlchemy session.

    Attributes:
        session: Session all queries of this source run on
        statement: Base ``select(Model)``, optionally with WHERE clauses;
            it must not carry its own ORDER BY/LIMIT/OFFSET
        order_by: Ordering clauses; the last one should be the primary key
            so the order is total
        pk_column: Primary key column used by ``locate``
    """

    session: AsyncSession
    statement: Select[Any]
    order_by: Sequence[Any]
    pk_column: InstrumentedAttribute[Any]
    options: tuple[Any, ...] = field(default=())

    @property
    def entity(self) -> Any:
        """Mapped class the statement selects."""
        return self.pk_column.class_

    def ordered(self) -> Select[Any]:
        """The filtered statement with ordering applied."""
        return self.statement.order_by(*self.order_by)

    async def count(self) -> int:
        count_stmt = select(func.count()).select_from(self.statement.subquery())
        result = await self.session.execute(count_stmt)
        return int(result.scalar_one())

    async def slice(self, start: int, stop: int) -> list[Any]:
        start = max(start, 0)
        if stop <= start:
            return []
        stmt = self.ordered().offset(start).limit(stop - start)
        if self.options:
            stmt = stmt.options(*self.options)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def locate(self, key: Any) -> int | None:
        row_number = func.row_number().over(order_by=list(self.order_by)).label("row_number")
        numbered = self.statement.with_only_columns(
            self.pk_column.label("pk"),
            row_number,
        ).subquery()
        try:
            key = coerce_key(self.pk_column, key)
        except ValueError:
            logger.debug("Key %r does not fit %s", key, self.pk_column)
            return None
        stmt = select(numbered.c.row_number).where(numbered.c.pk == key)
        result = await self.session.execute(stmt)
        position = result.scalar_one_or_none()
        return None if position is None else int(position) - 1

    def filter(self, **criteria: Any) -> SQLAlchemySource:
        return replace(self, statement=self.statement.filter_by(**criteria))

    def with_relations(self, relations: Relations) -> SQLAlchemySource:
        options = load_options(self.entity, relations)
        if not options:
            return self
        return replace(self, options=(*self.options, *options))


@dataclass(frozen=True)
class SequenceSource:
    """OrderedSource over an in-memory sequence.

    The sequence order is the connection order. Keys are compared as
    strings, since cursors carry primary keys as text.

    Attributes:
        items: Records in connection order
        pk: Name of the primary key field or attribute
    """

    items: Sequence[Any]
    pk: str = "id"

    async def count(self) -> int:
        return len(self.items)

    async def slice(self, start: int, stop: int) -> list[Any]:
        start = max(start, 0)
        if stop <= start:
            return []
        return list(self.items[start:stop])

    async def locate(self, key: Any) -> int | None:
        wanted = str(key)
        for offset, item in enumerate(self.items):
            if str(record_key(item, self.pk)) == wanted:
                return offset
        return None

    def filter(self, **criteria: Any) -> SequenceSource:
        def matches(item: Any) -> bool:
            for name, value in criteria.items():
                actual = item.get(name) if isinstance(item, Mapping) else getattr(item, name, None)
                if actual != value:
                    return False
            return True

        return replace(self, items=[item for item in self.items if matches(item)])

    def with_relations(self, relations: Relations) -> SequenceSource:
        return self


__all__ = [
    "OrderedSource",
    "Relations",
    "SQLAlchemySource",
    "SequenceSource",
    "coerce_key",
    "load_options",
    "record_key",
    "record_to_dict",
]
