"""Database layer: declarative base, table descriptors and ordered sources.

Base Classes and Mixins:
    - Base: Declarative base with constraint naming convention
    - IntegerPKMixin, UUIDPKMixin: Primary key strategies
    - TimestampMixin: created_at/updated_at (drives default ordering)

Tables:
    - Table: Model + Pydantic schema + primary key + ordering

Sources:
    - OrderedSource: Protocol consumed by the pagination engine
    - SQLAlchemySource: Async session-backed source
    - SequenceSource: In-memory source
"""

from tablerelay.core.database.base import (
    Base,
    IntegerPKMixin,
    TimestampMixin,
    UUIDPKMixin,
)
from tablerelay.core.database.source import (
    OrderedSource,
    Relations,
    SequenceSource,
    SQLAlchemySource,
    coerce_key,
    load_options,
    record_key,
    record_to_dict,
)
from tablerelay.core.database.table import Table

__all__ = [
    "Base",
    "IntegerPKMixin",
    "OrderedSource",
    "Relations",
    "SQLAlchemySource",
    "SequenceSource",
    "Table",
    "TimestampMixin",
    "UUIDPKMixin",
    "coerce_key",
    "load_options",
    "record_key",
    "record_to_dict",
]
