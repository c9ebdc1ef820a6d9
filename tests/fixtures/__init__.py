"""Test fixtures for pytest.

This module re-exports the sample tables used across the test suite.
"""

from .tables import (
    Author,
    AuthorSchema,
    Book,
    BookSummary,
    Foo,
    FooFilters,
    FooSchema,
    WriterSchema,
    author_table,
    foo_table,
    writer_table,
)

__all__ = [
    "Author",
    "AuthorSchema",
    "Book",
    "BookSummary",
    "Foo",
    "FooFilters",
    "FooSchema",
    "WriterSchema",
    "author_table",
    "foo_table",
    "writer_table",
]
