"""Unit tests for selection set projection."""
import strawberry
from strawberry.types import Info

from tablerelay.graphql.selection import (
    fields_from_info,
    node_relations,
    relations_from_fields,
    type_relations,
)


@strawberry.type
class Book:
    title: str
    page_count: int


@strawberry.interface
class Named:
    name: str
    favourite_book: Book | None


@strawberry.type
class Author(Named):
    books: list[Book]


@strawberry.type
class Publisher(Named):
    imprints: list[Book]


@strawberry.type
class Edge:
    cursor: str
    node: Author


@strawberry.type
class AuthorConnection:
    edges: list[Edge]


captured: dict = {}


@strawberry.type
class Query:
    @strawberry.field
    def authors(self, info: Info) -> AuthorConnection:
        captured["fields"] = fields_from_info(info)
        captured["relations"] = node_relations(info)
        return AuthorConnection(edges=[])

    @strawberry.field
    def named(self, info: Info) -> Named | None:
        captured["author"] = type_relations(info, "Author")
        captured["publisher"] = type_relations(info, "Publisher")
        return None


schema = strawberry.Schema(query=Query, types=[Author, Publisher])


def project(query: str) -> tuple[dict, dict]:
    captured.clear()
    result = schema.execute_sync(query)
    assert result.errors is None
    return captured["fields"], captured["relations"]


class TestFieldsFromInfo:
    """Tests for fields_from_info / fields_from_selections."""

    def test_plain_fields(self):
        """Leaves map to True and objects to their sub-selection."""
        fields, _ = project("{ authors { edges { cursor node { name books { title } } } } }")

        assert fields == {
            "edges": {
                "cursor": True,
                "node": {"name": True, "books": {"title": True}},
            },
        }

    def test_fragments_are_merged(self):
        """Inline fragments and fragment spreads merge into their level."""
        fields, _ = project(
            """
            query {
              authors {
                edges {
                  node {
                    name
                    ... on Author { books { title } }
                    ...AuthorBooks
                  }
                }
              }
            }
            fragment AuthorBooks on Author { books { pageCount } }
            """,
        )

        assert fields["edges"]["node"] == {
            "name": True,
            "books": {"title": True, "pageCount": True},
        }


class TestRelations:
    """Tests for relation extraction."""

    def test_relations_from_fields(self):
        """Only nested objects are kept, snake_cased."""
        fields = {"name": True, "favouriteBook": {"title": True}, "books": {"author": {"name": True}}}

        assert relations_from_fields(fields) == {"favourite_book": {}, "books": {"author": {}}}

    def test_node_relations(self):
        """Relations are read from edges.node of a connection selection."""
        _, relations = project("{ authors { edges { node { name favouriteBook { title } books { title } } } } }")

        assert relations == {"favourite_book": {}, "books": {}}

    def test_no_node_selection(self):
        """Without edges.node there is nothing to load."""
        _, relations = project("{ authors { edges { cursor } } }")

        assert relations == {}

    def test_typename_is_ignored(self):
        """__typename is a leaf, not a relation."""
        _, relations = project("{ authors { __typename edges { node { __typename name } } } }")

        assert relations == {}


class TestTypeRelations:
    """Tests for relations read per type under an abstract field."""

    def test_fragments_apply_to_their_type(self):
        """Each type only sees relations from fragments on itself or the interface."""
        captured.clear()
        result = schema.execute_sync(
            """
            query {
              named {
                name
                ... on Author { books { title } }
                ... on Publisher { imprints { title } }
                ...PublisherBooks
              }
            }
            fragment PublisherBooks on Publisher { imprints { pageCount } }
            """,
        )

        assert result.errors is None
        assert captured["author"] == {"books": {}}
        assert captured["publisher"] == {"imprints": {}}

    def test_interface_fragments_apply_to_every_type(self):
        captured.clear()
        result = schema.execute_sync("{ named { ... on Named { favouriteBook { title } } ... on Author { books { title } } } }")

        assert result.errors is None
        assert captured["author"] == {"favourite_book": {}, "books": {}}
        assert captured["publisher"] == {"favourite_book": {}}
