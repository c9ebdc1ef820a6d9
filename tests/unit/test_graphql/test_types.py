"""Unit tests for Relay connection and edge type factories."""
import strawberry

from tablerelay.core.pagination.schemas import Connection, PageInfo
from tablerelay.graphql.types.base import PageInfoType, graphql_name
from tablerelay.graphql.types.pagination import (
    create_connection_type,
    create_edge_type,
    to_connection_type,
)


@strawberry.type(name="Gizmo")
class GizmoType:
    name: str


@strawberry.type
class Query:
    @strawberry.field
    def gizmos(self) -> create_connection_type(GizmoType):  # type: ignore[valid-type]
        connection = Connection(
            edges=[{"cursor": "c1", "node": {"name": "a"}}, {"cursor": "c2", "node": {"name": "b"}}],
            page_info=PageInfo(has_previous_page=False, has_next_page=True, start_cursor="c1", end_cursor="c2"),
        )
        return to_connection_type(connection, GizmoType, lambda record: GizmoType(name=record["name"]))


schema = strawberry.Schema(query=Query)


class TestTypeFactories:
    """Tests for create_edge_type and create_connection_type."""

    def test_names(self):
        """Types are named after the node type's GraphQL name."""
        assert graphql_name(create_edge_type(GizmoType)) == "GizmoEdge"
        assert graphql_name(create_connection_type(GizmoType)) == "GizmoConnection"

    def test_types_are_cached(self):
        """Each node type gets exactly one edge and connection type."""
        assert create_edge_type(GizmoType) is create_edge_type(GizmoType)
        assert create_connection_type(GizmoType) is create_connection_type(GizmoType)

    def test_graphql_name_fallback(self):
        """Plain classes fall back to their Python name."""

        class Plain:
            pass

        assert graphql_name(Plain) == "Plain"
        assert graphql_name(PageInfoType) == "PageInfo"

    def test_sdl(self):
        """The connection shape follows the Relay specification."""
        sdl = str(schema)

        assert "type GizmoConnection" in sdl
        assert "edges: [GizmoEdge!]!" in sdl
        assert "pageInfo: PageInfo!" in sdl
        assert "cursor: String!" in sdl
        assert "node: Gizmo!" in sdl
        assert "hasNextPage: Boolean!" in sdl
        assert "startCursor: String" in sdl


class TestToConnectionType:
    """Tests for to_connection_type."""

    def test_execution(self):
        """Engine connections convert into the Strawberry types."""
        result = schema.execute_sync(
            "{ gizmos { edges { cursor node { name } } pageInfo { hasNextPage hasPreviousPage startCursor endCursor } } }",
        )

        assert result.errors is None
        assert result.data["gizmos"] == {
            "edges": [
                {"cursor": "c1", "node": {"name": "a"}},
                {"cursor": "c2", "node": {"name": "b"}},
            ],
            "pageInfo": {
                "hasNextPage": True,
                "hasPreviousPage": False,
                "startCursor": "c1",
                "endCursor": "c2",
            },
        }
