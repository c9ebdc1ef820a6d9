"""Projection of a GraphQL selection set into nested field mappings.

A connection resolver reads the selection under ``edges { node { ... } }``
to decide which relationships to load eagerly for the records it returns.

    query {
      foos {
        edges { node { id author { name } tags { label } } }
      }
    }

``fields_from_selections`` flattens fields, inline fragments and fragment
spreads into ``{"edges": {"node": {"id": True, "author": {"name": True},
"tags": {"label": True}}}}`` and ``relations_from_fields`` keeps only the
nested objects: ``{"author": {}, "tags": {}}`` (snake_cased).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from strawberry.types.nodes import FragmentSpread, InlineFragment, SelectedField
from strawberry.utils.str_converters import to_snake_case

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from strawberry.types import Info
    from strawberry.types.nodes import Selection

Fields = dict[str, "Fields | bool"]


def _merge(target: Fields, source: Fields) -> Fields:
    for name, value in source.items():
        current = target.get(name)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge(current, value)
        elif not isinstance(current, dict):
            target[name] = value
    return target


def fields_from_selections(selections: Iterable[Selection]) -> Fields:
    """Flatten a selection set into a nested mapping of field names.

    Leaf fields map to ``True``; fields with a sub-selection map to the
    mapping of their sub-selection. Fragments are merged into the
    enclosing level.

    Raises:
        TypeError: For a selection node that is neither a field nor a fragment.
    """
    fields: Fields = {}
    for selection in selections:
        match selection:
            case SelectedField():
                nested = fields_from_selections(selection.selections)
                _merge(fields, {selection.name: nested or True})
            case InlineFragment() | FragmentSpread():
                _merge(fields, fields_from_selections(selection.selections))
            case _:
                msg = f"Unsupported selection {type(selection).__name__}"
                raise TypeError(msg)
    return fields


def fields_from_info(info: Info[Any, Any]) -> Fields:
    """Fields selected under the field currently being resolved."""
    fields: Fields = {}
    for field in info.selected_fields:
        _merge(fields, fields_from_selections(field.selections))
    return fields


def relations_from_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only fields with a sub-selection, keyed by snake_case name.

    Returns:
        Nested mapping ``{relation: {nested_relation: {...}}}``; an empty
        mapping means the relation is loaded without nested relations.
    """
    return {
        to_snake_case(name): relations_from_fields(value)
        for name, value in fields.items()
        if isinstance(value, dict)
    }


def node_relations(info: Info[Any, Any]) -> dict[str, Any]:
    """Relations requested under ``edges { node }`` of a connection field."""
    edges = fields_from_info(info).get("edges")
    node = edges.get("node") if isinstance(edges, dict) else None
    return relations_from_fields(node) if isinstance(node, dict) else {}


def type_relations(info: Info[Any, Any], type_name: str) -> dict[str, Any]:
    """Relations requested for ``type_name`` under an abstract field such as ``node``.

    Plain fields and fragments on ``type_name`` or on an interface it
    implements apply; fragments on other types are ignored.
    """
    definition = info.schema.get_type_by_name(type_name)
    applicable = {type_name, *(interface.name for interface in getattr(definition, "interfaces", ()))}
    selections = [
        selection
        for field in info.selected_fields
        for selection in field.selections
        if not isinstance(selection, (InlineFragment, FragmentSpread))
        or selection.type_condition is None
        or selection.type_condition in applicable
    ]
    return relations_from_fields(fields_from_selections(selections))


__all__ = [
    "Fields",
    "fields_from_info",
    "fields_from_selections",
    "node_relations",
    "relations_from_fields",
    "type_relations",
]
