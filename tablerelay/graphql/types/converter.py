"""Pydantic schema to Strawberry type conversion.

A table's Pydantic schema describes its fields; this module derives the
GraphQL object type for it. Each field annotation is classified into a
closed set of kinds (SchemaKind) and every kind maps to one GraphQL type:

    object   -> generated object type (nested model)
    array    -> list of the item type
    boolean  -> Boolean        integer  -> Int        float -> Float
    string   -> String         id       -> ID (UUID)
    datetime -> DateTime       date     -> Date       json  -> JSON
    enum     -> generated enum (from Literal[...] or an Enum class)

Required fields without ``None`` in their annotation become non-null.
``Field(description=...)`` becomes the GraphQL field description, and
``Field(json_schema_extra={"graphql_type": T})`` replaces the derived
type with ``T`` verbatim.

Example:
    class FooSchema(BaseModel):
        id: int
        created_at: datetime
        status: Literal["draft", "published"] = "draft"
        bar: str | None = Field(default=None, description="Free text")

    converter = SchemaConverter()
    FooType = converter.node_type(foo_table)

    # type Foo implements Node {
    #   id: ID!
    #   createdAt: DateTime!
    #   status: FooStatus
    #   bar: String
    # }

    FooType.from_record(foo_row)
"""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from types import UnionType
from typing import TYPE_CHECKING, Annotated, Any, Literal, NamedTuple, Optional, Union, get_args, get_origin
from uuid import UUID

import strawberry
from pydantic import BaseModel, create_model
from strawberry.scalars import JSON

from tablerelay.core.database.source import record_to_dict
from tablerelay.core.pagination.cursor import to_global_id
from tablerelay.graphql.types.base import Node

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo

    from tablerelay.core.database.table import Table

logger = logging.getLogger(__name__)


class SchemaKind(Enum):
    """Kinds of schema fields with a GraphQL counterpart."""

    OBJECT = "object"
    ARRAY = "array"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    ID = "id"
    DATETIME = "datetime"
    DATE = "date"
    ENUM = "enum"
    JSON = "json"
    CUSTOM = "custom"


@dataclass(frozen=True)
class FieldSchema:
    """Classified field annotation.

    Attributes:
        kind: Field kind
        nullable: Whether ``None`` is an allowed value
        item: Item schema of an ARRAY
        model: Nested model of an OBJECT
        choices: Allowed values of a Literal ENUM
        enum: Enum class of an Enum ENUM
        graphql_type: Explicit GraphQL type of a CUSTOM field
    """

    kind: SchemaKind
    nullable: bool = False
    item: FieldSchema | None = None
    model: type[BaseModel] | None = None
    choices: tuple[Any, ...] = ()
    enum: type[Enum] | None = None
    graphql_type: Any = None


class GraphQLField(NamedTuple):
    """GraphQL annotation, description and value converter for one field."""

    annotation: Any
    description: str | None
    convert: Callable[[Any], Any]


def _identity(value: Any) -> Any:
    return value


# kind -> (annotation, converter)
_SCALARS: dict[SchemaKind, tuple[Any, Callable[[Any], Any]]] = {
    SchemaKind.BOOLEAN: (bool, bool),
    SchemaKind.INTEGER: (int, int),
    SchemaKind.FLOAT: (float, float),
    SchemaKind.STRING: (str, str),
    SchemaKind.ID: (strawberry.ID, str),
    SchemaKind.DATETIME: (datetime, _identity),
    SchemaKind.DATE: (date, _identity),
    SchemaKind.JSON: (JSON, _identity),
}

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset, Sequence)


def describe(annotation: Any) -> FieldSchema:
    """Classify a Python annotation into a FieldSchema.

    Raises:
        TypeError: For unions of more than one non-None type.
    """
    origin = get_origin(annotation)

    if origin is Annotated:
        return describe(get_args(annotation)[0])

    if origin is Union or origin is UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) != 1:
            msg = f"Cannot map union {annotation!r} to a GraphQL type"
            raise TypeError(msg)
        return replace(describe(members[0]), nullable=True)

    if origin is Literal:
        return FieldSchema(SchemaKind.ENUM, choices=get_args(annotation))

    if origin in _SEQUENCE_ORIGINS:
        args = get_args(annotation)
        return FieldSchema(SchemaKind.ARRAY, item=describe(args[0] if args else Any))

    if annotation is Any or annotation in (dict, Mapping) or origin in (dict, Mapping):
        return FieldSchema(SchemaKind.JSON)

    if isinstance(annotation, type):
        if issubclass(annotation, BaseModel):
            return FieldSchema(SchemaKind.OBJECT, model=annotation)
        if issubclass(annotation, Enum):
            return FieldSchema(SchemaKind.ENUM, enum=annotation)
        if issubclass(annotation, bool):
            return FieldSchema(SchemaKind.BOOLEAN)
        if issubclass(annotation, int):
            return FieldSchema(SchemaKind.INTEGER)
        if issubclass(annotation, (float, Decimal)):
            return FieldSchema(SchemaKind.FLOAT)
        if issubclass(annotation, datetime):
            return FieldSchema(SchemaKind.DATETIME)
        if issubclass(annotation, date):
            return FieldSchema(SchemaKind.DATE)
        if issubclass(annotation, UUID):
            return FieldSchema(SchemaKind.ID)

    return FieldSchema(SchemaKind.STRING)


def describe_field(field_info: FieldInfo) -> FieldSchema:
    """Classify a Pydantic field, honouring the ``graphql_type`` override."""
    extra = field_info.json_schema_extra
    if isinstance(extra, Mapping) and extra.get("graphql_type") is not None:
        return FieldSchema(SchemaKind.CUSTOM, graphql_type=extra["graphql_type"])

    schema = describe(field_info.annotation)
    if not field_info.is_required():
        schema = replace(schema, nullable=True)
    return schema


def _pascal(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def _member_name(value: Any) -> str:
    name = re.sub(r"\W", "_", str(value))
    return f"_{name}" if not name or name[0].isdigit() else name


def _holds_model(schema: FieldSchema) -> bool:
    if schema.kind is SchemaKind.OBJECT:
        return True
    return schema.kind is SchemaKind.ARRAY and schema.item is not None and _holds_model(schema.item)


def loaded_model(model: type[BaseModel]) -> type[BaseModel]:
    """Variant of ``model`` that validates only what a record carries.

    Records read from the database hold their loaded attributes only;
    relationships the query did not select are absent. In the variant,
    required fields default to ``None`` and fields holding nested models
    accept raw values, which the nested type's ``from_record`` validates
    in turn. Every other field keeps its declared type and default.
    """
    overrides: dict[str, Any] = {}
    for name, field_info in model.model_fields.items():
        if _holds_model(describe_field(field_info)):
            overrides[name] = (Any, None)
        elif field_info.is_required():
            overrides[name] = (Optional[field_info.annotation], None)  # noqa: UP007
    if not overrides:
        return model
    return create_model(f"Loaded{model.__name__}", __base__=model, **overrides)


def _model_description(model: type[BaseModel]) -> str | None:
    doc = model.__dict__.get("__doc__")
    return inspect.cleandoc(doc) if doc else None


class SchemaConverter:
    """Builds Strawberry types from Pydantic schemas.

    Generated object and enum types are cached on the converter, so one
    converter should be shared by every field of a schema: converting the
    same model twice returns the same type.
    """

    def __init__(self) -> None:
        self._types: dict[tuple[type[BaseModel], str], type] = {}
        self._enums: dict[Any, type[Enum]] = {}

    def fields_from_schema(self, model: type[BaseModel], owner: str | None = None) -> dict[str, GraphQLField]:
        """GraphQL fields for every field of ``model``.

        Args:
            model: Pydantic model to convert
            owner: GraphQL name of the type the fields belong to, used to
                name generated enums. Defaults to the model name.
        """
        owner = owner or model.__name__
        fields: dict[str, GraphQLField] = {}
        for name, field_info in model.model_fields.items():
            annotation, convert = self._build(describe_field(field_info), owner, name)
            fields[name] = GraphQLField(annotation, field_info.description, convert)
        return fields

    def to_type(
        self,
        model: type[BaseModel],
        *,
        name: str | None = None,
        description: str | None = None,
        node: bool = False,
        pk: str = "id",
    ) -> type:
        """Create (or reuse) the Strawberry object type for ``model``.

        Args:
            model: Pydantic model describing the fields
            name: GraphQL type name, defaults to the model name
            description: Type description, defaults to the model docstring
            node: Implement the Node interface; ``id`` becomes the global id
                built from ``name`` and the ``pk`` field
            pk: Primary key field used for the global id

        Returns:
            Strawberry type with a ``from_record(record)`` classmethod that
            validates a record (mapping, ORM instance or model instance)
            against ``model`` and builds the type from it.
        """
        type_name = name or model.__name__
        key = (model, type_name)
        if key in self._types:
            return self._types[key]

        fields = self.fields_from_schema(model, type_name)
        if node and pk not in fields:
            msg = f"{model.__name__} has no primary key field {pk!r}"
            raise ValueError(msg)

        annotations: dict[str, Any] = {}
        namespace: dict[str, Any] = {}
        for field_name, graphql_field in fields.items():
            annotations[field_name] = graphql_field.annotation
            namespace[field_name] = strawberry.field(description=graphql_field.description)
        converters = {field_name: graphql_field.convert for field_name, graphql_field in fields.items()}

        if node:
            annotations["id"] = strawberry.ID
            namespace["id"] = strawberry.field(description=f"The global ID of the {type_name}")
            converters.pop("id", None)

        validator = loaded_model(model)

        def from_record(cls: type, record: Any) -> Any:
            data = record if isinstance(record, model) else validator.model_validate(
                record_to_dict(record),
                from_attributes=True,
            )
            values: dict[str, Any] = {}
            for field_name, convert in converters.items():
                value = getattr(data, field_name)
                values[field_name] = None if value is None else convert(value)
            if node:
                values["id"] = to_global_id(type_name, getattr(data, pk))
            return cls(**values)

        namespace["__annotations__"] = annotations
        namespace["from_record"] = classmethod(from_record)
        namespace["__module__"] = __name__

        bases = (Node,) if node else ()
        graphql_type = strawberry.type(
            type(type_name, bases, namespace),
            name=type_name,
            description=description or _model_description(model),
        )
        self._types[key] = graphql_type
        logger.debug("Generated GraphQL type %s from %s", type_name, model.__name__)
        return graphql_type

    def node_type(self, table: Table[Any], *, description: str | None = None) -> type:
        """Node type for a table, named after the table."""
        return self.to_type(
            table.schema,
            name=table.name,
            description=description,
            node=True,
            pk=table.pk,
        )

    def _build(self, schema: FieldSchema, owner: str, field_name: str) -> tuple[Any, Callable[[Any], Any]]:
        match schema.kind:
            case SchemaKind.CUSTOM:
                return schema.graphql_type, _identity
            case SchemaKind.OBJECT:
                nested = self.to_type(schema.model)
                base, convert = nested, nested.from_record
            case SchemaKind.ARRAY:
                item_annotation, item_convert = self._build(schema.item, owner, field_name)
                base = list[item_annotation]

                def convert(value: Any) -> Any:
                    return [item_convert(item) for item in value]

            case SchemaKind.ENUM:
                base = self._enum_type(schema, owner, field_name)
                convert = base
            case _:
                base, convert = _SCALARS[schema.kind]

        if schema.nullable:
            return Optional[base], _nullable(convert)  # noqa: UP007
        return base, convert

    def _enum_type(self, schema: FieldSchema, owner: str, field_name: str) -> type[Enum]:
        if schema.enum is not None:
            if schema.enum not in self._enums:
                already_defined = hasattr(schema.enum, "__strawberry_definition__") or hasattr(
                    schema.enum,
                    "_enum_definition",
                )
                self._enums[schema.enum] = schema.enum if already_defined else strawberry.enum(schema.enum)
            return self._enums[schema.enum]

        key = (owner, field_name)
        if key not in self._enums:
            name = f"{owner}{_pascal(field_name)}"
            members = {_member_name(choice): choice for choice in schema.choices}
            self._enums[key] = strawberry.enum(Enum(name, members), name=name)
        return self._enums[key]


def _nullable(convert: Callable[[Any], Any]) -> Callable[[Any], Any]:
    def convert_nullable(value: Any) -> Any:
        return None if value is None else convert(value)

    return convert_nullable


def fields_from_table(table: Table[Any], converter: SchemaConverter | None = None) -> dict[str, GraphQLField]:
    """GraphQL fields derived from a table's schema."""
    return (converter or SchemaConverter()).fields_from_schema(table.schema, table.name)


__all__ = [
    "FieldSchema",
    "GraphQLField",
    "SchemaConverter",
    "SchemaKind",
    "describe",
    "describe_field",
    "fields_from_table",
    "loaded_model",
]
