"""Custom scalars validated by Pydantic.

``validated_scalar`` turns any type Pydantic can validate into a GraphQL
scalar: incoming values go through a ``TypeAdapter`` and outgoing values
are dumped in JSON mode.

Example:
    PositiveInt = validated_scalar(
        "PositiveInt",
        Annotated[int, Field(gt=0)],
        description="An integer greater than zero",
    )

    @strawberry.type
    class Query:
        @strawberry.field
        def double(self, value: PositiveInt) -> int:
            return value * 2
"""

from __future__ import annotations

import logging
from typing import Any, NewType

import strawberry
from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


def validated_scalar(name: str, annotation: Any, *, description: str | None = None) -> Any:
    """Create a GraphQL scalar whose input is validated by Pydantic.

    Args:
        name: GraphQL name of the scalar
        annotation: Any type or ``Annotated`` constraint Pydantic accepts
        description: Optional scalar description

    Returns:
        A Strawberry scalar usable as a field or argument annotation.
        Invalid input values are reported as GraphQL validation errors
        carrying the Pydantic error messages.
    """
    adapter = TypeAdapter(annotation)

    def parse_value(value: Any) -> Any:
        try:
            return adapter.validate_python(value)
        except ValidationError as e:
            messages = "; ".join(error["msg"] for error in e.errors())
            logger.debug("Invalid %s value %r: %s", name, value, messages)
            raise ValueError(f"Invalid {name}: {messages}") from e

    def serialize(value: Any) -> Any:
        return adapter.dump_python(value, mode="json")

    return strawberry.scalar(
        NewType(name, object),
        name=name,
        description=description,
        serialize=serialize,
        parse_value=parse_value,
    )


__all__ = ["validated_scalar"]
