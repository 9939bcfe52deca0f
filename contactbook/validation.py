"""Request validation helper shared by the services."""

from typing import Any, Type, TypeVar

import pydantic
from fastapi.encoders import jsonable_encoder

from .errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=pydantic.BaseModel)


def validate(schema: Type[SchemaT], data: Any) -> SchemaT:
    """
    Parse ``data`` into ``schema``.

    Args:
        schema: Pydantic model describing the expected input.
        data: A mapping or an instance of ``schema``. Instances pass through
            unchanged, keeping track of which fields were explicitly set.

    Raises:
        ValidationError: If the input does not satisfy the schema.

    Returns:
        The parsed input.
    """
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(
            jsonable_encoder(exc.errors(include_url=False))
        ) from exc
