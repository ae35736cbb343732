from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from fastapi import Path
from typing import Annotated, Generic, TypeVar

UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"

# Path parameter that must be a UUID; anything else is a 400
UuidPath = Annotated[str, Path(pattern=UUID_PATTERN)]

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for API schemas: snake_case in Python, camelCase on the wire (both accepted on input)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DataResponse(BaseModel, Generic[T]):
    data: T


class MessageResponse(CamelModel):
    message: str
