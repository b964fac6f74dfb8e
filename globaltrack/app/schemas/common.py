"""
Shared schema building blocks.

All API payloads use camelCase field names on the wire and snake_case
attribute names in Python.
"""

from datetime import datetime, timezone
from typing import Annotated, Generic, TypeVar
from pydantic import AfterValidator, BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, accepts either spelling on input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint."""
    success: bool = True
    data: T
