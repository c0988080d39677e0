"""
Shared building blocks for the schema modules.
"""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


Role = Literal["admin", "member"]


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while keeping snake_case attributes."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC so that all stored times are comparable."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    """Generic ``{"message": ...}`` response body."""

    message: str


class BatchResult(BaseModel):
    message: str
    count: int
