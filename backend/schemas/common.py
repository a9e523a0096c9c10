"""Shared schema helpers.

The dashboard speaks camelCase JSON (``deviceType``, ``executedAt``) while the
models use snake_case columns, so every schema derives from ``CamelModel``.
"""

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import BaseModel, PlainSerializer
from pydantic.alias_generators import to_camel


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_utc_isoformat(value: datetime) -> str:
    """Render a stored timestamp as ISO-8601 with an explicit UTC designator."""
    return to_naive_utc(value).isoformat() + "Z"


# Timestamps are stored as naive UTC; responses mark them as UTC for clients
UtcDatetime = Annotated[
    datetime,
    PlainSerializer(to_utc_isoformat, return_type=str, when_used="json"),
]


class CamelModel(BaseModel):
    """Base schema accepting camelCase or snake_case input, emitting camelCase."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
