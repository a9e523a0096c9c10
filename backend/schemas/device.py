"""Pydantic schemas for device endpoints."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from schemas.common import CamelModel, UtcDatetime, to_naive_utc


DeviceStatus = Literal["online", "offline", "idle"]


class DeviceCreateRequest(CamelModel):
    """Request schema for registering a device.

    Any ``userId`` in the body is ignored; the owner is always the caller.
    """

    name: str
    description: Optional[str] = None
    device_type: str  # smartphone, tablet, laptop, desktop
    platform: str
    status: DeviceStatus = "offline"
    last_activity: Optional[datetime] = None
    battery: Optional[int] = Field(default=None, ge=0, le=100)

    @field_validator("last_activity")
    @classmethod
    def normalize_last_activity(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class DeviceUpdateRequest(CamelModel):
    """Partial update; only fields present in the body are applied."""

    name: Optional[str] = None
    description: Optional[str] = None
    device_type: Optional[str] = None
    platform: Optional[str] = None
    status: Optional[DeviceStatus] = None
    last_activity: Optional[datetime] = None
    battery: Optional[int] = Field(default=None, ge=0, le=100)

    @field_validator("name", "device_type", "platform", "status")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("last_activity")
    @classmethod
    def normalize_last_activity(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class DeviceResponse(CamelModel):
    """Response schema for device data."""

    id: int
    user_id: str
    name: str
    description: Optional[str] = None
    device_type: str
    platform: str
    status: str
    last_activity: Optional[UtcDatetime] = None
    battery: Optional[int] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime
