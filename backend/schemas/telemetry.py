"""Pydantic schemas for device telemetry (locations, calls, messages, media)."""

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import Field, field_validator

from database import MAX_INTEGER
from schemas.common import CamelModel, UtcDatetime, to_naive_utc


class TelemetryCreateRequest(CamelModel):
    """Common fields for a telemetry record reported by a device."""

    timestamp: Optional[datetime] = None

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class LocationCreateRequest(TelemetryCreateRequest):
    """Coordinates are stored as text exactly as reported."""

    latitude: str
    longitude: str
    address: Optional[str] = None

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def coordinate_as_text(cls, v: Union[str, int, float]) -> str:
        if isinstance(v, bool):
            raise ValueError("Coordinate must be a number or string")
        if isinstance(v, (int, float)):
            return str(v)
        return v


class CallCreateRequest(TelemetryCreateRequest):
    phone_number: str = Field(min_length=1)
    call_type: Literal["incoming", "outgoing", "missed"]
    duration: Optional[int] = Field(default=None, ge=0, le=MAX_INTEGER)  # seconds


class MessageCreateRequest(TelemetryCreateRequest):
    phone_number: str = Field(min_length=1)
    message_type: Literal["incoming", "outgoing"]
    content: Optional[str] = None


class PhotoCreateRequest(TelemetryCreateRequest):
    photo_url: str = Field(min_length=1)
    source: Optional[str] = None  # front_camera, back_camera


class RecordingCreateRequest(TelemetryCreateRequest):
    recording_url: str = Field(min_length=1)
    duration: Optional[int] = Field(default=None, ge=0, le=MAX_INTEGER)  # seconds


class LocationResponse(CamelModel):
    id: int
    device_id: int
    latitude: str
    longitude: str
    address: Optional[str] = None
    timestamp: UtcDatetime


class CallResponse(CamelModel):
    id: int
    device_id: int
    phone_number: str
    call_type: str
    duration: Optional[int] = None
    timestamp: UtcDatetime


class MessageRecordResponse(CamelModel):
    id: int
    device_id: int
    phone_number: str
    message_type: str
    content: Optional[str] = None
    timestamp: UtcDatetime


class PhotoResponse(CamelModel):
    id: int
    device_id: int
    photo_url: str
    source: Optional[str] = None
    timestamp: UtcDatetime


class RecordingResponse(CamelModel):
    id: int
    device_id: int
    recording_url: str
    duration: Optional[int] = None
    timestamp: UtcDatetime
