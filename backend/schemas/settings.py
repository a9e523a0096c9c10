from typing import Optional

from pydantic import Field, field_validator

from config import MAX_TRACKING_INTERVAL
from schemas.common import CamelModel, UtcDatetime


class SettingsUpdateRequest(CamelModel):
    """Partial settings update; omitted fields keep their stored values."""

    stealth_mode: Optional[bool] = None
    notifications_enabled: Optional[bool] = None
    tracking_interval: Optional[int] = Field(default=None, ge=1, le=MAX_TRACKING_INTERVAL)  # minutes

    @field_validator("stealth_mode", "notifications_enabled", "tracking_interval")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class SettingsResponse(CamelModel):
    id: int
    user_id: str
    stealth_mode: bool
    notifications_enabled: bool
    tracking_interval: int
    updated_at: UtcDatetime
