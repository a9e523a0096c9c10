from typing import Optional

from pydantic import Field

from schemas.common import CamelModel, UtcDatetime


class CommandCreateRequest(CamelModel):
    """Request schema for issuing a command (alarm, lock, wipe, photo, recording)."""

    command_type: str = Field(min_length=1, max_length=50)


class CommandResponse(CamelModel):
    id: int
    device_id: int
    command_type: str
    status: str
    executed_at: Optional[UtcDatetime] = None
    created_at: UtcDatetime
