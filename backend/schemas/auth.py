from typing import Optional

from schemas.common import CamelModel, UtcDatetime


class SessionCreateRequest(CamelModel):
    """ID token handed over by the identity provider after sign-in."""

    id_token: str


class UserResponse(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime
