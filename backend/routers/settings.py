"""User settings endpoints."""

import logging

from fastapi import APIRouter, Depends

from models.user import User
from schemas.settings import SettingsResponse, SettingsUpdateRequest
from services.auth import get_current_user
from services.storage_service import StorageService, get_storage


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=SettingsResponse)
def read_settings(
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage),
):
    """Get the caller's settings.

    The first read persists the defaults (stealth mode off, notifications on,
    15 minute tracking interval); later reads return that same row.
    """
    user_settings = storage.get_settings(current_user.id)
    if user_settings is None:
        user_settings = storage.create_or_update_settings(current_user.id, {})
    return user_settings


@router.put("", response_model=SettingsResponse)
def update_settings(
    payload: SettingsUpdateRequest,
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage),
):
    """Partially update the caller's settings; omitted fields keep their values."""
    changes = payload.model_dump(exclude_unset=True)
    logger.info("User %s updating settings: %s", current_user.id, sorted(changes))
    return storage.create_or_update_settings(current_user.id, changes)
