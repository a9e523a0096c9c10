"""Remote command endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from config import COMMAND_RATE_LIMIT, RATE_LIMIT_ENABLED
from models.device import Device
from models.user import User
from schemas.command import CommandCreateRequest, CommandResponse
from services.auth import get_current_user
from services.command_dispatcher import CommandDispatcher, get_command_dispatcher
from services.ownership import get_owned_device
from services.storage_service import StorageService, get_storage


logger = logging.getLogger(__name__)


def get_user_id_from_request(request: Request) -> str:
    """Extract user ID for rate limiting key."""
    # get_current_user stores the caller on request.state; unauthenticated
    # routes fall back to the client address
    if hasattr(request.state, "user_id"):
        return str(request.state.user_id)
    return get_remote_address(request)


limiter = Limiter(key_func=get_user_id_from_request, enabled=RATE_LIMIT_ENABLED)
router = APIRouter()


@router.get("/commands", response_model=list[CommandResponse])
def list_user_commands(
    limit: Optional[int] = Query(default=None, ge=0, description="Maximum number of results"),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage),
):
    """Command history across all of the caller's devices, newest first."""
    return storage.get_commands_by_user(current_user.id, limit)


@router.get("/devices/{device_id}/commands", response_model=list[CommandResponse])
def list_device_commands(
    limit: Optional[int] = Query(default=None, ge=0, description="Maximum number of results"),
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    return storage.get_commands(device.id, limit)


@router.post(
    "/devices/{device_id}/commands",
    response_model=CommandResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(COMMAND_RATE_LIMIT)
def create_command(
    request: Request,
    payload: CommandCreateRequest,
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
    dispatcher: CommandDispatcher = Depends(get_command_dispatcher),
):
    """
    Issue a command (alarm, lock, wipe, photo, recording, ...) to a device.

    The command is stored as pending and handed to the dispatcher, which
    resolves it asynchronously. The response always reflects the pending state.

    Body: commandType
    Returns: 201 with the pending command
    Raises: 400 invalid payload, 403/404 device access, 429 rate limit
    """
    command = storage.create_command(device.id, payload.command_type)
    response = CommandResponse.model_validate(command)

    dispatcher.dispatch(command)
    logger.info(
        "Queued %s command %s for device %s",
        command.command_type,
        command.id,
        device.id,
    )
    return response
