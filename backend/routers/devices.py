"""Device registration and management endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from models.device import Device
from models.user import User
from schemas.device import DeviceCreateRequest, DeviceResponse, DeviceUpdateRequest
from services.auth import get_current_user
from services.ownership import get_owned_device
from services.storage_service import StorageService, get_storage


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[DeviceResponse])
def list_devices(
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage),
):
    """List the caller's devices, most recently active first."""
    return storage.get_devices(current_user.id)


@router.get("/{device_id}", response_model=DeviceResponse)
def get_device(device: Device = Depends(get_owned_device)):
    """
    Fetch a single device.

    Raises: 400 malformed id, 404 unknown device, 403 device of another user
    """
    return device


@router.post("", response_model=DeviceResponse, status_code=status.HTTP_201_CREATED)
def create_device(
    payload: DeviceCreateRequest,
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage),
):
    """
    Register a new device for the caller.

    Body: name, deviceType, platform (required); description, status,
    lastActivity, battery (optional)
    Returns: the device with its generated id, status "offline" unless given
    """
    device = storage.create_device(current_user.id, **payload.model_dump())
    logger.info("User %s registered device %s", current_user.id, device.id)
    return device


@router.put("/{device_id}", response_model=DeviceResponse)
def update_device(
    payload: DeviceUpdateRequest,
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    """Partially update a device. Fields missing from the body keep their values."""
    updated = storage.update_device(device.id, payload.model_dump(exclude_unset=True))
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Device not found",
        )
    return updated


@router.delete("/{device_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_device(
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    """
    Permanently delete a device.

    Telemetry and commands recorded for it are removed with it.
    Returns: 204 No Content on success
    """
    device_id = device.id
    if not storage.delete_device(device_id):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete device",
        )

    logger.info("Deleted device %s", device_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
