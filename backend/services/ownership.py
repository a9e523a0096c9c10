"""Device ownership guard shared by every device-scoped route."""

from fastapi import Depends, HTTPException, status

from database import MAX_INTEGER
from models.device import Device
from models.user import User
from services.auth import get_current_user
from services.storage_service import StorageService, get_storage


def parse_device_id(raw_device_id: str) -> int:
    """Parse a path device id, rejecting anything but a positive integer."""
    try:
        device_id = int(raw_device_id)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid device ID",
        )

    if device_id <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid device ID",
        )

    # Ids past the column range cannot name a stored device
    if device_id > MAX_INTEGER:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Device not found",
        )

    return device_id


def get_owned_device(
    device_id: str,
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage),
) -> Device:
    """Load the device named in the path and make sure the caller owns it.

    Raises: 400 malformed id, 404 unknown device, 403 device of another user.
    """
    parsed_id = parse_device_id(device_id)

    device = storage.get_device(parsed_id)
    if device is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Device not found",
        )

    if device.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this device",
        )

    return device
