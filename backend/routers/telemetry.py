"""Telemetry endpoints: locations, calls, messages, photos and recordings.

Every route is scoped to a device the caller owns. Lists are newest first and
accept an optional ``limit``; ingestion appends a single record.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from models.device import Device
from schemas.common import to_naive_utc
from schemas.telemetry import (
    CallCreateRequest,
    CallResponse,
    LocationCreateRequest,
    LocationResponse,
    MessageCreateRequest,
    MessageRecordResponse,
    PhotoCreateRequest,
    PhotoResponse,
    RecordingCreateRequest,
    RecordingResponse,
)
from services.ownership import get_owned_device
from services.storage_service import StorageService, get_storage


router = APIRouter()


def parse_query_date(value: str) -> datetime:
    """Parse an ISO-8601 date or datetime query value into naive UTC."""
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date format",
        )
    return to_naive_utc(parsed)


# ----------------------------------------------------------------------------
# Locations
# ----------------------------------------------------------------------------

@router.get("/{device_id}/locations", response_model=list[LocationResponse])
def list_locations(
    limit: Optional[int] = Query(default=None, ge=0, description="Maximum number of results"),
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    return storage.get_locations(device.id, limit)


@router.get("/{device_id}/locations/range", response_model=list[LocationResponse])
def list_locations_in_range(
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    """
    Get locations recorded between startDate and endDate (inclusive), oldest first.

    A start after the end is not rejected; it simply matches nothing.
    Raises: 400 if either date is missing or unparsable
    """
    if not start_date or not end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both startDate and endDate parameters are required",
        )

    start = parse_query_date(start_date)
    end = parse_query_date(end_date)
    return storage.get_locations_by_date_range(device.id, start, end)


@router.post(
    "/{device_id}/locations",
    response_model=LocationResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_location(
    payload: LocationCreateRequest,
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    return storage.add_location(device.id, **payload.model_dump())


# ----------------------------------------------------------------------------
# Calls and messages
# ----------------------------------------------------------------------------

@router.get("/{device_id}/calls", response_model=list[CallResponse])
def list_calls(
    limit: Optional[int] = Query(default=None, ge=0, description="Maximum number of results"),
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    return storage.get_calls(device.id, limit)


@router.post(
    "/{device_id}/calls",
    response_model=CallResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_call(
    payload: CallCreateRequest,
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    return storage.add_call(device.id, **payload.model_dump())


@router.get("/{device_id}/messages", response_model=list[MessageRecordResponse])
def list_messages(
    limit: Optional[int] = Query(default=None, ge=0, description="Maximum number of results"),
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    return storage.get_messages(device.id, limit)


@router.post(
    "/{device_id}/messages",
    response_model=MessageRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_message(
    payload: MessageCreateRequest,
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    return storage.add_message(device.id, **payload.model_dump())


# ----------------------------------------------------------------------------
# Media
# ----------------------------------------------------------------------------

@router.get("/{device_id}/photos", response_model=list[PhotoResponse])
def list_photos(
    limit: Optional[int] = Query(default=None, ge=0, description="Maximum number of results"),
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    return storage.get_photos(device.id, limit)


@router.post(
    "/{device_id}/photos",
    response_model=PhotoResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_photo(
    payload: PhotoCreateRequest,
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    """Record a photo reference. The URL points at externally stored media."""
    return storage.add_photo(device.id, **payload.model_dump())


@router.get("/{device_id}/recordings", response_model=list[RecordingResponse])
def list_recordings(
    limit: Optional[int] = Query(default=None, ge=0, description="Maximum number of results"),
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    return storage.get_recordings(device.id, limit)


@router.post(
    "/{device_id}/recordings",
    response_model=RecordingResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_recording(
    payload: RecordingCreateRequest,
    device: Device = Depends(get_owned_device),
    storage: StorageService = Depends(get_storage),
):
    """Record an audio recording reference. The URL points at externally stored media."""
    return storage.add_recording(device.id, **payload.model_dump())
