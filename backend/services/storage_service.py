"""Data access for devices, telemetry, commands and settings.

No method here performs authorization; callers are expected to have checked
device ownership before reaching for device-scoped data.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from database import MAX_INTEGER, get_db
from models.command import (
    COMMAND_STATUS_EXECUTED,
    COMMAND_STATUS_PENDING,
    TERMINAL_COMMAND_STATUSES,
    Command,
)
from models.device import Device
from models.settings import UserSettings
from models.telemetry import Call, Location, Message, Photo, Recording
from models.user import User


logger = logging.getLogger(__name__)

USER_PROFILE_FIELDS = ("email", "first_name", "last_name", "profile_image_url")


def _apply_limit(query: Query, limit: Optional[int]) -> Query:
    if limit is not None:
        query = query.limit(min(limit, MAX_INTEGER))
    return query


class StorageService:
    """Repository over the monitoring tables, bound to one database session."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def upsert_user(self, user_id: str, **profile) -> User:
        """Create the user on first sign-in, otherwise overwrite the profile fields."""
        user = self.get_user(user_id)
        values = {field: profile.get(field) for field in USER_PROFILE_FIELDS}

        if user is None:
            user = User(id=user_id, **values)
            self.db.add(user)
        else:
            for field, value in values.items():
                setattr(user, field, value)
            user.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(user)
        return user

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------

    def get_devices(self, user_id: str) -> list[Device]:
        """Return the user's devices, most recently active first."""
        return (
            self.db.query(Device)
            .filter(Device.user_id == user_id)
            .order_by(Device.last_activity.desc().nulls_last(), Device.id.desc())
            .all()
        )

    def get_device(self, device_id: int) -> Optional[Device]:
        return self.db.query(Device).filter(Device.id == device_id).first()

    def create_device(self, user_id: str, **fields) -> Device:
        device = Device(user_id=user_id, **fields)
        self.db.add(device)
        self.db.commit()
        self.db.refresh(device)
        return device

    def update_device(self, device_id: int, fields: dict) -> Optional[Device]:
        """Apply a partial update. ``updated_at`` is refreshed even for an empty update."""
        device = self.get_device(device_id)
        if device is None:
            return None

        for field, value in fields.items():
            setattr(device, field, value)
        device.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(device)
        return device

    def delete_device(self, device_id: int) -> bool:
        device = self.get_device(device_id)
        if device is None:
            return False

        self.db.delete(device)
        self.db.commit()
        return True

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    def _get_for_device(self, model, device_id: int, limit: Optional[int]) -> list:
        query = (
            self.db.query(model)
            .filter(model.device_id == device_id)
            .order_by(model.timestamp.desc(), model.id.desc())
        )
        return _apply_limit(query, limit).all()

    def _add_for_device(self, model, device_id: int, fields: dict):
        # A missing timestamp falls back to the column default (insertion time)
        values = {k: v for k, v in fields.items() if not (k == "timestamp" and v is None)}
        row = model(device_id=device_id, **values)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def get_locations(self, device_id: int, limit: Optional[int] = None) -> list[Location]:
        return self._get_for_device(Location, device_id, limit)

    def get_locations_by_date_range(
        self,
        device_id: int,
        start_date: datetime,
        end_date: datetime,
    ) -> list[Location]:
        """Return locations with ``start_date <= timestamp <= end_date``, oldest first."""
        return (
            self.db.query(Location)
            .filter(
                Location.device_id == device_id,
                Location.timestamp >= start_date,
                Location.timestamp <= end_date,
            )
            .order_by(Location.timestamp.asc(), Location.id.asc())
            .all()
        )

    def add_location(self, device_id: int, **fields) -> Location:
        return self._add_for_device(Location, device_id, fields)

    def get_calls(self, device_id: int, limit: Optional[int] = None) -> list[Call]:
        return self._get_for_device(Call, device_id, limit)

    def add_call(self, device_id: int, **fields) -> Call:
        return self._add_for_device(Call, device_id, fields)

    def get_messages(self, device_id: int, limit: Optional[int] = None) -> list[Message]:
        return self._get_for_device(Message, device_id, limit)

    def add_message(self, device_id: int, **fields) -> Message:
        return self._add_for_device(Message, device_id, fields)

    def get_photos(self, device_id: int, limit: Optional[int] = None) -> list[Photo]:
        return self._get_for_device(Photo, device_id, limit)

    def add_photo(self, device_id: int, **fields) -> Photo:
        return self._add_for_device(Photo, device_id, fields)

    def get_recordings(self, device_id: int, limit: Optional[int] = None) -> list[Recording]:
        return self._get_for_device(Recording, device_id, limit)

    def add_recording(self, device_id: int, **fields) -> Recording:
        return self._add_for_device(Recording, device_id, fields)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def get_commands(self, device_id: int, limit: Optional[int] = None) -> list[Command]:
        query = (
            self.db.query(Command)
            .filter(Command.device_id == device_id)
            .order_by(Command.created_at.desc(), Command.id.desc())
        )
        return _apply_limit(query, limit).all()

    def get_commands_by_user(self, user_id: str, limit: Optional[int] = None) -> list[Command]:
        """Return commands across every device the user owns, newest first."""
        query = (
            self.db.query(Command)
            .join(Device, Command.device_id == Device.id)
            .filter(Device.user_id == user_id)
            .order_by(Command.created_at.desc(), Command.id.desc())
        )
        return _apply_limit(query, limit).all()

    def get_command(self, command_id: int) -> Optional[Command]:
        return self.db.query(Command).filter(Command.id == command_id).first()

    def create_command(self, device_id: int, command_type: str) -> Command:
        command = Command(
            device_id=device_id,
            command_type=command_type,
            status=COMMAND_STATUS_PENDING,
        )
        self.db.add(command)
        self.db.commit()
        self.db.refresh(command)
        return command

    def update_command_status(
        self,
        command_id: int,
        status: str,
        executed_at: Optional[datetime] = None,
    ) -> Optional[Command]:
        """Move a pending command to a terminal status.

        Commands already in a terminal status are returned unchanged.
        ``executed_at`` defaults to now when the new status is ``executed``.
        """
        if status not in TERMINAL_COMMAND_STATUSES:
            raise ValueError(f"Unsupported command status transition to '{status}'")

        command = self.get_command(command_id)
        if command is None:
            return None

        if command.status != COMMAND_STATUS_PENDING:
            logger.warning(
                "Command %s already %s; ignoring transition to %s",
                command_id,
                command.status,
                status,
            )
            return command

        if executed_at is None and status == COMMAND_STATUS_EXECUTED:
            executed_at = datetime.utcnow()

        command.status = status
        command.executed_at = executed_at
        self.db.commit()
        self.db.refresh(command)
        return command

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_settings(self, user_id: str) -> Optional[UserSettings]:
        return self.db.query(UserSettings).filter(UserSettings.user_id == user_id).first()

    def create_or_update_settings(self, user_id: str, fields: dict) -> UserSettings:
        """Upsert keyed on ``user_id``.

        The update path keeps the existing row id and only touches the given
        fields; the insert path lets column defaults fill anything omitted.
        """
        settings = self.get_settings(user_id)

        if settings is None:
            settings = UserSettings(user_id=user_id, **fields)
            self.db.add(settings)
            try:
                self.db.commit()
            except IntegrityError:
                # Another request created the row first; update that one instead.
                self.db.rollback()
                settings = self.get_settings(user_id)
                if settings is None:
                    raise
                return self._update_settings(settings, fields)
            self.db.refresh(settings)
            logger.info("Created settings for user %s", user_id)
            return settings

        return self._update_settings(settings, fields)

    def _update_settings(self, settings: UserSettings, fields: dict) -> UserSettings:
        for field, value in fields.items():
            setattr(settings, field, value)
        settings.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(settings)
        return settings


def get_storage(db: Session = Depends(get_db)) -> StorageService:
    """Dependency providing a StorageService bound to the request's session."""
    return StorageService(db)
