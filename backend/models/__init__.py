from models.command import Command
from models.device import Device
from models.settings import UserSettings
from models.telemetry import Call, Location, Message, Photo, Recording
from models.user import User

__all__ = [
    "Call",
    "Command",
    "Device",
    "Location",
    "Message",
    "Photo",
    "Recording",
    "User",
    "UserSettings",
]
