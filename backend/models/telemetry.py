"""Append-only telemetry collected from devices."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from database import Base


class Location(Base):
    """A reported position. Coordinates are kept as the text the device sent."""

    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(
        Integer,
        ForeignKey("devices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    latitude = Column(Text, nullable=False)
    longitude = Column(Text, nullable=False)
    address = Column(Text, nullable=True)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    device = relationship("Device", back_populates="locations")


class Call(Base):
    __tablename__ = "calls"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(
        Integer,
        ForeignKey("devices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    phone_number = Column(String(64), nullable=False)
    call_type = Column(String(20), nullable=False)  # incoming, outgoing, missed
    duration = Column(Integer, nullable=True)  # seconds
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    device = relationship("Device", back_populates="calls")


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(
        Integer,
        ForeignKey("devices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    phone_number = Column(String(64), nullable=False)
    message_type = Column(String(20), nullable=False)  # incoming, outgoing
    content = Column(Text, nullable=True)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    device = relationship("Device", back_populates="messages")


class Photo(Base):
    """Reference to a photo stored outside this service."""

    __tablename__ = "photos"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(
        Integer,
        ForeignKey("devices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    photo_url = Column(Text, nullable=False)
    source = Column(String(50), nullable=True)  # front_camera, back_camera
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    device = relationship("Device", back_populates="photos")


class Recording(Base):
    """Reference to an audio recording stored outside this service."""

    __tablename__ = "recordings"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(
        Integer,
        ForeignKey("devices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    recording_url = Column(Text, nullable=False)
    duration = Column(Integer, nullable=True)  # seconds
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    device = relationship("Device", back_populates="recordings")
