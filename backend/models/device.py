"""Monitored devices registered by users."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from database import Base


class Device(Base):
    """A monitored endpoint owned by exactly one user.

    Purely a database record; there is no live connection behind it.
    """

    __tablename__ = "devices"
    __table_args__ = (
        CheckConstraint(
            "battery IS NULL OR (battery >= 0 AND battery <= 100)",
            name="ck_devices_battery_range",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    device_type = Column(String(50), nullable=False)  # smartphone, tablet, laptop, desktop
    platform = Column(String(50), nullable=False)  # iOS, Android, Windows, ...
    status = Column(String(20), default="offline", nullable=False)
    last_activity = Column(DateTime, nullable=True)
    battery = Column(Integer, nullable=True)  # percentage
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    user = relationship("User", backref="devices")
    locations = relationship(
        "Location", back_populates="device", cascade="all, delete-orphan", passive_deletes=True
    )
    calls = relationship(
        "Call", back_populates="device", cascade="all, delete-orphan", passive_deletes=True
    )
    messages = relationship(
        "Message", back_populates="device", cascade="all, delete-orphan", passive_deletes=True
    )
    photos = relationship(
        "Photo", back_populates="device", cascade="all, delete-orphan", passive_deletes=True
    )
    recordings = relationship(
        "Recording", back_populates="device", cascade="all, delete-orphan", passive_deletes=True
    )
    commands = relationship(
        "Command", back_populates="device", cascade="all, delete-orphan", passive_deletes=True
    )
