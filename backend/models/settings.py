"""Per-user dashboard settings."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from config import DEFAULT_TRACKING_INTERVAL
from database import Base


class UserSettings(Base):
    """One row per user, created lazily on first read."""

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    stealth_mode = Column(Boolean, default=False, nullable=False)
    notifications_enabled = Column(Boolean, default=True, nullable=False)
    tracking_interval = Column(Integer, default=DEFAULT_TRACKING_INTERVAL, nullable=False)  # minutes
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )
