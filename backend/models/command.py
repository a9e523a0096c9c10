"""Remote commands issued against devices."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from database import Base


COMMAND_STATUS_PENDING = "pending"
COMMAND_STATUS_EXECUTED = "executed"
COMMAND_STATUS_FAILED = "failed"

TERMINAL_COMMAND_STATUSES = (COMMAND_STATUS_EXECUTED, COMMAND_STATUS_FAILED)


class Command(Base):
    """A user-initiated instruction for a device.

    Status moves once from pending to a terminal state (executed or failed).
    """

    __tablename__ = "commands"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(
        Integer,
        ForeignKey("devices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    command_type = Column(String(50), nullable=False)  # alarm, lock, wipe, photo, recording
    status = Column(String(20), default=COMMAND_STATUS_PENDING, nullable=False)
    executed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    device = relationship("Device", back_populates="commands")
