"""Delivery of commands to devices.

There is no real device channel yet. ``SimulatedCommandDispatcher`` stands in
for one by marking each command executed after a fixed delay.
"""

import logging
import threading
from typing import Callable, Optional

from fastapi import Request
from sqlalchemy.orm import Session

from config import COMMAND_EXECUTION_DELAY_SECONDS
from models.command import COMMAND_STATUS_EXECUTED, Command
from services.storage_service import StorageService


logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Hands a freshly created command over to the device transport."""

    def dispatch(self, command: Command) -> None:
        raise NotImplementedError


class SimulatedCommandDispatcher(CommandDispatcher):
    """Marks every dispatched command executed after ``delay_seconds``.

    Each command gets its own one-shot timer. Timers are never cancelled or
    retried, and commands for the same device resolve independently.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        delay_seconds: float = COMMAND_EXECUTION_DELAY_SECONDS,
    ):
        self.session_factory = session_factory
        self.delay_seconds = delay_seconds

    def dispatch(self, command: Command) -> threading.Timer:
        timer = threading.Timer(self.delay_seconds, self.mark_executed, args=(command.id,))
        timer.daemon = True
        timer.start()
        logger.info(
            "Dispatched %s command %s to device %s",
            command.command_type,
            command.id,
            command.device_id,
        )
        return timer

    def mark_executed(self, command_id: int) -> Optional[Command]:
        """Timer callback: runs outside any request, so it owns its session."""
        db = self.session_factory()
        try:
            command = StorageService(db).update_command_status(command_id, COMMAND_STATUS_EXECUTED)
            if command is None:
                logger.warning("Command %s no longer exists; nothing to execute", command_id)
            else:
                logger.info("Command %s executed", command_id)
            return command
        except Exception:
            # Nothing upstream can receive this error
            db.rollback()
            logger.exception("Failed to mark command %s executed", command_id)
            return None
        finally:
            db.close()


def get_command_dispatcher(request: Request) -> CommandDispatcher:
    """Dependency returning the dispatcher constructed at application startup."""
    return request.app.state.command_dispatcher
