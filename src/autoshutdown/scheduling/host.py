"""Collaborator protocols the orchestrator talks to.

The host process provides these; autoshutdown only decides when and with
what lead time to use them.
"""

from enum import Enum, IntEnum
from typing import Protocol


class ShutdownMode(Enum):
    """What the host does when the grace period ends."""

    SHUTDOWN = "shutdown"
    RESTART = "restart"
    # Wait for all sessions to leave before shutting down
    IDLE = "idle"


class ExitCode(IntEnum):
    """Process exit codes understood by the host's supervisor."""

    SHUTDOWN = 0
    ERROR = 1
    RESTART = 2


class SessionBroadcaster(Protocol):
    """Sends a text notice to all connected sessions."""

    def broadcast(self, message: str) -> None: ...


class EventService(Protocol):
    """Starts recurring host events by numeric id."""

    def start_event(self, event_id: int) -> None: ...

    def describe_event(self, event_id: int) -> str: ...


class ShutdownHost(Protocol):
    """The host's own shutdown primitive."""

    def request_shutdown(
        self, grace_seconds: int, mode: ShutdownMode, exit_code: ExitCode
    ) -> None: ...

    def cancel_pending_shutdown(self) -> None: ...
