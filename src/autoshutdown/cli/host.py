"""Console host for running the restart schedule outside a game server.

Implements every collaborator protocol the orchestrator needs: broadcasts go
to the terminal, events are only recorded, and a requested shutdown becomes
a countdown after which the run loop exits with the requested code.
"""

import logging
import time
from collections.abc import Callable

from rich.markup import escape

from autoshutdown.cli.console import console
from autoshutdown.scheduling.host import ExitCode, ShutdownMode

logger = logging.getLogger(__name__)


class ConsoleHost:
    """Terminal-backed broadcaster, event service and shutdown primitive."""

    def __init__(
        self,
        event_names: dict[int, str] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._event_names = event_names or {}
        self._clock = clock
        self._deadline: float | None = None
        self._mode = ShutdownMode.SHUTDOWN
        self._exit_code = ExitCode.SHUTDOWN
        self.started_events: list[int] = []
        self.broadcasts: list[str] = []

    @property
    def shutdown_pending(self) -> bool:
        return self._deadline is not None

    @property
    def mode(self) -> ShutdownMode:
        return self._mode

    def broadcast(self, message: str) -> None:
        self.broadcasts.append(message)
        console.print(f"[bold yellow]{escape(message)}[/bold yellow]")

    def start_event(self, event_id: int) -> None:
        self.started_events.append(event_id)

    def describe_event(self, event_id: int) -> str:
        return self._event_names.get(event_id, f"event {event_id}")

    def set_event_names(self, event_names: dict[int, str]) -> None:
        self._event_names = dict(event_names)

    def request_shutdown(
        self, grace_seconds: int, mode: ShutdownMode, exit_code: ExitCode
    ) -> None:
        self._deadline = self._clock() + grace_seconds
        self._mode = mode
        self._exit_code = exit_code
        logger.info(
            "shutdown_requested",
            extra={
                "shutdown.grace_seconds": grace_seconds,
                "shutdown.mode": mode.value,
                "shutdown.exit_code": int(exit_code),
            },
        )

    def cancel_pending_shutdown(self) -> None:
        if self._deadline is None:
            return
        self._deadline = None
        logger.info("shutdown_cancelled")

    def shutdown_due(self) -> ExitCode | None:
        """Exit code to stop with once the grace period is over, else None."""
        if self._deadline is None or self._clock() < self._deadline:
            return None
        return self._exit_code
