"""Pre-announcement of the restart."""

import logging
from dataclasses import dataclass

from autoshutdown.config.models import DEFAULT_PRE_ANNOUNCE_MESSAGE
from autoshutdown.scheduling.host import (
    ExitCode,
    SessionBroadcaster,
    ShutdownHost,
    ShutdownMode,
)

logger = logging.getLogger(__name__)

_UNITS = (
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def format_duration(seconds: int) -> str:
    """Format a duration as full text, e.g. "1 hour 5 seconds"."""
    seconds = max(0, int(seconds))
    if seconds == 0:
        return "0 seconds"

    parts: list[str] = []
    for name, size in _UNITS:
        count, seconds = divmod(seconds, size)
        if count:
            parts.append(f"{count} {name}" + ("" if count == 1 else "s"))
    return " ".join(parts)


def validate_message_template(template: str) -> str:
    """Return ``template`` if it formats with a duration, else the default."""
    try:
        template.format(format_duration(3600))
    except (IndexError, KeyError, ValueError, AttributeError, TypeError) as e:
        logger.warning(
            "pre_announce_message_invalid",
            extra={
                "announce.template": template,
                "announce.default": DEFAULT_PRE_ANNOUNCE_MESSAGE,
                "error.message": str(e),
            },
        )
        return DEFAULT_PRE_ANNOUNCE_MESSAGE
    return template


@dataclass(frozen=True)
class AnnouncementPlan:
    """Everything the pre-announce action needs when it fires."""

    lead_seconds: int
    message_template: str = DEFAULT_PRE_ANNOUNCE_MESSAGE
    shutdown_mode: ShutdownMode = ShutdownMode.RESTART
    exit_code: ExitCode = ExitCode.SHUTDOWN

    @property
    def message(self) -> str:
        return self.message_template.format(format_duration(self.lead_seconds))


def announce_restart(
    plan: AnnouncementPlan,
    broadcaster: SessionBroadcaster,
    host: ShutdownHost,
) -> None:
    """Broadcast the restart notice and hand the countdown to the host."""
    message = plan.message
    logger.info("restart_announced", extra={"announce.message": message})
    broadcaster.broadcast(message)
    host.request_shutdown(plan.lead_seconds, plan.shutdown_mode, plan.exit_code)
