"""Scheduling subsystem: restart occurrence and announcement orchestration.

Public API:
- ShutdownOrchestrator: Validates the restart rule and arms the pre-announcement
- TaskScheduler: Tick-driven one-shot deferred callbacks
- next_occurrence: Next restart timestamp for a recurrence rule

Types:
- RecurrenceRule: Weekday-mask or interval based restart rule
- ScheduleState: The currently armed schedule
- AnnouncementPlan: What the pre-announce action broadcasts and requests
"""

from autoshutdown.scheduling.announce import AnnouncementPlan, format_duration
from autoshutdown.scheduling.host import (
    EventService,
    ExitCode,
    SessionBroadcaster,
    ShutdownHost,
    ShutdownMode,
)
from autoshutdown.scheduling.occurrence import (
    RecurrenceRule,
    next_occurrence,
    next_occurrence_for,
)
from autoshutdown.scheduling.orchestrator import (
    ScheduleConfigError,
    ScheduleState,
    ShutdownOrchestrator,
)
from autoshutdown.scheduling.tasks import TaskContext, TaskScheduler

__all__ = [
    "AnnouncementPlan",
    "EventService",
    "ExitCode",
    "RecurrenceRule",
    "ScheduleConfigError",
    "ScheduleState",
    "SessionBroadcaster",
    "ShutdownHost",
    "ShutdownMode",
    "ShutdownOrchestrator",
    "TaskContext",
    "TaskScheduler",
    "format_duration",
    "next_occurrence",
    "next_occurrence_for",
]
