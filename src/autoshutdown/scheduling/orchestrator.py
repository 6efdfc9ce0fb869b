"""Restart orchestration: validates the rule and arms the announcement.

The orchestrator owns the single active restart schedule. The host constructs
one instance, calls ``initialize`` at startup and on every config reload, and
calls ``tick`` from its update loop.

Example:
    orchestrator = ShutdownOrchestrator(
        broadcaster=sessions, events=events, host=world, tz=config.tzinfo
    )
    orchestrator.initialize(config.auto_shutdown)

    while running:
        orchestrator.tick(elapsed)
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, tzinfo

from autoshutdown.config.models import AutoShutdownConfig
from autoshutdown.scheduling.announce import (
    AnnouncementPlan,
    announce_restart,
    format_duration,
    validate_message_template,
)
from autoshutdown.scheduling.host import (
    EventService,
    SessionBroadcaster,
    ShutdownHost,
)
from autoshutdown.scheduling.occurrence import (
    MIN_LEAD_SECONDS,
    RecurrenceRule,
    next_occurrence_for,
)
from autoshutdown.scheduling.tasks import TaskContext, TaskScheduler

logger = logging.getLogger(__name__)

HOUR = 3600
DAY = 86400

MAX_WEEKDAY_MASK = 0b1111111
MIN_INTERVAL_DAYS = 1
MAX_INTERVAL_DAYS = 365
# Time tokens must fit an unsigned byte before range checks
MAX_TIME_TOKEN = 255

# Delay used when the announcement should go out right away
IMMEDIATE_DELAY = 1


class ScheduleConfigError(ValueError):
    """Invalid restart schedule configuration."""


@dataclass(frozen=True)
class ScheduleState:
    """The currently armed schedule. All timestamps are POSIX seconds.

    Only meaningful while ``enabled`` is true.
    """

    enabled: bool = False
    next_occurrence: int = 0
    pre_announce_time: int = 0
    effective_lead_time: int = 0


def parse_time_of_day(value: str) -> tuple[int, int, int]:
    """Parse "HH:MM:SS" into (hour, minute, second).

    Empty tokens are ignored, so "04::00:00" reads as "04:00:00". Each token
    must be a plain unsigned byte. Ranges are checked separately.

    Raises:
        ScheduleConfigError: If the string does not have three byte tokens.
    """
    tokens = [token for token in value.split(":") if token]
    if len(tokens) != 3:
        raise ScheduleConfigError(f"expected HH:MM:SS, got '{value}'")

    parts: list[int] = []
    for token in tokens:
        if not (token.isascii() and token.isdigit()) or int(token) > MAX_TIME_TOKEN:
            raise ScheduleConfigError(f"invalid time component '{token}' in '{value}'")
        parts.append(int(token))
    return parts[0], parts[1], parts[2]


def build_rule(config: AutoShutdownConfig) -> RecurrenceRule:
    """Validate the schedule settings and build the recurrence rule.

    Raises:
        ScheduleConfigError: On the first invalid setting.
    """
    hour, minute, second = parse_time_of_day(config.time)

    if not 0 <= config.weekday_mask <= MAX_WEEKDAY_MASK:
        raise ScheduleConfigError(
            f"weekday_mask must be within 0-{MAX_WEEKDAY_MASK}, "
            f"got {config.weekday_mask}"
        )

    if not MIN_INTERVAL_DAYS <= config.every_days <= MAX_INTERVAL_DAYS:
        raise ScheduleConfigError(
            f"every_days must be within {MIN_INTERVAL_DAYS}-{MAX_INTERVAL_DAYS}, "
            f"got {config.every_days}"
        )

    if hour > 23 or minute > 59 or second > 59:
        raise ScheduleConfigError(f"time of day out of range: '{config.time}'")

    return RecurrenceRule(
        weekday_mask=config.weekday_mask,
        interval_days=config.every_days,
        hour=hour,
        minute=minute,
        second=second,
    )


def clamp_lead_time(seconds: int) -> int:
    """Lead times over one day fall back to one hour."""
    if seconds > DAY:
        logger.warning(
            "pre_announce_too_long",
            extra={"announce.configured_seconds": seconds, "announce.seconds": HOUR},
        )
        return HOUR
    return seconds


def compute_schedule(
    now: int, rule: RecurrenceRule, lead_time: int, tz: tzinfo | None = None
) -> ScheduleState:
    """Work out the restart and pre-announce times for ``rule``.

    When less time is left than ``lead_time``, the announcement goes out
    right away and announces whatever time remains.
    """
    next_time = next_occurrence_for(now, rule, tz)
    until_shutdown = next_time - now

    if until_shutdown < lead_time:
        return ScheduleState(
            enabled=True,
            next_occurrence=next_time,
            pre_announce_time=now + IMMEDIATE_DELAY,
            effective_lead_time=until_shutdown,
        )

    return ScheduleState(
        enabled=True,
        next_occurrence=next_time,
        pre_announce_time=next_time - lead_time,
        effective_lead_time=lead_time,
    )


def parse_event_ids(value: str) -> list[int]:
    """Parse a space-delimited list of event ids, skipping bad tokens."""
    event_ids: list[int] = []
    for token in value.split(" "):
        if not token:
            continue
        if not (token.isascii() and token.isdigit()):
            logger.warning("start_event_invalid_id", extra={"event.token": token})
            continue
        event_ids.append(int(token))
    return event_ids


def format_timestamp(timestamp: int, tz: tzinfo | None = None) -> str:
    """Local time of ``timestamp`` for logs and CLI output."""
    return datetime.fromtimestamp(timestamp, tz).strftime("%Y-%m-%d %H:%M:%S %a")


class ShutdownOrchestrator:
    """Computes the next restart and arms its pre-announcement.

    Only one pre-announce action is ever armed. When it fires it broadcasts
    the notice and asks the host to shut down after the effective lead time;
    there is no separate shutdown task.
    """

    def __init__(
        self,
        broadcaster: SessionBroadcaster,
        events: EventService,
        host: ShutdownHost,
        *,
        scheduler: TaskScheduler | None = None,
        clock: Callable[[], float] = time.time,
        tz: tzinfo | None = None,
    ) -> None:
        self._broadcaster = broadcaster
        self._events = events
        self._host = host
        self._scheduler = scheduler or TaskScheduler()
        self._clock = clock
        self.tz = tz
        self._state = ScheduleState()
        self._rule: RecurrenceRule | None = None

    @property
    def state(self) -> ScheduleState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self._state.enabled

    @property
    def rule(self) -> RecurrenceRule | None:
        return self._rule

    @property
    def pending_actions(self) -> int:
        return self._scheduler.pending

    def initialize(self, config: AutoShutdownConfig) -> ScheduleState:
        """Validate ``config``, compute the schedule and arm the announcement.

        Safe to call repeatedly. Every call first cancels whatever a previous
        call armed. Configuration errors leave the module disabled with
        nothing armed; nothing is raised.
        """
        self._scheduler.cancel_all()
        self._state = ScheduleState()
        self._rule = None

        if not config.enabled:
            logger.info("auto_shutdown_disabled")
            return self._state

        try:
            rule = build_rule(config)
        except ScheduleConfigError as e:
            logger.error(
                "auto_shutdown_config_invalid",
                extra={
                    "config.time": config.time,
                    "config.weekday_mask": config.weekday_mask,
                    "config.every_days": config.every_days,
                    "error.message": str(e),
                },
            )
            return self._state

        try:
            self._arm(config, rule)
        except Exception as e:
            logger.error("auto_shutdown_init_failed", extra={"error.message": str(e)})
            self._scheduler.cancel_all()
            self._state = ScheduleState()
            self._rule = None
        return self._state

    def _arm(self, config: AutoShutdownConfig, rule: RecurrenceRule) -> None:
        lead_time = clamp_lead_time(config.pre_announce.seconds)
        template = validate_message_template(config.pre_announce.message)

        now = int(self._clock())
        state = compute_schedule(now, rule, lead_time, self.tz)
        until_shutdown = state.next_occurrence - now

        if until_shutdown < MIN_LEAD_SECONDS:
            logger.warning(
                "shutdown_imminent",
                extra={"schedule.seconds_until": until_shutdown},
            )

        logger.info("auto_shutdown_loading")

        # Drop a countdown armed before a reload
        self._host.cancel_pending_shutdown()

        logger.info(
            "shutdown_scheduled",
            extra={
                "schedule.next": format_timestamp(state.next_occurrence, self.tz),
                "schedule.remaining": format_duration(until_shutdown),
            },
        )
        announce_delay = state.pre_announce_time - now
        logger.info(
            "pre_announce_scheduled",
            extra={
                "schedule.pre_announce": format_timestamp(
                    state.pre_announce_time, self.tz
                ),
                "schedule.remaining": format_duration(announce_delay),
                "announce.lead": format_duration(state.effective_lead_time),
            },
        )

        self._rule = rule
        self._state = state

        self._start_persistent_events(config.start_events)

        plan = AnnouncementPlan(
            lead_seconds=state.effective_lead_time, message_template=template
        )
        self._scheduler.schedule(
            announce_delay, lambda context: self._announce(context, plan)
        )

    def tick(self, elapsed: float) -> None:
        """Advance the task scheduler by ``elapsed`` seconds."""
        if not self._state.enabled:
            return
        self._scheduler.update(elapsed)

    def preview(
        self, config: AutoShutdownConfig, now: int | None = None
    ) -> ScheduleState:
        """Compute what ``initialize`` would arm, without arming anything.

        Raises:
            ScheduleConfigError: If the configuration is invalid.
        """
        if not config.enabled:
            return ScheduleState()
        rule = build_rule(config)
        lead_time = clamp_lead_time(config.pre_announce.seconds)
        now = int(self._clock()) if now is None else now
        return compute_schedule(now, rule, lead_time, self.tz)

    def _announce(self, context: TaskContext, plan: AnnouncementPlan) -> None:
        logger.debug("pre_announce_fired", extra={"task.id": context.task_id})
        announce_restart(plan, self._broadcaster, self._host)

    def _start_persistent_events(self, event_list: str) -> None:
        for event_id in parse_event_ids(event_list):
            try:
                self._events.start_event(event_id)
                description = self._events.describe_event(event_id)
            except Exception as e:
                logger.error(
                    "start_event_failed",
                    extra={"event.id": event_id, "error.message": str(e)},
                )
                continue
            logger.info(
                "start_event",
                extra={"event.id": event_id, "event.description": description},
            )
