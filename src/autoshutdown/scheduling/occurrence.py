"""Next occurrence calculation for the restart schedule.

A rule either selects weekdays through a 7-bit mask (bit 0 = Sunday ...
bit 6 = Saturday) or, when the mask is 0, repeats every ``interval_days``
days. Both modes fire at a fixed local time of day.

Day offsets are applied as calendar days on the local wall clock, so a
restart at 04:00 stays at 04:00 across daylight saving changes and month
or year boundaries.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo

DAYS_PER_WEEK = 7

# Candidates closer to "now" than this are treated as already elapsed
MIN_LEAD_SECONDS = 10


@dataclass(frozen=True)
class RecurrenceRule:
    """When the restart happens.

    Exactly one selection mode is active, decided by ``weekday_mask != 0``.
    """

    weekday_mask: int
    interval_days: int
    hour: int
    minute: int
    second: int

    @property
    def is_weekly(self) -> bool:
        return self.weekday_mask != 0

    @property
    def time_of_day(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"

    def weekdays(self) -> list[int]:
        """Selected weekdays, 0 = Sunday."""
        return [day for day in range(DAYS_PER_WEEK) if self.weekday_mask & (1 << day)]


def local_weekday(moment: datetime) -> int:
    """Weekday with Sunday = 0 ... Saturday = 6."""
    return (moment.weekday() + 1) % DAYS_PER_WEEK


def _to_timestamp(moment: datetime) -> int:
    return int(moment.timestamp())


def next_occurrence(
    now: int,
    weekday_mask: int,
    interval_days: int,
    hour: int,
    minute: int,
    second: int,
    tz: tzinfo | None = None,
) -> int:
    """Compute the next restart timestamp after ``now``.

    Args:
        now: Current POSIX timestamp in seconds.
        weekday_mask: Weekday bits, 0 to use ``interval_days``.
        interval_days: Days between restarts in interval mode.
        hour: Local hour of the restart.
        minute: Local minute of the restart.
        second: Local second of the restart.
        tz: Time zone for the local calendar. None uses the process local zone.

    Returns:
        POSIX timestamp of the next occurrence, always more than
        MIN_LEAD_SECONDS after ``now``.
    """
    local_now = datetime.fromtimestamp(now, tz)
    base = local_now.replace(hour=hour, minute=minute, second=second, microsecond=0)

    if weekday_mask != 0:
        today = local_weekday(local_now)
        # Only offset 0 can match and still be unusable; every later offset
        # is at least a day ahead. A mask holding only today falls through
        # to the same time next week.
        for offset in range(DAYS_PER_WEEK):
            if not weekday_mask & (1 << ((today + offset) % DAYS_PER_WEEK)):
                continue
            candidate = _to_timestamp(base + timedelta(days=offset))
            if candidate - MIN_LEAD_SECONDS > now:
                return candidate
        return _to_timestamp(base + timedelta(days=DAYS_PER_WEEK))

    candidate = _to_timestamp(base)
    if interval_days > 1 or candidate - MIN_LEAD_SECONDS <= now:
        candidate = _to_timestamp(base + timedelta(days=interval_days))
    return candidate


def next_occurrence_for(
    now: int, rule: RecurrenceRule, tz: tzinfo | None = None
) -> int:
    """Compute the next restart timestamp for a validated rule."""
    return next_occurrence(
        now,
        rule.weekday_mask,
        rule.interval_days,
        rule.hour,
        rule.minute,
        rule.second,
        tz=tz,
    )
