"""Configuration models using Pydantic."""

from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

DEFAULT_TIME = "04:00:00"
DEFAULT_PRE_ANNOUNCE_SECONDS = 3600
DEFAULT_PRE_ANNOUNCE_MESSAGE = "[SERVER]: Automated (quick) server restart in {}"


class PreAnnounceConfig(BaseModel):
    """Configuration for the restart pre-announcement.

    The message must contain a single ``{}`` placeholder which receives the
    remaining time as human readable text.
    """

    seconds: int = Field(default=DEFAULT_PRE_ANNOUNCE_SECONDS, ge=0)
    message: str = DEFAULT_PRE_ANNOUNCE_MESSAGE


class AutoShutdownConfig(BaseModel):
    """Configuration for the automatic restart schedule.

    Only types and signs are enforced here. Range checks (mask bits, interval,
    time of day) happen when the schedule is initialized, so an out-of-range
    value disables the module instead of failing the whole load.
    """

    enabled: bool = False
    # Bit 0 = Sunday ... bit 6 = Saturday; 0 selects every_days
    weekday_mask: int = Field(default=0, ge=0)
    every_days: int = Field(default=1, ge=0)
    time: str = DEFAULT_TIME
    pre_announce: PreAnnounceConfig = Field(default_factory=PreAnnounceConfig)
    # Space-delimited event ids started after a successful initialization
    start_events: str = ""
    # Descriptions shown by the console host, keyed by event id
    event_names: dict[int, str] = Field(default_factory=dict)


class LoggingConfig(BaseModel):
    """Configuration for logging output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None
    log_to_file: bool = False


class ConfigError(Exception):
    """Configuration error."""

    pass


class Config(BaseModel):
    """Root configuration model."""

    # IANA name; None means the process local time zone
    timezone: str | None = None
    auto_shutdown: AutoShutdownConfig = Field(default_factory=AutoShutdownConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{value}'") from e
        return value

    @property
    def tzinfo(self) -> ZoneInfo | None:
        """Resolved time zone, or None for process local time."""
        return ZoneInfo(self.timezone) if self.timezone else None
