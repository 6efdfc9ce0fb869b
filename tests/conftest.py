"""Shared test fixtures and factories."""

from datetime import UTC, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from autoshutdown.config.models import AutoShutdownConfig, PreAnnounceConfig
from autoshutdown.config.paths import get_autoshutdown_home
from autoshutdown.scheduling.host import ExitCode, ShutdownMode
from autoshutdown.scheduling.orchestrator import ShutdownOrchestrator
from autoshutdown.scheduling.tasks import TaskScheduler


def ts(*args: int, tz=UTC) -> int:
    """POSIX timestamp for a wall-clock time in ``tz``."""
    return int(datetime(*args, tzinfo=tz).timestamp())


# =============================================================================
# Time Fixtures
# =============================================================================


class FakeClock:
    """Settable replacement for time.time."""

    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def monday_3am() -> int:
    """Monday 2026-01-12 03:00:00 UTC."""
    return ts(2026, 1, 12, 3, 0, 0)


@pytest.fixture
def clock(monday_3am: int) -> FakeClock:
    return FakeClock(monday_3am)


@pytest.fixture
def berlin() -> ZoneInfo:
    """Europe/Berlin, skipped when no tz database is available."""
    try:
        return ZoneInfo("Europe/Berlin")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")


# =============================================================================
# Collaborator Fakes
# =============================================================================


class RecordingHost:
    """Records every call the orchestrator makes to its collaborators."""

    def __init__(self, failing_events: set[int] | None = None) -> None:
        self.broadcasts: list[str] = []
        self.started_events: list[int] = []
        self.shutdown_requests: list[tuple[int, ShutdownMode, ExitCode]] = []
        self.cancel_calls = 0
        self.failing_events = failing_events or set()

    def broadcast(self, message: str) -> None:
        self.broadcasts.append(message)

    def start_event(self, event_id: int) -> None:
        if event_id in self.failing_events:
            raise RuntimeError(f"event {event_id} does not exist")
        self.started_events.append(event_id)

    def describe_event(self, event_id: int) -> str:
        return f"Event #{event_id}"

    def request_shutdown(
        self, grace_seconds: int, mode: ShutdownMode, exit_code: ExitCode
    ) -> None:
        self.shutdown_requests.append((grace_seconds, mode, exit_code))

    def cancel_pending_shutdown(self) -> None:
        self.cancel_calls += 1


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def scheduler() -> TaskScheduler:
    return TaskScheduler()


@pytest.fixture
def orchestrator(
    host: RecordingHost, scheduler: TaskScheduler, clock: FakeClock
) -> ShutdownOrchestrator:
    """Orchestrator on a fixed clock, computing in UTC."""
    return ShutdownOrchestrator(
        host, host, host, scheduler=scheduler, clock=clock, tz=UTC
    )


def make_config(**overrides) -> AutoShutdownConfig:
    """Enabled daily 04:00:00 restart with a one hour announcement."""
    pre_announce = PreAnnounceConfig(
        seconds=overrides.pop("seconds", 3600),
        message=overrides.pop(
            "message", "[SERVER]: Automated (quick) server restart in {}"
        ),
    )
    values = {"enabled": True, "time": "04:00:00", "pre_announce": pre_announce}
    values.update(overrides)
    return AutoShutdownConfig(**values)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def config_toml_content() -> str:
    """Valid TOML config content."""
    return """
timezone = "UTC"

[auto_shutdown]
enabled = true
weekday_mask = 0
every_days = 1
time = "04:00:00"
start_events = "12 17"

[auto_shutdown.pre_announce]
seconds = 3600
message = "Restart in {}"
"""


@pytest.fixture
def config_file(tmp_path: Path, config_toml_content: str) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(config_toml_content)
    return config_path


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point AUTOSHUTDOWN_HOME at a temp dir so no real config is picked up."""
    home = tmp_path / "home"
    monkeypatch.setenv("AUTOSHUTDOWN_HOME", str(home))
    monkeypatch.chdir(tmp_path)
    get_autoshutdown_home.cache_clear()
    yield home
    get_autoshutdown_home.cache_clear()
