"""Schedule preview commands."""

import time
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Annotated

import typer

from autoshutdown.cli.console import console, error, warning


def _parse_now(value: str, tz: tzinfo | None) -> int:
    """Parse an ISO timestamp; naive values are read in ``tz``."""
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None and tz is not None:
        moment = moment.replace(tzinfo=tz)
    return int(moment.timestamp())


def register(app: typer.Typer) -> None:
    """Register the next command."""

    @app.command("next")
    def next_restart(
        config: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
        now: Annotated[
            str | None,
            typer.Option(
                "--now",
                help="Compute from this ISO time instead of the current time",
            ),
        ] = None,
    ) -> None:
        """Show when the next automatic restart would happen.

        Nothing is armed; this only runs the calculation.

        Examples:
            autoshutdown next
            autoshutdown next --now 2026-01-12T03:00:00
        """
        from rich.table import Table

        from autoshutdown.cli.host import ConsoleHost
        from autoshutdown.config import ConfigError, load_config
        from autoshutdown.scheduling import (
            ScheduleConfigError,
            ShutdownOrchestrator,
            format_duration,
        )
        from autoshutdown.scheduling.orchestrator import format_timestamp

        try:
            config_obj = load_config(config)
        except ConfigError as e:
            error(str(e))
            raise typer.Exit(1) from None

        tz = config_obj.tzinfo
        try:
            now_ts = _parse_now(now, tz) if now else int(time.time())
        except ValueError:
            error(f"Invalid --now value: {now}")
            raise typer.Exit(1) from None

        host = ConsoleHost()
        orchestrator = ShutdownOrchestrator(host, host, host, tz=tz)
        try:
            state = orchestrator.preview(config_obj.auto_shutdown, now=now_ts)
        except ScheduleConfigError as e:
            error(f"Invalid schedule: {e}")
            raise typer.Exit(1) from None

        if not state.enabled:
            warning("Automatic restart is disabled")
            return

        table = Table(title="Next Restart")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Restart at", format_timestamp(state.next_occurrence, tz))
        table.add_row("Announce at", format_timestamp(state.pre_announce_time, tz))
        table.add_row("Remaining", format_duration(state.next_occurrence - now_ts))
        table.add_row("Lead time", format_duration(state.effective_lead_time))
        table.add_row("Time zone", config_obj.timezone or "local")
        console.print(table)
