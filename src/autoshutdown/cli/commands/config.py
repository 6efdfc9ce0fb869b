"""Configuration management commands."""

from pathlib import Path
from typing import Annotated

import click
import typer

from autoshutdown.cli.console import console, error, success


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        action: Annotated[
            str | None,
            typer.Argument(help="Action: show, validate"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: search standard locations)",
            ),
        ] = None,
    ) -> None:
        """Manage configuration."""
        if action is None:
            ctx = click.get_current_context()
            click.echo(ctx.get_help())
            raise typer.Exit(0)

        from rich.syntax import Syntax
        from rich.table import Table

        from autoshutdown.config import ConfigError, find_config_path, load_config
        from autoshutdown.scheduling import ScheduleConfigError
        from autoshutdown.scheduling.orchestrator import build_rule

        try:
            config_path = find_config_path(path)
        except ConfigError as e:
            error(str(e))
            raise typer.Exit(1) from None

        if action == "show":
            content = config_path.read_text()
            syntax = Syntax(content, "toml", theme="monokai", line_numbers=True)
            console.print(f"[bold]Config file: {config_path}[/bold]\n")
            console.print(syntax)

        elif action == "validate":
            try:
                config_obj = load_config(config_path)
            except ConfigError as e:
                error("Configuration validation failed:")
                console.print(str(e))
                raise typer.Exit(1) from None

            settings = config_obj.auto_shutdown
            table = Table(title="Configuration Summary")
            table.add_column("Setting", style="cyan")
            table.add_column("Value", style="green")
            table.add_row("Enabled", "yes" if settings.enabled else "[dim]no[/dim]")
            table.add_row("Time zone", config_obj.timezone or "local")

            if settings.enabled:
                try:
                    rule = build_rule(settings)
                except ScheduleConfigError as e:
                    error(f"Invalid schedule: {e}")
                    raise typer.Exit(1) from None

                if rule.is_weekly:
                    names = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
                    days = ", ".join(names[day] for day in rule.weekdays())
                    table.add_row("Weekdays", days)
                else:
                    table.add_row("Every", f"{rule.interval_days} day(s)")
                table.add_row("Time", rule.time_of_day)
                table.add_row(
                    "Pre-announce", f"{settings.pre_announce.seconds} seconds"
                )
                table.add_row(
                    "Start events", settings.start_events or "[dim]none[/dim]"
                )

            success("Configuration is valid!")
            console.print()
            console.print(table)

        else:
            error(f"Unknown action: {action}")
            console.print("Valid actions: show, validate")
            raise typer.Exit(1)
