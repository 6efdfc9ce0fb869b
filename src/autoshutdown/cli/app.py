"""Main CLI application."""

import typer

from autoshutdown.cli.commands import config, run, schedule

app = typer.Typer(
    name="autoshutdown",
    help="autoshutdown - scheduled server restarts with pre-announcement",
    no_args_is_help=True,
)

for command in (config, run, schedule):
    command.register(app)


if __name__ == "__main__":
    app()
