"""CLI command modules."""

from autoshutdown.cli.commands import config, run, schedule

__all__ = [
    "config",
    "run",
    "schedule",
]
