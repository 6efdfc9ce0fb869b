"""Scheduled automatic server restarts with pre-announcement."""

__version__ = "0.1.0"
