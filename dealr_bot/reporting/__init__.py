"""Operator console output."""

from dealr_bot.reporting.console import StatusReporter, StepHandle, shorten

__all__ = ["StatusReporter", "StepHandle", "shorten"]
