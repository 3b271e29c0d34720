"""
User-facing notifications for compilation outcomes.

The compile workflow reports through an explicit reporter instead of writing
to the console itself, so callers can swap in RecordingReporter under test.
"""

from typing import List, Protocol

import typer


class Reporter(Protocol):
    def success(self, message: str) -> None: ...


class ConsoleReporter:
    """Writes notifications to stdout in color."""

    def success(self, message: str) -> None:
        typer.secho(message, fg=typer.colors.GREEN)


class RecordingReporter:
    """Keeps notifications in memory."""

    def __init__(self) -> None:
        self.messages: List[str] = []

    def success(self, message: str) -> None:
        self.messages.append(message)
