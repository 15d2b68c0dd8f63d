"""
Progress reporting for the sync workflow.

The syncer only emits (category, message) pairs; how they are shown is up to
the reporter it is given.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from rich.console import Console


class ReportCategory(str, Enum):
    """Kind of status line emitted by the syncer."""

    STEP = "step"
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Report:
    """A single emitted status line."""

    category: ReportCategory
    message: str


class Reporter(Protocol):
    """Receives status lines from the syncer."""

    def emit(self, category: ReportCategory, message: str) -> None: ...


CATEGORY_STYLES = {
    ReportCategory.STEP: "bold cyan",
    ReportCategory.SUCCESS: "green",
    ReportCategory.ERROR: "red",
    ReportCategory.INFO: "yellow",
}


class ConsoleReporter:
    """Prints status lines to a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self._printed_step = False

    def emit(self, category: ReportCategory, message: str) -> None:
        # Separate steps with a blank line
        if category is ReportCategory.STEP:
            if self._printed_step:
                self.console.print()
            self._printed_step = True
        # Git output may contain [brackets]; never treat it as markup
        self.console.print(
            message,
            style=CATEGORY_STYLES[category],
            markup=False,
            highlight=False,
        )


class RecordingReporter:
    """Keeps every status line in memory."""

    def __init__(self):
        self.reports: list[Report] = []

    def emit(self, category: ReportCategory, message: str) -> None:
        self.reports.append(Report(category, message))

    def messages(self, category: ReportCategory | None = None) -> list[str]:
        """Get emitted messages, optionally only those of one category."""
        return [r.message for r in self.reports if category is None or r.category is category]
