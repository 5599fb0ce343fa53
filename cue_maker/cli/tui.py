"""Terminal User Interface components using rich.

Everything is printed to stderr so that cue sheets and labels written to
stdout can still be piped.
"""

import logging
from typing import Dict, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn
from rich.table import Table

from ..core.cue import CueTrackLabel
from ..core.timecode import format_cue_timecode, format_seconds_text

console = Console(stderr=True)
logger = logging.getLogger(__name__)


def display_header(title: str) -> None:
    """Display a header with the given title."""
    console.print()
    console.print(Panel(title, style="bold blue"), justify="center")
    console.print()


def display_labels(labels: Sequence[CueTrackLabel], title: str = "Labels") -> None:
    """Display labels in a table."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Number", style="dim")
    table.add_column("Start", justify="right", style="green")
    table.add_column("CUE time", justify="right", style="green")
    table.add_column("Title", style="cyan")

    for i, label in enumerate(labels, 1):
        table.add_row(
            str(i),
            format_seconds_text(label.start),
            format_cue_timecode(label.start),
            label.title,
        )

    console.print(table)
    console.print()


def create_progress() -> Progress:
    """Create a progress bar with spinner and status."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed:.0f}/{task.total:.0f}"),
        console=console,
    )


class ProcessingProgress:
    """Context manager for tracking progress of named tasks."""

    def __init__(self):
        self.progress = create_progress()
        self.tasks: Dict[str, TaskID] = {}
        self.totals: Dict[str, float] = {}

    def __enter__(self) -> "ProcessingProgress":
        self.progress.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.progress.__exit__(exc_type, exc_val, exc_tb)

    def start_task(self, name: str, total: Optional[float] = None) -> TaskID:
        """Start a new task with ``total`` steps."""
        self.totals[name] = total or 1
        task_id = self.progress.add_task(
            f"[bold blue]{name}...", total=self.totals[name]
        )
        self.tasks[name] = task_id
        return task_id

    def advance(self, name: str, steps: float = 1) -> None:
        """Advance a task by some steps."""
        if name in self.tasks:
            self.progress.update(self.tasks[name], advance=steps)

    def complete_task(self, name: str) -> None:
        """Mark a task as complete."""
        if name in self.tasks:
            self.progress.update(
                self.tasks[name],
                completed=self.totals[name],
                description=f"[bold green]{name} ✓",
            )

    def fail_task(self, name: str, error: str) -> None:
        """Mark a task as failed."""
        if name in self.tasks:
            self.progress.update(
                self.tasks[name], description=f"[bold red]{name} ✗ ({error})"
            )
