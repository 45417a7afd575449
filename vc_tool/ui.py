"""Rich UI helpers for the vc CLI.

Provides consistent formatting for CLI output:
- Usage table listing every action
- Spinner while ffmpeg runs
- Completion, info and error messages
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from rich.console import Console
from rich.markup import escape
from rich.status import Status
from rich.table import Table

from vc_tool.video_processor.constants import ACTION_TABLE

# Singleton console instance; paths and ffmpeg command lines are never wrapped
console = Console(soft_wrap=True)


@contextmanager
def status_spinner(message: str) -> Iterator[Status]:
    """Context manager for a spinner during long operations.

    Usage:
        with status_spinner("Processing"):
            do_something_slow()
    """
    with console.status(f"[cyan]{message}[/cyan]") as status:
        yield status


def print_usage() -> None:
    """Print the usage line and the table of available actions."""
    console.print("Usage: vc <action> <param> <file>\n")
    console.print("Available actions:\n")

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Action", style="bold cyan")
    table.add_column("Param")
    table.add_column("Description", style="dim")

    for action, example, description in ACTION_TABLE:
        table.add_row(action, example, description)

    console.print(table)


def step_complete(message: str, output_path: Optional[str | Path] = None) -> None:
    """Print step completion with optional output path."""
    console.print(f"[green]{escape(message)}[/green]")
    if output_path:
        console.print(f"  [dim]Output:[/dim] {escape(str(output_path))}", highlight=False)


def step_error(message: str, details: Optional[str] = None) -> None:
    """Print an error message.

    Args:
        message: Error message
        details: Optional additional details
    """
    console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)
    if details:
        console.print(f"  [dim]{escape(details)}[/dim]", highlight=False)


def step_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[cyan]Info:[/cyan] {escape(message)}", highlight=False)
