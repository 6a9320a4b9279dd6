"""
Output formatting utilities for the CLI.

Status lines, tables, and renderers for run results, pending commands and
session statistics.
"""

from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from waypoint.approvals.models import PendingCommand
    from waypoint.providers.models import SessionStats

# Global console instance
console = Console()


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]i[/blue] {message}")


def print_table(
    headers: list[str],
    rows: list[list[Any]],
    title: str | None = None,
) -> None:
    """Print a table."""
    table = Table(title=title)

    for header in headers:
        table.add_column(header)

    for row in rows:
        table.add_row(*[str(cell) for cell in row])

    console.print(table)


def print_pending_command(command: "PendingCommand") -> None:
    """Show a command awaiting approval."""
    lines = [
        f"[bold]Command:[/bold] {command.command}",
        f"[bold]Directory:[/bold] {command.working_directory}",
    ]
    if command.reason:
        lines.append(f"[bold]Reason:[/bold] {command.reason}")
    console.print(Panel("\n".join(lines), title="[yellow]Approval required[/yellow]"))


def print_session_stats(stats: "SessionStats") -> None:
    """One-line summary of session usage."""
    console.print(
        f"[dim]Tokens: {stats.prompt_tokens:,} in / {stats.completion_tokens:,} out "
        f"({stats.total_tokens:,} total) | Cost: ${stats.total_cost:.4f} | "
        f"Responses: {stats.message_count}[/dim]"
    )


def format_size(size: int) -> str:
    """Human-readable byte count."""
    if size < 1024:
        return f"{size} B"
    value = size / 1024
    for unit in ("KB", "MB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"
