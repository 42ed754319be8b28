"""Output formatting utilities for CLI."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

console = Console()


def error_message(message: str, hint: str | None = None) -> None:
    """Print error message.

    Args:
        message: Error message
        hint: Optional hint for user
    """
    typer.secho(f"✗ {message}", fg=typer.colors.RED, err=True)
    if hint:
        typer.secho(f"  Hint: {hint}", fg=typer.colors.YELLOW, err=True)


def success_message(message: str) -> None:
    """Print success message.

    Args:
        message: Success message
    """
    typer.secho(f"✓ {message}", fg=typer.colors.GREEN)


def export_summary(output_path: Path, table_count: int, view_count: int) -> None:
    """Print the result of a successful export.

    Args:
        output_path: File the schema was written to
        table_count: Number of tables exported
        view_count: Number of views exported
    """
    success_message(f"Successfully exported schema to: {output_path}")

    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_row("Tables exported", str(table_count))
    summary.add_row("Views exported", str(view_count))
    console.print(summary)
