"""Import and export commands for moving transactions in and out."""

import sys
from pathlib import Path

from rich.console import Console

from budgetlens.commands.transactions import load_state
from budgetlens.store.interchange import (
    SUPPORTED_FORMATS,
    ImportFormatError,
    default_export_name,
    read_import_file,
    write_export,
)

console = Console()


def import_command(path: str) -> None:
    """Import transactions from a JSON or CSV file."""
    file_path = Path(path).expanduser()

    try:
        result = read_import_file(file_path)
    except ImportFormatError as e:
        console.print("[red]Failed to import data. Please check file format.[/red]", style="bold")
        console.print(f"[dim]{e}[/dim]")
        sys.exit(1)

    if not result.transactions:
        console.print("[yellow]No transactions found to import[/yellow]")
        if result.skipped:
            console.print(f"[dim]Skipped {result.skipped} malformed rows[/dim]")
        return

    state = load_state()
    try:
        added = state.extend(result.transactions)
    except OSError as e:
        console.print(f"[red]Could not save imported transactions: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]Successfully imported {len(added)} transactions![/green]", style="bold")
    if result.skipped:
        console.print(f"[dim]Skipped {result.skipped} malformed rows[/dim]")


def export_command(fmt: str = "json", output: str | None = None) -> None:
    """Export all transactions to a JSON or CSV file."""
    fmt = fmt.lower()
    if fmt not in SUPPORTED_FORMATS:
        console.print(f"[red]Unknown format '{fmt}'. Use json or csv[/red]")
        sys.exit(1)

    file_path = Path(output).expanduser() if output else Path.cwd() / default_export_name(fmt)

    state = load_state()
    try:
        write_export(file_path, state.transactions, fmt)
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Exported {len(state.transactions)} transactions to: {file_path}")
