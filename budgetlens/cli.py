"""CLI entry point for budgetlens."""

import datetime

import typer

from budgetlens.commands.admin import init_command
from budgetlens.commands.budget import budget_command
from budgetlens.commands.data import export_command, import_command
from budgetlens.commands.report import analyze_command, report_command
from budgetlens.commands.transactions import add_command, delete_command, edit_command, list_command
from budgetlens.log import configure_logging

app = typer.Typer(
    name="budgetlens",
    help="budgetlens - Track income and expenses against a monthly budget",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """budgetlens - Track income and expenses against a monthly budget."""
    configure_logging(verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config and data"),
) -> None:
    """Initialize budgetlens configuration and data store."""
    init_command(force)


@app.command()
def add(
    type_: str = typer.Argument(..., metavar="TYPE", help="income or expense"),
    amount: float = typer.Argument(..., help="Amount (must be greater than zero)"),
    category: str = typer.Option("Other", "--category", "-c", help="Category, e.g. 'Food & Dining'"),
    date: str = typer.Option(None, "--date", "-d", help="Date (default: today)"),
    notes: str = typer.Option(None, "--notes", "-n", help="Optional notes"),
) -> None:
    """Add an income or expense transaction."""
    if date is None:
        date = datetime.date.today().isoformat()
    add_command(type_.lower(), category, amount, date, notes)


@app.command()
def edit(
    txn_id: str = typer.Argument(..., metavar="ID", help="Transaction ID (from 'budgetlens list')"),
    type_: str = typer.Option(None, "--type", "-t", help="income or expense"),
    amount: float = typer.Option(None, "--amount", "-a", help="New amount"),
    category: str = typer.Option(None, "--category", "-c", help="New category"),
    date: str = typer.Option(None, "--date", "-d", help="New date"),
    notes: str = typer.Option(None, "--notes", "-n", help="New notes (empty string clears them)"),
) -> None:
    """Replace fields of an existing transaction."""
    edit_command(txn_id, type_.lower() if type_ else None, category, amount, date, notes)


@app.command()
def delete(
    txn_id: str = typer.Argument(..., metavar="ID", help="Transaction ID (from 'budgetlens list')"),
) -> None:
    """Delete a transaction."""
    delete_command(txn_id)


@app.command(name="list")
def list_transactions(
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all your transactions"),
) -> None:
    """List your transactions, newest first."""
    list_command(limit, all)


@app.command()
def budget(
    set_amount: float = typer.Option(None, "--set", help="Set your monthly budget"),
) -> None:
    """Show or set your monthly budget."""
    budget_command(set_amount)


@app.command(name="report")
def report(
    histogram: bool = typer.Option(True, help="Show histogram of your spending"),
    as_json: bool = typer.Option(False, "--json", help="Print the metrics as JSON"),
    period: str = typer.Option(None, "--period", help="Period label (YYYY-MM, default: current month)"),
) -> None:
    """Show your totals, budget status, and spending breakdown."""
    report_command(histogram, as_json, period)


@app.command()
def analyze(
    as_json: bool = typer.Option(False, "--json", help="Print the analysis as JSON"),
) -> None:
    """Analyze your finances, using the remote summarizer when configured."""
    analyze_command(as_json)


@app.command(name="import")
def import_transactions(
    path: str = typer.Argument(..., help="JSON or CSV file to import"),
) -> None:
    """Import transactions from a JSON or CSV file."""
    import_command(path)


@app.command(name="export")
def export_transactions(
    fmt: str = typer.Option("json", "--format", "-f", help="Export format: json or csv"),
    output: str = typer.Option(None, "--output", "-o", help="Output file (default: budget-tracker-<date>.<format>)"),
) -> None:
    """Export your transactions to a JSON or CSV file."""
    export_command(fmt, output)


if __name__ == "__main__":
    app()
