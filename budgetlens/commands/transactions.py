"""Transaction management commands (add, edit, delete, list)."""

import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from budgetlens.config import get_default_budget, load_config_or_default
from budgetlens.domain.models import category_color
from budgetlens.domain.transactions import (
    Transaction,
    create_transaction,
    format_money_display,
    validate_transaction_input,
)
from budgetlens.store.state import AppState, open_state

console = Console()


def load_state() -> AppState:
    """Load state using the configured default budget."""
    return open_state(default_budget=get_default_budget(load_config_or_default()))


def print_transaction(txn: Transaction) -> None:
    """Print the fields of a single transaction."""
    console.print(f"  ID: {txn.id}")
    console.print(f"  Date: {txn.date.isoformat()}")
    console.print(f"  Type: {txn.type.value}")
    console.print(f"  Category: [{category_color(txn.category)}]{txn.category}[/]")
    console.print(f"  Amount: {format_money_display(txn.amount)}")
    if txn.notes:
        console.print(f"  Notes: {escape(txn.notes)}")


def add_command(
    type_: str,
    category: str,
    amount: float,
    date: str,
    notes: str | None = None,
) -> None:
    """Add a transaction.

    Args:
        type_: "income" or "expense".
        category: Category name (unknown names are filed under Other).
        amount: Amount, must be greater than zero.
        date: Transaction date (YYYY-MM-DD, DD/MM/YYYY, or other formats).
        notes: Optional notes.
    """
    is_valid, error = validate_transaction_input(type_, category, amount, date)
    if not is_valid:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    try:
        state = load_state()
        txn = state.add(create_transaction(type_, category, amount, date, notes))
    except OSError as e:
        console.print(f"[red]Could not save transaction: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Transaction added:")
    print_transaction(txn)


def edit_command(
    txn_id: str,
    type_: str | None = None,
    category: str | None = None,
    amount: float | None = None,
    date: str | None = None,
    notes: str | None = None,
) -> None:
    """Replace a transaction, keeping any field that is not given."""
    state = load_state()
    existing = state.find(txn_id)
    if existing is None:
        console.print(f"[red]Transaction {txn_id} not found[/red]")
        sys.exit(1)

    new_type = type_ if type_ is not None else existing.type.value
    new_category = category if category is not None else existing.category
    new_amount = amount if amount is not None else existing.amount
    new_date = date if date is not None else existing.date.isoformat()
    new_notes = notes if notes is not None else existing.notes

    is_valid, error = validate_transaction_input(new_type, new_category, new_amount, new_date)
    if not is_valid:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    updated = create_transaction(new_type, new_category, new_amount, new_date, new_notes, txn_id=existing.id)
    try:
        state.replace(updated)
    except OSError as e:
        console.print(f"[red]Could not save transaction: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Updated transaction {txn_id}:")
    print_transaction(updated)


def delete_command(txn_id: str) -> None:
    """Delete a transaction by id."""
    state = load_state()
    try:
        removed = state.delete(txn_id)
    except KeyError:
        console.print(f"[red]Transaction {txn_id} not found[/red]")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Could not save changes: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Deleted transaction {removed.id}")


def sort_newest_first(transactions: list[Transaction]) -> list[Transaction]:
    """Order transactions by date, newest first, keeping entry order for ties."""
    indexed = list(enumerate(transactions))
    indexed.sort(key=lambda pair: (pair[1].date, pair[0]), reverse=True)
    return [txn for _, txn in indexed]


def list_command(limit: int = 50, all: bool = False) -> None:
    """List transactions, newest first."""
    state = load_state()

    if not state.transactions:
        console.print("[yellow]No transactions yet[/yellow]")
        return

    ordered = sort_newest_first(state.transactions)
    shown = ordered if all else ordered[:limit]

    title = f"Transactions (showing {len(shown)} of {len(ordered)})"
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    table.add_column("Notes", style="white")

    for txn in shown:
        if txn.is_income:
            amount_display = f"[green]+{format_money_display(txn.amount)}[/green]"
        else:
            amount_display = f"[red]-{format_money_display(txn.amount)}[/red]"

        category = f"[{category_color(txn.category)}]{txn.category}[/]"
        notes = escape(txn.notes) if txn.notes else "[dim]-[/dim]"
        table.add_row(txn.id, txn.date.isoformat(), category, amount_display, notes)

    console.print(table)

    income_count = sum(1 for txn in state.transactions if txn.is_income)
    expense_count = len(state.transactions) - income_count
    console.print(f"[dim]{income_count} income, {expense_count} expense[/dim]")
