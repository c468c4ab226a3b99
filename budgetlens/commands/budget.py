"""Budget command for viewing and setting the monthly budget."""

import sys

from rich.console import Console

from budgetlens.commands.transactions import load_state
from budgetlens.domain.metrics import BudgetAnalysis, BudgetStatus
from budgetlens.domain.transactions import format_money_display
from budgetlens.store.state import validate_budget

console = Console()

STATUS_STYLES = {
    BudgetStatus.ON_TRACK: "green",
    BudgetStatus.CAUTION: "yellow",
    BudgetStatus.OVER_BUDGET: "red",
}


def format_status(analysis: BudgetAnalysis) -> str:
    """Format the budget status with its colour."""
    style = STATUS_STYLES[analysis.status]
    return f"[{style}]{analysis.status.value}[/{style}]"


def format_percentage(percentage: float | None) -> str:
    """Format a percentage of budget used; None means no budget to measure against."""
    if percentage is None:
        return "n/a (no budget)"
    return f"{percentage:.1f}%"


def render_progress_bar(percentage: float | None, width: int = 40) -> str:
    """Render a text progress bar, capped at full width.

    Args:
        percentage: Percentage of budget used.
        width: Bar width in characters.

    Returns:
        Bar string such as "█████░░░░░".
    """
    if percentage is None:
        filled = width
    else:
        filled = int(min(max(percentage, 0.0), 100.0) / 100 * width)
    return "█" * filled + "░" * (width - filled)


def render_budget_analysis(analysis: BudgetAnalysis) -> None:
    """Print budget utilization."""
    style = STATUS_STYLES[analysis.status]
    console.print(f"  Monthly budget: {format_money_display(analysis.monthly_budget)}")
    console.print(f"  Spent:          [red]{format_money_display(analysis.spent)}[/red]")
    console.print(f"  Remaining:      {format_money_display(analysis.remaining)}")
    console.print(f"  Status:         {format_status(analysis)}")
    console.print(f"\n  [{style}]{render_progress_bar(analysis.percentage_used)}[/{style}]")
    console.print(f"  {format_percentage(analysis.percentage_used)} of budget used")


def budget_command(set_amount: float | None = None) -> None:
    """Show the monthly budget, or set it when an amount is given."""
    state = load_state()

    if set_amount is not None:
        is_valid, error = validate_budget(set_amount)
        if not is_valid:
            console.print(f"[red]{error}[/red]")
            sys.exit(1)
        try:
            state.set_budget(set_amount)
        except OSError as e:
            console.print(f"[red]Could not save budget: {e}[/red]", style="bold")
            sys.exit(1)
        console.print(f"[green]✓[/green] Monthly budget set to {format_money_display(state.budget)}\n")

    metrics = state.metrics()
    console.print("[bold cyan]Budget[/bold cyan]\n")
    render_budget_analysis(metrics.budget_analysis)
