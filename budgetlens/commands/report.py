"""Report and analyze commands for viewing derived metrics."""

import json
import sys

from rich.console import Console

from budgetlens.commands.budget import render_budget_analysis
from budgetlens.commands.transactions import load_state
from budgetlens.config import get_analysis_settings, load_config_or_default
from budgetlens.coordinator import AnalysisCoordinator
from budgetlens.dates import period_label
from budgetlens.domain.analysis import Enriched, FinancialAnalysis, analyze
from budgetlens.domain.metrics import FinancialMetrics
from budgetlens.domain.models import Period, category_color
from budgetlens.domain.transactions import format_money_display
from budgetlens.integrations.summarizer import make_summarizer

console = Console()


def calculate_histogram_bar_length(amount: float, max_amount: float, bar_width: int) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)


def render_metrics(metrics: FinancialMetrics, histogram: bool = True) -> None:
    """Print summary totals, budget status, and category breakdown."""
    summary = metrics.summary
    try:
        heading = period_label(summary.period)
    except ValueError:
        heading = summary.period
    console.print(f"[bold cyan]{heading}[/bold cyan]\n")

    console.print(f"  [bold]Total income:[/bold]   [green]{format_money_display(summary.total_income)}[/green]")
    console.print(f"  [bold]Total expenses:[/bold] [red]{format_money_display(summary.total_expenses)}[/red]")
    net_style = "green" if summary.net_balance >= 0 else "red"
    console.print(f"  [bold]Net balance:[/bold]    [{net_style}]{format_money_display(summary.net_balance)}[/{net_style}]\n")

    console.print("[bold]Budget:[/bold]\n")
    render_budget_analysis(metrics.budget_analysis)

    bars = metrics.chart_data.bar_chart
    if bars:
        console.print("\n[bold red]Spending by category:[/bold red]\n")
        max_amount = max(bar.amount for bar in bars)
        bar_width = 30
        for item in metrics.category_breakdown:
            style = category_color(item.category)
            amount_display = format_money_display(item.amount)
            line = f"  [{style}]{item.category:20}[/{style}] {amount_display:>12} ({item.percentage:.2f}%)"
            if histogram:
                line += " " + "█" * calculate_histogram_bar_length(item.amount, max_amount, bar_width)
            console.print(line)
    else:
        console.print("\n[dim]No expense data available[/dim]")

    if metrics.invalid_transactions:
        console.print(
            f"\n[yellow]{metrics.invalid_transactions} of {metrics.transactions_processed} "
            "transactions were invalid and left out[/yellow]"
        )


def report_command(histogram: bool = True, as_json: bool = False, period: str | None = None) -> None:
    """Show totals, budget status, and the category breakdown."""
    state = load_state()

    if period is not None:
        try:
            period_label(Period(period))
        except ValueError:
            console.print(f"[red]Invalid period '{period}'. Use YYYY-MM[/red]")
            sys.exit(1)

    metrics = state.metrics(Period(period) if period else None)

    if as_json:
        console.print_json(json.dumps(metrics.to_dict()))
        return

    if not state.transactions:
        console.print("[dim]Add your first transaction to see a financial analysis[/dim]")
        return

    render_metrics(metrics, histogram)


def render_analysis(analysis: FinancialAnalysis, enriched: bool) -> None:
    """Print an analysis with its confidence and metadata."""
    source = "remote summarizer" if enriched else "local calculation"
    render_metrics(analysis.result)
    console.print(
        f"\n[dim]Source: {source} · confidence {analysis.confidence:.2f} · "
        f"{analysis.metadata.transactions_analyzed} transactions · "
        f"{analysis.metadata.analysis_date} · {analysis.metadata.processing_time}[/dim]"
    )


def analyze_command(as_json: bool = False) -> None:
    """Analyze transactions, using the remote summarizer when configured."""
    state = load_state()

    if not state.transactions:
        console.print("[dim]Add your first transaction to see a financial analysis[/dim]")
        return

    settings = get_analysis_settings(load_config_or_default())
    summarizer = make_summarizer(settings) if settings else None

    with AnalysisCoordinator(lambda txns, budget: analyze(txns, budget, summarizer)) as coordinator:
        coordinator.request(state.transactions, state.budget)

    outcome = coordinator.latest
    if outcome is None:
        console.print("[red]Analysis failed[/red]", style="bold")
        sys.exit(1)

    if as_json:
        console.print_json(json.dumps(outcome.analysis.to_dict()))
        return

    render_analysis(outcome.analysis, isinstance(outcome, Enriched))
