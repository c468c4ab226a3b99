"""Pure functions deriving financial metrics from transactions and a budget.

This module contains the functional core for reporting:
- No I/O operations (no files, no console, no network)
- No side effects
- Pure data transformations
- Easy to test

Sums are accumulated unrounded; every figure is rounded to 2 decimals only
when the FinancialMetrics value is built.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from budgetlens.dates import current_period
from budgetlens.domain.models import CategoryName, Money, Period
from budgetlens.domain.transactions import Transaction, is_valid_transaction

CAUTION_THRESHOLD = 80.0
OVER_BUDGET_THRESHOLD = 100.0


class BudgetStatus(str, Enum):
    """Qualitative classification of spend against budget."""

    ON_TRACK = "On Track"
    CAUTION = "Caution"
    OVER_BUDGET = "Over Budget"


@dataclass(frozen=True)
class Summary:
    """Immutable income/expense totals."""

    total_income: Money
    total_expenses: Money
    net_balance: Money
    period: Period


@dataclass(frozen=True)
class BudgetAnalysis:
    """Immutable budget utilization.

    percentage_used is None when spending exists against a zero budget.
    """

    monthly_budget: Money
    spent: Money
    remaining: Money
    percentage_used: float | None
    status: BudgetStatus


@dataclass(frozen=True)
class CategoryBreakdown:
    """Immutable expense total for one category."""

    category: CategoryName
    amount: Money
    percentage: float


@dataclass(frozen=True)
class PieSlice:
    category: CategoryName
    value: Money


@dataclass(frozen=True)
class Bar:
    category: CategoryName
    amount: Money


@dataclass(frozen=True)
class ProgressBar:
    used: Money
    total: Money
    percentage: float | None


@dataclass(frozen=True)
class ChartData:
    """Chart-shaped projections of the breakdown and budget."""

    pie_chart: list[PieSlice]
    bar_chart: list[Bar]
    progress_bar: ProgressBar


@dataclass(frozen=True)
class FinancialMetrics:
    """Immutable analysis report."""

    summary: Summary
    budget_analysis: BudgetAnalysis
    category_breakdown: list[CategoryBreakdown]
    chart_data: ChartData
    transactions_processed: int
    valid_transactions: int
    invalid_transactions: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to the nested JSON-ready shape."""
        return {
            "summary": {
                "total_income": self.summary.total_income,
                "total_expenses": self.summary.total_expenses,
                "net_balance": self.summary.net_balance,
                "period": self.summary.period,
            },
            "budget_analysis": {
                "monthly_budget": self.budget_analysis.monthly_budget,
                "spent": self.budget_analysis.spent,
                "remaining": self.budget_analysis.remaining,
                "percentage_used": self.budget_analysis.percentage_used,
                "status": self.budget_analysis.status.value,
            },
            "category_breakdown": [
                {"category": c.category, "amount": c.amount, "percentage": c.percentage}
                for c in self.category_breakdown
            ],
            "chart_data": {
                "pie_chart": [{"category": p.category, "value": p.value} for p in self.chart_data.pie_chart],
                "bar_chart": [{"category": b.category, "amount": b.amount} for b in self.chart_data.bar_chart],
                "progress_bar": {
                    "used": self.chart_data.progress_bar.used,
                    "total": self.chart_data.progress_bar.total,
                    "percentage": self.chart_data.progress_bar.percentage,
                },
            },
            "transactions_processed": self.transactions_processed,
            "valid_transactions": self.valid_transactions,
            "invalid_transactions": self.invalid_transactions,
        }


def round_money(value: float) -> Money:
    """Round a monetary figure to 2 decimals for output."""
    return Money(round(value, 2))


def split_valid(transactions: Sequence[Transaction]) -> tuple[list[Transaction], int]:
    """Separate usable transactions from malformed ones.

    Args:
        transactions: Transactions to check.

    Returns:
        Tuple of (valid_transactions, invalid_count).
    """
    valid = [txn for txn in transactions if is_valid_transaction(txn)]
    return valid, len(transactions) - len(valid)


def sum_by_type(transactions: Sequence[Transaction]) -> tuple[float, float]:
    """Sum income and expense amounts.

    Returns:
        Tuple of (total_income, total_expenses), unrounded.
    """
    income = sum(txn.amount for txn in transactions if txn.is_income)
    expenses = sum(txn.amount for txn in transactions if txn.is_expense)
    return float(income), float(expenses)


def group_expenses_by_category(transactions: Sequence[Transaction]) -> dict[CategoryName, float]:
    """Sum expense amounts per category.

    Categories keep the order in which they first appear.
    """
    totals: dict[CategoryName, float] = {}
    for txn in transactions:
        if txn.is_expense:
            totals[txn.category] = totals.get(txn.category, 0.0) + txn.amount
    return totals


def calculate_percentage_used(spent: float, budget: float) -> float | None:
    """Calculate percentage of budget used.

    Args:
        spent: Total expenses.
        budget: Monthly budget.

    Returns:
        Percentage (0-100+), 0 when nothing is spent, None when there is
        spending against a budget of zero or less.
    """
    if spent <= 0:
        return 0.0
    if budget <= 0:
        return None
    return spent / budget * 100


def classify_budget_status(percentage_used: float | None) -> BudgetStatus:
    """Classify a percentage of budget used.

    Thresholds are exclusive: exactly 80% is still on track and exactly 100%
    is caution. An undefined percentage means spending against no budget.
    """
    if percentage_used is None or percentage_used > OVER_BUDGET_THRESHOLD:
        return BudgetStatus.OVER_BUDGET
    if percentage_used > CAUTION_THRESHOLD:
        return BudgetStatus.CAUTION
    return BudgetStatus.ON_TRACK


def create_category_breakdown(
    totals: dict[CategoryName, float],
    total_expenses: float,
) -> list[CategoryBreakdown]:
    """Create per-category breakdown with percentage shares.

    Args:
        totals: Unrounded expense totals per category.
        total_expenses: Unrounded sum of all expenses.

    Returns:
        List of CategoryBreakdown in the order of the totals mapping.
    """
    breakdown: list[CategoryBreakdown] = []
    for category, amount in totals.items():
        percentage = amount / total_expenses * 100 if total_expenses > 0 else 0.0
        breakdown.append(
            CategoryBreakdown(
                category=category,
                amount=round_money(amount),
                percentage=round(percentage, 2),
            )
        )
    return breakdown


def create_budget_analysis(budget: float, spent: float) -> BudgetAnalysis:
    """Create budget utilization from the budget and total expenses."""
    percentage = calculate_percentage_used(spent, budget)
    rounded_percentage = round(percentage, 2) if percentage is not None else None

    return BudgetAnalysis(
        monthly_budget=round_money(budget),
        spent=round_money(spent),
        remaining=round_money(budget - spent),
        percentage_used=rounded_percentage,
        status=classify_budget_status(rounded_percentage),
    )


def create_chart_data(
    breakdown: list[CategoryBreakdown],
    budget_analysis: BudgetAnalysis,
) -> ChartData:
    """Project the breakdown and budget analysis into chart shapes."""
    return ChartData(
        pie_chart=[PieSlice(category=c.category, value=c.amount) for c in breakdown],
        bar_chart=[Bar(category=c.category, amount=c.amount) for c in breakdown],
        progress_bar=ProgressBar(
            used=budget_analysis.spent,
            total=budget_analysis.monthly_budget,
            percentage=budget_analysis.percentage_used,
        ),
    )


def compute_metrics(
    transactions: Sequence[Transaction],
    budget: float,
    period: Period | None = None,
) -> FinancialMetrics:
    """Derive the full analysis report.

    Malformed transactions are counted as invalid and left out of every
    aggregate.

    Args:
        transactions: Transactions in insertion order.
        budget: Monthly budget.
        period: Period label for the summary. If None, uses the current month.

    Returns:
        FinancialMetrics with all figures rounded to 2 decimals.
    """
    valid, invalid_count = split_valid(transactions)

    income, expenses = sum_by_type(valid)
    totals = group_expenses_by_category(valid)

    breakdown = create_category_breakdown(totals, expenses)
    budget_analysis = create_budget_analysis(budget, expenses)

    summary = Summary(
        total_income=round_money(income),
        total_expenses=round_money(expenses),
        net_balance=round_money(income - expenses),
        period=period or current_period(),
    )

    return FinancialMetrics(
        summary=summary,
        budget_analysis=budget_analysis,
        category_breakdown=breakdown,
        chart_data=create_chart_data(breakdown, budget_analysis),
        transactions_processed=len(transactions),
        valid_transactions=len(valid),
        invalid_transactions=invalid_count,
    )


def _require(data: Any, key: str) -> Any:
    if not isinstance(data, dict) or key not in data:
        raise ValueError(f"Missing field: {key}")
    return data[key]


def _number(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field {key} must be a number")
    return float(value)


def _optional_number(value: Any, key: str) -> float | None:
    if value is None:
        return None
    return _number(value, key)


def metrics_from_dict(data: Any) -> FinancialMetrics:
    """Parse a FinancialMetrics from its nested dictionary shape.

    Args:
        data: Decoded JSON payload, e.g. from a remote summarizer.

    Returns:
        Parsed FinancialMetrics.

    Raises:
        ValueError: If the payload is missing fields or has wrong types.
    """
    summary_data = _require(data, "summary")
    budget_data = _require(data, "budget_analysis")
    chart_data = _require(data, "chart_data")
    progress_data = _require(chart_data, "progress_bar")

    summary = Summary(
        total_income=Money(_number(_require(summary_data, "total_income"), "total_income")),
        total_expenses=Money(_number(_require(summary_data, "total_expenses"), "total_expenses")),
        net_balance=Money(_number(_require(summary_data, "net_balance"), "net_balance")),
        period=Period(str(_require(summary_data, "period"))),
    )

    try:
        status = BudgetStatus(_require(budget_data, "status"))
    except ValueError as e:
        raise ValueError(f"Invalid budget status: {budget_data.get('status')!r}") from e

    budget_analysis = BudgetAnalysis(
        monthly_budget=Money(_number(_require(budget_data, "monthly_budget"), "monthly_budget")),
        spent=Money(_number(_require(budget_data, "spent"), "spent")),
        remaining=Money(_number(_require(budget_data, "remaining"), "remaining")),
        percentage_used=_optional_number(budget_data.get("percentage_used"), "percentage_used"),
        status=status,
    )

    raw_breakdown = _require(data, "category_breakdown")
    if not isinstance(raw_breakdown, list):
        raise ValueError("Field category_breakdown must be a list")

    breakdown = [
        CategoryBreakdown(
            category=CategoryName(str(_require(item, "category"))),
            amount=Money(_number(_require(item, "amount"), "amount")),
            percentage=_number(_require(item, "percentage"), "percentage"),
        )
        for item in raw_breakdown
    ]

    pie = _require(chart_data, "pie_chart")
    bars = _require(chart_data, "bar_chart")
    if not isinstance(pie, list) or not isinstance(bars, list):
        raise ValueError("Chart series must be lists")

    charts = ChartData(
        pie_chart=[
            PieSlice(
                category=CategoryName(str(_require(item, "category"))),
                value=Money(_number(_require(item, "value"), "value")),
            )
            for item in pie
        ],
        bar_chart=[
            Bar(
                category=CategoryName(str(_require(item, "category"))),
                amount=Money(_number(_require(item, "amount"), "amount")),
            )
            for item in bars
        ],
        progress_bar=ProgressBar(
            used=Money(_number(_require(progress_data, "used"), "used")),
            total=Money(_number(_require(progress_data, "total"), "total")),
            percentage=_optional_number(progress_data.get("percentage"), "percentage"),
        ),
    )

    return FinancialMetrics(
        summary=summary,
        budget_analysis=budget_analysis,
        category_breakdown=breakdown,
        chart_data=charts,
        transactions_processed=int(_number(_require(data, "transactions_processed"), "transactions_processed")),
        valid_transactions=int(_number(_require(data, "valid_transactions"), "valid_transactions")),
        invalid_transactions=int(_number(_require(data, "invalid_transactions"), "invalid_transactions")),
    )
