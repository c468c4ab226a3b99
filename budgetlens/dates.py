"""Date utilities for budgetlens.

Pure functions for period labels and date parsing.
"""

from datetime import date, datetime

import pandas as pd

from budgetlens.domain.models import Period


def current_period(today: date | None = None) -> Period:
    """Get the year-month label for a day.

    Args:
        today: Day to label. If None, uses today's date.

    Returns:
        Period in YYYY-MM format.
    """
    if today is None:
        today = date.today()
    return Period(today.strftime("%Y-%m"))


def period_label(period: Period) -> str:
    """Format a period for display.

    Args:
        period: Period in YYYY-MM format.

    Returns:
        Human-readable month (e.g., "January 2025").

    Raises:
        ValueError: If period is not in YYYY-MM format.
    """
    return datetime.strptime(period, "%Y-%m").strftime("%B %Y")


def parse_date(raw: str) -> date:
    """Parse a date string into a date.

    ISO dates and timestamps (``2025-01-15``, ``2025-01-15T10:00:00.000Z``) are
    read directly. Anything else goes through pandas.to_datetime, which copes
    with European and American formats; day-first is assumed when ambiguous.

    Args:
        raw: Raw date string.

    Returns:
        Parsed date.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    text = raw.strip()
    if not text:
        raise ValueError("Date is empty")

    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass

    try:
        parsed = pd.to_datetime(text, dayfirst=True)
    except (ValueError, OverflowError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw}': {e}") from e

    if pd.isna(parsed):
        raise ValueError(f"Could not parse date '{raw}'")
    return parsed.date()
