"""Domain type definitions for budgetlens.

These types provide semantic clarity and help with type checking:
- Money: Amount in currency units (e.g. dollars), kept as float
- Period: Month in YYYY-MM format
- CategoryName: Name of a spending or income category
- TransactionType: Whether a transaction is income or an expense
- Category: The closed set of categories a transaction can belong to
"""

from enum import Enum
from typing import NewType

# Money amounts are floats; rounding to 2 decimals happens only at output
Money = NewType("Money", float)

# Period is always in YYYY-MM format (e.g., "2025-01")
Period = NewType("Period", str)

CategoryName = NewType("CategoryName", str)


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class Category(str, Enum):
    """Known transaction categories."""

    FOOD = "Food & Dining"
    TRANSPORTATION = "Transportation"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    BILLS = "Bills & Utilities"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    TRAVEL = "Travel"
    INCOME = "Income"
    OTHER = "Other"


# Rich style used when rendering each category
CATEGORY_COLORS: dict[Category, str] = {
    Category.FOOD: "dark_orange",
    Category.TRANSPORTATION: "blue",
    Category.SHOPPING: "purple",
    Category.ENTERTAINMENT: "hot_pink",
    Category.BILLS: "yellow",
    Category.HEALTHCARE: "red",
    Category.EDUCATION: "green",
    Category.TRAVEL: "slate_blue1",
    Category.INCOME: "spring_green2",
    Category.OTHER: "grey62",
}


def normalize_category(raw: str) -> CategoryName:
    """Map free-form category text onto the known category set.

    Matching is case-insensitive and ignores surrounding whitespace. Unknown
    names fall back to "Other".

    Args:
        raw: Category text from user input or an imported file.

    Returns:
        Canonical category name.
    """
    key = " ".join(raw.split()).lower()
    for category in Category:
        if category.value.lower() == key:
            return CategoryName(category.value)
    return CategoryName(Category.OTHER.value)


def category_color(name: str) -> str:
    """Get the display style for a category name."""
    try:
        return CATEGORY_COLORS[Category(name)]
    except ValueError:
        return CATEGORY_COLORS[Category.OTHER]
