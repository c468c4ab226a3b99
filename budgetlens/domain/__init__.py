"""Domain models and pure functions for budgetlens.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from budgetlens.domain.models import Category, CategoryName, Money, Period, TransactionType

__all__ = ["Category", "CategoryName", "Money", "Period", "TransactionType"]
