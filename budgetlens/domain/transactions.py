"""Pure functions for transaction records, validation, and interchange rows.

This module contains the functional core for transaction operations:
- No I/O operations (no files, no console)
- No side effects
- Pure data transformations
- Easy to test

Parsing helpers raise ValueError for malformed input; callers decide whether a
bad record is skipped or rejects the whole batch.
"""

import math
import uuid
from dataclasses import dataclass, replace
from datetime import date
from typing import Any

from budgetlens.dates import parse_date
from budgetlens.domain.models import CategoryName, Money, TransactionType, normalize_category

CSV_HEADER = ["Date", "Type", "Category", "Amount", "Notes"]


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction data."""

    id: str
    type: TransactionType
    category: CategoryName
    amount: Money
    date: date
    notes: str | None = None

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


def new_transaction_id() -> str:
    """Generate a fresh transaction id."""
    return uuid.uuid4().hex


def is_valid_amount(amount: Any) -> bool:
    """Check that an amount is a finite number greater than zero."""
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return False
    try:
        return math.isfinite(amount) and amount > 0
    except OverflowError:
        return False


def is_valid_transaction(txn: Transaction) -> bool:
    """Check whether a transaction can take part in aggregation.

    Args:
        txn: Transaction to check.

    Returns:
        True if amount, category, type, and date are all usable.
    """
    if not is_valid_amount(txn.amount):
        return False
    if not isinstance(txn.category, str) or not txn.category.strip():
        return False
    if txn.type not in (TransactionType.INCOME, TransactionType.EXPENSE):
        return False
    return isinstance(txn.date, date)


def validate_transaction_input(
    type_: str,
    category: str,
    amount: float | None,
    date_text: str | None,
) -> tuple[bool, str | None]:
    """Validate user-entered transaction fields.

    Args:
        type_: "income" or "expense".
        category: Category name.
        amount: Amount entered by the user.
        date_text: Date entered by the user.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if type_ not in (TransactionType.INCOME.value, TransactionType.EXPENSE.value):
        return False, "Type must be 'income' or 'expense'"

    if amount is None or not is_valid_amount(amount):
        return False, "Please enter a valid amount"

    if not category or not category.strip():
        return False, "Please select a category"

    if not date_text or not date_text.strip():
        return False, "Please select a date"

    try:
        parse_date(date_text)
    except ValueError:
        return False, f"Invalid date: {date_text}"

    return True, None


def create_transaction(
    type_: str,
    category: str,
    amount: float,
    date_text: str,
    notes: str | None = None,
    txn_id: str | None = None,
) -> Transaction:
    """Build a transaction from already-validated user input.

    Args:
        type_: "income" or "expense".
        category: Category name (normalized onto the known set).
        amount: Amount in currency units.
        date_text: Date string.
        notes: Optional notes; blank notes are dropped.
        txn_id: Id to use. If None, a new id is generated.

    Returns:
        New Transaction.

    Raises:
        ValueError: If any field cannot be parsed.
    """
    return Transaction(
        id=txn_id or new_transaction_id(),
        type=TransactionType(type_),
        category=normalize_category(category),
        amount=Money(float(amount)),
        date=parse_date(date_text),
        notes=clean_notes(notes),
    )


def clean_notes(notes: Any) -> str | None:
    """Strip notes, treating blank or missing notes as absent."""
    if notes is None:
        return None
    text = str(notes).strip()
    return text or None


def with_new_id(txn: Transaction) -> Transaction:
    """Copy a transaction with a freshly generated id."""
    return replace(txn, id=new_transaction_id())


def transaction_to_dict(txn: Transaction) -> dict[str, Any]:
    """Convert a transaction to its JSON-serializable mirror.

    Notes are omitted when absent.
    """
    data: dict[str, Any] = {
        "id": txn.id,
        "type": txn.type.value,
        "category": txn.category,
        "amount": txn.amount,
        "date": txn.date.isoformat(),
    }
    if txn.notes is not None:
        data["notes"] = txn.notes
    return data


def transaction_from_dict(data: Any) -> Transaction:
    """Parse a transaction from its JSON mirror.

    A missing id is replaced by a generated one.

    Args:
        data: Decoded JSON object.

    Returns:
        Parsed Transaction.

    Raises:
        ValueError: If the record is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError("Transaction record must be an object")

    try:
        type_ = TransactionType(data.get("type"))
    except ValueError as e:
        raise ValueError(f"Invalid transaction type: {data.get('type')!r}") from e

    raw_category = data.get("category")
    if not isinstance(raw_category, str) or not raw_category.strip():
        raise ValueError("Transaction category is missing")

    amount = parse_amount(data.get("amount"))

    raw_date = data.get("date")
    if not isinstance(raw_date, str):
        raise ValueError("Transaction date is missing")

    raw_id = data.get("id")
    txn_id = str(raw_id) if raw_id not in (None, "") else new_transaction_id()

    return Transaction(
        id=txn_id,
        type=type_,
        category=normalize_category(raw_category),
        amount=amount,
        date=parse_date(raw_date),
        notes=clean_notes(data.get("notes")),
    )


def parse_amount(raw: Any) -> Money:
    """Parse an amount from a number or decimal string.

    Currency symbols and thousands separators are tolerated in strings.

    Raises:
        ValueError: If the amount is not a finite number greater than zero.
    """
    if isinstance(raw, str):
        cleaned = raw.strip().replace("$", "").replace("£", "").replace(",", "")
        try:
            value: Any = float(cleaned)
        except ValueError as e:
            raise ValueError(f"Invalid amount: {raw!r}") from e
    elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            value = float(raw)
        except OverflowError as e:
            raise ValueError(f"Amount is too large: {raw!r}") from e
    else:
        raise ValueError(f"Invalid amount: {raw!r}")

    if not is_valid_amount(value):
        raise ValueError(f"Amount must be a positive number: {raw!r}")
    return Money(value)


def format_amount(amount: Money) -> str:
    """Format an amount as a plain decimal string (e.g. "1234.50")."""
    return f"{amount:.2f}"


def transaction_to_csv_row(txn: Transaction) -> list[str]:
    """Convert a transaction to a CSV row matching CSV_HEADER."""
    return [
        txn.date.isoformat(),
        txn.type.value,
        txn.category,
        format_amount(txn.amount),
        txn.notes or "",
    ]


def parse_csv_transaction(row: dict[str, str]) -> Transaction | None:
    """Parse a CSV row keyed by CSV_HEADER into a transaction.

    Args:
        row: CSV row as dictionary.

    Returns:
        Transaction if valid, None if the row should be skipped.
    """
    raw_date = (row.get("Date") or "").strip()
    raw_type = (row.get("Type") or "").strip().lower()
    raw_category = (row.get("Category") or "").strip()
    raw_amount = (row.get("Amount") or "").strip()

    if not raw_date or not raw_category or not raw_amount:
        return None

    try:
        return Transaction(
            id=new_transaction_id(),
            type=TransactionType(raw_type),
            category=normalize_category(raw_category),
            amount=parse_amount(raw_amount),
            date=parse_date(raw_date),
            notes=clean_notes(row.get("Notes")),
        )
    except ValueError:
        return None


def format_money_display(amount: float, include_sign: bool = False) -> str:
    """Format money amount for display.

    Args:
        amount: Amount in currency units.
        include_sign: Whether to include + or - sign.

    Returns:
        Formatted string (e.g., "-$123.45" or "$123.45").
    """
    formatted = f"${abs(amount):,.2f}"

    if include_sign:
        if amount < 0:
            return f"-{formatted}"
        else:
            return f"+{formatted}"
    elif amount < 0:
        return f"-{formatted}"
    else:
        return formatted
