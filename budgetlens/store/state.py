"""Application state: the transaction collection and the monthly budget.

State is held in an explicit AppState object with an injected persistence
port, so the domain layer can be tested without any storage. Every mutation
saves the affected entry; metrics are always recomputed from the full
current collection.
"""

import json
import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from budgetlens.domain.metrics import FinancialMetrics, compute_metrics
from budgetlens.domain.models import Period
from budgetlens.domain.transactions import (
    Transaction,
    transaction_from_dict,
    transaction_to_dict,
    with_new_id,
)
from budgetlens.store.kv import KeyValueStore

logger = logging.getLogger(__name__)

TRANSACTIONS_KEY = "budget-tracker-transactions"
BUDGET_KEY = "budget-tracker-budget"
DEFAULT_BUDGET = 2000.0


@dataclass(frozen=True)
class Persistence:
    """Load/save port for the two persisted entries."""

    load: Callable[[str], str | None]
    save: Callable[[str, str], None]


def kv_persistence(store: KeyValueStore) -> Persistence:
    """Build a persistence port backed by a KeyValueStore."""
    return Persistence(load=store.get, save=store.set)


def memory_persistence(initial: dict[str, str] | None = None) -> tuple[Persistence, dict[str, str]]:
    """Build an in-memory persistence port.

    Returns:
        Tuple of (persistence, backing_dict).
    """
    data: dict[str, str] = dict(initial or {})
    return Persistence(load=data.get, save=data.__setitem__), data


def encode_transactions(transactions: Iterable[Transaction]) -> str:
    """Serialize transactions as a JSON array with ISO dates."""
    return json.dumps([transaction_to_dict(txn) for txn in transactions])


def decode_transactions(raw: str | None) -> list[Transaction]:
    """Parse the persisted transaction array.

    Any failure falls back to an empty collection. Individual malformed
    records are dropped.

    Args:
        raw: Persisted JSON text, or None if absent.

    Returns:
        List of transactions.
    """
    if raw is None:
        return []

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Resetting transactions: stored data is not valid JSON (%s)", e)
        return []

    if not isinstance(data, list):
        logger.warning("Resetting transactions: stored data is not an array")
        return []

    transactions: list[Transaction] = []
    for index, record in enumerate(data):
        try:
            transactions.append(transaction_from_dict(record))
        except ValueError as e:
            logger.warning("Dropping stored transaction %d: %s", index, e)
    return transactions


def encode_budget(budget: float) -> str:
    """Serialize the budget as a decimal string."""
    return repr(float(budget))


def decode_budget(raw: str | None, default: float = DEFAULT_BUDGET) -> float:
    """Parse the persisted budget, falling back to default when unusable."""
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Resetting budget: %r is not a number", raw)
        return default
    if not math.isfinite(value) or value < 0:
        logger.warning("Resetting budget: %r is out of range", raw)
        return default
    return value


def validate_budget(value: float) -> tuple[bool, str | None]:
    """Validate a budget entered by the user.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not math.isfinite(value):
        return False, "Budget must be a number"
    if value < 0:
        return False, "Budget cannot be negative"
    return True, None


@dataclass
class AppState:
    """In-memory transactions and budget with write-through persistence."""

    persistence: Persistence
    transactions: list[Transaction] = field(default_factory=list)
    budget: float = DEFAULT_BUDGET

    @classmethod
    def load(cls, persistence: Persistence, default_budget: float = DEFAULT_BUDGET) -> "AppState":
        """Load state once at startup, resetting anything malformed to defaults."""
        return cls(
            persistence=persistence,
            transactions=decode_transactions(persistence.load(TRANSACTIONS_KEY)),
            budget=decode_budget(persistence.load(BUDGET_KEY), default_budget),
        )

    def _save_transactions(self) -> None:
        self.persistence.save(TRANSACTIONS_KEY, encode_transactions(self.transactions))

    def save(self) -> None:
        """Persist both entries."""
        self._save_transactions()
        self.persistence.save(BUDGET_KEY, encode_budget(self.budget))

    def find(self, txn_id: str) -> Transaction | None:
        return next((txn for txn in self.transactions if txn.id == txn_id), None)

    def add(self, txn: Transaction) -> Transaction:
        """Append a transaction, regenerating its id if it is already taken."""
        if self.find(txn.id) is not None:
            txn = with_new_id(txn)
        self.transactions.append(txn)
        self._save_transactions()
        return txn

    def replace(self, txn: Transaction) -> None:
        """Replace the transaction with the same id.

        Raises:
            KeyError: If no transaction has that id.
        """
        for index, existing in enumerate(self.transactions):
            if existing.id == txn.id:
                self.transactions[index] = txn
                self._save_transactions()
                return
        raise KeyError(txn.id)

    def delete(self, txn_id: str) -> Transaction:
        """Remove a transaction by id.

        Raises:
            KeyError: If no transaction has that id.
        """
        txn = self.find(txn_id)
        if txn is None:
            raise KeyError(txn_id)
        self.transactions = [t for t in self.transactions if t.id != txn_id]
        self._save_transactions()
        return txn

    def extend(self, imported: Iterable[Transaction]) -> list[Transaction]:
        """Append imported transactions, regenerating ids that collide.

        Returns:
            The transactions as stored.
        """
        taken = {txn.id for txn in self.transactions}
        added: list[Transaction] = []
        for txn in imported:
            if txn.id in taken:
                txn = with_new_id(txn)
            taken.add(txn.id)
            added.append(txn)

        if added:
            self.transactions.extend(added)
            self._save_transactions()
        return added

    def set_budget(self, value: float) -> None:
        """Set the monthly budget.

        Raises:
            ValueError: If the value is negative or not finite.
        """
        is_valid, error = validate_budget(value)
        if not is_valid:
            raise ValueError(error)
        self.budget = float(value)
        self.persistence.save(BUDGET_KEY, encode_budget(self.budget))

    def metrics(self, period: Period | None = None) -> FinancialMetrics:
        """Recompute metrics from the current collection and budget."""
        return compute_metrics(self.transactions, self.budget, period)


def open_state(store_path: Path | None = None, default_budget: float = DEFAULT_BUDGET) -> AppState:
    """Load application state from the key-value store file.

    Args:
        store_path: Path to the store file. If None, uses default location.
        default_budget: Budget used when none is stored.
    """
    return AppState.load(kv_persistence(KeyValueStore(store_path)), default_budget)
