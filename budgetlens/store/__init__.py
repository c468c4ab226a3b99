"""Store layer - persistence, application state, and file interchange.

This module re-exports the public store functions for easy importing.
"""

from budgetlens.store.interchange import (
    ImportFormatError,
    ImportResult,
    export_csv,
    export_json,
    read_import_file,
    write_export,
)
from budgetlens.store.kv import KeyValueStore, get_store_path, store_exists
from budgetlens.store.state import (
    BUDGET_KEY,
    DEFAULT_BUDGET,
    TRANSACTIONS_KEY,
    AppState,
    Persistence,
    kv_persistence,
    memory_persistence,
    open_state,
)

__all__ = [
    # Key-value blob
    "KeyValueStore",
    "get_store_path",
    "store_exists",
    # State
    "AppState",
    "BUDGET_KEY",
    "DEFAULT_BUDGET",
    "Persistence",
    "TRANSACTIONS_KEY",
    "kv_persistence",
    "memory_persistence",
    "open_state",
    # Interchange
    "ImportFormatError",
    "ImportResult",
    "export_csv",
    "export_json",
    "read_import_file",
    "write_export",
]
