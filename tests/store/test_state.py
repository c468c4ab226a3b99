"""Tests for budgetlens.store.state."""

import json

import pytest

from budgetlens.domain.transactions import create_transaction
from budgetlens.store.state import (
    BUDGET_KEY,
    DEFAULT_BUDGET,
    TRANSACTIONS_KEY,
    AppState,
    decode_budget,
    decode_transactions,
    encode_budget,
    encode_transactions,
    memory_persistence,
    open_state,
)


def txn(txn_id: str, amount: float = 10, type_: str = "expense", category: str = "Travel"):
    return create_transaction(type_, category, amount, "2025-01-15", txn_id=txn_id)


class TestDecodeTransactions:
    """Tests for decode_transactions fallbacks."""

    def test_missing_entry(self) -> None:
        assert decode_transactions(None) == []

    def test_invalid_json_resets(self) -> None:
        assert decode_transactions("[{not json") == []

    def test_non_array_resets(self) -> None:
        assert decode_transactions('{"id": "1"}') == []

    def test_drops_bad_records(self) -> None:
        """Should keep good records and drop malformed ones."""
        raw = json.dumps(
            [
                {"id": "1", "type": "expense", "category": "Travel", "amount": 5, "date": "2025-01-15"},
                {"id": "2", "type": "expense", "category": "Travel", "amount": "NaN", "date": "2025-01-15"},
                "junk",
            ]
        )

        transactions = decode_transactions(raw)

        assert [t.id for t in transactions] == ["1"]

    def test_drops_amount_too_large_for_float(self) -> None:
        """Should drop an integer amount that overflows a float."""
        huge = "9" * 400
        raw = (
            '[{"id": "big", "type": "expense", "category": "Travel", "amount": ' + huge + ', "date": "2025-01-15"},'
            ' {"id": "ok", "type": "expense", "category": "Travel", "amount": 5, "date": "2025-01-15"}]'
        )

        transactions = decode_transactions(raw)

        assert [t.id for t in transactions] == ["ok"]

    def test_round_trip(self) -> None:
        """Should restore what encode_transactions wrote."""
        original = [txn("a"), create_transaction("income", "Income", 99.5, "2025-01-01", "Pay", txn_id="b")]

        assert decode_transactions(encode_transactions(original)) == original


class TestDecodeBudget:
    """Tests for decode_budget fallbacks."""

    @pytest.mark.parametrize("raw", [None, "abc", "-5", "inf", "nan"])
    def test_falls_back_to_default(self, raw: str | None) -> None:
        assert decode_budget(raw) == DEFAULT_BUDGET

    def test_custom_default(self) -> None:
        assert decode_budget(None, 1500) == 1500

    def test_parses_decimal_string(self) -> None:
        assert decode_budget(encode_budget(1234.56)) == 1234.56
        assert decode_budget("2000") == 2000


class TestAppState:
    """Tests for AppState mutations."""

    def test_load_defaults_from_empty_store(self) -> None:
        persistence, _ = memory_persistence()

        state = AppState.load(persistence)

        assert state.transactions == []
        assert state.budget == DEFAULT_BUDGET

    def test_load_resets_corrupt_entries(self) -> None:
        """Should fall back to defaults when both entries are corrupt."""
        persistence, _ = memory_persistence({TRANSACTIONS_KEY: "oops", BUDGET_KEY: "lots"})

        state = AppState.load(persistence)

        assert state.transactions == []
        assert state.budget == DEFAULT_BUDGET

    def test_add_persists(self) -> None:
        persistence, data = memory_persistence()
        state = AppState.load(persistence)

        state.add(txn("a"))

        assert [t.id for t in decode_transactions(data[TRANSACTIONS_KEY])] == ["a"]

    def test_add_regenerates_duplicate_id(self) -> None:
        """Should keep ids unique."""
        persistence, _ = memory_persistence()
        state = AppState.load(persistence)
        state.add(txn("a"))

        stored = state.add(txn("a", amount=20))

        assert stored.id != "a"
        assert len({t.id for t in state.transactions}) == 2

    def test_replace_by_id(self) -> None:
        """Should swap the whole record in place."""
        persistence, data = memory_persistence()
        state = AppState.load(persistence)
        state.add(txn("a"))
        state.add(txn("b"))

        state.replace(txn("a", amount=99, category="Shopping"))

        assert [(t.id, t.amount, t.category) for t in state.transactions] == [
            ("a", 99, "Shopping"),
            ("b", 10, "Travel"),
        ]
        assert decode_transactions(data[TRANSACTIONS_KEY])[0].amount == 99

    def test_replace_unknown_id_raises(self) -> None:
        persistence, _ = memory_persistence()
        state = AppState.load(persistence)

        with pytest.raises(KeyError):
            state.replace(txn("missing"))

    def test_delete(self) -> None:
        persistence, data = memory_persistence()
        state = AppState.load(persistence)
        state.add(txn("a"))
        state.add(txn("b"))

        removed = state.delete("a")

        assert removed.id == "a"
        assert [t.id for t in state.transactions] == ["b"]
        assert [t.id for t in decode_transactions(data[TRANSACTIONS_KEY])] == ["b"]

    def test_delete_unknown_id_raises(self) -> None:
        persistence, _ = memory_persistence()
        state = AppState.load(persistence)

        with pytest.raises(KeyError):
            state.delete("missing")

    def test_extend_regenerates_colliding_ids(self) -> None:
        """Should append imports and give colliding ids new values."""
        persistence, _ = memory_persistence()
        state = AppState.load(persistence)
        state.add(txn("a"))

        added = state.extend([txn("a", amount=5), txn("b"), txn("b", amount=7)])

        assert len(added) == 3
        assert added[1].id == "b"
        assert len({t.id for t in state.transactions}) == 4

    def test_set_budget_persists(self) -> None:
        persistence, data = memory_persistence()
        state = AppState.load(persistence)

        state.set_budget(1500)

        assert state.budget == 1500
        assert decode_budget(data[BUDGET_KEY]) == 1500

    @pytest.mark.parametrize("value", [-1, float("nan"), float("inf")])
    def test_set_budget_rejects_invalid(self, value: float) -> None:
        persistence, data = memory_persistence()
        state = AppState.load(persistence)

        with pytest.raises(ValueError):
            state.set_budget(value)

        assert BUDGET_KEY not in data
        assert state.budget == DEFAULT_BUDGET

    def test_metrics_recomputed_from_current_state(self) -> None:
        """Should reflect every mutation in the next metrics call."""
        persistence, _ = memory_persistence()
        state = AppState.load(persistence)
        state.set_budget(100)
        state.add(txn("a", amount=50))

        assert state.metrics().budget_analysis.percentage_used == 50

        state.delete("a")

        assert state.metrics().summary.total_expenses == 0


class TestOpenState:
    """Tests for open_state against a real file."""

    def test_persists_between_loads(self, tmp_path) -> None:
        store_path = tmp_path / "store.json"
        state = open_state(store_path)
        state.add(txn("a"))
        state.set_budget(750)

        reloaded = open_state(store_path)

        assert [t.id for t in reloaded.transactions] == ["a"]
        assert reloaded.budget == 750

    def test_invalid_utf8_falls_back(self, tmp_path) -> None:
        """Should start from defaults when the store is not valid UTF-8."""
        store_path = tmp_path / "store.json"
        store_path.write_bytes(b'{"budget-tracker-budget": "\xff\xfe"}')

        state = open_state(store_path)

        assert state.transactions == []
        assert state.budget == DEFAULT_BUDGET

    def test_corrupt_file_falls_back(self, tmp_path) -> None:
        store_path = tmp_path / "store.json"
        store_path.write_text("{{{ not json")

        state = open_state(store_path, default_budget=300)

        assert state.transactions == []
        assert state.budget == 300
