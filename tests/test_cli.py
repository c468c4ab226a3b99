"""End-to-end tests for the budgetlens command line."""

import json

import pytest
from typer.testing import CliRunner

from budgetlens.cli import app
from budgetlens.store.kv import get_store_path
from budgetlens.store.state import open_state

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point config and data at a temporary directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("BUDGETLENS_TOKEN", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def invoke(*args: str):
    return runner.invoke(app, list(args))


class TestInit:
    """Tests for the init command."""

    def test_creates_config_and_store(self, isolated_home) -> None:
        result = invoke("init")

        assert result.exit_code == 0
        assert (isolated_home / "config" / "budgetlens" / "config.toml").exists()
        assert get_store_path().exists()

    def test_refuses_to_overwrite(self) -> None:
        invoke("init")

        result = invoke("init")

        assert result.exit_code == 1
        assert "--force" in result.output


class TestDamagedFiles:
    """Tests for commands running against damaged config or data."""

    def test_malformed_config_and_store(self, isolated_home) -> None:
        """Should run with defaults instead of failing at startup."""
        config_path = isolated_home / "config" / "budgetlens" / "config.toml"
        config_path.parent.mkdir(parents=True)
        config_path.write_text("not = [valid")
        store_path = get_store_path()
        store_path.parent.mkdir(parents=True)
        store_path.write_bytes(b"\xff\xfe garbage")

        result = invoke("budget")

        assert result.exit_code == 0
        assert "$2,000.00" in result.output

    def test_import_oversized_csv_field(self, isolated_home) -> None:
        path = isolated_home / "big.csv"
        path.write_text("Date,Type,Category,Amount,Notes\n2025-01-11,expense,Travel,4," + "x" * 200_000 + "\n")

        result = invoke("import", str(path))

        assert result.exit_code == 1
        assert "Failed to import data" in result.output
        assert open_state().transactions == []


class TestAdd:
    """Tests for the add command."""

    def test_adds_expense(self) -> None:
        result = invoke("add", "expense", "42.5", "--category", "Travel", "--date", "2025-01-15", "--notes", "Train")

        assert result.exit_code == 0
        state = open_state()
        assert len(state.transactions) == 1
        txn = state.transactions[0]
        assert (txn.type.value, txn.category, txn.amount, txn.notes) == ("expense", "Travel", 42.5, "Train")

    def test_zero_amount_rejected(self) -> None:
        """Should refuse amounts that are not greater than zero."""
        result = invoke("add", "expense", "0", "--date", "2025-01-15")

        assert result.exit_code == 1
        assert "Please enter a valid amount" in result.output
        assert open_state().transactions == []

    def test_unknown_type_rejected(self) -> None:
        result = invoke("add", "refund", "10")

        assert result.exit_code == 1
        assert open_state().transactions == []


class TestEditAndDelete:
    """Tests for the edit and delete commands."""

    def test_edit_keeps_unspecified_fields(self) -> None:
        invoke("add", "expense", "10", "--category", "Shopping", "--date", "2025-01-15", "--notes", "Socks")
        txn_id = open_state().transactions[0].id

        result = invoke("edit", txn_id, "--amount", "12")

        assert result.exit_code == 0
        txn = open_state().transactions[0]
        assert (txn.id, txn.amount, txn.category, txn.notes) == (txn_id, 12, "Shopping", "Socks")

    def test_delete(self) -> None:
        invoke("add", "income", "100", "--category", "Income")
        txn_id = open_state().transactions[0].id

        result = invoke("delete", txn_id)

        assert result.exit_code == 0
        assert open_state().transactions == []

    def test_delete_unknown_id(self) -> None:
        result = invoke("delete", "nope")

        assert result.exit_code == 1
        assert "not found" in result.output


class TestBudgetAndReport:
    """Tests for the budget and report commands."""

    def test_set_budget(self) -> None:
        result = invoke("budget", "--set", "1500")

        assert result.exit_code == 0
        assert open_state().budget == 1500

    def test_report_json(self) -> None:
        """Should print metrics for the requested period as JSON."""
        invoke("budget", "--set", "1000")
        invoke("add", "income", "3000", "--category", "Income", "--date", "2025-01-01")
        invoke("add", "expense", "850", "--category", "Food & Dining", "--date", "2025-01-10")

        result = invoke("report", "--json", "--period", "2025-01")

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["summary"]["net_balance"] == 2150
        assert data["summary"]["period"] == "2025-01"
        assert data["budget_analysis"]["percentage_used"] == 85
        assert data["budget_analysis"]["status"] == "Caution"

    def test_report_invalid_period(self) -> None:
        result = invoke("report", "--period", "2025-13")

        assert result.exit_code == 1

    def test_report_without_transactions(self) -> None:
        result = invoke("report")

        assert result.exit_code == 0
        assert "first transaction" in result.output


class TestAnalyze:
    """Tests for the analyze command."""

    def test_local_fallback_without_endpoint(self) -> None:
        """Should compute locally with the fallback confidence."""
        invoke("add", "expense", "25", "--category", "Entertainment", "--date", "2025-01-20")

        result = invoke("analyze", "--json")

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["confidence"] == 0.8
        assert data["metadata"]["transactions_analyzed"] == 1
        assert data["result"]["summary"]["total_expenses"] == 25


class TestImportExport:
    """Tests for the import and export commands."""

    def test_export_then_import_csv(self, isolated_home) -> None:
        invoke("add", "expense", "12.5", "--category", "Food & Dining", "--date", "2025-01-10", "--notes", "Lunch")
        out = isolated_home / "out.csv"

        export = invoke("export", "--format", "csv", "--output", str(out))
        assert export.exit_code == 0
        assert out.read_text().splitlines()[0] == "Date,Type,Category,Amount,Notes"

        result = invoke("import", str(out))

        assert result.exit_code == 0
        assert "Successfully imported 1 transactions!" in result.output
        assert len(open_state().transactions) == 2

    def test_import_bad_file(self, isolated_home) -> None:
        """Should reject the file and leave existing data alone."""
        invoke("add", "expense", "5", "--category", "Travel")
        bad = isolated_home / "bad.json"
        bad.write_text("{oops")

        result = invoke("import", str(bad))

        assert result.exit_code == 1
        assert "Failed to import data" in result.output
        assert len(open_state().transactions) == 1

    def test_export_unknown_format(self) -> None:
        result = invoke("export", "--format", "xml")

        assert result.exit_code == 1
