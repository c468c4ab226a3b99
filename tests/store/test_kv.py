"""Tests for budgetlens.store.kv."""

import json

from budgetlens.store.kv import KeyValueStore, get_store_path, store_exists


class TestKeyValueStore:
    """Tests for KeyValueStore."""

    def test_missing_file_reads_empty(self, tmp_path) -> None:
        store = KeyValueStore(tmp_path / "store.json")

        assert store.get("anything") is None

    def test_set_preserves_other_keys(self, tmp_path) -> None:
        """Should keep existing entries when writing a new one."""
        path = tmp_path / "nested" / "store.json"
        store = KeyValueStore(path)

        store.set("a", "1")
        store.set("b", "2")

        assert store.get("a") == "1"
        assert json.loads(path.read_text()) == {"a": "1", "b": "2"}
        assert not path.with_suffix(".json.tmp").exists()

    def test_corrupt_file_reads_empty(self, tmp_path) -> None:
        path = tmp_path / "store.json"
        path.write_text("[1, 2, 3]")

        assert KeyValueStore(path).get("a") is None

    def test_invalid_utf8_reads_empty(self, tmp_path) -> None:
        """Should treat undecodable bytes as an unreadable store."""
        path = tmp_path / "store.json"
        path.write_bytes(b'{"budget-tracker-budget": "\xff\xfe"}')

        assert KeyValueStore(path).get("budget-tracker-budget") is None

    def test_non_string_values_ignored(self, tmp_path) -> None:
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"a": 5, "b": "ok"}))

        store = KeyValueStore(path)

        assert store.get("a") is None
        assert store.get("b") == "ok"


class TestStorePath:
    """Tests for XDG store location."""

    def test_uses_xdg_data_home(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

        assert get_store_path() == tmp_path / "budgetlens" / "store.json"
        assert not store_exists()
