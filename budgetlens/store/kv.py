"""File-backed key-value blob.

All entries live in one JSON object on disk, values are strings. Writes go
through a temporary file and a rename so a crash never leaves a half-written
blob behind.
"""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_store_path() -> Path:
    """Get the default store path (XDG compliant)."""
    return get_xdg_data_home() / "budgetlens" / "store.json"


def store_exists(store_path: Path | None = None) -> bool:
    """Check if the store file exists.

    Args:
        store_path: Path to check. If None, uses default location.
    """
    if store_path is None:
        store_path = get_store_path()
    return store_path.exists()


class KeyValueStore:
    """String key-value entries persisted as a single JSON object."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path if path is not None else get_store_path()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable store at %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store at %s: expected an object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        """Get the value for a key, or None if absent."""
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        """Set a key, preserving the other entries.

        Raises:
            OSError: If the store cannot be written.
        """
        data = self._read_all()
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self.path)
