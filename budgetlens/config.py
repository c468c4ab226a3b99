"""Configuration file management for budgetlens."""

import copy
import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "budget": {
        "default": 2000.0,
    },
    "analysis": {
        "endpoint": "",
        "timeout": 10.0,
        "token_env": "BUDGETLENS_TOKEN",
    },
}


@dataclass(frozen=True)
class AnalysisSettings:
    """Remote summarizer settings."""

    endpoint: str
    timeout: float
    token: str | None


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "budgetlens" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    save_config(DEFAULT_CONFIG, config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def load_config_or_default(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration, using defaults when the file is missing or malformed."""
    try:
        return load_config(config_path)
    except FileNotFoundError:
        return copy.deepcopy(DEFAULT_CONFIG)
    except tomllib.TOMLDecodeError as e:
        logger.warning("Ignoring malformed config file: %s", e)
        return copy.deepcopy(DEFAULT_CONFIG)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def get_default_budget(config: dict[str, Any]) -> float:
    """Get the budget used when none has been stored yet."""
    value = config.get("budget", {}).get("default", DEFAULT_CONFIG["budget"]["default"])
    try:
        return float(value)
    except (TypeError, ValueError):
        return float(DEFAULT_CONFIG["budget"]["default"])


def get_analysis_settings(config: dict[str, Any]) -> AnalysisSettings | None:
    """Get summarizer settings.

    The token is read from the environment variable named by token_env, or
    from a literal token key.

    Returns:
        AnalysisSettings, or None if no endpoint is configured.
    """
    section = config.get("analysis", {})
    endpoint = str(section.get("endpoint") or "").strip()
    if not endpoint:
        return None

    token_env = section.get("token_env")
    token = section.get("token") or (os.environ.get(token_env) if token_env else None)

    try:
        timeout = float(section.get("timeout", DEFAULT_CONFIG["analysis"]["timeout"]))
    except (TypeError, ValueError):
        timeout = float(DEFAULT_CONFIG["analysis"]["timeout"])

    return AnalysisSettings(endpoint=endpoint, timeout=timeout, token=token)
