"""Configuration file management for juntos."""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

DEFAULT_CURRENCY = "$"
DEFAULT_PERIOD = "this-month"
DEFAULT_LOG_LEVEL = "WARNING"


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
    return get_xdg_config_home() / "juntos" / "config.toml"


def default_config() -> dict[str, Any]:
    return {
        "currency": DEFAULT_CURRENCY,
        "default_period": DEFAULT_PERIOD,
        "log_level": DEFAULT_LOG_LEVEL,
        "labels": {},
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(default_config(), f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


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


def get_setting(key: str, config_path: Path | None = None) -> Any:
    """Get a single setting, falling back to the built-in default.

    A missing config file is treated as an empty one.

    Args:
        key: Setting name.
        config_path: Path to config file. If None, uses default location.

    Returns:
        Setting value or None if unset and without a default.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {}
    return config.get(key, default_config().get(key))


def update_config(updates: dict[str, Any], config_path: Path | None = None) -> dict[str, Any]:
    """Merge updates into the config file, creating it if needed.

    Nested ``labels`` tables are merged key by key.

    Args:
        updates: Settings to change.
        config_path: Path to config file. If None, uses default location.

    Returns:
        The saved configuration.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = default_config()

    for key, value in updates.items():
        if key == "labels" and isinstance(value, dict):
            labels = dict(config.get("labels", {}))
            labels.update(value)
            config["labels"] = labels
        else:
            config[key] = value

    save_config(config, config_path)
    return config
