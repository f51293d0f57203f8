"""Configuration module for easygit.

This module provides access to user configuration stored in one of these locations:
1. $EASYGIT_CONFIG_DIR/easygitrc if $EASYGIT_CONFIG_DIR is defined
2. $XDG_CONFIG_HOME/easygit/easygitrc if $XDG_CONFIG_HOME is defined
3. $HOME/.easygitrc

The configuration is stored in TOML format. It only controls where easygit
keeps its logs and state files; the custom commands themselves live in the
JSON settings file (see easygit.settings).
"""

import copy
import os
from pathlib import Path
from typing import Any

import tomli

__all__ = [
    "get_config_path",
    "load_config",
    "get_logger_verbosity",
    "get_logger_path",
    "get_settings_path",
    "get_locale_path",
]

SETTINGS_FILENAME = ".easy-git-config.json"
LOCALE_DIRNAME = ".easy-git"
LOCALE_FILENAME = "locale.json"


def _default_config() -> dict[str, Any]:
    # EASYGIT_CONFIG_DIR relocates every state file, which keeps tests away
    # from the real home directory.
    config_dir = os.environ.get("EASYGIT_CONFIG_DIR")
    if config_dir:
        settings = str(Path(config_dir) / SETTINGS_FILENAME)
        locale = str(Path(config_dir) / LOCALE_FILENAME)
    else:
        settings = str(Path.home() / SETTINGS_FILENAME)
        locale = str(Path.home() / LOCALE_DIRNAME / LOCALE_FILENAME)

    return {
        "logger": {
            "verbosity": "INFO",  # Default logging level
            "path": str(Path.home() / ".easygit"),  # Default logger path
        },
        "files": {
            "settings": settings,
            "locale": locale,
        },
    }


def get_config_path() -> Path:
    """Return the path to the user's config file.

    Checks the following locations in order:
    1. $EASYGIT_CONFIG_DIR/easygitrc if $EASYGIT_CONFIG_DIR is defined
    2. $XDG_CONFIG_HOME/easygit/easygitrc if $XDG_CONFIG_HOME is defined
    3. Fallback to $HOME/.easygitrc

    Returns:
        Path to the config file
    """
    if "EASYGIT_CONFIG_DIR" in os.environ:
        path = Path(os.environ["EASYGIT_CONFIG_DIR"]) / "easygitrc"
        if path.exists():
            return path

    if "XDG_CONFIG_HOME" in os.environ:
        path = Path(os.environ["XDG_CONFIG_HOME"]) / "easygit" / "easygitrc"
        if path.exists():
            return path

    return Path.home() / ".easygitrc"


def load_config() -> dict[str, Any]:
    """Load configuration from the config file.

    Returns:
        Dict containing the merged configuration (defaults + user config).
    """
    config = copy.deepcopy(_default_config())
    config_path = get_config_path()

    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                user_config = tomli.load(f)
        except (OSError, tomli.TOMLDecodeError) as e:
            print(f"Error loading config from {config_path}: {e}")
        else:
            _merge_configs(config, user_config)

    return config


def _merge_configs(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Recursively merge override dict into base dict.

    Args:
        base: The base configuration dictionary to merge into.
        override: The override configuration dictionary to merge from.

    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            nested_value: dict[str, Any] = value
            _merge_configs(base[key], nested_value)
        else:
            base[key] = value


def get_logger_verbosity() -> str:
    """Get the configured logger verbosity level.

    Returns:
        String representing the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    """
    config = load_config()
    return config["logger"]["verbosity"]


def get_logger_path() -> str:
    config = load_config()
    return os.path.expanduser(config["logger"]["path"])


def get_settings_path() -> str:
    """Get the path of the JSON document holding custom commands and flags."""
    config = load_config()
    return os.path.expanduser(config["files"]["settings"])


def get_locale_path() -> str:
    config = load_config()
    return os.path.expanduser(config["files"]["locale"])
