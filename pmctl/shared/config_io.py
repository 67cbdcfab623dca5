"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of PmctlConfig to/from TOML.
"""

import os
import platform
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from pmctl.domain.config import PmctlConfig


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/pmctl/config.toml or ~/.config/pmctl/config.toml
    - Windows: %APPDATA%/pmctl/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "pmctl" / "config.toml"
        return Path.home() / ".config" / "pmctl" / "config.toml"
    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config:
        return Path(xdg_config) / "pmctl" / "config.toml"
    return Path.home() / ".config" / "pmctl" / "config.toml"


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def config_to_data(config: PmctlConfig) -> dict[str, Any]:
    """Convert a PmctlConfig to a TOML-ready dictionary."""
    return {
        "daemon": {
            "socket_path": config.daemon.socket_path,
            "connect_timeout": config.daemon.connect_timeout,
            "call_timeout": config.daemon.call_timeout,
        },
        "logs": {
            "poll_interval": config.logs.poll_interval,
        },
        "display": {
            "color": config.display.color,
        },
    }


def load_config(path: Path) -> PmctlConfig:
    """Load configuration from a TOML file on top of the defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed or has invalid values
    """
    return PmctlConfig.from_partial(PmctlConfig.default(), load_config_data(path))


def save_config(config: PmctlConfig, path: Path) -> None:
    """Save configuration to a TOML file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(config_to_data(config), f)
