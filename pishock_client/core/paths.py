"""Centralized path constants for the PiShock client."""

from __future__ import annotations

import os
from pathlib import Path

# User-specific state (PISHOCK_STATE_DIR relocates everything)
_USER_STATE_ENV = os.environ.get("PISHOCK_STATE_DIR")
USER_STATE_DIR = Path(_USER_STATE_ENV).expanduser() if _USER_STATE_ENV else (Path.home() / ".pishock")
USER_CONFIG_PATH = USER_STATE_DIR / "config.txt"


def resolve_config_path(explicit: Path | str | None = None) -> Path:
    """Return the config file to read: explicit path > PISHOCK_CONFIG > user default."""
    if explicit:
        return Path(explicit).expanduser()
    env = os.environ.get("PISHOCK_CONFIG")
    if env:
        return Path(env).expanduser()
    return USER_CONFIG_PATH


__all__ = [
    'USER_STATE_DIR',
    'USER_CONFIG_PATH',
    'resolve_config_path',
]
