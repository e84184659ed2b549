"""Async Python client for the PiShock API."""

from __future__ import annotations

from importlib import metadata

from .account import PiShockAccount
from .api.payloads import OpCode
from .core.config import ClientConfig
from .core.errors import (
    CooldownError,
    InvalidCredentialsError,
    InvalidDurationError,
    InvalidIntensityError,
    InvalidOpCodeError,
    PiShockConnectionError,
    PiShockError,
    ShareCodeInUseError,
    ShareCodeNotFoundError,
    ShockerOfflineError,
    ShockerPausedError,
    UnknownPiShockError,
)
from .interpolation import ShockPoint
from .shocker import PiShocker, ShockerMetadata

try:
    __version__ = metadata.version("pishock-client")
except metadata.PackageNotFoundError:  # pragma: no cover - local dev
    __version__ = "0.0.0"


__all__ = [
    "__version__",
    "ClientConfig",
    "OpCode",
    "PiShockAccount",
    "PiShocker",
    "ShockerMetadata",
    "ShockPoint",
    "PiShockError",
    "ShareCodeNotFoundError",
    "InvalidCredentialsError",
    "ShockerPausedError",
    "ShockerOfflineError",
    "ShareCodeInUseError",
    "InvalidOpCodeError",
    "InvalidIntensityError",
    "InvalidDurationError",
    "CooldownError",
    "PiShockConnectionError",
    "UnknownPiShockError",
]
