"""Loggers for the PiShock client.

Every module logs through ``get_module_logger(component)``, which returns a
logger under the ``pishock_client`` namespace whose messages carry a
``[Component]`` prefix.
"""

from __future__ import annotations

import logging
from typing import Optional

LOGGER_NAMESPACE = "pishock_client"


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    """Return ``value`` with everything but the last ``visible`` characters hidden."""
    if not value:
        return ""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


class StructuredLogger:
    """Prefixes messages with ``[component]`` and formats them only when enabled."""

    __slots__ = ("_logger", "_component")

    def __init__(self, logger: logging.Logger, component: str) -> None:
        self._logger = logger
        self._component = component

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"StructuredLogger({self._logger.name!r}, component={self._component!r})"

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def component(self) -> str:
        return self._component

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _emit(self, level: int, message: object, args: tuple, **kwargs) -> None:
        if not self._logger.isEnabledFor(level):
            return
        text = str(message)
        if args:
            try:
                text = text % args
            except (TypeError, ValueError):
                text = f"{text} | args={' '.join(str(arg) for arg in args)}"
        self._logger.log(level, "[%s] %s", self._component, text, **kwargs)

    def debug(self, message: object, *args, **kwargs) -> None:
        self._emit(logging.DEBUG, message, args, **kwargs)

    def info(self, message: object, *args, **kwargs) -> None:
        self._emit(logging.INFO, message, args, **kwargs)

    def warning(self, message: object, *args, **kwargs) -> None:
        self._emit(logging.WARNING, message, args, **kwargs)

    def error(self, message: object, *args, **kwargs) -> None:
        self._emit(logging.ERROR, message, args, **kwargs)


def get_module_logger(component: str) -> StructuredLogger:
    """Return the logger for ``component`` (e.g. ``"Shocker"``)."""
    return StructuredLogger(logging.getLogger(f"{LOGGER_NAMESPACE}.{component}"), component)


__all__ = [
    "LOGGER_NAMESPACE",
    "StructuredLogger",
    "get_module_logger",
    "mask_secret",
]
