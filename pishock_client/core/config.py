"""Typed client configuration.

Values are resolved from, in increasing precedence: dataclass defaults, a
``key = value`` config file, and ``PISHOCK_*`` environment variables. The CLI
applies its own flags on top of the result.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from .config_loader import ConfigLoader
from .logging_utils import get_module_logger
from .paths import resolve_config_path

logger = get_module_logger("Config")

PUBLIC_API_BASE_URL = "https://do.pishock.com/api"

# Environment variable -> config key
ENV_OVERRIDES: dict[str, str] = {
    "PISHOCK_USERNAME": "username",
    "PISHOCK_APIKEY": "api_key",
    "PISHOCK_SHARECODE": "share_code",
    "PISHOCK_API_URL": "api_base_url",
    "PISHOCK_APP_NAME": "app_name",
}


@dataclass(slots=True)
class ClientConfig:
    app_name: str = "pishock_client"
    username: str = ""
    api_key: str = ""
    share_code: str = ""
    api_base_url: str = PUBLIC_API_BASE_URL
    request_timeout: float = 10.0
    cooldown: float = 0.0
    metadata_retries: int = 3
    log_level: str = "info"

    @classmethod
    def defaults(cls) -> dict[str, Any]:
        return asdict(cls())

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ClientConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            logger.debug("Ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in values.items() if k in known})

    @classmethod
    def load(
        cls,
        config_path: Optional[Path | str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ClientConfig":
        path = resolve_config_path(config_path)
        values = ConfigLoader.load(path, cls.defaults(), strict=True)
        return cls.from_mapping(values).with_env(environ)

    @classmethod
    async def load_async(
        cls,
        config_path: Optional[Path | str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ClientConfig":
        path = resolve_config_path(config_path)
        values = await ConfigLoader.load_async(path, cls.defaults(), strict=True)
        return cls.from_mapping(values).with_env(environ)

    def with_env(self, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """Return a copy with non-empty ``PISHOCK_*`` variables applied."""
        env = os.environ if environ is None else environ
        updates = {key: env[var] for var, key in ENV_OVERRIDES.items() if env.get(var)}
        return replace(self, **updates) if updates else self

    def with_overrides(self, **overrides: Any) -> "ClientConfig":
        """Return a copy with every override that is not None applied."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **updates) if updates else self

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.api_key)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


__all__ = ["ClientConfig", "ENV_OVERRIDES", "PUBLIC_API_BASE_URL"]
