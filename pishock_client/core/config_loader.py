import asyncio
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import aiofiles

from pishock_client.core.logging_utils import get_module_logger

logger = get_module_logger("ConfigLoader")


class ConfigLoader:
    """Loader for ``key = value`` config files.

    Lines starting with ``#`` and trailing ``# comments`` are ignored. When
    ``defaults`` is given, values for known keys are coerced to the type of
    the default; other values are guessed (bool, int, float, then str).
    """

    @staticmethod
    async def load_async(
        config_path: Path,
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False
    ) -> Dict[str, Any]:
        """Async version of load() reading the file through aiofiles."""
        config = defaults.copy() if defaults else {}

        if not await asyncio.to_thread(config_path.exists):
            logger.debug("Config file not found at %s, using defaults", config_path)
            return config

        try:
            lines: list[str] = []
            async with aiofiles.open(config_path, 'r', encoding='utf-8') as f:
                async for line in f:
                    lines.append(line)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read config file %s: %s", config_path, e)
            return config

        config.update(ConfigLoader._parse_lines(lines, defaults, strict))
        logger.info("Loaded config from %s (%d values)", config_path, len(config))
        return config

    @staticmethod
    def load(
        config_path: Path,
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False
    ) -> Dict[str, Any]:
        config = defaults.copy() if defaults else {}

        if not config_path.exists():
            logger.debug("Config file not found at %s, using defaults", config_path)
            return config

        logger.debug("Loading config from: %s", config_path)

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                parsed = ConfigLoader._parse_lines(f, defaults, strict)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read config file %s: %s", config_path, e)
            return config

        config.update(parsed)
        logger.info("Loaded config from %s (%d values)", config_path, len(config))
        return config

    @staticmethod
    def _parse_lines(
        lines: Iterable[str],
        defaults: Optional[Dict[str, Any]],
        strict: bool,
    ) -> Dict[str, Any]:
        config: Dict[str, Any] = {}

        for line_num, line in enumerate(lines, 1):
            line = line.strip()

            if not line or line.startswith('#'):
                continue

            if '=' not in line:
                logger.warning(
                    "Invalid config line %d (missing '='): %s",
                    line_num, line
                )
                continue

            key, value = line.split('=', 1)
            key = key.strip()
            value = value.strip()

            if '#' in value:
                value = value.split('#', 1)[0].strip()

            if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                value = value[1:-1]

            if strict and defaults is not None and key not in defaults:
                logger.warning(
                    "Unknown config key '%s' (line %d) - ignored in strict mode",
                    key, line_num
                )
                continue

            if defaults and key in defaults:
                try:
                    config[key] = ConfigLoader._parse_value_with_type(
                        value, type(defaults[key])
                    )
                except ValueError:
                    logger.warning(
                        "Failed to parse '%s' for '%s' (line %d), keeping default",
                        value, key, line_num
                    )
            else:
                config[key] = ConfigLoader._parse_value(value)

        return config

    @staticmethod
    def _parse_value(value: str) -> Any:
        value_lower = value.lower()
        if value_lower in ('true', 'false', 'yes', 'no', 'on', 'off'):
            return value_lower in ('true', 'yes', 'on')

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    @staticmethod
    def _parse_value_with_type(value: str, target_type: type) -> Any:
        if target_type == bool:
            return value.lower() in ('true', 'yes', 'on', '1')

        if target_type is int:
            return int(value, 0)  # Accepts hex (0x...), octal (0o...) and binary (0b...)

        if target_type is float:
            return float(value)

        return value
