"""Command line interface for controlling a shocker through the PiShock API."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence

from pishock_client import __version__
from pishock_client.account import PiShockAccount
from pishock_client.core.config import ClientConfig
from pishock_client.core.errors import (
    InvalidDurationError,
    InvalidIntensityError,
    PiShockError,
)
from pishock_client.core.logging_config import LOG_LEVEL_NAMES, configure_logging
from pishock_client.core.logging_utils import get_module_logger
from pishock_client.interpolation import ShockPoint
from pishock_client.shocker import PiShocker

logger = get_module_logger("CLI")

SUPPRESSED_LOGGERS = ("aiohttp", "asyncio")


# ---------------------------------------------------------------------------
# Argument types


def _positive_number(value: str, typ: type, name: str):
    """Generic positive number validator for argparse."""
    try:
        parsed = typ(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Value must be a {name}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("Value must be positive")
    return parsed


def positive_int(value: str) -> int:
    return _positive_number(value, int, "integer")


def positive_float(value: str) -> float:
    return _positive_number(value, float, "number")


def shock_point(value: str) -> ShockPoint:
    """Parse ``DURATION:INTENSITY`` (e.g. ``2.5:40``)."""
    duration, sep, intensity = value.partition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected DURATION:INTENSITY, got '{value}'")
    return ShockPoint(duration=positive_float(duration), intensity=positive_int(intensity))


def _env_default(name: str, default, converter):
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return converter(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Parser


def _add_intensity(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-i", "--intensity",
        type=positive_int,
        default=_env_default("PISHOCK_INTENSITY", 20, int),
        help="Intensity 1-100 (default: $PISHOCK_INTENSITY or 20)",
    )


def _add_duration(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-d", "--duration",
        type=positive_float,
        default=_env_default("PISHOCK_DURATION", 1.0, float),
        help="Duration in seconds, 0.1-15 (default: $PISHOCK_DURATION or 1)",
    )


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=Path, default=None, help="Config file (default: ~/.pishock/config.txt)")
    common.add_argument("--username", default=None, help="PiShock username (or $PISHOCK_USERNAME)")
    common.add_argument("--api-key", default=None, help="PiShock API key (or $PISHOCK_APIKEY)")
    common.add_argument("--share-code", default=None, help="Shocker share code (or $PISHOCK_SHARECODE)")
    common.add_argument("--app-name", default=None, help="Name shown in the PiShock logs")
    common.add_argument("--api-url", default=None, help="Override the PiShock API base URL")
    common.add_argument(
        "--log-level",
        choices=LOG_LEVEL_NAMES,
        default=None,
        help="Logging verbosity (default: from config, else info)",
    )
    common.add_argument("--log-file", type=Path, default=None, help="Optional rotating log file")

    parser = argparse.ArgumentParser(prog="pishock", description="Control a shocker through the PiShock API")
    sub = parser.add_subparsers(dest="command", required=True)

    p_version = sub.add_parser("version", help="Print the package version")
    p_version.set_defaults(handler=None)

    p_info = sub.add_parser("info", parents=[common], help="Show shocker details")
    p_info.set_defaults(handler=cmd_info)

    p_beep = sub.add_parser("beep", parents=[common], help="Beep")
    _add_duration(p_beep)
    p_beep.set_defaults(handler=cmd_beep)

    p_vibrate = sub.add_parser("vibrate", parents=[common], help="Vibrate")
    _add_intensity(p_vibrate)
    _add_duration(p_vibrate)
    p_vibrate.set_defaults(handler=cmd_vibrate)

    p_shock = sub.add_parser("shock", parents=[common], help="Shock (with a warning vibration by default)")
    _add_intensity(p_shock)
    _add_duration(p_shock)
    p_shock.add_argument("--no-warning", action="store_true", help="Skip the warning vibration")
    p_shock.add_argument(
        "--countdown",
        type=int,
        default=3,
        help="Seconds to count down before shocking, 0 to disable (default: 3)",
    )
    p_shock.set_defaults(handler=cmd_shock)

    p_mini = sub.add_parser("mini-shock", parents=[common], help="300ms shock")
    _add_intensity(p_mini)
    p_mini.set_defaults(handler=cmd_mini_shock)

    p_curve = sub.add_parser("curve", parents=[common], help="Shock along an interpolated intensity curve")
    p_curve.add_argument(
        "points",
        nargs="+",
        type=shock_point,
        metavar="DURATION:INTENSITY",
        help="Ramp to INTENSITY over DURATION seconds, e.g. 3:10 5:40 2:20",
    )
    p_curve.set_defaults(handler=cmd_curve)

    return parser


# ---------------------------------------------------------------------------
# Commands


async def cmd_info(shocker: PiShocker, args: argparse.Namespace) -> None:
    print("PiShocker details:")
    print(f"  Name: {shocker.name}")
    print(f"  Shocker ID: {shocker.shocker_id}")
    print(f"  Client ID: {shocker.client_id}")
    print(f"  Max intensity: {shocker.max_intensity}")
    print(f"  Max duration: {shocker.max_duration}s")
    print(f"  Online: {shocker.online}")
    print(f"  Paused: {shocker.paused}")


async def cmd_beep(shocker: PiShocker, args: argparse.Namespace) -> None:
    await shocker.beep(args.duration)
    print("Beep sent")


async def cmd_vibrate(shocker: PiShocker, args: argparse.Namespace) -> None:
    await shocker.vibrate(args.intensity, args.duration)
    print("Vibration sent")


async def _countdown(seconds: int) -> None:
    print(f"Waiting {seconds} seconds before shocking!")
    print("Press Ctrl+C to cancel... ")
    for remaining in range(seconds, 0, -1):
        print(f"{remaining}... ", end="", flush=True)
        await asyncio.sleep(1)
    print("SHOCK!", flush=True)


async def cmd_shock(shocker: PiShocker, args: argparse.Namespace) -> None:
    # Refuse out of range values before counting down
    shocker.check_limits(args.intensity, args.duration)
    if args.countdown > 0:
        await _countdown(args.countdown)

    if args.no_warning:
        await shocker.shock(args.intensity, args.duration)
    else:
        await shocker.shock_with_warning(args.intensity, args.duration)
    print("Shock successfully sent!")


async def cmd_mini_shock(shocker: PiShocker, args: argparse.Namespace) -> None:
    await shocker.mini_shock(args.intensity)
    print("Mini shock sent")


async def cmd_curve(shocker: PiShocker, args: argparse.Namespace) -> None:
    await shocker.shock_curve(args.points)
    print("Shock curve sent")


Handler = Callable[[PiShocker, argparse.Namespace], Awaitable[None]]


async def _run_command(config: ClientConfig, handler: Handler, args: argparse.Namespace) -> None:
    async with PiShockAccount.from_config(config) as account:
        shocker = await account.get_shocker(config.share_code)
        await handler(shocker, args)


def resolve_config(args: argparse.Namespace) -> ClientConfig:
    """Config file and environment, then command line flags."""
    config = ClientConfig.load(args.config)
    return config.with_overrides(
        username=args.username,
        api_key=args.api_key,
        share_code=args.share_code,
        app_name=args.app_name,
        api_base_url=args.api_url,
        log_level=args.log_level,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point for the ``pishock`` command.

    Args:
        argv: Arguments excluding the executable; if None, uses sys.argv[1:].

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.handler is None:
        print(__version__)
        return 0

    config = resolve_config(args)
    configure_logging(
        config.log_level,
        log_file=args.log_file,
        suppressed_loggers=SUPPRESSED_LOGGERS,
    )

    if not (config.has_credentials and config.share_code):
        logger.error("A username, API key and share code are required "
                     "(PISHOCK_USERNAME, PISHOCK_APIKEY and PISHOCK_SHARECODE)")
        return 1

    try:
        asyncio.run(_run_command(config, args.handler, args))
    except InvalidIntensityError as exc:
        logger.error("Invalid intensity specified, max intensity: %d", exc.max_intensity)
        return 1
    except InvalidDurationError as exc:
        logger.error("Invalid duration specified, max duration: %ds", exc.max_duration)
        return 1
    except PiShockError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    except KeyboardInterrupt:
        print("\nCancelled", file=sys.stderr)
        return 130

    return 0


__all__ = ["build_parser", "main", "resolve_config", "shock_point"]
