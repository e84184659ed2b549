"""Typed errors for the PiShock API and response text resolution."""

from __future__ import annotations

from typing import Optional

from .logging_utils import get_module_logger

logger = get_module_logger("Errors")

SUCCESS_TEXT = "Operation Succeeded."
_INTENSITY_RANGE_PREFIX = "Intensity must be between 0 and "


class PiShockError(Exception):
    """Base class for every error raised by the client."""

    message = "PiShock error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)


class ShareCodeNotFoundError(PiShockError):
    message = "Share code doesn't exist"


class InvalidCredentialsError(PiShockError):
    message = "Username or API key invalid"


class ShockerPausedError(PiShockError):
    message = "Shocker is in paused state"


class ShockerOfflineError(PiShockError):
    message = "Shocker is offline"


class ShareCodeInUseError(PiShockError):
    message = "Share code is already in use"


class InvalidOpCodeError(PiShockError):
    def __init__(self, op_code: int) -> None:
        self.op_code = op_code
        super().__init__(f"Invalid OP code specified: {op_code}")


class InvalidIntensityError(PiShockError):
    """Intensity outside 1..max_intensity."""

    def __init__(self, max_intensity: int) -> None:
        self.max_intensity = max_intensity
        super().__init__(f"Invalid intensity specified, max intensity: {max_intensity}")


class InvalidDurationError(PiShockError):
    """Duration outside 0.1s..max_duration (seconds)."""

    def __init__(self, max_duration: int) -> None:
        self.max_duration = max_duration
        super().__init__(f"Invalid duration specified, max duration: {max_duration}")


class CooldownError(PiShockError):
    def __init__(self, remaining: float) -> None:
        self.remaining = remaining
        super().__init__(f"Shocker cooldown active, {remaining:.2f}s remaining")


class PiShockConnectionError(PiShockError):
    def __init__(self, message: str) -> None:
        super().__init__(f"Connection error: {message}")


class UnknownPiShockError(PiShockError):
    def __init__(self, message: str) -> None:
        self.detail = message
        super().__init__(f"Unknown error: {message}")


# The API has served the "doesn't exist" message with a curly apostrophe, a
# straight one, and as UTF-8 mis-decoded as cp1252.
_RESPONSE_ERRORS: dict[str, type[PiShockError]] = {
    "Share code not found": ShareCodeNotFoundError,
    "This code doesn’t exist.": ShareCodeNotFoundError,
    "This code doesn't exist.": ShareCodeNotFoundError,
    "This code doesnâ€™t exist.": ShareCodeNotFoundError,
    "Not Authorized.": InvalidCredentialsError,
    "Shocker is Paused, unable to send command.": ShockerPausedError,
    "Device currently not connected.": ShockerOfflineError,
    "This share code has already been used by somebody else.": ShareCodeInUseError,
}


def resolve_response_text(text: str) -> None:
    """Map an operate response body to ``None`` (success) or raise the matching error.

    The mapping is not exhaustive: conditions that are validated client-side
    before a request is sent are not expected from the API.

    Raises:
        PiShockError: The subclass matching the response text, or
            ``UnknownPiShockError`` for unrecognised bodies.
    """
    body = text.strip()
    logger.debug("Resolving response body: %s", body)

    if body == SUCCESS_TEXT:
        return None

    if _INTENSITY_RANGE_PREFIX in body:
        limit = body.rsplit(" ", 1)[-1].rstrip(".")
        try:
            max_intensity = int(limit)
        except ValueError:
            raise UnknownPiShockError(body) from None
        raise InvalidIntensityError(max_intensity)

    error_cls = _RESPONSE_ERRORS.get(body)
    if error_cls is not None:
        raise error_cls()

    raise UnknownPiShockError(body)


__all__ = [
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
    "SUCCESS_TEXT",
    "resolve_response_text",
]
