"""A single PiShock shocker reached through a share code."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Tuple

from pishock_client.api.client import PiShockAPIClient
from pishock_client.api.payloads import (
    MIN_DURATION_SECONDS,
    OPERATE_PATH,
    SHOCKER_INFO_PATH,
    Credentials,
    OpCode,
    operate_payload,
    shocker_info_payload,
)
from pishock_client.core.errors import (
    CooldownError,
    InvalidDurationError,
    InvalidIntensityError,
    PiShockConnectionError,
    ShareCodeNotFoundError,
    ShockerOfflineError,
    ShockerPausedError,
    UnknownPiShockError,
    resolve_response_text,
)
from pishock_client.core.logging_utils import get_module_logger
from pishock_client.core.retry_policy import RetryPolicy
from pishock_client.interpolation import ShockPoint, shock_curve

logger = get_module_logger("Shocker")

DEFAULT_MAX_INTENSITY = 100
DEFAULT_MAX_DURATION = 15
MINI_SHOCK_DURATION = 0.3
WARNING_INTENSITY = 20
WARNING_DURATION = 1.0
COMMAND_GAP = 0.2  # The firmware drops commands sent back to back


@dataclass(frozen=True)
class ShockerMetadata:
    """Shocker details as returned by ``GetShockerInfo``."""
    client_id: int
    shocker_id: int
    name: str
    paused: bool
    max_intensity: int
    max_duration: int
    online: bool

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "ShockerMetadata":
        try:
            return cls(
                client_id=int(data["clientId"]),
                shocker_id=int(data["id"]),
                name=str(data["name"]),
                paused=bool(data["paused"]),
                max_intensity=int(data["maxIntensity"]),
                max_duration=int(data["maxDuration"]),
                online=bool(data["online"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise UnknownPiShockError(f"Malformed shocker info: {exc!r}") from exc


class PiShocker:
    """
    One shocker, addressed by its share code.

    Obtain instances from ``PiShockAccount.get_shocker`` rather than building
    them directly. Limits from the fetched metadata are enforced client-side
    before any command is sent; without metadata only the API's absolute
    limits are checked.
    """

    def __init__(
        self,
        share_code: str,
        credentials: Credentials,
        client: PiShockAPIClient,
        cooldown: Optional[float] = None,
        metadata_retry: Optional[RetryPolicy] = None,
    ):
        self._share_code = share_code
        self._credentials = credentials
        self._client = client
        self._cooldown = cooldown if cooldown else None
        self._metadata_retry = metadata_retry or RetryPolicy(
            max_attempts=3, retry_on=(PiShockConnectionError,)
        )
        self.metadata: Optional[ShockerMetadata] = None
        self._last_command: Optional[float] = None

    def __repr__(self) -> str:
        return f"PiShocker(share_code={self._share_code!r}, name={self.name!r})"

    # ------------------------------------------------------------------
    # Metadata

    async def refresh_metadata(self) -> ShockerMetadata:
        """Fetch and store the shocker's metadata.

        Called by ``PiShockAccount.get_shocker``; call it again to pick up
        changes such as the shocker going offline or being paused.

        Raises:
            ShareCodeNotFoundError: The API answered with a non-200 status.
            UnknownPiShockError: The body could not be decoded.
            PiShockConnectionError: The API was unreachable on every attempt.
        """
        payload = shocker_info_payload(self._credentials, self._share_code)
        logger.debug("Requesting shocker metadata for %s", self._share_code)

        try:
            result = await self._metadata_retry.execute(
                lambda: self._client.post_json(SHOCKER_INFO_PATH, payload),
                on_retry=lambda attempt, error: logger.warning(
                    "Metadata request failed (%s), attempt %d", error, attempt
                ),
            )
            status, data = result.unwrap()
        except ValueError as exc:
            raise UnknownPiShockError(str(exc)) from exc

        if result.attempts > 1:
            logger.info("Shocker info for %s answered after %d attempts", self._share_code, result.attempts)

        if status != 200:
            raise ShareCodeNotFoundError()
        if not isinstance(data, Mapping):
            raise UnknownPiShockError(f"Unexpected shocker info: {data!r}")

        self.metadata = ShockerMetadata.from_api(data)
        logger.debug("Shocker metadata: %s", self.metadata)
        return self.metadata

    @property
    def share_code(self) -> str:
        return self._share_code

    @property
    def cooldown(self) -> Optional[float]:
        return self._cooldown

    @property
    def name(self) -> Optional[str]:
        return self.metadata.name if self.metadata else None

    @property
    def client_id(self) -> Optional[int]:
        return self.metadata.client_id if self.metadata else None

    @property
    def shocker_id(self) -> Optional[int]:
        return self.metadata.shocker_id if self.metadata else None

    @property
    def max_intensity(self) -> Optional[int]:
        return self.metadata.max_intensity if self.metadata else None

    @property
    def max_duration(self) -> Optional[int]:
        """Maximum duration in seconds."""
        return self.metadata.max_duration if self.metadata else None

    @property
    def online(self) -> Optional[bool]:
        return self.metadata.online if self.metadata else None

    @property
    def paused(self) -> Optional[bool]:
        return self.metadata.paused if self.metadata else None

    # ------------------------------------------------------------------
    # Validation

    def check_limits(self, intensity: int, duration: float) -> None:
        """Raise if ``intensity``/``duration`` exceed the shocker's configured maxima."""
        if self.max_duration is not None and duration > self.max_duration:
            raise InvalidDurationError(self.max_duration)
        if self.max_intensity is not None and intensity > self.max_intensity:
            raise InvalidIntensityError(self.max_intensity)

    def _validate(self, op_code: OpCode, intensity: int, duration: float) -> None:
        if self.online is False:
            raise ShockerOfflineError()
        if self.paused:
            raise ShockerPausedError()

        self.check_limits(intensity, duration)

        if op_code is not OpCode.BEEP and intensity < 1:
            raise InvalidIntensityError(self.max_intensity or DEFAULT_MAX_INTENSITY)
        if duration < MIN_DURATION_SECONDS:
            raise InvalidDurationError(self.max_duration or DEFAULT_MAX_DURATION)

    def _claim_cooldown(self, follow_up: bool) -> None:
        # No await between check and update, so concurrent callers can't both pass
        now = time.monotonic()
        if self._cooldown and not follow_up and self._last_command is not None:
            elapsed = now - self._last_command
            if elapsed < self._cooldown:
                raise CooldownError(self._cooldown - elapsed)
        self._last_command = now

    # ------------------------------------------------------------------
    # Commands

    async def _operate(
        self,
        op_code: OpCode,
        intensity: int,
        duration: float,
        *,
        follow_up: bool = False,
    ) -> None:
        if op_code is OpCode.BEEP:
            intensity = 0

        self._validate(op_code, intensity, duration)
        self._claim_cooldown(follow_up)

        logger.debug(
            "Sending %s (intensity %d, %.2fs) to %s",
            op_code.name, intensity, duration, self._share_code
        )
        payload = operate_payload(self._credentials, self._share_code, op_code, intensity, duration)
        _, text = await self._client.post_text(OPERATE_PATH, payload)
        resolve_response_text(text)

    async def send_operation(self, op_code: OpCode | int, intensity: int, duration: float) -> None:
        """Validate and send a single operate request.

        Args:
            op_code: Operation to perform
            intensity: 1 up to the shocker's maximum (ignored for beeps)
            duration: Seconds; at least 0.1 and at most the shocker's maximum

        Raises:
            PiShockError: A client-side validation failure or the API's refusal.
        """
        await self._operate(OpCode.parse(op_code), intensity, duration)

    async def beep(self, duration: float) -> None:
        """Beep for ``duration`` seconds."""
        logger.debug("Beeping for %.2fs", duration)
        await self._operate(OpCode.BEEP, 0, duration)

    async def vibrate(self, intensity: int, duration: float) -> None:
        """Vibrate at ``intensity`` (1-100) for ``duration`` seconds."""
        logger.info("Vibrating with intensity %d for %.2fs", intensity, duration)
        await self._operate(OpCode.VIBRATE, intensity, duration)

    async def shock(self, intensity: int, duration: float) -> None:
        """Shock without any warning.

        Prefer ``shock_with_warning`` unless the wearer asked otherwise.
        """
        logger.info("Shocking with intensity %d for %.2fs", intensity, duration)
        await self._operate(OpCode.SHOCK, intensity, duration)

    async def mini_shock(self, intensity: int) -> None:
        """Deliver a 300ms shock."""
        logger.info("Mini shock with intensity %d", intensity)
        await self.shock(intensity, MINI_SHOCK_DURATION)

    async def shock_with_warning(
        self,
        intensity: int,
        duration: float,
        warning_intensity: int = WARNING_INTENSITY,
        warning_duration: float = WARNING_DURATION,
    ) -> None:
        """Vibrate softly, then shock. This is the recommended way to shock.

        The maximum intensity and duration depend on the wearer's settings;
        callers should handle ``InvalidIntensityError`` and
        ``InvalidDurationError``. The shock is validated before the warning
        is sent, so a refused shock never produces a lone vibration.
        """
        self._validate(OpCode.SHOCK, intensity, duration)

        logger.debug("Sending warning vibration")
        await self.vibrate(warning_intensity, warning_duration)
        await asyncio.sleep(COMMAND_GAP)

        logger.info("Shocking with intensity %d for %.2fs", intensity, duration)
        await self._operate(OpCode.SHOCK, intensity, duration, follow_up=True)

    async def _shock_sequence(self, steps: Sequence[Tuple[int, float]], gap: float) -> None:
        """Send consecutive shocks with ``gap`` seconds between them.

        Only the first step is subject to the cooldown.
        """
        for index, (intensity, duration) in enumerate(steps):
            if index:
                await asyncio.sleep(gap)
            logger.debug("Sequence step %d: intensity %d for %.2fs", index, intensity, duration)
            await self._operate(OpCode.SHOCK, intensity, duration, follow_up=index > 0)

    async def shock_curve(self, points: Sequence[ShockPoint]) -> None:
        """Shock along a curve of ``ShockPoint`` targets, see ``interpolation.shock_curve``."""
        await shock_curve(self, points)
