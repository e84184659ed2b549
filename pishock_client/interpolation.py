"""Shock curves: ramps between intensities sent as a series of short shocks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Sequence

import numpy as np
import plotext as plt

from pishock_client.api.payloads import MIN_DURATION_SECONDS
from pishock_client.core.errors import InvalidDurationError, InvalidIntensityError
from pishock_client.core.logging_utils import get_module_logger

if TYPE_CHECKING:
    from pishock_client.shocker import PiShocker

logger = get_module_logger("Interpolation")

# Distance between interpolated steps. Lower values make the API answer
# with busy errors.
RESOLUTION_MS = 500
STEP_GAP = 0.1
DEFAULT_START_INTENSITY = 1

CHART_WIDTH = 180
CHART_HEIGHT = 60


@dataclass(frozen=True)
class ShockPoint:
    """Reach ``intensity`` over ``duration`` seconds."""
    duration: float
    intensity: int


def linear_interpolation(start: int, end: int, elapsed_ms, duration_ms: int) -> np.ndarray:
    """Intensity at ``elapsed_ms`` into a ramp from ``start`` to ``end``.

    ``elapsed_ms`` may be a scalar or an array. The ramp is truncated toward
    zero and the absolute value is returned, so results are never negative.
    """
    elapsed = np.asarray(elapsed_ms, dtype=float)
    result = start + np.trunc((end - start) * elapsed / duration_ms)
    return np.abs(result).astype(int)


def interpolate_curve(points: Sequence[ShockPoint]) -> List[ShockPoint]:
    """Expand ``points`` into fixed ``RESOLUTION_MS`` steps.

    Each point ramps from the previous point's intensity (or
    ``DEFAULT_START_INTENSITY`` for the first) to its own intensity.
    """
    step = RESOLUTION_MS / 1000
    curve: List[ShockPoint] = []
    start = DEFAULT_START_INTENSITY

    for point in points:
        duration_ms = int(round(point.duration * 1000))
        if duration_ms <= 0:
            continue
        elapsed = np.arange(0, duration_ms, RESOLUTION_MS)
        values = linear_interpolation(start, point.intensity, elapsed, duration_ms)
        curve.extend(ShockPoint(step, int(value)) for value in values)
        start = point.intensity

    return curve


def render_curve(curve: Sequence[ShockPoint], width: int = CHART_WIDTH, height: int = CHART_HEIGHT) -> str:
    """Render the step intensities as a text chart."""
    if not curve:
        return ""

    plt.clear_figure()
    plt.theme("clear")
    plt.plotsize(width, height)
    plt.plot(list(range(len(curve))), [point.intensity for point in curve])
    plt.xlabel(f"step ({RESOLUTION_MS}ms)")
    plt.ylabel("intensity")
    return plt.build()


async def shock_curve(shocker: "PiShocker", points: Sequence[ShockPoint]) -> None:
    """Validate ``points`` against the shocker's limits, then send the interpolated curve.

    Nothing is sent if any point is out of range.
    """
    for point in points:
        if point.intensity < 1:
            raise InvalidIntensityError(shocker.max_intensity or 100)
        if point.duration < MIN_DURATION_SECONDS:
            raise InvalidDurationError(shocker.max_duration or 15)
        shocker.check_limits(point.intensity, point.duration)

    logger.debug("Total length of raw curve: %.2fs", sum(point.duration for point in points))

    curve = interpolate_curve(points)
    if not curve:
        logger.warning("Shock curve is empty, nothing to send")
        return

    logger.info("Shock step graph - 1 step = %dms\n%s", RESOLUTION_MS, render_curve(curve))
    logger.debug(
        "Total length of interpolated curve: %.2fs (%d steps)",
        sum(point.duration for point in curve), len(curve)
    )

    await shocker._shock_sequence([(point.intensity, point.duration) for point in curve], STEP_GAP)
    logger.debug("Finished sending shock curve")
