"""
Color Mappings

Map a distribution of hit counts to a series of RGBA colors.

A mapping is any object with a ``map(counts) -> colors`` method that returns
one color per count, in the same order. Two mappings are provided:

- SimpleMapping: every cell with at least one hit gets a fixed opaque color.
- LogarithmicMapping: log-normalized heat ramp
  (dark blue -> cyan -> green -> yellow -> white), rescaled on every call to
  the largest count present.

Cells without hits are always fully transparent ``(0, 0, 0, 0)``.
"""

import logging
import numbers
from typing import Protocol, Tuple

import numpy as np

from pointdensity.utils.constants import (
    CHANNEL_MAX,
    CHANNEL_MIN,
    RAMP_BLUE_TO_CYAN,
    RAMP_CYAN_TO_GREEN,
    RAMP_GREEN_TO_YELLOW,
    RAMP_YELLOW_TO_WHITE,
    RGBA_CHANNELS,
)
from pointdensity.utils.error_handling import SceneConfigError

logger = logging.getLogger(__name__)


class ColorMapping(Protocol):
    """Maps a distribution of counts to one RGBA color per count."""

    def map(self, counts: np.ndarray) -> np.ndarray: ...


def _transparent(n: int) -> np.ndarray:
    return np.zeros((n, RGBA_CHANNELS), dtype=np.uint8)


def _round_half_away(values: np.ndarray) -> np.ndarray:
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


def _to_channel(unit: np.ndarray) -> np.ndarray:
    """Scale [0, 1] intensities to rounded, clamped 0..255 channel values."""
    scaled = _round_half_away(CHANNEL_MAX * unit)
    return np.clip(scaled, CHANNEL_MIN, CHANNEL_MAX).astype(np.uint8)


def heat_ramp(frac) -> np.ndarray:
    """
    Map log-density fractions to RGB on the five-segment heat ramp.

    Args:
        frac: Scalar or array of fractions, nominally in [0, 1]

    Returns:
        ``(n, 3)`` uint8 array of RGB values. Fractions above 1 map to white.
    """
    f = np.atleast_1d(np.asarray(frac, dtype=np.float64))
    segments = [
        f <= RAMP_BLUE_TO_CYAN,
        f <= RAMP_CYAN_TO_GREEN,
        f <= RAMP_GREEN_TO_YELLOW,
        f <= RAMP_YELLOW_TO_WHITE,
    ]
    red = np.select(segments, [0.0, 0.0, 4.0 * (f - RAMP_CYAN_TO_GREEN), 1.0], default=1.0)
    green = np.select(segments, [4.0 * f, 1.0, 1.0, 1.0], default=1.0)
    blue = np.select(
        segments,
        [1.0, 1.0 - 4.0 * (f - RAMP_BLUE_TO_CYAN), 0.0, 4.0 * (f - RAMP_GREEN_TO_YELLOW)],
        default=1.0,
    )
    return np.stack([_to_channel(red), _to_channel(green), _to_channel(blue)], axis=-1)


class SimpleMapping:
    """Maps every cell with hits to a fixed opaque foreground color."""

    def __init__(self, red: int, green: int, blue: int):
        self.foreground: Tuple[int, int, int, int] = (
            _validate_channel("red", red),
            _validate_channel("green", green),
            _validate_channel("blue", blue),
            CHANNEL_MAX,
        )

    def __repr__(self) -> str:
        return f"SimpleMapping(foreground={self.foreground})"

    def map(self, counts: np.ndarray) -> np.ndarray:
        counts = np.asarray(counts)
        colors = _transparent(counts.size)
        colors[counts.reshape(-1) > 0] = self.foreground
        return colors


class LogarithmicMapping:
    """
    Default heat-scale mapping.

    ``frac = ln(count) / ln(max_count)`` is fed through :func:`heat_ramp`.
    An all-zero grid maps to all-transparent. When the largest count is 1
    (``ln(max_count) == 0``) every hit sits at the top of the ramp.
    """

    def __repr__(self) -> str:
        return "LogarithmicMapping()"

    def map(self, counts: np.ndarray) -> np.ndarray:
        counts = np.asarray(counts).reshape(-1)
        colors = _transparent(counts.size)
        if counts.size == 0:
            return colors

        max_count = counts.max()
        if max_count == 0:
            logger.debug("Logarithmic mapping over empty grid; output is fully transparent")
            return colors

        hit = counts > 0
        count_log = np.log(counts[hit].astype(np.float64))
        max_log = float(np.log(np.float64(max_count)))
        if max_log > 0.0:
            frac = count_log / max_log
        else:
            frac = np.ones_like(count_log)

        colors[hit, :3] = heat_ramp(frac)
        colors[hit, 3] = CHANNEL_MAX
        return colors


def _validate_channel(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise SceneConfigError(f"Color channel {name} must be an integer (got {value!r})")
    if value < CHANNEL_MIN or value > CHANNEL_MAX:
        raise SceneConfigError(
            f"Color channel {name} must be in {CHANNEL_MIN}..{CHANNEL_MAX} (got {value})"
        )
    return int(value)


def simple_mapping(red: int, green: int, blue: int) -> SimpleMapping:
    """Create a mapping that paints every cell with hits in one predefined color."""
    return SimpleMapping(red, green, blue)


def default_mapping() -> LogarithmicMapping:
    """Create the default logarithmic heat mapping."""
    return LogarithmicMapping()
