"""
Density Scene

A scene is a plane onto which points are drawn. It owns a fixed-resolution
grid of hit counters over a rectangular viewport, accumulates batches of
Cartesian points into it, optionally spreads the counts over a square
neighborhood, and renders the counts through a color mapping.

Bounds policy:
    A point is counted when ``min_x <= x < max_x`` and ``min_y < y <= max_y``.
    The y test is half-open on the opposite side from x because image rows
    grow downwards: row 0 holds ``y == max_y``. Everything else, including
    NaN and infinite coordinates, is dropped silently.
"""

import logging
import numbers
import time
from typing import Iterable, Optional, Union

import numpy as np

from pointdensity.core.color.mapping import ColorMapping
from pointdensity.core.geo.models import Cartesian
from pointdensity.core.scene.grid import (
    box_sum,
    grid_view,
    index,
    new_bins,
    saturating_increment,
)
from pointdensity.core.scene.models import Viewport
from pointdensity.utils.constants import (
    CHANNEL_MAX,
    CHANNEL_MIN,
    HIT_COUNT_LIMIT,
    MAX_SPREAD_RADIUS,
    MIN_SPREAD_RADIUS,
    RGBA_CHANNELS,
)
from pointdensity.utils.error_handling import (
    MappingLengthError,
    MappingMissingError,
    MappingResultError,
    SceneConfigError,
)

logger = logging.getLogger(__name__)

MAX_RESOLUTION = 2**32 - 1

PointBatch = Union[Iterable[Cartesian], np.ndarray]


def _validate_resolution(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise SceneConfigError(f"Scene {name} must be an integer (got {value!r})")
    if value <= 0 or value > MAX_RESOLUTION:
        raise SceneConfigError(f"Scene {name} must be in 1..{MAX_RESOLUTION} (got {value})")
    return int(value)


def _points_to_arrays(points: PointBatch):
    """Return (xs, ys) float64 arrays for a batch of points."""
    if isinstance(points, np.ndarray):
        arr = points
    else:
        points = list(points)
        if not points:
            return np.empty(0), np.empty(0)
        if any(isinstance(p, Cartesian) for p in points):
            points = [(p.x, p.y) if isinstance(p, Cartesian) else p for p in points]
        arr = np.asarray(points)

    arr = np.asarray(arr, dtype=np.float64)
    if arr.size == 0:
        return np.empty(0), np.empty(0)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Point batch must have shape (n, 2), got {arr.shape}")
    return arr[:, 0], arr[:, 1]


class Scene:
    """
    Density grid over a fixed viewport.

    Attributes:
        width: Grid width in pixels
        height: Grid height in pixels
        viewport: Region of the plane covered by the grid
    """

    def __init__(
        self,
        width: int,
        height: int,
        min_x: float,
        max_x: float,
        min_y: float,
        max_y: float
    ):
        self.width = _validate_resolution("width", width)
        self.height = _validate_resolution("height", height)
        self.viewport = Viewport(float(min_x), float(max_x), float(min_y), float(max_y))
        self._bins = new_bins(self.width, self.height)
        logger.debug(
            f"Created scene {self.width}x{self.height} over viewport {self.viewport.as_tuple()}"
        )

    @classmethod
    def from_viewport(cls, width: int, height: int, viewport: Viewport) -> "Scene":
        return cls(width, height, *viewport.as_tuple())

    def __repr__(self) -> str:
        return f"Scene(width={self.width}, height={self.height}, viewport={self.viewport.as_tuple()})"

    @property
    def bins(self) -> np.ndarray:
        """The live flat row-major counter vector (length ``width * height``)."""
        return self._bins

    @property
    def counts(self) -> np.ndarray:
        """Read-only ``(height, width)`` view of the counters."""
        view = grid_view(self._bins, self.width, self.height).view()
        view.flags.writeable = False
        return view

    @property
    def occupied_bins(self) -> int:
        return int(np.count_nonzero(self._bins))

    def index(self, x, y):
        """Linear bin index for pixel ``(x, y)``; see :func:`pointdensity.core.scene.grid.index`."""
        return index(x, y, self.width, self.height)

    def aggregate(self, points: PointBatch) -> None:
        """
        Aggregate a batch of points into the scene.

        Points outside the viewport are dropped. Counters saturate at
        ``HIT_COUNT_LIMIT``; a bin already at or above it is left unchanged.
        Calls are purely additive, so batches may arrive in any order.

        Args:
            points: Sequence of ``Cartesian`` points or an ``(n, 2)`` array of (x, y)
        """
        xs, ys = _points_to_arrays(points)
        if xs.size == 0:
            return

        vp = self.viewport
        scale_x = self.width / vp.span_x
        scale_y = self.height / vp.span_y

        with np.errstate(invalid="ignore"):
            inside = (xs >= vp.min_x) & (xs < vp.max_x) & (ys > vp.min_y) & (ys <= vp.max_y)

        cols = np.floor((xs[inside] - vp.min_x) * scale_x).astype(np.int64)
        rows = np.floor((vp.max_y - ys[inside]) * scale_y).astype(np.int64)
        idx, valid = self.index(cols, rows)
        accepted = idx[valid]

        saturating_increment(self._bins, accepted, HIT_COUNT_LIMIT)
        logger.debug(f"Aggregated {accepted.size} of {xs.size} points ({xs.size - accepted.size} dropped)")

    def clear(self) -> None:
        """Reset every bin to zero in place."""
        self._bins.fill(0)

    def spread(self, radius: int) -> None:
        """
        Spread counts over a square neighborhood.

        Each cell becomes the saturating sum of the pre-spread cells within
        Chebyshev distance ``radius``. Cells outside the grid count as zero.
        Radius 0 leaves the grid untouched. Applying spread twice compounds.

        Raises:
            SceneConfigError: If ``radius`` is not an integer in 0..255
        """
        if isinstance(radius, bool) or not isinstance(radius, numbers.Integral):
            raise SceneConfigError(f"Spread radius must be an integer (got {radius!r})")
        if radius < MIN_SPREAD_RADIUS or radius > MAX_SPREAD_RADIUS:
            raise SceneConfigError(
                f"Spread radius must be in {MIN_SPREAD_RADIUS}..{MAX_SPREAD_RADIUS} (got {radius})"
            )
        if radius == 0:
            return

        started = time.perf_counter()
        source = grid_view(self._bins, self.width, self.height)
        spread = box_sum(source, int(radius))
        self._bins = spread.reshape(-1)
        logger.debug(f"Spread radius={radius} in {time.perf_counter() - started:.3f}s")

    def render(self, mapping: Optional[ColorMapping]) -> np.ndarray:
        """
        Render the current counters through a color mapping.

        Args:
            mapping: Object with a ``map(counts) -> colors`` method

        Returns:
            New ``(height, width, 4)`` uint8 RGBA array; ``pixels[y, x]`` is the
            color the mapping produced for ``index(x, y)``.

        Raises:
            MappingMissingError: If ``mapping`` is None
            MappingResultError: If the mapping returns None or non-RGBA entries
            MappingLengthError: If the mapping returns the wrong number of colors
        """
        if mapping is None:
            raise MappingMissingError()

        counts = self._bins.view()
        counts.flags.writeable = False
        colors = mapping.map(counts)

        if colors is None:
            raise MappingResultError("Color mapping must not map to None when rendering an image")

        expected = self.width * self.height
        try:
            actual = len(colors)
        except TypeError as e:
            raise MappingResultError(f"Color mapping returned a non-sequence result: {e}") from e
        if actual != expected:
            raise MappingLengthError(expected, actual, self.width, self.height)

        try:
            palette = np.asarray(colors)
        except ValueError as e:
            raise MappingResultError(f"Color mapping returned malformed colors: {e}") from e
        if palette.shape != (expected, RGBA_CHANNELS):
            raise MappingResultError(
                f"Color mapping must return {RGBA_CHANNELS}-channel colors, got shape {palette.shape}"
            )
        if palette.dtype != np.uint8:
            if not np.issubdtype(palette.dtype, np.integer):
                raise MappingResultError(f"Color mapping returned non-integer colors ({palette.dtype})")
            if palette.min() < CHANNEL_MIN or palette.max() > CHANNEL_MAX:
                raise MappingResultError(
                    f"Color mapping returned channel values outside {CHANNEL_MIN}..{CHANNEL_MAX}"
                )
            palette = palette.astype(np.uint8)

        ys, xs = np.indices((self.height, self.width))
        idx, _ = self.index(xs, ys)
        pixels = palette[idx]
        logger.debug(f"Rendered {self.width}x{self.height} image with {type(mapping).__name__}")
        return pixels
