"""
Mercator Projection

Projects geographic locations (longitude/latitude in radians) onto the
plane and back. The plane is normalized so that one full turn of longitude
spans one unit of x:

    x = longitude / 2π
    y = ln(tan(π/4 + latitude/2)) / 2π

Latitudes must lie strictly within (-π/2, π/2); the poles are not representable.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from pointdensity.core.geo.models import Cartesian, Geographic
from pointdensity.utils.constants import HALF_PI, QUARTER_PI, TWO_PI
from pointdensity.utils.error_handling import LengthMismatchError

logger = logging.getLogger(__name__)


def _check_lengths(src: Sequence, dst: Optional[list], context: str) -> None:
    if dst is not None and len(src) != len(dst):
        raise LengthMismatchError(len(src), len(dst), context=context)


class MercatorProjection:
    """Stateless forward/inverse Mercator transform."""

    def forward_single(self, src: Geographic) -> Cartesian:
        """Project one geographic location to a point on the map."""
        x = src.longitude / TWO_PI
        y = math.log(math.tan(QUARTER_PI + 0.5 * src.latitude)) / TWO_PI
        return Cartesian(x, y)

    def inverse_single(self, src: Cartesian) -> Geographic:
        """Project one point on the map back to a geographic location."""
        longitude = TWO_PI * src.x
        latitude = 2.0 * math.atan(math.exp(TWO_PI * src.y)) - HALF_PI
        return Geographic(longitude, latitude)

    def forward(
        self,
        src: Sequence[Geographic],
        dst: Optional[List[Cartesian]] = None
    ) -> List[Cartesian]:
        """
        Project a batch of geographic locations.

        Args:
            src: Geographic locations to project
            dst: Optional destination list, overwritten element by element.
                 Must have the same length as ``src``.

        Returns:
            The destination list (a new list when ``dst`` is None)

        Raises:
            LengthMismatchError: If ``dst`` is given and its length differs
                from ``src``. Nothing is written in that case.
        """
        _check_lengths(src, dst, "Mercator.forward")
        if dst is None:
            return [self.forward_single(g) for g in src]
        for i, g in enumerate(src):
            dst[i] = self.forward_single(g)
        return dst

    def inverse(
        self,
        src: Sequence[Cartesian],
        dst: Optional[List[Geographic]] = None
    ) -> List[Geographic]:
        """
        Project a batch of map points back to geographic locations.

        Same destination contract as :meth:`forward`.
        """
        _check_lengths(src, dst, "Mercator.inverse")
        if dst is None:
            return [self.inverse_single(c) for c in src]
        for i, c in enumerate(src):
            dst[i] = self.inverse_single(c)
        return dst

    def forward_arrays(self, longitude, latitude) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized forward projection of equal-length coordinate arrays."""
        lon = np.asarray(longitude, dtype=np.float64)
        lat = np.asarray(latitude, dtype=np.float64)
        if lon.shape != lat.shape:
            raise LengthMismatchError(lon.size, lat.size, context="Mercator.forward_arrays")
        with np.errstate(divide="ignore", invalid="ignore"):
            x = lon / TWO_PI
            y = np.log(np.tan(QUARTER_PI + 0.5 * lat)) / TWO_PI
        return x, y

    def inverse_arrays(self, x, y) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized inverse projection of equal-length coordinate arrays."""
        xs = np.asarray(x, dtype=np.float64)
        ys = np.asarray(y, dtype=np.float64)
        if xs.shape != ys.shape:
            raise LengthMismatchError(xs.size, ys.size, context="Mercator.inverse_arrays")
        longitude = TWO_PI * xs
        latitude = 2.0 * np.arctan(np.exp(TWO_PI * ys)) - HALF_PI
        return longitude, latitude


def mercator() -> MercatorProjection:
    """Create a Mercator projection."""
    return MercatorProjection()
