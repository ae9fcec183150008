"""
Scene Data Models

Contains the viewport definition validated at construction.
"""

import math
from dataclasses import dataclass

from pointdensity.utils.error_handling import SceneConfigError


@dataclass(frozen=True)
class Viewport:
    """Rectangular region of the Cartesian plane mapped onto the grid."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def __post_init__(self):
        for name in ("min_x", "max_x", "min_y", "max_y"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise SceneConfigError(f"Viewport {name} must be finite (got {value})")
        if not self.min_x < self.max_x:
            raise SceneConfigError(
                f"Viewport requires min_x < max_x (got {self.min_x} >= {self.max_x})"
            )
        if not self.min_y < self.max_y:
            raise SceneConfigError(
                f"Viewport requires min_y < max_y (got {self.min_y} >= {self.max_y})"
            )

    @property
    def span_x(self) -> float:
        return self.max_x - self.min_x

    @property
    def span_y(self) -> float:
        return self.max_y - self.min_y

    def as_tuple(self):
        return (self.min_x, self.max_x, self.min_y, self.max_y)
