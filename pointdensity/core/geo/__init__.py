"""
Geographic Core Module

Coordinate value types and the Mercator projection.

Modules:
- models.py - Cartesian and Geographic value types
- projection.py - Forward/inverse Mercator transform
"""

from pointdensity.core.geo.models import Cartesian, Geographic
from pointdensity.core.geo.projection import MercatorProjection, mercator

__all__ = ["Cartesian", "Geographic", "MercatorProjection", "mercator"]
