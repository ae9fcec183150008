"""
Coordinate Data Models

Immutable value types for points in the plane and on the globe.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Cartesian:
    """A two-dimensional vector in Cartesian coordinates."""
    x: float  # abscissa
    y: float  # ordinate


@dataclass(frozen=True)
class Geographic:
    """
    A geographic location given as longitude and latitude.

    By convention both values are in radians.
    """
    longitude: float
    latitude: float
