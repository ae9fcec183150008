"""
point-density

Renders large point clouds into raster images as density fields.

Usage:
    from pointdensity import Scene, default_mapping
    scene = Scene(800, 800, -5.0, 5.0, -5.0, 5.0)
    scene.aggregate(points)
    scene.spread(1)
    pixels = scene.render(default_mapping())
"""

from pointdensity.core.color import default_mapping, simple_mapping
from pointdensity.core.geo import Cartesian, Geographic, mercator
from pointdensity.core.scene import Scene, Viewport

__version__ = "1.0.0"

__all__ = [
    "Cartesian",
    "Geographic",
    "Scene",
    "Viewport",
    "default_mapping",
    "mercator",
    "simple_mapping",
]
