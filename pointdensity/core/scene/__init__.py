"""
Scene Core Module

Density grid engine: binning, spreading and rendering.

Modules:
- grid.py - Linear addressing and saturating counter arithmetic
- models.py - Viewport definition
- scene.py - Scene (aggregate / clear / spread / render)
"""

from pointdensity.core.scene.grid import index
from pointdensity.core.scene.models import Viewport
from pointdensity.core.scene.scene import Scene

__all__ = ["Scene", "Viewport", "index"]
