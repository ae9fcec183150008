"""
Artifacts Package

Image compositing and PNG output for rendered scenes.
"""

from pointdensity.artifacts.png import composite_over, save_png

__all__ = ["composite_over", "save_png"]
