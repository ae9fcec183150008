"""
Core Package

This package contains the core algorithmic logic for point-density.

Structure:
- geo/ - Coordinate value types and Mercator projection
- scene/ - Density grid (aggregate, spread, render)
- color/ - Count-to-color mappings

Usage:
Core modules are imported by the artifacts and CLI layers. Do not import CLI modules from core.
"""
