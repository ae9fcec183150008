"""
Color Mapping Core Module

Maps count grids to RGBA colors.

Modules:
- mapping.py - ColorMapping protocol, simple and logarithmic mappings
"""

from pointdensity.core.color.mapping import (
    ColorMapping,
    LogarithmicMapping,
    SimpleMapping,
    default_mapping,
    heat_ramp,
    simple_mapping,
)

__all__ = [
    "ColorMapping",
    "LogarithmicMapping",
    "SimpleMapping",
    "default_mapping",
    "heat_ramp",
    "simple_mapping",
]
