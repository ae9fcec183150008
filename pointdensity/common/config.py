"""
Render Configuration Loader

Loads config/render.yml with no hardcoded defaults, validates required
fields, and builds the core objects (scene and color mapping) it describes.

Example:
    >>> config = load_render_config()
    >>> scene = config.create_scene()
    >>> mapping = config.create_mapping()
"""

from __future__ import annotations

import dataclasses
import logging
import numbers
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import yaml

from pointdensity.core.color import default_mapping, simple_mapping
from pointdensity.core.scene import Scene, Viewport
from pointdensity.utils.constants import (
    CHANNEL_MAX,
    CHANNEL_MIN,
    MAX_SPREAD_RADIUS,
    MIN_SPREAD_RADIUS,
)

logger = logging.getLogger(__name__)

CONFIG_DIR = Path("config")
DEFAULT_CONFIG_PATH = CONFIG_DIR / "render.yml"

MAPPING_TYPES = ("default", "simple")


class RenderConfigError(ValueError):
    """Raised when render.yml is missing required fields or invalid."""


def _is_int(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _channels(name: str, value: Any, count: int) -> Tuple[int, ...]:
    if not isinstance(value, (list, tuple)) or len(value) != count:
        raise RenderConfigError(f"{name} must be a list of {count} integers (got {value!r})")
    for channel in value:
        if not _is_int(channel) or not CHANNEL_MIN <= channel <= CHANNEL_MAX:
            raise RenderConfigError(
                f"{name} channels must be integers in {CHANNEL_MIN}..{CHANNEL_MAX} (got {value!r})"
            )
    return tuple(int(c) for c in value)


@dataclass(frozen=True)
class RenderConfig:
    width: int
    height: int
    viewport: Viewport
    spread_radius: int
    mapping_type: str
    mapping_color: Tuple[int, int, int]
    background: Tuple[int, int, int, int]
    output: Path
    chunk_size: int

    def __post_init__(self):
        for name in ("width", "height", "chunk_size"):
            value = getattr(self, name)
            if not _is_int(value) or value <= 0:
                raise RenderConfigError(f"{name} must be a positive integer (got {value!r})")
        if not _is_int(self.spread_radius) or not MIN_SPREAD_RADIUS <= self.spread_radius <= MAX_SPREAD_RADIUS:
            raise RenderConfigError(
                f"spread_radius must be an integer in {MIN_SPREAD_RADIUS}..{MAX_SPREAD_RADIUS} "
                f"(got {self.spread_radius!r})"
            )
        if self.mapping_type not in MAPPING_TYPES:
            raise RenderConfigError(
                f"mapping.type must be one of {list(MAPPING_TYPES)} (got {self.mapping_type!r})"
            )
        object.__setattr__(self, "mapping_color", _channels("mapping.color", self.mapping_color, 3))
        object.__setattr__(self, "background", _channels("background", self.background, 4))
        object.__setattr__(self, "output", Path(self.output))

    def with_overrides(self, **overrides: Any) -> "RenderConfig":
        """
        Return a copy with the given fields replaced. ``None`` values are ignored.

        ``viewport`` may be passed as a ``Viewport`` or a (min_x, max_x, min_y, max_y) sequence.
        """
        changes = {k: v for k, v in overrides.items() if v is not None}
        viewport = changes.get("viewport")
        if viewport is not None and not isinstance(viewport, Viewport):
            changes["viewport"] = _viewport_from_sequence(viewport)
        if changes:
            logger.debug(f"Applying render config overrides: {sorted(changes)}")
        return dataclasses.replace(self, **changes)

    def create_scene(self) -> Scene:
        return Scene.from_viewport(self.width, self.height, self.viewport)

    def create_mapping(self):
        if self.mapping_type == "simple":
            return simple_mapping(*self.mapping_color)
        return default_mapping()


def _viewport_from_sequence(values: Sequence[float]) -> Viewport:
    if len(values) != 4:
        raise RenderConfigError(f"viewport needs 4 values (min_x max_x min_y max_y), got {len(values)}")
    try:
        return Viewport(*(float(v) for v in values))
    except (TypeError, ValueError) as e:
        raise RenderConfigError(f"Invalid viewport {list(values)}: {e}") from e


def _require(section: Dict[str, Any], key: str, context: str) -> Any:
    if not isinstance(section, dict) or key not in section:
        raise RenderConfigError(f"render.yml missing required field: {context}{key}")
    return section[key]


def build_render_config(raw: Dict[str, Any]) -> RenderConfig:
    """Validate a parsed render.yml mapping and return a RenderConfig."""
    if not isinstance(raw, dict):
        raise RenderConfigError("render.yml must contain a mapping at the top level")

    resolution = _require(raw, "resolution", "")
    viewport = _require(raw, "viewport", "")
    mapping = _require(raw, "mapping", "")

    viewport_values = [_require(viewport, k, "viewport.") for k in ("min_x", "max_x", "min_y", "max_y")]

    return RenderConfig(
        width=_require(resolution, "width", "resolution."),
        height=_require(resolution, "height", "resolution."),
        viewport=_viewport_from_sequence(viewport_values),
        spread_radius=_require(raw, "spread_radius", ""),
        mapping_type=str(_require(mapping, "type", "mapping.")).lower(),
        mapping_color=mapping.get("color", [255, 255, 255]),
        background=_require(raw, "background", ""),
        output=Path(str(_require(raw, "output", ""))),
        chunk_size=_require(raw, "chunk_size", ""),
    )


def load_render_config(path: Optional[Union[str, Path]] = None) -> RenderConfig:
    """
    Load render.yml and validate it.

    Args:
        path: Config file path (defaults to config/render.yml relative to the working directory)

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If YAML parsing fails
        RenderConfigError: If required fields are missing or invalid
    """
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    logger.info(f"Loading render config from: {path.absolute()}")

    if not path.exists():
        logger.error(f"render.yml not found at {path.absolute()} (cwd: {os.getcwd()})")
        raise FileNotFoundError(
            f"render config not found at {path}. "
            f"Ensure config/ directory exists or pass --config."
        )

    with path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    config = build_render_config(raw)
    logger.info(
        f"Loaded render config version {raw.get('version', 'unknown')}: "
        f"{config.width}x{config.height}, mapping={config.mapping_type}, spread={config.spread_radius}"
    )
    return config
