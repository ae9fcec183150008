"""
Pytest configuration for point-density tests.

Shared fixtures: small scenes, render.yml files and point CSVs.
"""

from pathlib import Path

import pytest
import yaml

from pointdensity.core.scene import Scene

REPO_ROOT = Path(__file__).parent.parent


def make_render_config(**overrides):
    """Return a valid parsed render.yml mapping with optional top-level overrides."""
    config = {
        "version": "test",
        "resolution": {"width": 4, "height": 4},
        "viewport": {"min_x": 0.0, "max_x": 4.0, "min_y": 0.0, "max_y": 4.0},
        "spread_radius": 0,
        "mapping": {"type": "simple", "color": [255, 0, 0]},
        "background": [0, 0, 0, 255],
        "output": "out.png",
        "chunk_size": 2,
    }
    config.update(overrides)
    return config


@pytest.fixture
def repo_root():
    return REPO_ROOT


@pytest.fixture
def raw_render_config():
    """Factory for parsed render.yml mappings."""
    return make_render_config


@pytest.fixture
def scene_10x10():
    """10x10 grid over (0,0)-(10,10): one unit per pixel."""
    return Scene(10, 10, 0.0, 10.0, 0.0, 10.0)


@pytest.fixture
def render_config_file(tmp_path):
    """Write a valid render.yml into tmp_path and return its path."""
    path = tmp_path / "render.yml"
    config = make_render_config(output=str(tmp_path / "out.png"))
    path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return path


@pytest.fixture
def points_csv(tmp_path):
    """CSV with five x,y points inside a (0,0)-(4,4) viewport and one outside."""
    path = tmp_path / "points.csv"
    path.write_text(
        "x,y,label\n"
        "0.5,3.5,a\n"
        "0.5,3.5,b\n"
        "1.5,1.5,c\n"
        "3.5,0.5,d\n"
        "2.5,2.5,e\n"
        "9.0,9.0,outside\n",
        encoding="utf-8",
    )
    return path
