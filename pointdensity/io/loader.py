"""
Point File Loader

Streams point coordinates out of CSV files in fixed-size chunks so that
arbitrarily large point clouds can be aggregated without holding the whole
dataset in memory.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Tuple, Union

import numpy as np
import pandas as pd

from pointdensity.core.geo.projection import MercatorProjection
from pointdensity.core.scene.scene import Scene
from pointdensity.utils.constants import DEFAULT_CSV_CHUNK_SIZE
from pointdensity.utils.error_handling import InputDataError

logger = logging.getLogger(__name__)

CARTESIAN_COLUMNS = ("x", "y")
GEOGRAPHIC_COLUMNS = ("lon", "lat")


@dataclass
class AggregationStats:
    rows: int = 0
    chunks: int = 0


def iter_point_chunks(
    path: Union[str, Path],
    columns: Tuple[str, str] = CARTESIAN_COLUMNS,
    chunk_size: int = DEFAULT_CSV_CHUNK_SIZE,
) -> Iterator[np.ndarray]:
    """
    Yield ``(n, 2)`` float64 arrays of coordinates from a CSV file.

    Non-numeric cells become NaN and are later dropped by the scene.

    Raises:
        FileNotFoundError: If the file does not exist
        InputDataError: If a requested column is missing or the file cannot be parsed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Point file not found: {path}")

    try:
        header = pd.read_csv(path, nrows=0)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise InputDataError(f"Failed to read header of {path}: {e}") from e
    missing = [c for c in columns if c not in header.columns]
    if missing:
        raise InputDataError(
            f"{path} is missing column(s) {missing}; available: {list(header.columns)}"
        )

    try:
        for chunk in pd.read_csv(path, usecols=list(columns), chunksize=chunk_size):
            first = pd.to_numeric(chunk[columns[0]], errors="coerce")
            second = pd.to_numeric(chunk[columns[1]], errors="coerce")
            yield np.column_stack([first.to_numpy(np.float64), second.to_numpy(np.float64)])
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise InputDataError(f"Failed to parse {path}: {e}") from e


def aggregate_csv(
    scene: Scene,
    path: Union[str, Path],
    columns: Tuple[str, str] = CARTESIAN_COLUMNS,
    chunk_size: int = DEFAULT_CSV_CHUNK_SIZE,
    geographic: bool = False,
) -> AggregationStats:
    """
    Aggregate every row of a CSV point file into ``scene``, one chunk at a time.

    Args:
        scene: Target scene
        path: CSV file
        columns: Names of the (x, y) columns, or (longitude, latitude) when geographic
        chunk_size: Rows per aggregate call
        geographic: Treat columns as longitude/latitude in degrees and project
            them with Mercator before aggregation

    Returns:
        AggregationStats with row and chunk counts
    """
    projection = MercatorProjection() if geographic else None
    stats = AggregationStats()

    for chunk in iter_point_chunks(path, columns, chunk_size):
        if projection is not None:
            x, y = projection.forward_arrays(np.radians(chunk[:, 0]), np.radians(chunk[:, 1]))
            chunk = np.column_stack([x, y])
        scene.aggregate(chunk)
        stats.rows += len(chunk)
        stats.chunks += 1

    logger.info(
        f"Aggregated {stats.rows} rows from {path} in {stats.chunks} chunk(s); "
        f"{scene.occupied_bins} occupied bins"
    )
    return stats
