"""
Grid Addressing and Saturating Arithmetic

Pure helpers shared by aggregation, spreading and rendering.

Bins are stored as a flat row-major ``uint64`` vector. Cell ``(x, y)``
lives at ``width * y + x``; ``grid_view`` exposes the same storage as a
``(height, width)`` array so that ``grid_view(bins)[y, x] == bins[index(x, y)]``.
"""

from typing import Tuple, Union

import numpy as np

from pointdensity.utils.constants import COUNTER_MAX

COUNTER_DTYPE = np.uint64

IndexResult = Tuple[Union[int, np.ndarray], Union[bool, np.ndarray]]


def index(x, y, width: int, height: int) -> IndexResult:
    """
    Calculate a bin index from a pair of integer pixel coordinates.

    Works on scalars and on equal-shape integer arrays.

    Args:
        x: Pixel column(s)
        y: Pixel row(s), row 0 is the top of the image
        width: Grid width in cells
        height: Grid height in cells

    Returns:
        Tuple of (index, valid). Invalid coordinates (negative, ``x >= width``
        or ``y >= height``) yield index 0 and valid False.
    """
    if np.ndim(x) == 0 and np.ndim(y) == 0:
        x = int(x)
        y = int(y)
        if x < 0 or y < 0 or x >= width or y >= height:
            return 0, False
        return width * y + x, True

    xs = np.asarray(x, dtype=np.int64)
    ys = np.asarray(y, dtype=np.int64)
    valid = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
    idx = np.where(valid, np.int64(width) * ys + xs, 0)
    return idx, valid


def grid_view(bins: np.ndarray, width: int, height: int) -> np.ndarray:
    """Return a ``(height, width)`` view of flat row-major bins."""
    return bins.reshape(height, width)


def new_bins(width: int, height: int) -> np.ndarray:
    """Allocate a zeroed counter vector for a ``width x height`` grid."""
    return np.zeros(width * height, dtype=COUNTER_DTYPE)


def saturating_add(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Element-wise ``a + b`` on uint64 arrays, clamped at ``COUNTER_MAX`` instead of wrapping."""
    total = np.add(a, b, dtype=COUNTER_DTYPE)
    overflow = total < a
    total[overflow] = COUNTER_MAX
    return total


def saturating_increment(bins: np.ndarray, idx: np.ndarray, limit: int) -> None:
    """
    Add one hit per entry of ``idx`` to ``bins`` in place.

    A bin never grows past ``limit``; a bin already at or above ``limit``
    is left unchanged. Repeated indices accumulate.
    """
    if idx.size == 0:
        return
    cells, hits = np.unique(idx, return_counts=True)
    current = bins[cells]
    ceiling = COUNTER_DTYPE(limit)
    room = ceiling - np.minimum(current, ceiling)
    bins[cells] = current + np.minimum(hits.astype(COUNTER_DTYPE), room)


def _window_sum(values: np.ndarray, radius: int, axis: int) -> np.ndarray:
    """Saturating sum over ``[i - radius, i + radius]`` along one axis, zero outside."""
    n = values.shape[axis]
    pad = [(0, 0)] * values.ndim
    pad[axis] = (radius, radius)
    padded = np.pad(values, pad, mode="constant", constant_values=0)
    out = np.zeros_like(values)
    for offset in range(2 * radius + 1):
        window = [slice(None)] * values.ndim
        window[axis] = slice(offset, offset + n)
        out = saturating_add(out, padded[tuple(window)])
    return out


def box_sum(grid: np.ndarray, radius: int) -> np.ndarray:
    """
    Sum every cell's ``(2r+1) x (2r+1)`` neighborhood into a new grid.

    Cells outside the grid count as zero. Sums saturate at ``COUNTER_MAX``.
    Rows are summed first, then columns; clamping is monotone so this equals
    the clamped sum over the full square.
    """
    rows = _window_sum(grid, radius, axis=1)
    return _window_sum(rows, radius, axis=0)
