"""
Image Artifacts

Composites rendered density pixels onto a background color and writes PNG
files. Encoding goes through matplotlib with the headless Agg backend.
"""

import logging
from pathlib import Path
from typing import Sequence, Union

import matplotlib
matplotlib.use('Agg')  # Headless backend
import matplotlib.pyplot as plt
import numpy as np

from pointdensity.utils.constants import CHANNEL_MAX, DEFAULT_BACKGROUND, RGBA_CHANNELS

logger = logging.getLogger(__name__)


def composite_over(
    pixels: np.ndarray,
    background: Sequence[int] = DEFAULT_BACKGROUND
) -> np.ndarray:
    """
    Alpha-composite non-premultiplied RGBA pixels over a uniform background.

    Args:
        pixels: ``(h, w, 4)`` uint8 array, e.g. the result of ``Scene.render``
        background: RGBA color (0..255 per channel)

    Returns:
        New ``(h, w, 4)`` uint8 array. Opaque when the background is opaque.
    """
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != RGBA_CHANNELS:
        raise ValueError(f"Expected (h, w, 4) RGBA pixels, got shape {pixels.shape}")
    if len(background) != RGBA_CHANNELS:
        raise ValueError(f"Background must be an RGBA color, got {tuple(background)}")

    src = pixels.astype(np.float64) / CHANNEL_MAX
    dst = np.asarray(background, dtype=np.float64) / CHANNEL_MAX

    src_alpha = src[..., 3:4]
    dst_alpha = dst[3]
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)

    weighted = src[..., :3] * src_alpha + dst[:3] * dst_alpha * (1.0 - src_alpha)
    rgb = np.divide(weighted, out_alpha, out=np.zeros_like(weighted), where=out_alpha > 0)

    out = np.concatenate([rgb, out_alpha], axis=-1)
    return np.clip(np.floor(out * CHANNEL_MAX + 0.5), 0, CHANNEL_MAX).astype(np.uint8)


def save_png(image: np.ndarray, path: Union[str, Path]) -> Path:
    """
    Write an ``(h, w, 3)`` or ``(h, w, 4)`` uint8 image to a PNG file.

    Parent directories are created as needed.

    Returns:
        The written path
    """
    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] not in (3, RGBA_CHANNELS) or image.dtype != np.uint8:
        raise ValueError(
            f"Expected a uint8 (h, w, 3|4) image, got shape {image.shape} dtype {image.dtype}"
        )

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.imsave(path, image, format="png")
    logger.info(f"Wrote {image.shape[1]}x{image.shape[0]} PNG to {path}")
    return path
