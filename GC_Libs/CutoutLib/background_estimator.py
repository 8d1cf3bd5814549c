"""
Background color estimation.

Functions:
    corner_pixels: The four corner samples of an image array
    estimate_background_color: Mean corner color, rounded per channel
    color_distance_map: Euclidean RGB distance of every pixel to a color
"""

import math
from typing import List

import numpy as np

from GC_Libs.CutoutLib.cutout_models import RgbColor


def corner_pixels(pixels: np.ndarray) -> List[RgbColor]:
    """
    Sample the top-left, top-right, bottom-left and bottom-right pixels.

    Args:
        pixels: (H, W, 3+) uint8 array

    Returns:
        List of four RGB tuples
    """
    height, width = pixels.shape[:2]
    corners = [(0, 0), (0, width - 1), (height - 1, 0), (height - 1, width - 1)]
    return [tuple(int(c) for c in pixels[y, x, :3]) for y, x in corners]


def estimate_background_color(pixels: np.ndarray) -> RgbColor:
    """
    Estimate the background as the average of the four corner pixels.

    Each channel is rounded half-up, so (240, 241, 240, 241) gives 241.

    Args:
        pixels: (H, W, 3+) uint8 array

    Returns:
        Reference RGB color
    """
    samples = corner_pixels(pixels)
    return tuple(
        int(math.floor(sum(sample[channel] for sample in samples) / 4 + 0.5))
        for channel in range(3)
    )


def color_distance_map(pixels: np.ndarray, reference: RgbColor) -> np.ndarray:
    """Euclidean RGB distance of every pixel to *reference* (alpha ignored)."""
    rgb = pixels[:, :, :3].astype(np.float64)
    diff = rgb - np.asarray(reference, dtype=np.float64)
    return np.sqrt(np.sum(diff * diff, axis=2))
