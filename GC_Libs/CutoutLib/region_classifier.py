"""
Foreground/background region classification.

Two policies select background pixels relative to the reference color:

- Threshold: every pixel at or below ``tolerance`` is background.
- Seeded fill: background grows from the four corners through 4-connected
  pixels closer than ``tolerance * FLOOD_FACTOR``. Enclosed areas that look
  like the background are kept with their source alpha.

A pixel exactly at ``tolerance`` is background under both policies. Both
policies feather kept pixels whose distance falls in the band
``(tolerance, tolerance * FEATHER_FACTOR)`` and clear the configured
bottom-right corner region.

Example:
    >>> reference = estimate_background_color(pixels)
    >>> mask, alpha = classify_regions(pixels, reference, ProcessingParameters())
"""

import logging
from typing import Optional, Tuple

import numpy as np
from scipy import ndimage

from GC_Libs.constants import FEATHER_FACTOR, FLOOD_FACTOR
from GC_Libs.CutoutLib.background_estimator import color_distance_map
from GC_Libs.CutoutLib.cutout_models import (
    ClassificationMode,
    CornerRegion,
    InvalidParameterError,
    ProcessingParameters,
    RgbColor,
)

logger = logging.getLogger(__name__)

# 4-connectivity
CROSS_STRUCTURE = ndimage.generate_binary_structure(2, 1)


def feather_alpha(distance: np.ndarray, tolerance: float) -> np.ndarray:
    """
    Linear opacity ramp across the feathering band.

    Returns:
        uint8 array: 0 at ``tolerance``, 255 at ``tolerance * FEATHER_FACTOR``
    """
    band_width = tolerance * (FEATHER_FACTOR - 1.0)
    ramp = (distance - tolerance) * (255.0 / band_width)
    return np.clip(np.rint(ramp), 0, 255).astype(np.uint8)


def threshold_background(distance: np.ndarray, tolerance: float) -> np.ndarray:
    """Background wherever the distance is at or below tolerance."""
    return distance <= tolerance


def seeded_fill_background(distance: np.ndarray, tolerance: float) -> np.ndarray:
    """
    Grow background from the four corner seeds.

    A pixel joins the background when it is 4-connected to a corner through
    pixels whose distance is below ``tolerance * FLOOD_FACTOR``. Labeling is
    non-recursive, so image size does not hit a depth limit, and neighbors
    never wrap across row boundaries.
    """
    candidates = distance < tolerance * FLOOD_FACTOR
    labels, count = ndimage.label(candidates, structure=CROSS_STRUCTURE)
    if count == 0:
        return np.zeros(distance.shape, dtype=bool)

    height, width = distance.shape
    seeds = {
        labels[0, 0],
        labels[0, width - 1],
        labels[height - 1, 0],
        labels[height - 1, width - 1],
    }
    seeds.discard(0)
    if not seeds:
        return np.zeros(distance.shape, dtype=bool)

    return np.isin(labels, sorted(seeds))


def corner_region_mask(shape: Tuple[int, int], region: Optional[CornerRegion]) -> np.ndarray:
    """
    Mask of the forced-transparent bottom-right region.

    Pixels with ``x > W * (1 - fraction_x)`` and ``y > H * (1 - fraction_y)``
    are selected. ``None`` selects nothing.
    """
    height, width = shape
    if region is None:
        return np.zeros(shape, dtype=bool)

    xs = np.arange(width) > width * (1.0 - region.fraction_x)
    ys = np.arange(height) > height * (1.0 - region.fraction_y)
    return ys[:, np.newaxis] & xs[np.newaxis, :]


def classify_regions(
    pixels: np.ndarray,
    reference: RgbColor,
    params: ProcessingParameters,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Classify every pixel as foreground or background.

    Args:
        pixels: (H, W, 4) uint8 RGBA array (not modified)
        reference: Background reference color
        params: Processing parameters

    Returns:
        Tuple of (mask, alpha): bool foreground mask and uint8 alpha buffer.
        Alpha never exceeds the source alpha.

    Raises:
        InvalidParameterError: If tolerance is not positive
    """
    tolerance = float(params.tolerance)
    if tolerance <= 0:
        raise InvalidParameterError(f"tolerance must be > 0, got {params.tolerance}")

    distance = color_distance_map(pixels, reference)

    if params.classification_mode == ClassificationMode.THRESHOLD:
        background = threshold_background(distance, tolerance)
    else:
        background = seeded_fill_background(distance, tolerance)
        background |= distance == tolerance

    background |= corner_region_mask(distance.shape, params.corner_region)
    mask = ~background

    # enclosed pixels under tolerance (seeded fill only) keep their source alpha
    alpha = pixels[:, :, 3].copy()
    alpha[background] = 0

    band = mask & (distance > tolerance) & (distance < tolerance * FEATHER_FACTOR)
    alpha[band] = np.minimum(alpha[band], feather_alpha(distance[band], tolerance))

    logger.debug(
        "Classified %d background / %d foreground pixels (%s, tolerance=%s, feathered=%d)",
        int(background.sum()),
        int(mask.sum()),
        params.classification_mode.value,
        params.tolerance,
        int(band.sum()),
    )
    return mask, alpha
