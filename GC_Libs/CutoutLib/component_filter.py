"""
Connected-component noise filtering and bounding box extraction.

Pixels with alpha above ``min_alpha`` are grouped into 4-connected
components. Components with ``min_size`` pixels or fewer are residual noise
and are hidden. The retained components share one bounding box.

Retention policies:
    union   - keep every component above the size bar (default, safe for
              multi-part garments)
    largest - keep only the largest component above the size bar
"""

import logging
from typing import Optional, Tuple

import numpy as np
from scipy import ndimage

from GC_Libs.constants import DEFAULT_MIN_ALPHA, DEFAULT_MIN_COMPONENT_SIZE
from GC_Libs.CutoutLib.cutout_models import (
    BoundingBox,
    InvalidParameterError,
    RetentionMode,
)
from GC_Libs.CutoutLib.region_classifier import CROSS_STRUCTURE

logger = logging.getLogger(__name__)


def bounding_box_of(mask: np.ndarray) -> Optional[BoundingBox]:
    """Minimal box enclosing all True pixels, or None when there are none."""
    rows = np.flatnonzero(mask.any(axis=1))
    if rows.size == 0:
        return None
    cols = np.flatnonzero(mask.any(axis=0))
    x, y = int(cols[0]), int(rows[0])
    return BoundingBox(x, y, int(cols[-1]) - x + 1, int(rows[-1]) - y + 1)


def filter_components(
    alpha: np.ndarray,
    min_alpha: int = DEFAULT_MIN_ALPHA,
    min_size: int = DEFAULT_MIN_COMPONENT_SIZE,
    retention_mode: RetentionMode = RetentionMode.UNION_ABOVE_SIZE,
) -> Tuple[np.ndarray, Optional[BoundingBox]]:
    """
    Drop small components and compute the bounding box of the rest.

    Args:
        alpha: (H, W) uint8 alpha buffer (not modified)
        min_alpha: Pixels with alpha above this value are labeled
        min_size: Components need more than this many pixels to survive
        retention_mode: Union of qualifying components, or largest only

    Returns:
        Tuple of (alpha, bounding_box). The returned alpha is zero outside the
        retained components; the box is None when nothing survives.

    Raises:
        InvalidParameterError: If thresholds are out of range
    """
    if not (0 <= min_alpha <= 255):
        raise InvalidParameterError(f"min_alpha must be 0-255, got {min_alpha}")
    if min_size < 0:
        raise InvalidParameterError(f"min_size must be >= 0, got {min_size}")

    retention_mode = RetentionMode(retention_mode)
    labels, count = ndimage.label(alpha > min_alpha, structure=CROSS_STRUCTURE)

    if count == 0:
        logger.debug("No pixels above alpha %d", min_alpha)
        return np.zeros_like(alpha), None

    # sizes[0] counts unlabeled pixels
    sizes = np.bincount(labels.ravel(), minlength=count + 1)
    sizes[0] = 0
    qualifying = np.flatnonzero(sizes > min_size)

    if retention_mode == RetentionMode.LARGEST_ONLY and qualifying.size > 0:
        # argmax returns the first (lowest) label on ties
        qualifying = qualifying[[int(np.argmax(sizes[qualifying]))]]

    keep = np.isin(labels, qualifying)
    result = np.where(keep, alpha, 0).astype(np.uint8)
    box = bounding_box_of(keep)

    logger.debug(
        "Kept %d of %d components (%s, min_size=%d), box=%s",
        int(qualifying.size),
        count,
        retention_mode.value,
        min_size,
        box,
    )
    return result, box
