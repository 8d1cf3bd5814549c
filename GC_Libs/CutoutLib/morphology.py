"""
Binary mask refinement.

Functions:
    erode_mask: 4-neighbor erosion of interior pixels
    apply_mask_to_alpha: Hide every pixel the mask rejects
"""

import numpy as np

from GC_Libs.CutoutLib.cutout_models import InvalidParameterError


def erode_mask(mask: np.ndarray, iterations: int) -> np.ndarray:
    """
    Erode a foreground mask by one ring per iteration.

    An interior foreground pixel becomes background when any of its four
    neighbors is background. Pixels on the first/last row and column are
    never evaluated. Every iteration reads the previous iteration's result.

    Args:
        mask: (H, W) bool array, True = foreground
        iterations: Number of erosion passes (0 returns an unchanged copy)

    Returns:
        New (H, W) bool array

    Raises:
        InvalidParameterError: If iterations is negative
    """
    if iterations < 0:
        raise InvalidParameterError(f"iterations must be >= 0, got {iterations}")

    current = mask.astype(bool, copy=True)
    height, width = current.shape
    if iterations == 0 or height < 3 or width < 3:
        return current

    for _ in range(iterations):
        inner = current[1:-1, 1:-1]
        neighbors_kept = (
            current[:-2, 1:-1]
            & current[2:, 1:-1]
            & current[1:-1, :-2]
            & current[1:-1, 2:]
        )
        eroded = current.copy()
        eroded[1:-1, 1:-1] = inner & neighbors_kept
        current = eroded

    return current


def apply_mask_to_alpha(alpha: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """Return a copy of *alpha* with every rejected pixel set to 0."""
    result = alpha.copy()
    result[~mask] = 0
    return result
