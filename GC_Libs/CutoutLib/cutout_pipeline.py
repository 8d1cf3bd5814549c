"""
Cutout pipeline entry points.

Runs the full chain for one image:

    decode -> estimate background -> classify -> erode -> apply mask
           -> filter components -> composite (full, tight)

Every invocation is a pure function of the source image and its processing
parameters. Nothing is shared between invocations, so separate images can be
processed on separate workers.

Functions:
    decode_image: Decode raw bytes into an RGBA image
    load_image: Decode an image file from disk
    validate_parameters: Fail fast on unusable parameters or output sizes
    segment_image: Segmentation half of the pipeline (no rendering)
    run_cutout: Full pipeline for a decoded image
    process_image_bytes: Full pipeline for raw image bytes
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Any

import numpy as np
from PIL import Image, UnidentifiedImageError

from GC_Libs.constants import DEFAULT_FULL_SIZE, DEFAULT_TIGHT_SIZE
from GC_Libs.CutoutLib.background_estimator import estimate_background_color
from GC_Libs.CutoutLib.component_filter import filter_components
from GC_Libs.CutoutLib.compositor import compose_output_pair
from GC_Libs.CutoutLib.cutout_models import (
    CutoutResult,
    ImageDecodeError,
    InvalidParameterError,
    OutputPair,
    ProcessingParameters,
)
from GC_Libs.CutoutLib.morphology import apply_mask_to_alpha, erode_mask
from GC_Libs.CutoutLib.region_classifier import classify_regions

logger = logging.getLogger(__name__)


def decode_image(data: bytes) -> Any:
    """
    Decode raw image bytes into an RGBA PIL Image.

    The image is fully loaded before returning, so pixel access never
    touches the byte stream again.

    Raises:
        ImageDecodeError: If the bytes are empty or not a readable image
    """
    if not data:
        raise ImageDecodeError("Image data is empty")

    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            return img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageDecodeError(f"Failed to decode image: {e}") from e


def load_image(path: Path) -> Any:
    """
    Read and decode an image file.

    Raises:
        ImageDecodeError: If the file cannot be read or decoded
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise ImageDecodeError(f"Failed to read image {path}: {e}") from e
    return decode_image(data)


def validate_parameters(params: ProcessingParameters, full_size: int, tight_size: int) -> None:
    """
    Reject parameters the pipeline cannot run with.

    Tolerance and erosion ranges are the caller's job; only values that make
    no sense at all are refused here.

    Raises:
        InvalidParameterError: Describing the first invalid value
    """
    if not isinstance(params, ProcessingParameters):
        raise InvalidParameterError(f"Expected ProcessingParameters, got {type(params)}")
    if params.tolerance <= 0:
        raise InvalidParameterError(f"tolerance must be > 0, got {params.tolerance}")
    if params.erosion_iterations < 0:
        raise InvalidParameterError(
            f"erosion_iterations must be >= 0, got {params.erosion_iterations}"
        )
    if not (0 <= params.min_alpha <= 255):
        raise InvalidParameterError(f"min_alpha must be 0-255, got {params.min_alpha}")
    if params.min_component_size < 0:
        raise InvalidParameterError(
            f"min_component_size must be >= 0, got {params.min_component_size}"
        )
    corner = params.corner_region
    if corner is not None and not (0.0 <= corner.fraction_x < 1.0 and 0.0 <= corner.fraction_y < 1.0):
        raise InvalidParameterError(f"corner fractions must be 0.0 <= f < 1.0, got {corner}")
    if full_size <= 0:
        raise InvalidParameterError(f"full_size must be > 0, got {full_size}")
    if tight_size <= 0:
        raise InvalidParameterError(f"tight_size must be > 0, got {tight_size}")


def segment_image(image: Any, params: ProcessingParameters) -> CutoutResult:
    """
    Segment the foreground of a decoded image.

    Args:
        image: PIL Image (converted to RGBA, never modified)
        params: Processing parameters

    Returns:
        CutoutResult with the reference color, refined mask, final alpha and
        bounding box
    """
    pixels = np.asarray(image.convert("RGBA"), dtype=np.uint8)

    reference = estimate_background_color(pixels)
    logger.debug("Reference background color: %s", reference)

    mask, alpha = classify_regions(pixels, reference, params)
    mask = erode_mask(mask, params.erosion_iterations)
    alpha = apply_mask_to_alpha(alpha, mask)

    alpha, bounding_box = filter_components(
        alpha,
        min_alpha=params.min_alpha,
        min_size=params.min_component_size,
        retention_mode=params.retention_mode,
    )
    mask &= alpha > 0

    return CutoutResult(
        reference_color=reference,
        mask=mask,
        alpha=alpha,
        bounding_box=bounding_box,
    )


def apply_alpha(image: Any, alpha: np.ndarray) -> Any:
    """Return an RGBA copy of *image* carrying *alpha*."""
    cutout = image.convert("RGBA")
    cutout.putalpha(Image.fromarray(alpha))
    return cutout


def run_cutout(
    image: Any,
    params: ProcessingParameters,
    full_size: int = DEFAULT_FULL_SIZE,
    tight_size: int = DEFAULT_TIGHT_SIZE,
) -> OutputPair:
    """
    Run the whole pipeline on a decoded image.

    Args:
        image: Source PIL Image
        params: Processing parameters (never modified)
        full_size: Side of the full-frame output square
        tight_size: Side of the tight thumbnail square

    Returns:
        OutputPair; when nothing survives segmentation the full output is a
        transparent frame and the tight output is a blank square

    Raises:
        InvalidParameterError: If parameters or sizes are invalid
    """
    validate_parameters(params, full_size, tight_size)

    result = segment_image(image, params)
    if result.is_empty:
        logger.warning(
            "No foreground survived filtering (tolerance=%s, erosion=%s); tight output is blank",
            params.tolerance,
            params.erosion_iterations,
        )

    cutout = apply_alpha(image, result.alpha)
    return compose_output_pair(
        cutout,
        result.bounding_box,
        full_size=full_size,
        tight_size=tight_size,
        outline=params.outline,
    )


def process_image_bytes(
    data: bytes,
    params: ProcessingParameters,
    full_size: int = DEFAULT_FULL_SIZE,
    tight_size: int = DEFAULT_TIGHT_SIZE,
) -> OutputPair:
    """
    Decode raw bytes and run the pipeline.

    Raises:
        ImageDecodeError: If the bytes cannot be decoded
        InvalidParameterError: If parameters or sizes are invalid
    """
    validate_parameters(params, full_size, tight_size)
    return run_cutout(decode_image(data), params, full_size, tight_size)
