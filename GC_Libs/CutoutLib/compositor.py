"""
Output compositing for cutout sprites.

Renders the two fixed-size square outputs of a cutout run:

- Full view: the whole source frame scaled to fit with a small margin
- Tight view: only the bounding box, scaled to fill the square

Both views are centered on a transparent canvas and can carry a flat black
outline built from offset copies of the sprite.

Example:
    >>> pair = compose_output_pair(cutout, box, full_size=2048, tight_size=1024)
    >>> full_png, tight_png = pair.to_png_bytes()
"""

import logging
from typing import Any, Optional, Tuple

import numpy as np
from PIL import Image

from GC_Libs.constants import (
    FULL_VIEW_MARGIN,
    OUTLINE_COLOR,
    OUTLINE_SPACING_DIVISOR,
)
from GC_Libs.CutoutLib.cutout_models import (
    BoundingBox,
    InvalidParameterError,
    OutputPair,
)

logger = logging.getLogger(__name__)

# 8 compass directions, clockwise from north
OUTLINE_DIRECTIONS = (
    (0, -1), (1, -1), (1, 0), (1, 1),
    (0, 1), (-1, 1), (-1, 0), (-1, -1),
)


def _check_size(size: int) -> None:
    if size <= 0:
        raise InvalidParameterError(f"target size must be > 0, got {size}")


def blank_canvas(size: int) -> Any:
    """Fully transparent size x size RGBA canvas."""
    _check_size(size)
    return Image.new("RGBA", (size, size), (0, 0, 0, 0))


def fit_size(width: int, height: int, target: int, margin: float = 0.0) -> Tuple[int, int]:
    """
    Scale (width, height) to fit inside target x target, keeping aspect ratio.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        target: Side of the square canvas
        margin: Fraction of the canvas left free (0.04 keeps 2% per side)

    Returns:
        (scaled_width, scaled_height), each clamped to 1..target
    """
    usable = target * (1.0 - margin)
    scale = min(usable / width, usable / height)
    scaled_w = min(target, max(1, int(round(width * scale))))
    scaled_h = min(target, max(1, int(round(height * scale))))
    return scaled_w, scaled_h


def place_centered(sprite: Any, size: int, margin: float = 0.0) -> Any:
    """Resize *sprite* to fit and paste it at the center of a blank canvas."""
    canvas = blank_canvas(size)
    scaled_w, scaled_h = fit_size(sprite.width, sprite.height, size, margin)
    scaled = sprite.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)
    canvas.paste(scaled, ((size - scaled_w) // 2, (size - scaled_h) // 2))
    return canvas


def outline_spacing(size: int) -> int:
    """Outline offset in pixels for a canvas of the given side."""
    return max(1, int(round(size / OUTLINE_SPACING_DIVISOR)))


def _shifted(alpha: np.ndarray, dx: int, dy: int) -> np.ndarray:
    """Translate a 2D array by (dx, dy), filling uncovered cells with 0."""
    height, width = alpha.shape
    result = np.zeros_like(alpha)
    if abs(dx) >= width or abs(dy) >= height:
        return result

    src_x = slice(max(0, -dx), width - max(0, dx))
    src_y = slice(max(0, -dy), height - max(0, dy))
    dst_x = slice(max(0, dx), width - max(0, -dx))
    dst_y = slice(max(0, dy), height - max(0, -dy))
    result[dst_y, dst_x] = alpha[src_y, src_x]
    return result


def stroke_outline(layer: Any, spacing: int) -> Any:
    """
    Draw a flat black outline under the sprite on *layer*.

    Copies of the layer are accumulated at ``spacing`` pixels in the 8
    compass directions (source-over), the silhouette is flattened to black
    keeping its coverage, and the sharp layer is composited on top.

    Args:
        layer: RGBA canvas holding the placed sprite
        spacing: Offset distance in pixels (>= 1)

    Returns:
        New RGBA image of the same size
    """
    if spacing < 1:
        raise InvalidParameterError(f"spacing must be >= 1, got {spacing}")

    alpha = np.asarray(layer.getchannel("A"), dtype=np.float64) / 255.0
    uncovered = np.ones_like(alpha)
    for dx, dy in OUTLINE_DIRECTIONS:
        uncovered *= 1.0 - _shifted(alpha, dx * spacing, dy * spacing)

    coverage = np.clip(np.rint((1.0 - uncovered) * 255.0), 0, 255).astype(np.uint8)
    outline = Image.new("RGBA", layer.size, OUTLINE_COLOR + (0,))
    outline.putalpha(Image.fromarray(coverage))
    return Image.alpha_composite(outline, layer)


def render_full(cutout: Any, size: int, outline: bool = False, margin: float = FULL_VIEW_MARGIN) -> Any:
    """
    Render the whole source frame scaled to fit the square with a margin.

    Args:
        cutout: RGBA image with the final alpha applied
        size: Side of the output square
        outline: Stroke a black outline under the sprite
        margin: Fraction of the canvas kept free around the frame

    Returns:
        RGBA image of size x size
    """
    _check_size(size)
    canvas = place_centered(cutout, size, margin)
    if outline:
        canvas = stroke_outline(canvas, outline_spacing(size))
    return canvas


def render_tight(cutout: Any, bounding_box: Optional[BoundingBox], size: int, outline: bool = False) -> Any:
    """
    Render only the bounding box, scaled to fill the square.

    A missing bounding box yields a fully transparent square.
    """
    _check_size(size)
    if bounding_box is None:
        return blank_canvas(size)

    sprite = cutout.crop(bounding_box.as_crop_box())
    canvas = place_centered(sprite, size)
    if outline:
        canvas = stroke_outline(canvas, outline_spacing(size))
    return canvas


def compose_output_pair(
    cutout: Any,
    bounding_box: Optional[BoundingBox],
    full_size: int,
    tight_size: int,
    outline: bool = False,
) -> OutputPair:
    """
    Render both outputs of a cutout run.

    Args:
        cutout: RGBA image with the final alpha applied
        bounding_box: Box of retained foreground, or None
        full_size: Side of the full-frame output
        tight_size: Side of the tight thumbnail
        outline: Stroke a black outline on both outputs

    Returns:
        OutputPair of freshly rendered images

    Raises:
        InvalidParameterError: If a size is not positive
    """
    _check_size(full_size)
    _check_size(tight_size)
    if cutout.mode != "RGBA":
        cutout = cutout.convert("RGBA")

    full = render_full(cutout, full_size, outline=outline)
    tight = render_tight(cutout, bounding_box, tight_size, outline=outline)
    logger.debug("Rendered outputs %dpx / %dpx (outline=%s, box=%s)",
                 full_size, tight_size, outline, bounding_box)
    return OutputPair(full=full, tight=tight, bounding_box=bounding_box)
