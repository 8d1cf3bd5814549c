"""
Cutout data models for Gear Cutout.

This module defines core data structures shared by the segmentation and
compositing stages.

Classes:
    ClassificationMode: How background pixels are selected
    RetentionMode: Which connected components survive noise filtering
    CornerRegion: Forced-transparent bottom-right region
    ProcessingParameters: Per-image knobs passed into a cutout run
    BoundingBox: Axis-aligned box enclosing retained foreground
    CutoutResult: Segmentation products (mask, alpha, box)
    OutputPair: The two rendered output images

Exceptions:
    CutoutError: Base class for pipeline failures
    ImageDecodeError: Source bytes could not be decoded
    InvalidParameterError: A parameter is out of range

Type Aliases:
    RgbColor: A tuple of 3 integers representing RGB color values (0-255)
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from io import BytesIO
from typing import Any, Dict, Optional, Tuple

import numpy as np
from PIL import Image

from GC_Libs.constants import (
    DEFAULT_CORNER_FRACTION,
    DEFAULT_EROSION_ITERATIONS,
    DEFAULT_MIN_ALPHA,
    DEFAULT_MIN_COMPONENT_SIZE,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_TOLERANCE,
)

RgbColor = Tuple[int, int, int]


class CutoutError(Exception):
    """Base class for errors raised by a cutout invocation."""


class ImageDecodeError(CutoutError):
    """Raised when source bytes cannot be decoded into an image."""


class InvalidParameterError(CutoutError, ValueError):
    """Raised when a processing parameter or output size is invalid."""


class ClassificationMode(str, Enum):
    THRESHOLD = "threshold"
    SEEDED_FILL = "seeded_fill"


class RetentionMode(str, Enum):
    UNION_ABOVE_SIZE = "union"
    LARGEST_ONLY = "largest"


@dataclass(frozen=True)
class CornerRegion:
    """Bottom-right region forced fully transparent.

    Attributes:
        fraction_x: Fraction of the width, measured from the right edge
        fraction_y: Fraction of the height, measured from the bottom edge
    """
    fraction_x: float = DEFAULT_CORNER_FRACTION
    fraction_y: float = DEFAULT_CORNER_FRACTION

    def __post_init__(self):
        for name in ("fraction_x", "fraction_y"):
            value = getattr(self, name)
            if not (0.0 <= value < 1.0):
                raise InvalidParameterError(f"{name} must be 0.0 <= f < 1.0, got {value}")


@dataclass(frozen=True)
class ProcessingParameters:
    """Per-image processing knobs.

    Tolerance and erosion are expected to be clamped by the caller to their
    practical ranges; values that cannot work at all are rejected here.

    Attributes:
        tolerance: Euclidean RGB distance below which a pixel is background
        erosion_iterations: Rings of boundary pixels to strip (0 disables)
        outline: Render a black outline stroke behind the foreground
        classification_mode: Threshold or seeded flood fill
        retention_mode: Union of components above the size bar, or largest only
        corner_region: Forced-transparent region, or None to disable
        min_alpha: Alpha above which a pixel counts for component labeling
        min_component_size: Components must be larger than this pixel count
    """
    tolerance: int = DEFAULT_TOLERANCE
    erosion_iterations: int = DEFAULT_EROSION_ITERATIONS
    outline: bool = False
    classification_mode: ClassificationMode = ClassificationMode.SEEDED_FILL
    retention_mode: RetentionMode = RetentionMode.UNION_ABOVE_SIZE
    corner_region: Optional[CornerRegion] = field(default_factory=CornerRegion)
    min_alpha: int = DEFAULT_MIN_ALPHA
    min_component_size: int = DEFAULT_MIN_COMPONENT_SIZE

    def __post_init__(self):
        # Accept plain strings for the modes (CLI and session files)
        object.__setattr__(self, "classification_mode", ClassificationMode(self.classification_mode))
        object.__setattr__(self, "retention_mode", RetentionMode(self.retention_mode))

        if self.tolerance <= 0:
            raise InvalidParameterError(f"tolerance must be > 0, got {self.tolerance}")
        if self.erosion_iterations < 0:
            raise InvalidParameterError(
                f"erosion_iterations must be >= 0, got {self.erosion_iterations}"
            )
        if not (0 <= self.min_alpha <= 255):
            raise InvalidParameterError(f"min_alpha must be 0-255, got {self.min_alpha}")
        if self.min_component_size < 0:
            raise InvalidParameterError(
                f"min_component_size must be >= 0, got {self.min_component_size}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["classification_mode"] = self.classification_mode.value
        data["retention_mode"] = self.retention_mode.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProcessingParameters":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        corner = filtered.get("corner_region")
        if isinstance(corner, dict):
            filtered["corner_region"] = CornerRegion(**corner)
        return cls(**filtered)


@dataclass(frozen=True)
class BoundingBox:
    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    def as_crop_box(self) -> Tuple[int, int, int, int]:
        """Return (left, upper, right, lower) for PIL.Image.crop."""
        return self.x, self.y, self.right, self.bottom


@dataclass
class CutoutResult:
    """Segmentation products of one invocation.

    Attributes:
        reference_color: Estimated background color
        mask: (H, W) bool array, True where foreground is kept
        alpha: (H, W) uint8 array, final opacity of every source pixel
        bounding_box: Union box of retained components, or None
    """
    reference_color: RgbColor
    mask: np.ndarray
    alpha: np.ndarray
    bounding_box: Optional[BoundingBox]

    @property
    def is_empty(self) -> bool:
        return self.bounding_box is None


@dataclass(frozen=True)
class OutputPair:
    full: 'Image.Image'
    tight: 'Image.Image'
    bounding_box: Optional[BoundingBox] = None

    def to_png_bytes(self) -> Tuple[bytes, bytes]:
        """Encode (full, tight) as PNG payloads."""
        return encode_png(self.full), encode_png(self.tight)


def encode_png(image: Any) -> bytes:
    """Encode an image losslessly, keeping transparency."""
    buffer = BytesIO()
    image.save(buffer, format=DEFAULT_OUTPUT_FORMAT)
    return buffer.getvalue()
