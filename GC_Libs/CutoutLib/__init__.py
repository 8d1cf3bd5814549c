"""
CutoutLib - Background removal and sprite compositing

This module provides the segmentation stages (background estimation,
region classification, erosion, component filtering) and the compositor
that renders the full and tight outputs of a cutout run.
"""

from GC_Libs.CutoutLib.cutout_models import (
    BoundingBox,
    ClassificationMode,
    CornerRegion,
    CutoutError,
    CutoutResult,
    ImageDecodeError,
    InvalidParameterError,
    OutputPair,
    ProcessingParameters,
    RetentionMode,
    RgbColor,
    encode_png,
)
from GC_Libs.CutoutLib.background_estimator import (
    color_distance_map,
    estimate_background_color,
)
from GC_Libs.CutoutLib.region_classifier import classify_regions
from GC_Libs.CutoutLib.morphology import apply_mask_to_alpha, erode_mask
from GC_Libs.CutoutLib.component_filter import bounding_box_of, filter_components
from GC_Libs.CutoutLib.compositor import (
    compose_output_pair,
    render_full,
    render_tight,
    stroke_outline,
)
from GC_Libs.CutoutLib.cutout_pipeline import (
    decode_image,
    load_image,
    process_image_bytes,
    run_cutout,
    segment_image,
)

__all__ = [
    "BoundingBox",
    "ClassificationMode",
    "CornerRegion",
    "CutoutError",
    "CutoutResult",
    "ImageDecodeError",
    "InvalidParameterError",
    "OutputPair",
    "ProcessingParameters",
    "RetentionMode",
    "RgbColor",
    "encode_png",
    "color_distance_map",
    "estimate_background_color",
    "classify_regions",
    "apply_mask_to_alpha",
    "erode_mask",
    "bounding_box_of",
    "filter_components",
    "compose_output_pair",
    "render_full",
    "render_tight",
    "stroke_outline",
    "decode_image",
    "load_image",
    "process_image_bytes",
    "run_cutout",
    "segment_image",
]
