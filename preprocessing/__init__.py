"""
Image preprocessing module for text recognition.

This module provides pure, deterministic functions over RGBA pixel buffers.
All functions follow the pattern: input -> output with no mutation of the
input buffer.

Key components:
- buffer: PixelBuffer and Color, the currency between all stages
- filters: contrast stretch, median denoise, sharpen, upscale, background removal
- threshold: histogram, Otsu and bimodal thresholds, binarization
- analysis: image statistics and automatic option selection
- config: PreprocessingOptions dataclass for parameterizing all steps
- steps / pipeline: step classes and the option-driven global pipeline
- image_io: decoding and encoding image files at the boundary
"""

from .errors import ImagePipelineError, InvalidImageError, OutOfBoundsError
from .buffer import Color, PixelBuffer, WHITE, BLACK
from .threshold import (
    luma,
    build_histogram,
    otsu_threshold,
    find_histogram_peaks,
    bimodal_threshold,
    adaptive_threshold,
    binarize,
    binarize_otsu,
    binarize_adaptive,
)
from .filters import (
    contrast_stretch,
    to_grayscale,
    median_denoise,
    sharpen_kernel,
    sharpen,
    upscale_nearest,
    quantize_colors,
    most_common_color,
    sample_corners,
    estimate_background_color,
    color_distance_map,
    remove_background,
)
from .config import PreprocessingOptions, PreprocessResult
from .analysis import ImageStatistics, image_statistics, analyze_image
from .steps import (
    PreprocessStep,
    UpscaleStep,
    DenoiseStep,
    ContrastStep,
    BackgroundRemovalStep,
    BinarizeStep,
    SharpenStep,
    DeskewStep,
    Pipeline,
    PipelineStepResults,
    StepResult,
)
from .pipeline import build_pipeline, preprocess_image
from .image_io import load_image, save_image

__all__ = [
    # Errors
    "ImagePipelineError",
    "InvalidImageError",
    "OutOfBoundsError",
    # Buffer
    "Color",
    "PixelBuffer",
    "WHITE",
    "BLACK",
    # Thresholding
    "luma",
    "build_histogram",
    "otsu_threshold",
    "find_histogram_peaks",
    "bimodal_threshold",
    "adaptive_threshold",
    "binarize",
    "binarize_otsu",
    "binarize_adaptive",
    # Filters
    "contrast_stretch",
    "to_grayscale",
    "median_denoise",
    "sharpen_kernel",
    "sharpen",
    "upscale_nearest",
    "quantize_colors",
    "most_common_color",
    "sample_corners",
    "estimate_background_color",
    "color_distance_map",
    "remove_background",
    # Options and analysis
    "PreprocessingOptions",
    "PreprocessResult",
    "ImageStatistics",
    "image_statistics",
    "analyze_image",
    # Class-based API
    "PreprocessStep",
    "UpscaleStep",
    "DenoiseStep",
    "ContrastStep",
    "BackgroundRemovalStep",
    "BinarizeStep",
    "SharpenStep",
    "DeskewStep",
    "Pipeline",
    "PipelineStepResults",
    "StepResult",
    # Function API
    "build_pipeline",
    "preprocess_image",
    # I/O
    "load_image",
    "save_image",
]
