"""
Global preprocessing pipeline that applies all enabled steps in order.

This is the whole-image path used directly before text recognition when no
region detection is wanted. Enabled steps always run in this order:

    scale_up -> remove_noise -> enhance_contrast -> remove_background
    -> binarize -> sharpen -> deskew
"""

from __future__ import annotations

import logging
from typing import Literal

from .analysis import analyze_image
from .buffer import PixelBuffer
from .config import PreprocessingOptions, PreprocessResult
from .steps import (
    BackgroundRemovalStep,
    BinarizeStep,
    ContrastStep,
    DenoiseStep,
    DeskewStep,
    Pipeline,
    PreprocessStep,
    SharpenStep,
    UpscaleStep,
)

logger = logging.getLogger(__name__)


def _validate_input(buffer: PixelBuffer) -> None:
    """Raises TypeError if buffer is not a PixelBuffer."""
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer).__name__}")


def build_pipeline(options: PreprocessingOptions) -> Pipeline:
    """Build a Pipeline holding one step per enabled option."""
    steps: list[PreprocessStep] = []

    if options.scale_up:
        steps.append(UpscaleStep(factor=options.scale_factor))
    if options.remove_noise:
        steps.append(DenoiseStep())
    if options.enhance_contrast:
        steps.append(ContrastStep(factor=options.contrast_factor))
    if options.remove_background:
        steps.append(BackgroundRemovalStep())
    if options.binarize:
        steps.append(BinarizeStep())
    if options.sharpen:
        steps.append(SharpenStep(center_weight=options.sharpen_center_weight))
    if options.deskew:
        steps.append(DeskewStep())

    return Pipeline(steps=steps)


def preprocess_image(
    buffer: PixelBuffer,
    options: PreprocessingOptions | Literal["auto"] | None = None,
    artifact_dir: str | None = None,
) -> PreprocessResult:
    """Apply the global preprocessing pipeline to a buffer.

    Args:
        buffer: Input image. Never modified.
        options: Preprocessing options. None uses the defaults; "auto"
                 derives them from image statistics via analyze_image().
        artifact_dir: Optional directory to save intermediate images.

    Returns:
        PreprocessResult with the original, the processed buffer and
        merged step metadata.

    Raises:
        TypeError: If buffer is not a PixelBuffer.
        ValueError: If options are invalid.
    """
    _validate_input(buffer)

    if options is None:
        options = PreprocessingOptions()
    elif options == "auto":
        options = analyze_image(buffer)
        logger.debug("Auto-selected steps: %s", options.enabled_steps())
    elif not isinstance(options, PreprocessingOptions):
        raise TypeError(
            f"options must be PreprocessingOptions, 'auto' or None, got {options!r}"
        )

    options.validate()

    pipeline = build_pipeline(options)
    pipeline_result = pipeline.run(buffer, artifact_dir=artifact_dir)

    logger.info(
        "Preprocessed %dx%d -> %dx%d with %d step(s)",
        buffer.width, buffer.height,
        pipeline_result.final.width, pipeline_result.final.height,
        len(pipeline),
    )

    return PreprocessResult(
        original=pipeline_result.original,
        processed=pipeline_result.final,
        options=options,
        scale_factor=pipeline_result.scale_factor,
        artifact_paths=pipeline_result.artifact_paths,
        metadata=pipeline_result.all_metadata,
    )
