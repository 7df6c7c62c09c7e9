"""Image statistics and automatic preprocessing option selection."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from config import (
    ANALYSIS_BRIGHT_BACKGROUND,
    ANALYSIS_DARK_BACKGROUND,
    ANALYSIS_EDGE_DIFF,
    ANALYSIS_LOW_CONTRAST,
    ANALYSIS_NOISY_EDGE_RATIO,
    ANALYSIS_SMALL_HEIGHT,
    ANALYSIS_SMALL_WIDTH,
    ANALYSIS_VERY_LOW_CONTRAST,
)

from .buffer import PixelBuffer
from .config import PreprocessingOptions


@dataclass(frozen=True)
class ImageStatistics:
    """Whole-image statistics driving option selection.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        avg_brightness: Mean of (R + G + B) / 3 over all pixels.
        avg_contrast: Sum of |brightness difference| to the pixels directly
            above and below, averaged over all pixels. Top and bottom rows
            contribute nothing.
        edge_ratio: Fraction of all pixels whose vertical difference sum
            exceeds the edge threshold.
    """

    width: int
    height: int
    avg_brightness: float
    avg_contrast: float
    edge_ratio: float

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "avg_brightness": self.avg_brightness,
            "avg_contrast": self.avg_contrast,
            "edge_ratio": self.edge_ratio,
        }


def image_statistics(buffer: PixelBuffer) -> ImageStatistics:
    """Compute brightness, vertical contrast and edge ratio for a buffer."""
    brightness = buffer.rgb.astype(np.float64).sum(axis=2) / 3.0
    total = brightness.size

    contrast_sum = 0.0
    edge_pixels = 0
    if buffer.height >= 3:
        center = brightness[1:-1]
        diff = np.abs(center - brightness[:-2]) + np.abs(center - brightness[2:])
        contrast_sum = float(diff.sum())
        edge_pixels = int(np.count_nonzero(diff > ANALYSIS_EDGE_DIFF))

    return ImageStatistics(
        width=buffer.width,
        height=buffer.height,
        avg_brightness=float(brightness.sum()) / total,
        avg_contrast=contrast_sum / total,
        edge_ratio=edge_pixels / total,
    )


def options_from_statistics(stats: ImageStatistics) -> PreprocessingOptions:
    """Derive preprocessing flags from image statistics."""
    return PreprocessingOptions(
        enhance_contrast=stats.avg_contrast < ANALYSIS_LOW_CONTRAST,
        remove_noise=stats.edge_ratio > ANALYSIS_NOISY_EDGE_RATIO,
        binarize=True,
        # Deskew has no implementation yet, so analysis never asks for it.
        deskew=False,
        scale_up=stats.width < ANALYSIS_SMALL_WIDTH or stats.height < ANALYSIS_SMALL_HEIGHT,
        sharpen=stats.avg_contrast < ANALYSIS_VERY_LOW_CONTRAST,
        remove_background=(
            stats.avg_brightness > ANALYSIS_BRIGHT_BACKGROUND
            or stats.avg_brightness < ANALYSIS_DARK_BACKGROUND
        ),
    )


def analyze_image(buffer: PixelBuffer) -> PreprocessingOptions:
    """Suggest preprocessing options for a buffer."""
    return options_from_statistics(image_statistics(buffer))
