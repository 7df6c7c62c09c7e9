"""
Configuration for the global preprocessing pipeline.

All preprocessing steps are parameterized through PreprocessingOptions to
ensure reproducibility and easy experimentation with different settings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from config import (
    CONTRAST_FACTOR,
    SCALE_UP_FACTOR,
    SHARPEN_CENTER_WEIGHT,
)

from .buffer import PixelBuffer


@dataclass(frozen=True)
class PreprocessingOptions:
    """Flags selecting which preprocessing steps run.

    Steps always run in a fixed order: scale_up, remove_noise,
    enhance_contrast, remove_background, binarize, sharpen, deskew.

    Attributes:
        enhance_contrast: Stretch contrast around mid-gray.
        remove_noise: 3x3 median filter.
        binarize: Otsu binarization on the luma histogram.
        deskew: Rotation correction. Currently an identity transform.
        scale_up: Nearest-neighbor upscale, keeps text edges hard.
        sharpen: 3x3 sharpen convolution.
        remove_background: Whiten pixels close to the corner color.
        scale_factor: Integer factor for scale_up.
        contrast_factor: Factor for enhance_contrast.
        sharpen_center_weight: Center weight of the sharpen kernel.
    """

    enhance_contrast: bool = True
    remove_noise: bool = True
    binarize: bool = True
    deskew: bool = False
    scale_up: bool = True
    sharpen: bool = True
    remove_background: bool = True

    scale_factor: int = SCALE_UP_FACTOR
    contrast_factor: float = CONTRAST_FACTOR
    sharpen_center_weight: int = SHARPEN_CENTER_WEIGHT

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if not isinstance(self.scale_factor, int) or self.scale_factor <= 0:
            raise ValueError(
                f"scale_factor must be a positive integer, got {self.scale_factor!r}"
            )
        if self.contrast_factor < 0:
            raise ValueError(
                f"contrast_factor must be non-negative, got {self.contrast_factor}"
            )
        if self.sharpen_center_weight <= 0:
            raise ValueError(
                "sharpen_center_weight must be positive, "
                f"got {self.sharpen_center_weight}"
            )

    def enabled_steps(self) -> list[str]:
        """Names of enabled flags, in pipeline order."""
        order = [
            "scale_up",
            "remove_noise",
            "enhance_contrast",
            "remove_background",
            "binarize",
            "sharpen",
            "deskew",
        ]
        return [name for name in order if getattr(self, name)]


@dataclass
class PreprocessResult:
    """Result of the global preprocessing pipeline.

    Attributes:
        original: Input buffer, untouched.
        processed: Final buffer after every enabled step.
        options: The options used.
        scale_factor: Ratio of processed width to original width.
        artifact_paths: Step name to saved file path (if artifact saving enabled).
        metadata: Merged metadata from all steps (threshold, background color, ...).
    """

    original: PixelBuffer
    processed: PixelBuffer
    options: PreprocessingOptions
    scale_factor: float = 1.0
    artifact_paths: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
