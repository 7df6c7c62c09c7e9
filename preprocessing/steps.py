"""
Preprocessing step classes with a common interface.

Each step is a dataclass that implements the PreprocessStep interface.
Steps are pure: they take a buffer and return a new buffer without
mutating the original.

Usage:
    from preprocessing.steps import UpscaleStep, BinarizeStep, Pipeline

    pipeline = Pipeline(steps=[
        UpscaleStep(factor=2),
        BinarizeStep(),
    ])
    result = pipeline.run(buffer)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from config import CONTRAST_FACTOR, SCALE_UP_FACTOR, SHARPEN_CENTER_WEIGHT

from .buffer import Color, PixelBuffer
from .filters import (
    contrast_stretch,
    median_denoise,
    remove_background,
    sharpen,
    sharpen_kernel,
    upscale_nearest,
)
from .image_io import save_image
from .threshold import binarize_otsu

logger = logging.getLogger(__name__)


class PreprocessStep(ABC):
    """Base class for preprocessing steps.

    All preprocessing steps must implement this interface. Steps should be
    pure functions: they take an input buffer and return a new output
    without mutating the original.

    Steps can optionally produce metadata (like the threshold they picked)
    that is preserved in the pipeline results.
    """

    @abstractmethod
    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        """Apply this preprocessing step to a buffer.

        Must be pure: never mutates the input buffer.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging and debugging."""

    def get_metadata(self) -> dict[str, Any]:
        """Return any metadata produced by the last apply() call.

        Empty by default.
        """
        return {}


@dataclass(frozen=True)
class UpscaleStep(PreprocessStep):
    """Nearest-neighbor upscale by an integer factor."""

    factor: int = SCALE_UP_FACTOR

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return upscale_nearest(buffer, self.factor)

    @property
    def name(self) -> str:
        return f"scale_up({self.factor})"

    def get_metadata(self) -> dict[str, Any]:
        return {"scale_factor": float(self.factor)}


@dataclass(frozen=True)
class DenoiseStep(PreprocessStep):
    """3x3 median filter."""

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return median_denoise(buffer)

    @property
    def name(self) -> str:
        return "remove_noise"


@dataclass(frozen=True)
class ContrastStep(PreprocessStep):
    """Contrast stretch around mid-gray."""

    factor: float = CONTRAST_FACTOR

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return contrast_stretch(buffer, self.factor)

    @property
    def name(self) -> str:
        return f"enhance_contrast({self.factor})"


@dataclass(frozen=True)
class BackgroundRemovalStep(PreprocessStep):
    """Whiten pixels close to the color found in the image corners."""

    _background: Color | None = field(default=None, init=False, repr=False)

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        result, background = remove_background(buffer)
        object.__setattr__(self, "_background", background)
        return result

    @property
    def name(self) -> str:
        return "remove_background"

    def get_metadata(self) -> dict[str, Any]:
        if self._background is None:
            return {}
        return {"background_color": self._background.as_tuple()}


@dataclass(frozen=True)
class BinarizeStep(PreprocessStep):
    """Otsu binarization on the luma histogram."""

    _threshold: int | None = field(default=None, init=False, repr=False)

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        result, threshold = binarize_otsu(buffer)
        object.__setattr__(self, "_threshold", threshold)
        return result

    @property
    def name(self) -> str:
        return "binarize"

    def get_metadata(self) -> dict[str, Any]:
        if self._threshold is None:
            return {}
        return {"threshold": self._threshold}


@dataclass(frozen=True)
class SharpenStep(PreprocessStep):
    """3x3 sharpen convolution."""

    center_weight: int = SHARPEN_CENTER_WEIGHT

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return sharpen(buffer, sharpen_kernel(self.center_weight))

    @property
    def name(self) -> str:
        return f"sharpen({self.center_weight})"


@dataclass(frozen=True)
class DeskewStep(PreprocessStep):
    """Rotation correction.

    Currently returns an unchanged copy of the input.
    TODO: estimate the dominant text angle (e.g. from a projection profile
    of the binarized image) and rotate by its negative.
    """

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return buffer.clone()

    @property
    def name(self) -> str:
        return "deskew"

    def get_metadata(self) -> dict[str, Any]:
        return {"step_status": "identity"}


@dataclass
class StepResult:
    """Result of applying a single preprocessing step.

    Attributes:
        name: Name of the step that produced this result.
        image: Output buffer from the step.
        metadata: Any metadata produced by the step.
        artifact_path: Path where the image was saved (if artifact saving enabled).
    """

    name: str
    image: PixelBuffer
    metadata: dict[str, Any] = field(default_factory=dict)
    artifact_path: str | None = None


@dataclass
class PipelineStepResults:
    """Results from running a preprocessing pipeline.

    Attributes:
        original: The original input buffer.
        steps: List of StepResult for each step in order.
        original_artifact_path: Path where the original was saved (if artifact saving enabled).
    """

    original: PixelBuffer
    steps: list[StepResult] = field(default_factory=list)
    original_artifact_path: str | None = None

    @property
    def final(self) -> PixelBuffer:
        """Get the final processed buffer."""
        if not self.steps:
            return self.original
        return self.steps[-1].image

    def get_intermediate(self, step_name: str) -> PixelBuffer | None:
        """Get an intermediate buffer by step key (e.g. "binarize", "scale_up")."""
        for step in self.steps:
            if step.name.split("(")[0] == step_name:
                return step.image
        return None

    def get_metadata(self, key: str) -> Any | None:
        """Get a metadata value from the first step that produced it."""
        for step in self.steps:
            if key in step.metadata:
                return step.metadata[key]
        return None

    @property
    def scale_factor(self) -> float:
        """Ratio of final width to original width."""
        return self.final.width / self.original.width

    @property
    def all_metadata(self) -> dict[str, Any]:
        """All metadata from all steps merged; later steps override earlier ones."""
        result = {}
        for step in self.steps:
            result.update(step.metadata)
        return result

    @property
    def artifact_paths(self) -> dict[str, str]:
        """Step key to artifact path, including "original" when saved."""
        paths = {}
        if self.original_artifact_path:
            paths["original"] = self.original_artifact_path
        for step in self.steps:
            if step.artifact_path:
                paths[step.name.split("(")[0]] = step.artifact_path
        return paths


@dataclass
class Pipeline:
    """A sequence of preprocessing steps to apply to a buffer.

    The pipeline runs each step in order, passing the output of one step
    as the input to the next. All intermediate results are preserved.
    """

    steps: list[PreprocessStep]

    def run(
        self,
        buffer: PixelBuffer,
        artifact_dir: str | None = None,
    ) -> PipelineStepResults:
        """Run the pipeline on a buffer.

        Args:
            buffer: Input buffer.
            artifact_dir: Optional directory to save intermediate images.
                         If provided, saves original.png and each step's output.

        Returns:
            PipelineStepResults containing all intermediate buffers and metadata.
        """
        result = PipelineStepResults(original=buffer.clone())
        current = result.original

        if artifact_dir:
            original_path = f"{artifact_dir}/original.png"
            save_image(buffer, original_path)
            result.original_artifact_path = original_path

        for step in self.steps:
            output = step.apply(current)
            metadata = step.get_metadata()
            logger.debug("Step %s -> %dx%d %s", step.name, output.width, output.height, metadata)

            artifact_path = None
            if artifact_dir:
                step_key = step.name.split("(")[0]
                artifact_path = f"{artifact_dir}/{step_key}.png"
                save_image(output, artifact_path)

            result.steps.append(
                StepResult(
                    name=step.name,
                    image=output,
                    metadata=metadata,
                    artifact_path=artifact_path,
                )
            )
            current = output

        return result

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)
