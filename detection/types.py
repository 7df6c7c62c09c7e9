"""
Type definitions for the detection module.

This module defines the core data structures used throughout the region
detection and enhancement pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Union

from preprocessing import PixelBuffer

# Which block scanner produced a candidate
ScannerName = Literal["edge", "color", "stroke"]

# A processed image comes from a region (its index) or from the whole image
ImageSource = Union[int, Literal["global"]]

GLOBAL_SOURCE: Literal["global"] = "global"


@dataclass(frozen=True)
class TextRegion:
    """A rectangle hypothesized to contain text.

    Attributes:
        x: Left edge in image pixels.
        y: Top edge in image pixels.
        width: Width in pixels.
        height: Height in pixels.
        confidence: Score between 0 and 1.
        sources: Scanners that contributed to this region, in the order
                 they were absorbed. Not part of equality.
    """

    x: int
    y: int
    width: int
    height: int
    confidence: float
    sources: tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Region size must be non-negative, got {self.width}x{self.height}"
            )
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be in [0, 1], got {self.confidence}")

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def to_xywh(self) -> tuple[int, int, int, int]:
        """Return (x, y, w, h) tuple."""
        return (self.x, self.y, self.width, self.height)

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "confidence": self.confidence,
            "sources": list(self.sources),
        }

    @classmethod
    def from_dict(cls, d: dict) -> TextRegion:
        return cls(
            x=d["x"],
            y=d["y"],
            width=d["width"],
            height=d["height"],
            confidence=d["confidence"],
            sources=tuple(d.get("sources", ())),
        )


@dataclass(frozen=True)
class ColorBlockAnalysis:
    """How one block fared against the color scanner's three signals.

    Attributes:
        color_variance: Population standard deviation of the block's colors,
                        R, G and B taken jointly.
        dominant_colors: Up to three most frequent quantized colors with
                         their pixel counts, most frequent first.
        low_variance: color_variance below the variance threshold.
        few_colors: At most two dominant colors.
        high_contrast: The two most frequent colors are far apart.
    """

    color_variance: float
    dominant_colors: tuple[tuple[tuple[int, int, int], int], ...]
    low_variance: bool
    few_colors: bool
    high_contrast: bool
    confidence: float

    @property
    def is_text_like(self) -> bool:
        return self.low_variance and self.few_colors and self.high_contrast


@dataclass(frozen=True)
class BlockScore:
    """Score of one scanner block, whether or not it became a candidate."""

    scanner: ScannerName
    x: int
    y: int
    size: int
    score: float
    is_candidate: bool
    color: ColorBlockAnalysis | None = None

    def to_region(self) -> TextRegion:
        return TextRegion(
            x=self.x,
            y=self.y,
            width=self.size,
            height=self.size,
            confidence=self.score,
            sources=(self.scanner,),
        )


@dataclass
class ProcessedImage:
    """An enhanced buffer ready for text recognition.

    Attributes:
        image: Enhanced buffer.
        source: Index into EnhancedImageResult.regions, or "global" for
                the whole-image fallback.
        threshold: Binarization threshold used, if any.
    """

    image: PixelBuffer
    source: ImageSource
    threshold: int | None = None

    @property
    def is_global(self) -> bool:
        return self.source == GLOBAL_SOURCE


@dataclass
class EnhancedImageResult:
    """Everything the pipeline hands to the text recognizer.

    Attributes:
        regions: Merged text regions in detection order.
        processed_images: One entry per enhanced region (same order as
                          regions), followed by the global fallback if it ran.
    """

    regions: list[TextRegion] = field(default_factory=list)
    processed_images: list[ProcessedImage] = field(default_factory=list)

    @property
    def no_text_detected(self) -> bool:
        """True when no text region was found."""
        return not self.regions

    @property
    def region_images(self) -> list[ProcessedImage]:
        return [p for p in self.processed_images if not p.is_global]

    @property
    def global_image(self) -> ProcessedImage | None:
        for processed in self.processed_images:
            if processed.is_global:
                return processed
        return None


class PipelineState(str, Enum):
    """Stages of one pipeline invocation."""

    IDLE = "idle"
    DETECTING_REGIONS = "detecting_regions"
    ENHANCING_REGIONS = "enhancing_regions"
    DONE = "done"
    FAILED = "failed"
