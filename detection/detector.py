"""
Main detect-and-enhance orchestration.

This module ties together all detection components: block scanners,
region merging, region enhancement and the global fallback.

One invocation moves through these states:

    IDLE -> DETECTING_REGIONS -> ENHANCING_REGIONS -> DONE

and ends in FAILED if any stage raises. A TextRegionPipeline holds no
image data between invocations.
"""

from __future__ import annotations

import logging

import numpy as np

from preprocessing import InvalidImageError, PixelBuffer

from .config import SmartOCROptions
from .enhancement import enhance_global, extract_and_enhance_region
from .merging import merge_regions
from .regions import find_text_candidates
from .types import (
    GLOBAL_SOURCE,
    EnhancedImageResult,
    PipelineState,
    ProcessedImage,
    TextRegion,
)

logger = logging.getLogger(__name__)


class TextRegionPipeline:
    """Detects text regions in an image and enhances them for recognition.

    Attributes:
        options: Options applied to every invocation.
        state: State of the current or last invocation.
        history: States visited by the current or last invocation.
    """

    def __init__(self, options: SmartOCROptions | None = None):
        if options is None:
            options = SmartOCROptions()
        options.validate()
        self.options = options
        self.state = PipelineState.IDLE
        self.history: list[PipelineState] = [PipelineState.IDLE]

    def _transition(self, state: PipelineState) -> None:
        logger.debug("Pipeline %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _validate_input(self, buffer: PixelBuffer) -> None:
        if isinstance(buffer, np.ndarray):
            raise TypeError("Expected PixelBuffer, wrap arrays with PixelBuffer.from_array()")
        if not isinstance(buffer, PixelBuffer):
            raise TypeError(f"Expected PixelBuffer, got {type(buffer).__name__}")
        if buffer.width <= 0 or buffer.height <= 0:
            raise InvalidImageError(
                f"Image must have positive width and height, got {buffer.width}x{buffer.height}"
            )

    def detect_regions(self, buffer: PixelBuffer) -> list[TextRegion]:
        """Run all scanners and merge their candidates."""
        candidates = find_text_candidates(buffer)
        return merge_regions(
            candidates,
            distance=self.options.merge_distance,
            min_width=self.options.min_region_width,
            min_height=self.options.min_region_height,
        )

    def enhance(
        self,
        buffer: PixelBuffer,
        regions: list[TextRegion],
    ) -> list[ProcessedImage]:
        """Enhance every region, then the whole image when needed.

        The whole image is enhanced when fallback_to_original is set or when
        there are no regions, which includes disabled detection.
        """
        processed: list[ProcessedImage] = []

        if self.options.enhance_text_regions:
            for index, region in enumerate(regions):
                image, threshold = extract_and_enhance_region(
                    buffer, region, padding=self.options.region_padding
                )
                processed.append(ProcessedImage(image=image, source=index, threshold=threshold))

        if self.options.fallback_to_original or not regions:
            processed.append(ProcessedImage(image=enhance_global(buffer), source=GLOBAL_SOURCE))

        return processed

    def run(self, buffer: PixelBuffer) -> EnhancedImageResult:
        """Detect and enhance text regions in one image.

        Args:
            buffer: Decoded input image. Never modified.

        Returns:
            EnhancedImageResult with merged regions and enhanced buffers, one
            per region followed by the global fallback when it ran.

        Raises:
            TypeError: If buffer is not a PixelBuffer.
            InvalidImageError: If the image has zero area.
            OutOfBoundsError: If a filter indexed outside a buffer.
        """
        self.state = PipelineState.IDLE
        self.history = [PipelineState.IDLE]

        try:
            self._validate_input(buffer)

            regions: list[TextRegion] = []
            if self.options.use_text_detection:
                self._transition(PipelineState.DETECTING_REGIONS)
                regions = self.detect_regions(buffer)
                logger.info("Detected %d text region(s)", len(regions))
            else:
                logger.debug("Text detection disabled, skipping to enhancement")

            self._transition(PipelineState.ENHANCING_REGIONS)
            processed = self.enhance(buffer, regions)
        except Exception:
            self._transition(PipelineState.FAILED)
            raise

        result = EnhancedImageResult(regions=regions, processed_images=processed)
        if result.no_text_detected and self.options.use_text_detection:
            logger.info("No text detected")
        self._transition(PipelineState.DONE)
        return result


def detect_and_extract_text(
    buffer: PixelBuffer,
    options: SmartOCROptions | None = None,
) -> EnhancedImageResult:
    """Run a fresh TextRegionPipeline on one image."""
    return TextRegionPipeline(options).run(buffer)
