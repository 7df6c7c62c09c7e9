"""
Interface to the external text recognizer.

The pipeline never runs OCR itself. Any engine exposing recognize() can be
plugged in; it is called once per processed image.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np

from .types import EnhancedImageResult, ProcessedImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecognitionResult:
    """Text recognized in one image.

    Attributes:
        text: Recognized text, possibly empty.
        confidence: Engine confidence. Engines report 0-1 or 0-100; the
                    value is passed through untouched.
    """

    text: str
    confidence: float


@runtime_checkable
class TextRecognizer(Protocol):
    """Anything that turns an RGBA array into text."""

    def recognize(self, image: np.ndarray) -> RecognitionResult:
        ...


def recognize_all(
    result: EnhancedImageResult,
    recognizer: TextRecognizer,
) -> list[tuple[ProcessedImage, RecognitionResult]]:
    """Call the recognizer once per processed image, in result order."""
    recognitions = []
    for processed in result.processed_images:
        recognition = recognizer.recognize(processed.image.to_array())
        logger.debug(
            "Source %s: %d chars, confidence %.2f",
            processed.source, len(recognition.text), recognition.confidence,
        )
        recognitions.append((processed, recognition))
    return recognitions


def best_recognition(
    recognitions: list[tuple[ProcessedImage, RecognitionResult]],
) -> RecognitionResult | None:
    """Highest-confidence recognition with non-blank text.

    Equal confidences keep the earlier image. Returns None if every text is blank.
    """
    best: RecognitionResult | None = None
    for _, recognition in recognitions:
        if not recognition.text.strip():
            continue
        if best is None or recognition.confidence > best.confidence:
            best = recognition
    return best
