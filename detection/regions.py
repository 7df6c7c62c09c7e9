"""
Block scanners that locate probable text regions.

Each scanner tiles the image into fixed-size square blocks, scores every
block and keeps the text-like ones as candidate TextRegions:

- edge: mean Sobel gradient magnitude (text has dense strokes)
- color: low color spread, few dominant colors, high contrast between them
- stroke: fraction of dark pixels typical for printed text

Blocks start at 0 and step by the block size while the start stays strictly
below (dimension - block size), so a partial block at the right or bottom
edge is never scored. Candidates are listed row by row, left to right.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import cv2
import numpy as np

from config import (
    COLOR_BLOCK_SIZE,
    COLOR_CONTRAST_DISTANCE,
    COLOR_MAX_DOMINANT,
    COLOR_QUANTIZATION_STEP,
    COLOR_VARIANCE_THRESHOLD,
    COLOR_WEIGHT_FEW_COLORS,
    COLOR_WEIGHT_HIGH_CONTRAST,
    COLOR_WEIGHT_LOW_VARIANCE,
    EDGE_BLOCK_SIZE,
    EDGE_SCORE_THRESHOLD,
    STROKE_BLOCK_SIZE,
    STROKE_DARK_LEVEL,
    STROKE_MAX_DARK_RATIO,
    STROKE_MIN_DARK_RATIO,
)
from preprocessing import Color, PixelBuffer, luma

from .types import BlockScore, ColorBlockAnalysis, TextRegion

logger = logging.getLogger(__name__)


def iter_blocks(width: int, height: int, size: int) -> Iterator[tuple[int, int]]:
    """Yield (x, y) of each scanned block, row-major."""
    for y in range(0, height - size, size):
        for x in range(0, width - size, size):
            yield x, y


# =============================================================================
# EDGE SCANNER
# =============================================================================


def sobel_magnitude(buffer: PixelBuffer) -> np.ndarray:
    """Sobel gradient magnitude of the channel-mean gray image.

    Returns:
        (H, W) uint8 array of sqrt(Gx^2 + Gy^2) clamped to 255. Border
        pixels are 0.
    """
    gray = buffer.rgb.astype(np.float64).sum(axis=2) / 3.0
    magnitude = np.zeros(gray.shape, dtype=np.uint8)
    if buffer.width < 3 or buffer.height < 3:
        return magnitude

    gx = cv2.Sobel(gray, cv2.CV_64F, 1, 0, ksize=3)
    gy = cv2.Sobel(gray, cv2.CV_64F, 0, 1, ksize=3)
    interior = np.sqrt(gx * gx + gy * gy)[1:-1, 1:-1]
    magnitude[1:-1, 1:-1] = np.rint(np.clip(interior, 0, 255)).astype(np.uint8)
    return magnitude


def score_edge_blocks(
    buffer: PixelBuffer,
    block_size: int = EDGE_BLOCK_SIZE,
    threshold: float = EDGE_SCORE_THRESHOLD,
) -> list[BlockScore]:
    """Mean normalized edge magnitude of every block."""
    edges = sobel_magnitude(buffer).astype(np.float64) / 255.0
    scores = []
    for x, y in iter_blocks(buffer.width, buffer.height, block_size):
        score = float(edges[y:y + block_size, x:x + block_size].mean())
        scores.append(BlockScore("edge", x, y, block_size, score, score > threshold))
    return scores


def detect_text_by_edges(buffer: PixelBuffer) -> list[TextRegion]:
    """Blocks whose edge score exceeds the edge threshold."""
    return [s.to_region() for s in score_edge_blocks(buffer) if s.is_candidate]


# =============================================================================
# COLOR SCANNER
# =============================================================================


def color_variance(colors: np.ndarray) -> float:
    """Population standard deviation of (N, 3) colors, channels taken jointly."""
    if len(colors) == 0:
        return 0.0
    colors = colors.astype(np.float64)
    deviation = colors - colors.mean(axis=0)
    return float(np.sqrt((deviation * deviation).sum(axis=1).mean()))


def dominant_colors(
    colors: np.ndarray,
    max_colors: int = COLOR_MAX_DOMINANT,
    step: int = COLOR_QUANTIZATION_STEP,
) -> list[tuple[tuple[int, int, int], int]]:
    """Most frequent quantized colors with their counts.

    Channels snap to the nearest multiple of step (halves round up). Colors
    with equal counts keep the order in which they first appear.
    """
    if len(colors) == 0:
        return []
    quantized = (np.floor(colors.astype(np.float64) / step + 0.5) * step).astype(np.int64)
    levels = 256 // step + 1
    codes = (quantized[:, 0] // step) * levels * levels + (quantized[:, 1] // step) * levels + quantized[:, 2] // step
    unique, first_index, counts = np.unique(codes, return_index=True, return_counts=True)
    order = np.lexsort((first_index, -counts))[:max_colors]
    return [
        (tuple(int(v) for v in quantized[first_index[i]]), int(counts[i]))
        for i in order
    ]


def analyze_color_block(colors: np.ndarray) -> ColorBlockAnalysis:
    """Score an (N, 3) block of colors against the three text signals."""
    variance = color_variance(colors)
    dominant = dominant_colors(colors)

    low_variance = variance < COLOR_VARIANCE_THRESHOLD
    few_colors = len(dominant) <= 2
    high_contrast = (
        len(dominant) >= 2
        and Color(*dominant[0][0]).distance_to(Color(*dominant[1][0])) > COLOR_CONTRAST_DISTANCE
    )
    confidence = (
        (COLOR_WEIGHT_LOW_VARIANCE if low_variance else 0.0)
        + (COLOR_WEIGHT_FEW_COLORS if few_colors else 0.0)
        + (COLOR_WEIGHT_HIGH_CONTRAST if high_contrast else 0.0)
    )
    return ColorBlockAnalysis(
        color_variance=variance,
        dominant_colors=tuple(dominant),
        low_variance=low_variance,
        few_colors=few_colors,
        high_contrast=high_contrast,
        confidence=min(1.0, confidence),
    )


def score_color_blocks(
    buffer: PixelBuffer,
    block_size: int = COLOR_BLOCK_SIZE,
) -> list[BlockScore]:
    """Color analysis of every block."""
    rgb = buffer.rgb
    scores = []
    for x, y in iter_blocks(buffer.width, buffer.height, block_size):
        block = rgb[y:y + block_size, x:x + block_size].reshape(-1, 3)
        analysis = analyze_color_block(block)
        scores.append(
            BlockScore(
                "color", x, y, block_size,
                score=analysis.confidence,
                is_candidate=analysis.is_text_like,
                color=analysis,
            )
        )
    return scores


def detect_text_by_color(buffer: PixelBuffer) -> list[TextRegion]:
    """Blocks passing all three color signals."""
    return [s.to_region() for s in score_color_blocks(buffer) if s.is_candidate]


# =============================================================================
# STROKE SCANNER
# =============================================================================


def dark_ratio(gray_block: np.ndarray, dark_level: int = STROKE_DARK_LEVEL) -> float:
    """Fraction of pixels with luma below dark_level."""
    if gray_block.size == 0:
        return 0.0
    return float(np.count_nonzero(gray_block < dark_level)) / gray_block.size


def score_stroke_blocks(
    buffer: PixelBuffer,
    block_size: int = STROKE_BLOCK_SIZE,
) -> list[BlockScore]:
    """Dark ratio of every block; the score is 0 outside the text range."""
    gray = luma(buffer)
    scores = []
    for x, y in iter_blocks(buffer.width, buffer.height, block_size):
        ratio = dark_ratio(gray[y:y + block_size, x:x + block_size])
        in_range = STROKE_MIN_DARK_RATIO < ratio < STROKE_MAX_DARK_RATIO
        scores.append(
            BlockScore("stroke", x, y, block_size, ratio if in_range else 0.0, in_range)
        )
    return scores


def detect_text_by_stroke(buffer: PixelBuffer) -> list[TextRegion]:
    """Blocks whose dark ratio lies strictly inside the text range."""
    return [s.to_region() for s in score_stroke_blocks(buffer) if s.is_candidate]


# =============================================================================
# ALL SCANNERS
# =============================================================================


def find_text_candidates(buffer: PixelBuffer) -> list[TextRegion]:
    """Candidates from the edge, color and stroke scanners, concatenated in that order."""
    edge = detect_text_by_edges(buffer)
    color = detect_text_by_color(buffer)
    stroke = detect_text_by_stroke(buffer)
    logger.debug(
        "Candidates: %d edge, %d color, %d stroke", len(edge), len(color), len(stroke)
    )
    return edge + color + stroke
