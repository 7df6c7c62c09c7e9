"""
Histogram thresholding: Otsu, bimodal peak midpoint, and binarization.

The histogram is always built from a full read pass over the buffer before
any pixel is written, so thresholds never see a partially binarized image.
"""

from __future__ import annotations

import logging

import numpy as np

from config import HISTOGRAM_BINS, HISTOGRAM_PEAK_MIN_COUNT, LUMA_WEIGHTS

from .buffer import PixelBuffer

logger = logging.getLogger(__name__)


def luma(buffer: PixelBuffer) -> np.ndarray:
    """Per-pixel luma as a (H, W) uint8 array.

    gray = round(0.299 R + 0.587 G + 0.114 B), halves rounding up.
    """
    rgb = buffer.rgb.astype(np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    gray = np.floor(rgb[:, :, 0] * wr + rgb[:, :, 1] * wg + rgb[:, :, 2] * wb + 0.5)
    return np.clip(gray, 0, 255).astype(np.uint8)


def build_histogram(buffer: PixelBuffer) -> np.ndarray:
    """Count pixels per luma level.

    Returns:
        Read-only int64 array of length 256.
    """
    histogram = np.bincount(luma(buffer).ravel(), minlength=HISTOGRAM_BINS).astype(np.int64)
    histogram.flags.writeable = False
    return histogram


def _check_histogram(histogram: np.ndarray) -> None:
    if len(histogram) != HISTOGRAM_BINS:
        raise ValueError(
            f"Histogram must have {HISTOGRAM_BINS} bins, got {len(histogram)}"
        )
    if np.any(np.asarray(histogram) < 0):
        raise ValueError("Histogram counts must be non-negative")


def otsu_threshold(histogram) -> int:
    """Gray level maximizing between-class variance.

    Evaluates w_B * w_F * (mean_B - mean_F)^2 for every candidate level t,
    where the background class holds the levels below t and the foreground
    class t and above. The first level reaching the maximum wins; a
    histogram with a single occupied level yields 0.

    Examples:
        >>> hist = np.zeros(256, dtype=np.int64)
        >>> hist[20] = hist[220] = 1000
        >>> otsu_threshold(hist)
        21
    """
    _check_histogram(histogram)
    counts = [int(c) for c in histogram]
    total = sum(counts)
    weighted_sum = sum(level * count for level, count in enumerate(counts))

    sum_background = 0
    weight_background = 0
    best_variance = 0.0
    threshold = 0

    for level, count in enumerate(counts):
        weight_background += count
        if weight_background == 0:
            continue
        weight_foreground = total - weight_background
        if weight_foreground == 0:
            break

        sum_background += level * count
        mean_background = sum_background / weight_background
        mean_foreground = (weighted_sum - sum_background) / weight_foreground

        variance = (
            weight_background
            * weight_foreground
            * (mean_background - mean_foreground) ** 2
        )
        if variance > best_variance:
            best_variance = variance
            threshold = level + 1

    return threshold


def find_histogram_peaks(
    histogram,
    min_count: int = HISTOGRAM_PEAK_MIN_COUNT,
    max_peaks: int = 2,
) -> list[int]:
    """Gray levels of the highest strict local maxima.

    A level qualifies when its count exceeds both neighbours and min_count.
    Levels are ordered by descending count; equal counts keep the lower
    level first.
    """
    _check_histogram(histogram)
    peaks = []
    for level in range(1, len(histogram) - 1):
        count = histogram[level]
        if count > histogram[level - 1] and count > histogram[level + 1] and count > min_count:
            peaks.append((level, int(count)))

    peaks.sort(key=lambda peak: peak[1], reverse=True)
    return [level for level, _ in peaks[:max_peaks]]


def bimodal_threshold(histogram) -> int:
    """First white level above the midpoint of the two largest peaks.

    The midpoint (halves rounding up) belongs to the dark class, so the
    returned threshold is one above it. Without two peaks this is the Otsu
    threshold of the same histogram.
    """
    peaks = find_histogram_peaks(histogram)
    if len(peaks) >= 2:
        midpoint = (peaks[0] + peaks[1] + 1) // 2
        threshold = midpoint + 1
        logger.debug("Bimodal threshold %d from peaks %s", threshold, peaks)
        return threshold

    threshold = otsu_threshold(histogram)
    logger.debug("Fewer than two histogram peaks, Otsu threshold %d", threshold)
    return threshold


def adaptive_threshold(buffer: PixelBuffer) -> int:
    """Bimodal-or-Otsu threshold computed from the buffer's luma histogram."""
    return bimodal_threshold(build_histogram(buffer))


def binarize(buffer: PixelBuffer, threshold: int) -> PixelBuffer:
    """Map every pixel to black or white by comparing its luma to threshold.

    Luma at or above the threshold becomes white, below it black. Alpha is
    preserved.
    """
    gray = luma(buffer)
    values = np.where(gray >= threshold, 255, 0).astype(np.uint8)
    return buffer.with_rgb(np.repeat(values[:, :, np.newaxis], 3, axis=2))


def binarize_otsu(buffer: PixelBuffer) -> tuple[PixelBuffer, int]:
    """Binarize with the Otsu threshold of the buffer itself."""
    threshold = otsu_threshold(build_histogram(buffer))
    return binarize(buffer, threshold), threshold


def binarize_adaptive(buffer: PixelBuffer) -> tuple[PixelBuffer, int]:
    """Binarize with the bimodal-or-Otsu threshold of the buffer itself."""
    threshold = adaptive_threshold(buffer)
    return binarize(buffer, threshold), threshold
