"""
Per-pixel and windowed filters over RGBA pixel buffers.

All functions are pure: they take a buffer and return a new buffer without
mutating the input. Alpha is carried through unchanged. 3x3 window filters
only write interior pixels; the one-pixel border keeps its input values.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import cv2
import numpy as np

from config import (
    BACKGROUND_QUANTIZATION_STEP,
    BACKGROUND_SAMPLE_SIZE,
    BACKGROUND_TOLERANCE,
    SHARPEN_CENTER_WEIGHT,
)

from .buffer import WHITE, Color, PixelBuffer
from .threshold import luma

logger = logging.getLogger(__name__)


def contrast_stretch(buffer: PixelBuffer, factor: float) -> PixelBuffer:
    """Stretch R, G, B around mid-gray: v' = clamp((v - 128) * factor + 128).

    Examples:
        >>> buf = PixelBuffer.create(2, 2, Color(100, 128, 200))
        >>> contrast_stretch(buf, 2.0).get(0, 0)
        Color(r=72, g=128, b=255)
    """
    if factor < 0:
        raise ValueError(f"Contrast factor must be non-negative, got {factor}")
    rgb = buffer.rgb.astype(np.float64)
    return buffer.with_rgb((rgb - 128.0) * factor + 128.0)


def to_grayscale(buffer: PixelBuffer) -> PixelBuffer:
    """Set R = G = B = luma for every pixel."""
    gray = luma(buffer)
    return buffer.with_rgb(np.repeat(gray[:, :, np.newaxis], 3, axis=2))


def median_denoise(buffer: PixelBuffer) -> PixelBuffer:
    """3x3 median filter applied to R, G and B independently.

    Border rows and columns are left as they are.
    """
    rgb = buffer.rgb
    result = rgb.copy()
    if buffer.width >= 3 and buffer.height >= 3:
        blurred = cv2.medianBlur(np.ascontiguousarray(rgb), 3)
        result[1:-1, 1:-1] = blurred[1:-1, 1:-1]
    return buffer.with_rgb(result)


def sharpen_kernel(center_weight: int = SHARPEN_CENTER_WEIGHT) -> np.ndarray:
    """Laplacian-style 3x3 kernel with the given center weight.

    A center weight of 5 is the standard sharpen; 6 also brightens, which
    helps separate text strokes from the background.
    """
    return np.array(
        [
            [0, -1, 0],
            [-1, center_weight, -1],
            [0, -1, 0],
        ],
        dtype=np.float32,
    )


def sharpen(buffer: PixelBuffer, kernel: np.ndarray | None = None) -> PixelBuffer:
    """Convolve R, G, B with a 3x3 kernel on interior pixels, clamping to [0, 255]."""
    if kernel is None:
        kernel = sharpen_kernel()
    kernel = np.asarray(kernel, dtype=np.float32)
    if kernel.shape != (3, 3):
        raise ValueError(f"Sharpen kernel must be 3x3, got shape {kernel.shape}")

    result = buffer.rgb.copy()
    if buffer.width >= 3 and buffer.height >= 3:
        src = buffer.rgb.astype(np.float32)
        # The kernels used here are symmetric, so correlation equals convolution.
        filtered = cv2.filter2D(src, -1, kernel, borderType=cv2.BORDER_REPLICATE)
        interior = np.clip(filtered[1:-1, 1:-1], 0, 255)
        result[1:-1, 1:-1] = np.rint(interior).astype(np.uint8)
    return buffer.with_rgb(result)


def upscale_nearest(buffer: PixelBuffer, factor: int) -> PixelBuffer:
    """Enlarge by an integer factor by replicating each pixel into a factor x factor block.

    Output pixel (x, y) equals source pixel (x // factor, y // factor).
    """
    if not isinstance(factor, int):
        raise TypeError(f"factor must be int, got {type(factor).__name__}")
    if factor <= 0:
        raise ValueError(f"factor must be positive, got {factor}")
    data = np.repeat(np.repeat(buffer.data, factor, axis=0), factor, axis=1)
    return PixelBuffer(np.ascontiguousarray(data))


def quantize_colors(buffer: PixelBuffer, step: int) -> PixelBuffer:
    """Snap each channel to the nearest multiple of step, clamped to 255."""
    if step <= 0:
        raise ValueError(f"Quantization step must be positive, got {step}")
    rgb = buffer.rgb.astype(np.float64)
    return buffer.with_rgb(np.floor(rgb / step + 0.5) * step)


def most_common_color(
    colors: Iterable[Color],
    step: int = BACKGROUND_QUANTIZATION_STEP,
) -> Color:
    """Most frequent color after quantizing to multiples of step.

    Ties go to the color encountered first. An empty input yields white.
    """
    counts: dict[Color, int] = {}
    for color in colors:
        key = color.quantized(step)
        counts[key] = counts.get(key, 0) + 1

    best = WHITE
    best_count = 0
    for color, count in counts.items():
        if count > best_count:
            best = color
            best_count = count
    return best


def sample_corners(
    buffer: PixelBuffer,
    size: int = BACKGROUND_SAMPLE_SIZE,
) -> list[Color]:
    """Colors from the four corner blocks, in TL, TR, BL, BR order.

    Blocks are clipped to the buffer, so images smaller than a block
    sample overlapping pixels more than once.
    """
    width, height = buffer.size
    block_w = min(size, width)
    block_h = min(size, height)
    right = width - block_w
    bottom = height - block_h
    samples: list[Color] = []
    for x, y in ((0, 0), (right, 0), (0, bottom), (right, bottom)):
        block = buffer.rgb[y:y + block_h, x:x + block_w].reshape(-1, 3)
        samples.extend(Color(int(r), int(g), int(b)) for r, g, b in block)
    return samples


def estimate_background_color(buffer: PixelBuffer) -> Color:
    """Most common quantized color among the four corner blocks."""
    return most_common_color(sample_corners(buffer), BACKGROUND_QUANTIZATION_STEP)


def color_distance_map(buffer: PixelBuffer, color: Color) -> np.ndarray:
    """Euclidean RGB distance of every pixel to color, as a (H, W) float array."""
    diff = buffer.rgb.astype(np.float64) - np.array(color.as_tuple(), dtype=np.float64)
    return np.sqrt(np.sum(diff * diff, axis=2))


def remove_background(
    buffer: PixelBuffer,
    tolerance: float = BACKGROUND_TOLERANCE,
) -> tuple[PixelBuffer, Color]:
    """Paint every pixel close to the estimated background color white.

    Returns:
        Tuple of (new buffer, estimated background color).
    """
    background = estimate_background_color(buffer)
    mask = color_distance_map(buffer, background) < tolerance
    rgb = buffer.rgb.copy()
    rgb[mask] = WHITE.as_tuple()
    logger.debug(
        "Background %s, %d of %d pixels whitened",
        background.as_tuple(), int(mask.sum()), mask.size,
    )
    return buffer.with_rgb(rgb), background
