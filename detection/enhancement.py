"""
Enhancement of text regions and of the whole image.

Region enhancement is aggressive: it isolates one region and turns it into
a clean black-on-white bitmap. Global enhancement keeps the overall layout
and only whitens the background and flattens colors.
"""

from __future__ import annotations

import logging

import numpy as np

from config import (
    BACKGROUND_QUANTIZATION_STEP,
    GLOBAL_COLOR_QUANTIZATION_STEP,
    GLOBAL_CONTRAST_FACTOR,
    GLOBAL_EDGE_SAMPLE_STEP,
    GLOBAL_MASK_DISTANCE_SCALE,
    GLOBAL_MASK_THRESHOLD,
    REGION_CONTRAST_FACTOR,
    REGION_PADDING,
    TEXT_SHARPEN_CENTER_WEIGHT,
)
from preprocessing import (
    WHITE,
    Color,
    PixelBuffer,
    binarize_adaptive,
    color_distance_map,
    contrast_stretch,
    most_common_color,
    quantize_colors,
    sharpen,
    sharpen_kernel,
    to_grayscale,
)

from .bbox import clip_rect
from .types import TextRegion

logger = logging.getLogger(__name__)


# =============================================================================
# REGION ENHANCEMENT
# =============================================================================


def crop_with_padding(
    buffer: PixelBuffer,
    region: TextRegion,
    padding: int = REGION_PADDING,
) -> PixelBuffer:
    """Crop region plus a padding border onto an opaque white canvas.

    Parts of the padded rectangle outside the image stay white. Source
    pixels are composited over white, so the crop is fully opaque.

    Returns:
        Buffer of size (region.width + 2 * padding, region.height + 2 * padding).
    """
    out_w = region.width + 2 * padding
    out_h = region.height + 2 * padding
    canvas = PixelBuffer.create(out_w, out_h, WHITE)

    left = region.x - padding
    top = region.y - padding
    sx, sy, sw, sh = clip_rect(left, top, out_w, out_h, buffer.width, buffer.height)
    if sw == 0 or sh == 0:
        return canvas

    src = buffer.data[sy:sy + sh, sx:sx + sw].astype(np.float64)
    alpha = src[:, :, 3:4] / 255.0
    composited = src[:, :, :3] * alpha + 255.0 * (1.0 - alpha)

    dx = sx - left
    dy = sy - top
    canvas.data[dy:dy + sh, dx:dx + sw, :3] = np.rint(composited).astype(np.uint8)
    return canvas


def enhance_text_region(buffer: PixelBuffer) -> tuple[PixelBuffer, int]:
    """Contrast 2.0, grayscale, aggressive sharpen, then adaptive binarization.

    Returns:
        Tuple of (binarized buffer, threshold used).
    """
    enhanced = contrast_stretch(buffer, REGION_CONTRAST_FACTOR)
    enhanced = to_grayscale(enhanced)
    enhanced = sharpen(enhanced, sharpen_kernel(TEXT_SHARPEN_CENTER_WEIGHT))
    return binarize_adaptive(enhanced)


def extract_and_enhance_region(
    buffer: PixelBuffer,
    region: TextRegion,
    padding: int = REGION_PADDING,
) -> tuple[PixelBuffer, int]:
    """Crop a region with padding and enhance it for text recognition."""
    crop = crop_with_padding(buffer, region, padding)
    enhanced, threshold = enhance_text_region(crop)
    logger.debug(
        "Region (%d, %d, %d, %d) enhanced with threshold %d",
        region.x, region.y, region.width, region.height, threshold,
    )
    return enhanced, threshold


# =============================================================================
# GLOBAL ENHANCEMENT
# =============================================================================


def sample_edges(buffer: PixelBuffer, step: int = GLOBAL_EDGE_SAMPLE_STEP) -> list[Color]:
    """Colors sampled every step pixels along the image border.

    Order: top and bottom rows pairwise, then left and right columns pairwise.
    """
    rgb = buffer.rgb
    width, height = buffer.size
    samples: list[Color] = []
    for x in range(0, width, step):
        for y in (0, height - 1):
            r, g, b = rgb[y, x]
            samples.append(Color(int(r), int(g), int(b)))
    for y in range(0, height, step):
        for x in (0, width - 1):
            r, g, b = rgb[y, x]
            samples.append(Color(int(r), int(g), int(b)))
    return samples


def estimate_border_background(buffer: PixelBuffer) -> Color:
    """Most common quantized color along the image border."""
    return most_common_color(sample_edges(buffer), BACKGROUND_QUANTIZATION_STEP)


def text_mask(buffer: PixelBuffer, background: Color) -> np.ndarray:
    """Per-pixel text likelihood in [0, 1] from distance to the background color.

    1 means likely text, 0 likely background.
    """
    distance = color_distance_map(buffer, background)
    return np.minimum(1.0, distance / GLOBAL_MASK_DISTANCE_SCALE)


def remove_complex_background(buffer: PixelBuffer) -> tuple[PixelBuffer, Color]:
    """Whiten pixels the text mask scores as background.

    Returns:
        Tuple of (new buffer, estimated background color).
    """
    background = estimate_border_background(buffer)
    mask = text_mask(buffer, background) < GLOBAL_MASK_THRESHOLD
    rgb = buffer.rgb.copy()
    rgb[mask] = WHITE.as_tuple()
    return buffer.with_rgb(rgb), background


def enhance_global(buffer: PixelBuffer) -> PixelBuffer:
    """Background removal, contrast 1.8, then 64-step color quantization."""
    enhanced, background = remove_complex_background(buffer)
    enhanced = contrast_stretch(enhanced, GLOBAL_CONTRAST_FACTOR)
    enhanced = quantize_colors(enhanced, GLOBAL_COLOR_QUANTIZATION_STEP)
    logger.debug("Global enhancement, background %s", background.as_tuple())
    return enhanced
