"""
Unit tests for the pixel filters: behavioral tests only.

Covers: purity (no input mutation), border handling, the upscale block
replication law and background removal.
"""

import numpy as np
import pytest

from preprocessing import (
    WHITE,
    Color,
    PixelBuffer,
    contrast_stretch,
    estimate_background_color,
    median_denoise,
    most_common_color,
    quantize_colors,
    remove_background,
    sample_corners,
    sharpen,
    sharpen_kernel,
    to_grayscale,
    upscale_nearest,
)


def _random_buffer(width=12, height=9, seed=0):
    rng = np.random.default_rng(seed)
    return PixelBuffer(rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8))


class TestContrastStretch:
    def test_factor_one_is_identity(self):
        buf = _random_buffer()
        assert contrast_stretch(buf, 1.0) == buf

    def test_stretches_around_mid_gray(self):
        buf = PixelBuffer.create(2, 2, Color(100, 128, 200))
        assert contrast_stretch(buf, 2.0).get(1, 1) == Color(72, 128, 255)

    def test_factor_zero_flattens_to_mid_gray(self):
        out = contrast_stretch(_random_buffer(), 0.0)
        assert np.all(out.rgb == 128)

    def test_preserves_alpha(self):
        buf = _random_buffer()
        out = contrast_stretch(buf, 1.5)
        assert np.array_equal(out.alpha, buf.alpha)

    def test_pure_function_no_mutation(self):
        buf = _random_buffer()
        before = buf.to_array()
        contrast_stretch(buf, 3.0)
        assert np.array_equal(buf.data, before)

    def test_negative_factor_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            contrast_stretch(_random_buffer(), -1.0)


class TestToGrayscale:
    def test_channels_equal_luma(self):
        buf = PixelBuffer.create(3, 3, Color(255, 0, 0))
        out = to_grayscale(buf)
        assert out.get(1, 1) == Color(76, 76, 76)

    def test_white_stays_white(self):
        assert to_grayscale(PixelBuffer.create(4, 4)) == PixelBuffer.create(4, 4)


class TestMedianDenoise:
    def test_removes_isolated_interior_pixel(self):
        buf = PixelBuffer.create(5, 5, Color(0, 0, 0))
        buf.set(2, 2, WHITE)
        out = median_denoise(buf)
        assert out.get(2, 2) == Color(0, 0, 0)

    def test_border_pixels_untouched(self):
        buf = PixelBuffer.create(5, 5, Color(0, 0, 0))
        buf.set(0, 0, WHITE)
        buf.set(4, 2, WHITE)
        out = median_denoise(buf)
        assert out.get(0, 0) == WHITE
        assert out.get(4, 2) == WHITE
        assert out.get(1, 1) == Color(0, 0, 0)

    def test_tiny_image_unchanged(self):
        buf = _random_buffer(width=2, height=2)
        assert median_denoise(buf) == buf

    def test_pure_function_no_mutation(self):
        buf = _random_buffer()
        before = buf.to_array()
        median_denoise(buf)
        assert np.array_equal(buf.data, before)


class TestSharpen:
    def test_standard_kernel_keeps_flat_image(self):
        buf = PixelBuffer.create(6, 6, Color(100, 100, 100))
        assert sharpen(buf) == buf

    def test_aggressive_kernel_brightens_interior_only(self):
        buf = PixelBuffer.create(6, 6, Color(100, 100, 100))
        out = sharpen(buf, sharpen_kernel(6))
        assert out.get(2, 2) == Color(200, 200, 200)
        assert out.get(0, 3) == Color(100, 100, 100)
        assert out.get(5, 5) == Color(100, 100, 100)

    def test_clamps_to_valid_range(self):
        buf = PixelBuffer.create(5, 5, Color(0, 0, 0))
        buf.set(2, 2, WHITE)
        out = sharpen(buf)
        assert out.get(2, 2) == WHITE
        assert out.get(2, 1) == Color(0, 0, 0)

    def test_kernel_shape_validated(self):
        with pytest.raises(ValueError, match="3x3"):
            sharpen(_random_buffer(), np.ones((2, 2)))

    def test_kernel_center_weight(self):
        kernel = sharpen_kernel(6)
        assert kernel[1, 1] == 6
        assert kernel.sum() == 2


class TestUpscaleNearest:
    def test_dimensions(self):
        out = upscale_nearest(_random_buffer(width=4, height=3), 3)
        assert out.size == (12, 9)

    def test_block_replication_law(self):
        buf = _random_buffer(width=4, height=3, seed=7)
        k = 3
        out = upscale_nearest(buf, k)
        for y in range(out.height):
            for x in range(out.width):
                assert np.array_equal(out.data[y, x], buf.data[y // k, x // k])

    def test_factor_one_copies(self):
        buf = _random_buffer()
        out = upscale_nearest(buf, 1)
        assert out == buf
        assert out.data is not buf.data

    def test_zero_factor_raises(self):
        with pytest.raises(ValueError, match="positive"):
            upscale_nearest(_random_buffer(), 0)

    def test_float_factor_raises(self):
        with pytest.raises(TypeError, match="factor must be int"):
            upscale_nearest(_random_buffer(), 1.5)


class TestQuantizeColors:
    def test_nearest_multiple_clamped(self):
        buf = PixelBuffer.from_array(np.array([[31, 32, 250]], dtype=np.uint8))
        out = quantize_colors(buf, 64)
        assert out.rgb[0, :, 0].tolist() == [0, 64, 255]

    def test_invalid_step_raises(self):
        with pytest.raises(ValueError):
            quantize_colors(_random_buffer(), 0)


class TestBackgroundEstimation:
    def test_most_common_color_majority(self):
        colors = [Color(0, 0, 0), Color(250, 250, 250), Color(255, 255, 255)]
        assert most_common_color(colors, 16) == Color(256, 256, 256)

    def test_most_common_color_tie_keeps_first(self):
        colors = [Color(0, 0, 0), Color(255, 255, 255)]
        assert most_common_color(colors, 16) == Color(0, 0, 0)

    def test_most_common_color_empty_is_white(self):
        assert most_common_color([]) == WHITE

    def test_sample_corners_order(self):
        buf = PixelBuffer.create(30, 20)
        buf.set(0, 0, Color(255, 0, 0))
        buf.set(29, 0, Color(0, 255, 0))
        samples = sample_corners(buf)
        assert len(samples) == 400
        assert samples[0] == Color(255, 0, 0)
        assert samples[109] == Color(0, 255, 0)

    def test_sample_corners_small_image(self):
        assert len(sample_corners(PixelBuffer.create(5, 5))) == 100

    def test_estimate_ignores_center(self):
        buf = PixelBuffer.create(40, 40, Color(200, 30, 30))
        buf.data[10:30, 10:30, :3] = 0
        assert estimate_background_color(buf) == Color(208, 32, 32)


class TestRemoveBackground:
    def test_uniform_image_becomes_white(self):
        buf = PixelBuffer.create(30, 30, Color(37, 140, 201))
        out, background = remove_background(buf)
        assert np.all(out.rgb == 255)
        assert background == Color(32, 144, 208)

    def test_keeps_distant_pixels(self):
        buf = PixelBuffer.create(40, 40, Color(200, 30, 30))
        buf.data[15:25, 15:25, :3] = 0
        out, _ = remove_background(buf)
        assert out.get(2, 2) == WHITE
        assert out.get(20, 20) == Color(0, 0, 0)

    def test_pure_function_no_mutation(self):
        buf = PixelBuffer.create(30, 30, Color(37, 140, 201))
        before = buf.to_array()
        remove_background(buf)
        assert np.array_equal(buf.data, before)
