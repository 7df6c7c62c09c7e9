"""Tests for histogram construction, thresholds and binarization."""

import numpy as np
import pytest

from preprocessing import (
    PixelBuffer,
    bimodal_threshold,
    binarize,
    binarize_adaptive,
    binarize_otsu,
    build_histogram,
    find_histogram_peaks,
    luma,
    otsu_threshold,
)


def _histogram(**levels):
    hist = np.zeros(256, dtype=np.int64)
    for level, count in levels.items():
        hist[int(level.lstrip("g"))] = count
    return hist


def _two_tone(dark, light, size=20):
    """Left half dark gray, right half light gray."""
    gray = np.full((size, size), light, dtype=np.uint8)
    gray[:, : size // 2] = dark
    return PixelBuffer.from_array(gray)


class TestLuma:
    def test_primary_weights(self):
        rgb = np.array([[[255, 0, 0], [0, 255, 0], [0, 0, 255]]], dtype=np.uint8)
        gray = luma(PixelBuffer.from_array(rgb))
        assert gray.tolist() == [[76, 150, 29]]

    def test_gray_is_unchanged(self):
        gray = np.arange(256, dtype=np.uint8).reshape(16, 16)
        assert np.array_equal(luma(PixelBuffer.from_array(gray)), gray)


class TestBuildHistogram:
    def test_counts_every_pixel(self):
        buf = _two_tone(40, 180, size=10)
        hist = build_histogram(buf)
        assert len(hist) == 256
        assert hist.sum() == 100
        assert hist[40] == 50
        assert hist[180] == 50

    def test_is_read_only(self):
        hist = build_histogram(PixelBuffer.create(2, 2))
        with pytest.raises(ValueError):
            hist[0] = 1


class TestOtsuThreshold:
    def test_two_peaks_threshold_strictly_between(self):
        hist = _histogram(g20=1000, g220=1000)
        threshold = otsu_threshold(hist)
        assert 20 < threshold < 220

    def test_first_maximum_wins(self):
        # Every split between the two levels has the same variance.
        assert otsu_threshold(_histogram(g20=1000, g220=1000)) == 21

    def test_single_level_yields_zero(self):
        assert otsu_threshold(_histogram(g128=500)) == 0

    def test_empty_histogram_yields_zero(self):
        assert otsu_threshold(np.zeros(256, dtype=np.int64)) == 0

    def test_wrong_length_raises(self):
        with pytest.raises(ValueError, match="256 bins"):
            otsu_threshold(np.zeros(10))

    def test_negative_counts_raise(self):
        hist = _histogram(g10=5)
        hist[3] = -1
        with pytest.raises(ValueError, match="non-negative"):
            otsu_threshold(hist)


class TestHistogramPeaks:
    def test_two_highest_peaks_by_count(self):
        hist = _histogram(g50=500, g120=300, g200=800)
        assert find_histogram_peaks(hist) == [200, 50]

    def test_equal_counts_keep_lower_level_first(self):
        hist = _histogram(g40=300, g180=300, g220=300)
        assert find_histogram_peaks(hist) == [40, 180]

    def test_count_must_exceed_minimum(self):
        assert find_histogram_peaks(_histogram(g60=100, g90=101)) == [90]

    def test_plateau_is_not_a_peak(self):
        assert find_histogram_peaks(_histogram(g100=500, g101=500)) == []


class TestBimodalThreshold:
    def test_first_level_above_peak_midpoint(self):
        hist = _histogram(g50=500, g200=800)
        assert bimodal_threshold(hist) == 126

    def test_midpoint_rounds_half_up(self):
        # Midpoint of 50 and 101 is 75.5, rounded up to 76.
        assert bimodal_threshold(_histogram(g50=500, g101=800)) == 77

    def test_falls_back_to_otsu_with_one_peak(self):
        hist = _histogram(g30=1000, g200=50)
        assert bimodal_threshold(hist) == otsu_threshold(hist) == 31


class TestBinarize:
    def test_output_only_black_and_white(self):
        rng = np.random.default_rng(0)
        data = rng.integers(0, 256, size=(16, 16, 4), dtype=np.uint8)
        buf = PixelBuffer(data)
        out = binarize(buf, 128)
        assert set(np.unique(out.rgb)) <= {0, 255}
        assert np.array_equal(out.alpha, buf.alpha)
        assert np.array_equal(out.rgb[:, :, 0], out.rgb[:, :, 2])

    def test_threshold_level_is_white(self):
        out = binarize(PixelBuffer.from_array(np.array([[99, 100, 101]], dtype=np.uint8)), 100)
        assert out.rgb[0, :, 0].tolist() == [0, 255, 255]

    def test_does_not_mutate_input(self):
        buf = _two_tone(40, 180)
        before = buf.to_array()
        binarize(buf, 100)
        assert np.array_equal(buf.data, before)

    def test_otsu_separates_two_tones(self):
        out, threshold = binarize_otsu(_two_tone(20, 220))
        assert threshold == 21
        assert out.get(0, 0).r == 0
        assert out.get(19, 0).r == 255

    def test_adaptive_uses_peak_midpoint(self):
        out, threshold = binarize_adaptive(_two_tone(50, 200))
        assert threshold == 126
        assert out.get(0, 5).r == 0
        assert out.get(15, 5).r == 255

    def test_adaptive_midpoint_level_is_black(self):
        row = np.array([[50] * 300 + [150] * 300 + [100] * 10], dtype=np.uint8)
        out, threshold = binarize_adaptive(PixelBuffer.from_array(row))
        assert threshold == 101
        assert out.rgb[0, 605, 0] == 0
        assert out.rgb[0, 0, 0] == 0
        assert out.rgb[0, 300, 0] == 255
