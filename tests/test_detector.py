"""
Tests for the detect-and-enhance orchestration.

Covers: state transitions, the global fallback, the "no text" result
and error propagation.
"""

import numpy as np
import pytest

import detection.detector as detector_module
from detection import (
    GLOBAL_SOURCE,
    PipelineState,
    SmartOCROptions,
    TextRegion,
    TextRegionPipeline,
    detect_and_extract_text,
)
from preprocessing import OutOfBoundsError, PixelBuffer


class TestSmartOCROptions:
    def test_defaults(self):
        options = SmartOCROptions()
        assert options.use_text_detection
        assert options.enhance_text_regions
        assert options.fallback_to_original
        assert options.merge_distance == 50

    def test_negative_merge_distance_raises(self):
        with pytest.raises(ValueError, match="merge_distance"):
            SmartOCROptions(merge_distance=-1).validate()

    def test_negative_padding_raises(self):
        with pytest.raises(ValueError, match="region_padding"):
            TextRegionPipeline(SmartOCROptions(region_padding=-5))


class TestGlobalFallback:
    def test_detection_disabled_gives_single_global_image(self, striped_text_rgb):
        buf = PixelBuffer.from_array(striped_text_rgb)
        options = SmartOCROptions(use_text_detection=False)
        result = detect_and_extract_text(buf, options)
        assert result.regions == []
        assert len(result.processed_images) == 1
        assert result.processed_images[0].source == GLOBAL_SOURCE
        assert result.global_image is result.processed_images[0]

    def test_detection_disabled_ignores_fallback_flag(self, striped_text_rgb):
        buf = PixelBuffer.from_array(striped_text_rgb)
        options = SmartOCROptions(use_text_detection=False, fallback_to_original=False)
        result = detect_and_extract_text(buf, options)
        assert len(result.processed_images) == 1
        assert result.processed_images[0].is_global

    def test_detection_disabled_skips_detecting_state(self):
        pipeline = TextRegionPipeline(SmartOCROptions(use_text_detection=False))
        pipeline.run(PixelBuffer.create(40, 40))
        assert pipeline.history == [
            PipelineState.IDLE,
            PipelineState.ENHANCING_REGIONS,
            PipelineState.DONE,
        ]


class TestRegionEnhancement:
    def test_regions_then_global(self, striped_text_rgb):
        buf = PixelBuffer.from_array(striped_text_rgb)
        pipeline = TextRegionPipeline()
        result = pipeline.run(buf)

        assert len(result.regions) >= 1
        assert len(result.processed_images) == len(result.regions) + 1
        for index, (region, processed) in enumerate(zip(result.regions, result.processed_images)):
            assert processed.source == index
            assert processed.image.size == (region.width + 20, region.height + 20)
            assert processed.threshold is not None
        assert result.processed_images[-1].is_global
        assert pipeline.state == PipelineState.DONE
        assert pipeline.history == [
            PipelineState.IDLE,
            PipelineState.DETECTING_REGIONS,
            PipelineState.ENHANCING_REGIONS,
            PipelineState.DONE,
        ]

    def test_regions_lie_on_text(self, striped_text_rgb):
        result = detect_and_extract_text(PixelBuffer.from_array(striped_text_rgb))
        for region in result.regions:
            assert region.x < 100 and region.right > 20
            assert region.y < 100 and region.bottom > 20

    def test_no_fallback_only_region_images(self, striped_text_rgb):
        options = SmartOCROptions(fallback_to_original=False)
        result = detect_and_extract_text(PixelBuffer.from_array(striped_text_rgb), options)
        assert result.regions
        assert result.global_image is None
        assert len(result.region_images) == len(result.regions)

    def test_region_enhancement_disabled(self, striped_text_rgb):
        options = SmartOCROptions(enhance_text_regions=False)
        result = detect_and_extract_text(PixelBuffer.from_array(striped_text_rgb), options)
        assert result.regions
        assert result.region_images == []
        assert result.global_image is not None

    def test_input_not_mutated(self, striped_text_rgb):
        buf = PixelBuffer.from_array(striped_text_rgb)
        before = buf.to_array()
        detect_and_extract_text(buf)
        assert np.array_equal(buf.data, before)


class TestNoTextDetected:
    def test_blank_image_with_fallback(self):
        result = detect_and_extract_text(PixelBuffer.create(80, 80))
        assert result.regions == []
        assert len(result.processed_images) == 1
        assert result.no_text_detected

    def test_blank_image_without_fallback_still_gets_global_image(self):
        options = SmartOCROptions(fallback_to_original=False)
        pipeline = TextRegionPipeline(options)
        result = pipeline.run(PixelBuffer.create(80, 80))
        assert result.regions == []
        assert len(result.processed_images) == 1
        assert result.processed_images[0].is_global
        assert result.no_text_detected
        assert pipeline.state == PipelineState.DONE


class TestFailures:
    def test_non_buffer_input_fails(self):
        pipeline = TextRegionPipeline()
        with pytest.raises(TypeError, match="Expected PixelBuffer"):
            pipeline.run("not an image")
        assert pipeline.state == PipelineState.FAILED
        assert pipeline.history == [PipelineState.IDLE, PipelineState.FAILED]

    def test_numpy_input_points_to_from_array(self):
        with pytest.raises(TypeError, match="from_array"):
            detect_and_extract_text(np.zeros((10, 10, 3), dtype=np.uint8))

    def test_out_of_bounds_in_stage_fails(self, monkeypatch):
        def broken_scanner(buffer):
            raise OutOfBoundsError(-1, 0, buffer.width, buffer.height)

        monkeypatch.setattr(detector_module, "find_text_candidates", broken_scanner)
        pipeline = TextRegionPipeline()
        with pytest.raises(OutOfBoundsError):
            pipeline.run(PixelBuffer.create(40, 40))
        assert pipeline.history == [
            PipelineState.IDLE,
            PipelineState.DETECTING_REGIONS,
            PipelineState.FAILED,
        ]

    def test_pipeline_reusable_after_failure(self):
        pipeline = TextRegionPipeline()
        with pytest.raises(TypeError):
            pipeline.run(None)
        result = pipeline.run(PixelBuffer.create(40, 40))
        assert pipeline.state == PipelineState.DONE
        assert len(result.processed_images) == 1


class TestEnhancedImageResult:
    def test_region_serialization(self, striped_text_rgb):
        result = detect_and_extract_text(PixelBuffer.from_array(striped_text_rgb))
        payload = [region.to_dict() for region in result.regions]
        assert [TextRegion.from_dict(d) for d in payload] == result.regions
        assert all(d["sources"] for d in payload)


@pytest.mark.slow
def test_full_size_photo_runs_every_scanner():
    rng = np.random.default_rng(11)
    img = rng.integers(0, 256, size=(900, 1200, 3), dtype=np.uint8)
    img[300:330, 200:1000] = 0
    result = detect_and_extract_text(PixelBuffer.from_array(img))
    assert result.global_image is not None
    assert result.global_image.image.size == (1200, 900)
