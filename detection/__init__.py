"""
Text region detection module.

This module finds rectangles likely to hold text and turns them into clean
images for an external text recognizer. It follows the same design
philosophy as the preprocessing module: pure functions, early validation,
and clear separation of concerns.

Key components:
- types: Core data structures (TextRegion, EnhancedImageResult, PipelineState)
- config: SmartOCROptions
- bbox: Rectangle geometry utilities
- regions: Edge, color and stroke block scanners
- merging: Greedy region merging and size filtering
- enhancement: Region and whole-image enhancement
- detector: Orchestration and pipeline state
- recognition: Interface to the external recognizer

The main entry point is `detect_and_extract_text()` which returns an
`EnhancedImageResult` holding the merged regions and one enhanced image per
region, plus the whole-image fallback.
"""

from .types import (
    TextRegion,
    BlockScore,
    ColorBlockAnalysis,
    ProcessedImage,
    EnhancedImageResult,
    PipelineState,
    GLOBAL_SOURCE,
)
from .config import SmartOCROptions
from .bbox import corner_distance, union_region, clip_rect
from .regions import (
    sobel_magnitude,
    score_edge_blocks,
    score_color_blocks,
    score_stroke_blocks,
    analyze_color_block,
    detect_text_by_edges,
    detect_text_by_color,
    detect_text_by_stroke,
    find_text_candidates,
)
from .merging import merge_nearby_regions, filter_small_regions, merge_regions
from .enhancement import (
    crop_with_padding,
    enhance_text_region,
    extract_and_enhance_region,
    text_mask,
    remove_complex_background,
    enhance_global,
)
from .detector import TextRegionPipeline, detect_and_extract_text
from .recognition import (
    RecognitionResult,
    TextRecognizer,
    recognize_all,
    best_recognition,
)

__all__ = [
    "TextRegion",
    "BlockScore",
    "ColorBlockAnalysis",
    "ProcessedImage",
    "EnhancedImageResult",
    "PipelineState",
    "GLOBAL_SOURCE",
    "SmartOCROptions",
    "corner_distance",
    "union_region",
    "clip_rect",
    "sobel_magnitude",
    "score_edge_blocks",
    "score_color_blocks",
    "score_stroke_blocks",
    "analyze_color_block",
    "detect_text_by_edges",
    "detect_text_by_color",
    "detect_text_by_stroke",
    "find_text_candidates",
    "merge_nearby_regions",
    "filter_small_regions",
    "merge_regions",
    "crop_with_padding",
    "enhance_text_region",
    "extract_and_enhance_region",
    "text_mask",
    "remove_complex_background",
    "enhance_global",
    "TextRegionPipeline",
    "detect_and_extract_text",
    "RecognitionResult",
    "TextRecognizer",
    "recognize_all",
    "best_recognition",
]
