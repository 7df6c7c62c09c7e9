"""
Configuration for text region detection and enhancement.
"""

from __future__ import annotations

from dataclasses import dataclass

from config import MERGE_DISTANCE, MIN_REGION_HEIGHT, MIN_REGION_WIDTH, REGION_PADDING


@dataclass(frozen=True)
class SmartOCROptions:
    """Options for one detect-and-enhance invocation.

    Attributes:
        use_text_detection: Run the block scanners and merge their candidates.
                            When False the pipeline goes straight to the
                            global enhancement.
        enhance_text_regions: Produce an enhanced buffer for every region.
        fallback_to_original: Also enhance the whole image even when regions
                              were found.
        merge_distance: Top-left corner distance below which candidates merge.
        min_region_width: Merged regions must be wider than this.
        min_region_height: Merged regions must be taller than this.
        region_padding: White border added around each region crop.
    """

    use_text_detection: bool = True
    enhance_text_regions: bool = True
    fallback_to_original: bool = True

    merge_distance: float = MERGE_DISTANCE
    min_region_width: int = MIN_REGION_WIDTH
    min_region_height: int = MIN_REGION_HEIGHT
    region_padding: int = REGION_PADDING

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if self.merge_distance < 0:
            raise ValueError(f"merge_distance must be non-negative, got {self.merge_distance}")
        if self.min_region_width < 0 or self.min_region_height < 0:
            raise ValueError(
                "min_region_width and min_region_height must be non-negative, "
                f"got {self.min_region_width}x{self.min_region_height}"
            )
        if self.region_padding < 0:
            raise ValueError(f"region_padding must be non-negative, got {self.region_padding}")
