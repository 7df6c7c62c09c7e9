"""
Greedy merging of candidate blocks into text regions.

Merging is order-dependent: the first unvisited candidate anchors a
cluster, so callers must pass candidates in scan order to get reproducible
output.
"""

from __future__ import annotations

import logging

from config import MERGE_DISTANCE, MIN_REGION_HEIGHT, MIN_REGION_WIDTH

from .bbox import corner_distance, union_region
from .types import TextRegion

logger = logging.getLogger(__name__)


def merge_nearby_regions(
    regions: list[TextRegion],
    distance: float = MERGE_DISTANCE,
) -> list[TextRegion]:
    """Cluster regions whose top-left corners lie close together.

    For each region not yet absorbed, in order, every later unabsorbed
    region whose top-left corner is closer than distance to the growing
    cluster's top-left corner is absorbed. The cluster's box is the union
    of the absorbed boxes and its confidence the maximum.

    A second pass can still merge: absorbing a region may move the cluster
    corner within distance of a region that was skipped earlier.

    Args:
        regions: Candidate regions in detection order.
        distance: Merge threshold in pixels (strict).

    Returns:
        Merged regions, one per cluster, in anchor order. No size filtering.
    """
    merged: list[TextRegion] = []
    visited = [False] * len(regions)

    for i, anchor in enumerate(regions):
        if visited[i]:
            continue
        visited[i] = True
        current = anchor

        for j in range(i + 1, len(regions)):
            if visited[j]:
                continue
            if corner_distance(current, regions[j]) < distance:
                current = union_region(current, regions[j])
                visited[j] = True

        merged.append(current)

    return merged


def filter_small_regions(
    regions: list[TextRegion],
    min_width: int = MIN_REGION_WIDTH,
    min_height: int = MIN_REGION_HEIGHT,
) -> list[TextRegion]:
    """Keep regions strictly wider than min_width and taller than min_height."""
    return [r for r in regions if r.width > min_width and r.height > min_height]


def merge_regions(
    regions: list[TextRegion],
    distance: float = MERGE_DISTANCE,
    min_width: int = MIN_REGION_WIDTH,
    min_height: int = MIN_REGION_HEIGHT,
) -> list[TextRegion]:
    """Merge nearby candidates, then drop regions too small to hold text."""
    merged = merge_nearby_regions(regions, distance)
    kept = filter_small_regions(merged, min_width, min_height)
    logger.debug(
        "Merged %d candidate(s) into %d region(s), %d kept after size filter",
        len(regions), len(merged), len(kept),
    )
    return kept
