"""
Rectangle geometry utilities.

All functions are pure and operate on TextRegion values or on
(x, y, w, h) tuples.
"""

from __future__ import annotations

import math

from .types import TextRegion


def corner_distance(a: TextRegion, b: TextRegion) -> float:
    """Euclidean distance between the top-left corners of two regions."""
    return math.hypot(a.x - b.x, a.y - b.y)


def union_region(a: TextRegion, b: TextRegion) -> TextRegion:
    """Smallest region covering both, with the higher confidence.

    Sources are concatenated without duplicates, a's first.
    """
    x = min(a.x, b.x)
    y = min(a.y, b.y)
    right = max(a.right, b.right)
    bottom = max(a.bottom, b.bottom)
    sources = a.sources + tuple(s for s in b.sources if s not in a.sources)
    return TextRegion(
        x=x,
        y=y,
        width=right - x,
        height=bottom - y,
        confidence=max(a.confidence, b.confidence),
        sources=sources,
    )


def clip_rect(
    x: int,
    y: int,
    w: int,
    h: int,
    img_width: int,
    img_height: int,
) -> tuple[int, int, int, int]:
    """Intersect (x, y, w, h) with the image; empty intersections give zero size."""
    x1 = max(0, x)
    y1 = max(0, y)
    x2 = min(img_width, x + w)
    y2 = min(img_height, y + h)
    return (x1, y1, max(0, x2 - x1), max(0, y2 - y1))

