"""
Optional post-filters applied to raw ``match_all`` output.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..templates import Template
from .engine import PixelDistance


def rank_matches(locations: Iterable[PixelDistance]) -> List[PixelDistance]:
    """
    Sort by ascending score, breaking ties by row then column.
    """
    return sorted(locations, key=PixelDistance.by_score)


def suppress_duplicates(locations: Iterable[PixelDistance], min_separation: int) -> List[PixelDistance]:
    """
    Keep the best location of every cluster of near-duplicate anchors.

    A location is dropped when an already kept, better location lies closer
    than ``min_separation`` along both axes.
    """
    if min_separation < 1:
        raise ValueError("min_separation must be >= 1")
    kept: List[PixelDistance] = []
    for location in rank_matches(locations):
        if any(
            abs(location.x - other.x) < min_separation and abs(location.y - other.y) < min_separation
            for other in kept
        ):
            continue
        kept.append(location)
    return kept


def best_matches(
    locations: Iterable[PixelDistance],
    template: Template,
    limit: Optional[int] = None,
) -> List[PixelDistance]:
    """
    Ranked, de-duplicated locations using the template's own separation.
    """
    if limit is not None and limit < 0:
        raise ValueError("limit must be >= 0")
    kept = suppress_duplicates(locations, template.min_separation)
    return kept if limit is None else kept[:limit]
