"""
Matching subpackage scores templates against distance tables.
"""

from .engine import DistanceMatcher, PixelDistance
from .ranking import best_matches, rank_matches, suppress_duplicates

__all__ = [
    "DistanceMatcher",
    "PixelDistance",
    "best_matches",
    "rank_matches",
    "suppress_duplicates",
]
