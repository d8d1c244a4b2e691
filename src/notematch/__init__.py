"""
Chamfer-distance matching of note head templates on binary page images.
"""

from .config import MatcherParams, TemplateParams
from .distance import ChamferDistance, DistanceTable
from .errors import DegenerateTemplate, InvalidImage, MatchingError, UnknownShape
from .matching import DistanceMatcher, PixelDistance, best_matches, rank_matches, suppress_duplicates
from .templates import KeyPoint, KeyPointKind, Shape, Template, TemplateCatalog, TemplateFactory

__all__ = [
    "ChamferDistance",
    "DegenerateTemplate",
    "DistanceMatcher",
    "DistanceTable",
    "InvalidImage",
    "KeyPoint",
    "KeyPointKind",
    "MatcherParams",
    "MatchingError",
    "PixelDistance",
    "Shape",
    "Template",
    "TemplateCatalog",
    "TemplateFactory",
    "TemplateParams",
    "UnknownShape",
    "best_matches",
    "rank_matches",
    "suppress_duplicates",
]
