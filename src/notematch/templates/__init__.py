"""
Note head templates and the per-interline catalogs that hold them.
"""

from .catalog import TemplateCatalog, TemplateFactory
from .shape import MIN_INTERLINE, Shape, half_extent, render_shape
from .template import KeyPoint, KeyPointKind, Template

__all__ = [
    "KeyPoint",
    "KeyPointKind",
    "MIN_INTERLINE",
    "Shape",
    "Template",
    "TemplateCatalog",
    "TemplateFactory",
    "half_extent",
    "render_shape",
]
