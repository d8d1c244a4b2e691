"""
Exceptions raised by the matching core.
"""

from __future__ import annotations


class MatchingError(Exception):
    """Base exception for note head matching errors."""


class InvalidImage(MatchingError, ValueError):
    """Raised when an image is empty or not a 2-D pixel grid."""


class DegenerateTemplate(MatchingError, ValueError):
    """Raised when a template could never produce a meaningful score."""


class UnknownShape(MatchingError, KeyError):
    """Raised when a catalog holds no template for the requested shape."""

    def __str__(self) -> str:
        # KeyError quotes its argument
        return str(self.args[0]) if self.args else ""


__all__ = ["DegenerateTemplate", "InvalidImage", "MatchingError", "UnknownShape"]
