"""
Distance transforms computed once per binary page image.
"""

from .chamfer import ChamferDistance, DistanceTable

__all__ = ["ChamferDistance", "DistanceTable"]
