"""
IO helpers turning page scans and text fixtures into foreground masks.
"""

from .binary import BinaryImage, ImageLike, mask_from_rows, to_foreground_mask
from .image_loader import binarize, load_foreground_mask, load_grayscale

__all__ = [
    "BinaryImage",
    "ImageLike",
    "binarize",
    "load_foreground_mask",
    "load_grayscale",
    "mask_from_rows",
    "to_foreground_mask",
]
