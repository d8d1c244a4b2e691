from __future__ import annotations

from typing import Protocol, Sequence, Union, runtime_checkable

import numpy as np

from ..errors import InvalidImage


@runtime_checkable
class BinaryImage(Protocol):
    """
    Pixel classification accessor supplied by the binarization stage.
    """

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def is_foreground(self, x: int, y: int) -> bool: ...


ImageLike = Union[np.ndarray, BinaryImage]


def to_foreground_mask(image: ImageLike) -> np.ndarray:
    """
    Normalize an image into a (height, width) boolean foreground mask.

    Arrays are read as nonzero = foreground. Accessor objects are sampled
    pixel by pixel.
    """
    if isinstance(image, np.ndarray):
        if image.ndim != 2:
            raise InvalidImage(f"expected a 2-D image, got {image.ndim} dimensions")
        height, width = image.shape
        if width == 0 or height == 0:
            raise InvalidImage(f"image has zero size ({width}x{height})")
        return image != 0

    if not isinstance(image, BinaryImage):
        raise InvalidImage(f"unsupported image type {type(image).__name__}")

    width, height = int(image.width), int(image.height)
    if width <= 0 or height <= 0:
        raise InvalidImage(f"image has zero size ({width}x{height})")
    mask = np.zeros((height, width), dtype=bool)
    for y in range(height):
        for x in range(width):
            mask[y, x] = bool(image.is_foreground(x, y))
    return mask


def mask_from_rows(rows: Sequence[str], foreground: str = "X") -> np.ndarray:
    """
    Build a foreground mask from text rows, one character per pixel.
    """
    if not rows or not rows[0]:
        raise InvalidImage("rows must describe at least one pixel")
    width = len(rows[0])
    for index, row in enumerate(rows):
        if len(row) != width:
            raise InvalidImage(f"row {index} has length {len(row)}, expected {width}")
    return np.array([[char == foreground for char in row] for row in rows], dtype=bool)
