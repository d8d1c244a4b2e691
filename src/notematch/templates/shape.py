"""Note head shapes and the reference bitmaps templates are sampled from.

Shapes form a closed enumeration. Supporting a new shape means adding a
member and registering its rendering rule in ``_RENDERERS``.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Tuple

import cv2
import numpy as np

MIN_INTERLINE = 8


class Shape(Enum):
    NOTEHEAD_BLACK = "notehead_black"
    NOTEHEAD_VOID = "notehead_void"
    WHOLE_NOTE = "whole_note"

    @classmethod
    def from_name(cls, name: str) -> "Shape":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown shape name {name!r}") from None


def half_extent(shape: Shape, interline: int) -> Tuple[int, int]:
    """
    Return (half_width, half_height) of the shape's bitmap at ``interline``.
    """
    _check_interline(interline)
    width_ratio = 0.9 if shape is Shape.WHOLE_NOTE else 0.8
    return int(width_ratio * interline + 0.5), interline // 2


def render_shape(shape: Shape, interline: int) -> np.ndarray:
    """
    Draw the shape centered in a (2 * hh + 1, 2 * hw + 1) boolean bitmap.
    """
    renderer = _RENDERERS.get(shape)
    if renderer is None:
        raise ValueError(f"no rendering rule for {shape!r}")
    half_width, half_height = half_extent(shape, interline)
    canvas = np.zeros((2 * half_height + 1, 2 * half_width + 1), dtype=np.uint8)
    renderer(canvas, half_width, half_height)
    return canvas > 0


def _check_interline(interline: int) -> None:
    if interline < MIN_INTERLINE:
        raise ValueError(f"interline must be >= {MIN_INTERLINE}, got {interline}")


def _ellipse(
    canvas: np.ndarray,
    axes: Tuple[int, int],
    angle: float,
    value: int,
) -> None:
    height, width = canvas.shape
    center = (width // 2, height // 2)
    axes = (max(1, axes[0]), max(1, axes[1]))
    cv2.ellipse(canvas, center, axes, angle, 0, 360, value, thickness=-1)


def _render_black_head(canvas: np.ndarray, half_width: int, half_height: int) -> None:
    _ellipse(canvas, (half_width - 1, half_height - 2), -20.0, 255)


def _render_void_head(canvas: np.ndarray, half_width: int, half_height: int) -> None:
    _ellipse(canvas, (half_width - 1, half_height - 2), -20.0, 255)
    _ellipse(canvas, (half_width // 2, max(1, (half_height - 2) // 2)), -35.0, 0)


def _render_whole_note(canvas: np.ndarray, half_width: int, half_height: int) -> None:
    _ellipse(canvas, (half_width - 1, half_height - 1), 0.0, 255)
    _ellipse(canvas, (half_width // 3, max(1, half_height // 2)), 50.0, 0)


_RENDERERS: Dict[Shape, Callable[[np.ndarray, int, int], None]] = {
    Shape.NOTEHEAD_BLACK: _render_black_head,
    Shape.NOTEHEAD_VOID: _render_void_head,
    Shape.WHOLE_NOTE: _render_whole_note,
}
