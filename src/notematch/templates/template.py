from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Tuple

import cv2
import numpy as np

from ..config import TemplateParams
from ..errors import DegenerateTemplate
from .shape import Shape, half_extent, render_shape

logger = logging.getLogger(__name__)


class KeyPointKind(Enum):
    FOREGROUND = "foreground"
    BACKGROUND = "background"


@dataclass(frozen=True)
class KeyPoint:
    """
    One weighted sample, relative to the template anchor.
    """

    dx: int
    dy: int
    kind: KeyPointKind
    weight: float = 1.0

    def __post_init__(self) -> None:
        if not self.weight > 0:
            raise ValueError(f"key point weight must be positive, got {self.weight}")


@dataclass(frozen=True, eq=False)
class TemplateArrays:
    """
    Column view of a template's key points used by the matcher.
    """

    dx: np.ndarray
    dy: np.ndarray
    weights: np.ndarray
    foreground: np.ndarray


@dataclass(frozen=True)
class Template:
    """
    Weighted foreground/background samples of one shape at one interline.

    The anchor sits at the shape's nominal center; every key point offset
    lies within ``half_width`` and ``half_height`` of it.
    """

    shape: Shape
    interline: int
    half_width: int
    half_height: int
    key_points: Tuple[KeyPoint, ...]

    def __post_init__(self) -> None:
        if not self.key_points:
            raise DegenerateTemplate(f"{self.shape.name} template has no key points")
        if not any(kp.kind is KeyPointKind.FOREGROUND for kp in self.key_points):
            raise DegenerateTemplate(f"{self.shape.name} template has no foreground key point")
        if not self.total_weight > 0:
            raise DegenerateTemplate(f"{self.shape.name} template has zero total weight")
        for kp in self.key_points:
            if abs(kp.dx) > self.half_width or abs(kp.dy) > self.half_height:
                raise DegenerateTemplate(
                    f"key point ({kp.dx}, {kp.dy}) outside half extent "
                    f"({self.half_width}, {self.half_height})"
                )

    @classmethod
    def build(
        cls,
        shape: Shape,
        interline: int,
        params: TemplateParams | None = None,
    ) -> "Template":
        """
        Sample the rendered shape into foreground and background key points.

        Foreground points follow the shape contour. Background points cover
        the ring just outside the shape and every pixel of its holes.
        """
        params = params or TemplateParams()
        half_width, half_height = half_extent(shape, interline)
        bitmap = render_shape(shape, interline)
        contour, background = _sample(bitmap)

        key_points = [
            KeyPoint(int(x) - half_width, int(y) - half_height, KeyPointKind.FOREGROUND, params.foreground_weight)
            for y, x in zip(*np.nonzero(contour))
        ]
        key_points.extend(
            KeyPoint(int(x) - half_width, int(y) - half_height, KeyPointKind.BACKGROUND, params.background_weight)
            for y, x in zip(*np.nonzero(background))
        )

        template = cls(
            shape=shape,
            interline=interline,
            half_width=half_width,
            half_height=half_height,
            key_points=tuple(key_points),
        )
        logger.debug(
            "Built %s template at interline %d: %d foreground, %d background key points",
            shape.name,
            interline,
            int(contour.sum()),
            int(background.sum()),
        )
        return template

    @property
    def width(self) -> int:
        return 2 * self.half_width + 1

    @property
    def height(self) -> int:
        return 2 * self.half_height + 1

    @property
    def total_weight(self) -> float:
        return float(sum(kp.weight for kp in self.key_points))

    @property
    def min_separation(self) -> int:
        """
        Distance under which two anchors are taken for the same symbol.
        """
        return max(1, self.half_height)

    @cached_property
    def arrays(self) -> TemplateArrays:
        dx = np.array([kp.dx for kp in self.key_points], dtype=np.intp)
        dy = np.array([kp.dy for kp in self.key_points], dtype=np.intp)
        weights = np.array([kp.weight for kp in self.key_points], dtype=np.float64)
        foreground = np.array([kp.kind is KeyPointKind.FOREGROUND for kp in self.key_points])
        for array in (dx, dy, weights, foreground):
            array.flags.writeable = False
        return TemplateArrays(dx=dx, dy=dy, weights=weights, foreground=foreground)

    def dump(self) -> str:
        """
        Character map of the key points: X foreground, o background,
        + anchor, . unsampled.
        """
        grid = [["." for _ in range(self.width)] for _ in range(self.height)]
        grid[self.half_height][self.half_width] = "+"
        for kp in self.key_points:
            mark = "X" if kp.kind is KeyPointKind.FOREGROUND else "o"
            grid[kp.dy + self.half_height][kp.dx + self.half_width] = mark
        header = f"{self.shape.name} interline={self.interline} size={self.width}x{self.height}"
        return "\n".join([header] + ["".join(row) for row in grid])


def _sample(bitmap: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    padded = np.pad(bitmap, 1, constant_values=False).astype(np.uint8)

    cross = cv2.getStructuringElement(cv2.MORPH_CROSS, (3, 3))
    interior = cv2.erode(padded, cross)[1:-1, 1:-1] > 0
    contour = bitmap & ~interior

    grown = cv2.dilate(padded, np.ones((3, 3), dtype=np.uint8))[1:-1, 1:-1] > 0
    ring = grown & ~bitmap

    # background not reachable from the border is a hole
    _, labels = cv2.connectedComponents((padded == 0).astype(np.uint8), connectivity=4)
    holes = (labels != labels[0, 0]) & (padded == 0)
    holes = holes[1:-1, 1:-1]

    return contour, ring | holes
