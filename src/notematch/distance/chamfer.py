from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from ..io.binary import ImageLike, to_foreground_mask

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class DistanceTable:
    """
    Raw chamfer costs to the nearest target pixel, one cell per image pixel.

    Values are stored in chamfer units; divide by ``normalizer`` to get
    pixels. Cells with no reachable target hold ``sentinel``.
    """

    values: np.ndarray = field(repr=False)
    normalizer: int
    sentinel: int

    def __post_init__(self) -> None:
        if self.values.ndim != 2:
            raise ValueError("distance values must be a 2-D array")
        self.values.flags.writeable = False

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def height(self) -> int:
        return int(self.values.shape[0])

    def get_value(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"({x}, {y}) outside {self.width}x{self.height} table")
        return int(self.values[y, x])

    def to_pixels(self, x: int, y: int) -> float:
        return self.get_value(x, y) / self.normalizer

    def dump(self, title: str | None = None) -> str:
        """
        Render the table as right-aligned rows of integers, for diagnostics.
        """
        cell = max(len(str(int(self.values.max()))), 1) + 1
        lines = [title] if title else []
        lines.append(" " * 4 + "".join(f"{x:>{cell}d}" for x in range(self.width)))
        for y in range(self.height):
            row = "".join(f"{int(value):>{cell}d}" for value in self.values[y])
            lines.append(f"{y:>4d}{row}")
        return "\n".join(lines)


class ChamferDistance:
    """
    Two-pass 3-4 chamfer distance transform.

    Orthogonal steps cost 3 and diagonal steps cost 4, so dividing by 3
    gives an approximation of the Euclidean distance in pixels.
    """

    ORTHOGONAL = 3
    DIAGONAL = 4

    def __init__(self, dtype: type | np.dtype = np.int16) -> None:
        storage = np.dtype(dtype)
        if storage not in (np.dtype(np.int16), np.dtype(np.int32)):
            raise ValueError("dtype must be int16 or int32")
        self.dtype = storage
        self.sentinel = int(np.iinfo(storage).max)

    def compute_to_foreground(self, image: ImageLike) -> DistanceTable:
        """
        Distance from every pixel to the nearest foreground pixel.
        """
        mask = to_foreground_mask(image)
        return self._compute(mask)

    def compute_to_background(self, image: ImageLike) -> DistanceTable:
        """
        Distance from every pixel to the nearest background pixel.
        """
        mask = to_foreground_mask(image)
        return self._compute(~mask)

    def _compute(self, targets: np.ndarray) -> DistanceTable:
        height, width = targets.shape
        distances = np.where(targets, 0, self.sentinel).astype(np.int64)
        steps = np.arange(width, dtype=np.int64) * self.ORTHOGONAL

        # forward: top-left -> bottom-right
        for y in range(height):
            row = distances[y]
            if y > 0:
                self._relax_from(row, distances[y - 1])
            distances[y] = self._sweep(row, steps)

        # backward: bottom-right -> top-left
        for y in range(height - 1, -1, -1):
            row = distances[y]
            if y < height - 1:
                self._relax_from(row, distances[y + 1])
            distances[y] = self._sweep(row[::-1], steps)[::-1]

        logger.debug(
            "Chamfer transform %dx%d, %d target pixels", width, height, int(targets.sum())
        )
        return DistanceTable(
            values=distances.astype(self.dtype),
            normalizer=self.ORTHOGONAL,
            sentinel=self.sentinel,
        )

    def _relax_from(self, row: np.ndarray, other: np.ndarray) -> None:
        """
        Update ``row`` in place from the adjacent, already final row.
        """
        np.minimum(row, other + self.ORTHOGONAL, out=row)
        np.minimum(row[1:], other[:-1] + self.DIAGONAL, out=row[1:])
        np.minimum(row[:-1], other[1:] + self.DIAGONAL, out=row[:-1])

    def _sweep(self, row: np.ndarray, steps: np.ndarray) -> np.ndarray:
        # Sequential d[x] = min(d[x], d[x-1] + 3) is a running minimum of
        # d[k] + 3 * (x - k) over k <= x.
        swept = np.minimum.accumulate(row - steps) + steps
        return np.minimum(swept, self.sentinel)
