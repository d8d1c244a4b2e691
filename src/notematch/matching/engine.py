from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from ..config import MatcherParams
from ..distance import DistanceTable
from ..templates import KeyPointKind, Template

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PixelDistance:
    """
    Candidate anchor location and its score. Lower scores fit better.
    """

    x: int
    y: int
    score: float

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PixelDistance):
            return NotImplemented
        return self.score < other.score

    @staticmethod
    def by_score(location: "PixelDistance") -> Tuple[float, int, int]:
        return location.score, location.y, location.x


class DistanceMatcher:
    """
    Chamfer matching of templates against one distance table.

    A foreground key point costs its distance to the nearest ink. A
    background key point costs how far it sits inside ``reference_depth``
    of ink. The score of an anchor is the weighted mean of those costs, in
    pixels.
    """

    def __init__(self, table: DistanceTable, params: MatcherParams | None = None) -> None:
        self.table = table
        self.params = params or MatcherParams()

    def match_all(self, template: Template, max_score: float = math.inf) -> List[PixelDistance]:
        """
        Score every anchor where the whole template fits in the image.

        Returns the locations scoring at most ``max_score``, in row-major
        anchor order.
        """
        rows, columns = self._anchor_grid(template)
        if rows <= 0 or columns <= 0:
            logger.debug(
                "%s template %dx%d does not fit in %dx%d table",
                template.shape.name,
                template.width,
                template.height,
                self.table.width,
                self.table.height,
            )
            return []

        chunk = self.params.chunk_rows
        bounds = [(start, min(start + chunk, rows)) for start in range(0, rows, chunk)]

        if self.params.workers > 1 and len(bounds) > 1:
            with ThreadPoolExecutor(max_workers=self.params.workers) as pool:
                parts = list(pool.map(lambda b: self._collect(template, b[0], b[1], max_score), bounds))
        else:
            parts = [self._collect(template, start, stop, max_score) for start, stop in bounds]

        locations = [location for part in parts for location in part]
        logger.debug(
            "%s: %d of %d anchors scored <= %s",
            template.shape.name,
            len(locations),
            rows * columns,
            max_score,
        )
        return locations

    def score_map(self, template: Template) -> np.ndarray:
        """
        Scores of all anchors as a (rows, columns) array.

        Cell (0, 0) is the anchor (half_width, half_height).
        """
        rows, columns = self._anchor_grid(template)
        if rows <= 0 or columns <= 0:
            return np.empty((0, 0), dtype=np.float64)
        return self._score_rows(template, 0, rows)

    def score_at(self, template: Template, x: int, y: int) -> float:
        """
        Score of a single anchor, evaluated key point by key point.
        """
        if not (
            template.half_width <= x < self.table.width - template.half_width
            and template.half_height <= y < self.table.height - template.half_height
        ):
            raise IndexError(f"template does not fit at anchor ({x}, {y})")
        normalizer = self.table.normalizer
        total = 0.0
        for kp in template.key_points:
            distance = self.table.get_value(x + kp.dx, y + kp.dy) / normalizer
            if kp.kind is KeyPointKind.FOREGROUND:
                total += kp.weight * distance
            else:
                total += kp.weight * max(0.0, self.params.reference_depth - distance)
        return total / template.total_weight

    def _anchor_grid(self, template: Template) -> Tuple[int, int]:
        rows = self.table.height - 2 * template.half_height
        columns = self.table.width - 2 * template.half_width
        return rows, columns

    def _collect(self, template: Template, start: int, stop: int, max_score: float) -> List[PixelDistance]:
        scores = self._score_rows(template, start, stop)
        ys, xs = np.nonzero(scores <= max_score)
        x0 = template.half_width
        y0 = template.half_height + start
        return [
            PixelDistance(x=int(x) + x0, y=int(y) + y0, score=float(scores[y, x]))
            for y, x in zip(ys, xs)
        ]

    def _score_rows(self, template: Template, start: int, stop: int) -> np.ndarray:
        _, columns = self._anchor_grid(template)
        values = self.table.values
        normalizer = self.table.normalizer
        depth = self.params.reference_depth * normalizer
        arrays = template.arrays
        count = stop - start

        totals = np.zeros((count, columns), dtype=np.float64)
        for dx, dy, weight, foreground in zip(arrays.dx, arrays.dy, arrays.weights, arrays.foreground):
            top = template.half_height + start + int(dy)
            left = template.half_width + int(dx)
            window = values[top : top + count, left : left + columns]
            if foreground:
                totals += weight * window
            else:
                totals += weight * np.maximum(0.0, depth - window)

        return totals / (normalizer * template.total_weight)
