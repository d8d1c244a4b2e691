from __future__ import annotations

import numpy as np
import pytest

from notematch.io import mask_from_rows
from notematch.templates import Shape, TemplateFactory, render_shape

# Two stacked note heads touching each other, 36 columns by 31 rows.
OVAL_ROWS = [
    "                                    ",
    "                                    ",
    "                                    ",
    "                                    ",
    "                    XXXXXXX         ",
    "                 XXXXXXXXXXXXX      ",
    "               XXXXXXXXXXXXXXXX     ",
    "             XXXXXXXXXXXXXXXXXX     ",
    "            XXXXXXXXXXXXXXXXXXX     ",
    "           XXXXXXXXXXXXXXXXXXXXX    ",
    "           XXXXXXXXXXXXXXXXXXXXX    ",
    "           XXXXXXXXXXXXXXXXXXXX     ",
    "           XXXXXXXXXXXXXXXXXXXX     ",
    "          XXXXXXXXXXXXXXXXXXXXX     ",
    "           XXXXXXXXXXXXXXXXXXX      ",
    "           XXXXXXXXXXXXXXXXXX       ",
    "            XXXXXXXXXXXXXXXX        ",
    "               XXXXXXXXXXXXXX       ",
    "               XXXXXXXXXXXXXXX      ",
    "             XXXXXXXXXXXXXXXXXX     ",
    "            XXXXXXXXXXXXXXXXXXX     ",
    "           XXXXXXXXXXXXXXXXXXXXX    ",
    "           XXXXXXXXXXXXXXXXXXXXX    ",
    "          XXXXXXXXXXXXXXXXXXXXXXX   ",
    "          XXXXXXXXXXXXXXXXXXXXXXX   ",
    "           XXXXXXXXXXXXXXXXXXXXXX   ",
    "            XXXXXXXXXXXXXXXXXXXXX   ",
    "             XXXXXXXXXXXXXXXXXXX    ",
    "              XXXXXXXXXXXXXXXXX     ",
    "               XXXXXXXXXXXXXX       ",
    "                 XXXXXXXXX          ",
]


@pytest.fixture
def oval_mask() -> np.ndarray:
    return mask_from_rows(OVAL_ROWS)


@pytest.fixture
def factory() -> TemplateFactory:
    # one factory per test keeps catalogs isolated
    return TemplateFactory()


def _place_shape(shape: Shape, interline: int, width: int, height: int, left: int, top: int) -> np.ndarray:
    """
    Paste the rendered shape into an empty canvas with its top-left at (left, top).
    """
    bitmap = render_shape(shape, interline)
    canvas = np.zeros((height, width), dtype=bool)
    canvas[top : top + bitmap.shape[0], left : left + bitmap.shape[1]] = bitmap
    return canvas


@pytest.fixture
def place_shape():
    return _place_shape
