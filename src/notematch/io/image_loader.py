from __future__ import annotations

from pathlib import Path
from typing import Union

import cv2
import numpy as np

PathLike = Union[str, Path]


def load_grayscale(path: PathLike) -> np.ndarray:
    """
    Load a page scan as a single-channel array ready for binarization.
    """
    image = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
    if image is None:
        raise FileNotFoundError(f"Unable to load image at {path}")
    return image


def binarize(gray: np.ndarray, threshold: int = 128) -> np.ndarray:
    """
    Classify dark ink as foreground.

    Returns a boolean mask where True marks pixels darker than or equal to
    ``threshold``.
    """
    if gray.ndim != 2:
        raise ValueError("gray must be a single-channel image")
    if not 0 <= threshold <= 255:
        raise ValueError("threshold must be in [0, 255]")
    _, mask = cv2.threshold(gray.astype(np.uint8), threshold, 255, cv2.THRESH_BINARY_INV)
    return mask > 0


def load_foreground_mask(path: PathLike, threshold: int = 128) -> np.ndarray:
    return binarize(load_grayscale(path), threshold)
