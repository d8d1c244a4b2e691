from __future__ import annotations

import argparse
import logging
import math
import time
from pathlib import Path
from typing import Sequence
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

import cv2
import numpy as np

from notematch import (
    ChamferDistance,
    DistanceMatcher,
    MatcherParams,
    PixelDistance,
    Shape,
    Template,
    TemplateFactory,
    best_matches,
)
from notematch.io import binarize, load_grayscale
from notematch.templates import KeyPointKind

logger = logging.getLogger("match_noteheads")


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Locate note heads in a page scan by chamfer matching.")
    parser.add_argument("image", type=Path, help="Grayscale or color page image.")
    parser.add_argument(
        "--interline",
        type=int,
        required=True,
        help="Distance in pixels between two staff lines; selects the template size.",
    )
    parser.add_argument(
        "--shape",
        type=str,
        action="append",
        default=None,
        help=(
            "Shape to search for, case-insensitive "
            f"({', '.join(shape.name for shape in Shape)}). "
            "Repeat for several shapes. Defaults to NOTEHEAD_BLACK."
        ),
    )
    parser.add_argument(
        "--threshold",
        type=int,
        default=128,
        help="Gray level at or below which a pixel is ink.",
    )
    parser.add_argument(
        "--max-score",
        type=float,
        default=math.inf,
        help="Discard anchors scoring above this value (pixels).",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Number of de-duplicated matches reported per shape.",
    )
    parser.add_argument(
        "--reference-depth",
        type=float,
        default=1.0,
        help="Distance (pixels) under which background key points are penalized.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of threads scoring anchor rows.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the image annotated with the reported matches.",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the templates' key point maps.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()
    try:
        args.shape = [Shape.from_name(name) for name in (args.shape or ["NOTEHEAD_BLACK"])]
    except ValueError as exc:
        parser.error(str(exc))
    return args


def render_visualization(
    gray: np.ndarray,
    results: Sequence[tuple[Template, PixelDistance]],
) -> np.ndarray:
    """
    Overlay template key points and anchors of the reported matches.
    """
    annotated = cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)
    overlay = annotated.copy()
    height, width = gray.shape

    for template, location in results:
        for kp in template.key_points:
            x, y = location.x + kp.dx, location.y + kp.dy
            if 0 <= x < width and 0 <= y < height:
                color = (0, 0, 255) if kp.kind is KeyPointKind.FOREGROUND else (255, 128, 0)
                overlay[y, x] = color

    annotated = cv2.addWeighted(overlay, 0.7, annotated, 0.3, 0)

    for template, location in results:
        cv2.drawMarker(
            annotated,
            (location.x, location.y),
            (0, 200, 0),
            markerType=cv2.MARKER_CROSS,
            markerSize=max(6, template.half_height),
            thickness=1,
        )
        cv2.putText(
            annotated,
            f"{location.score:.2f}",
            (location.x + template.half_width + 2, location.y),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.35,
            (0, 128, 0),
            1,
            lineType=cv2.LINE_AA,
        )
    return annotated


def run() -> None:
    args = parse_arguments()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    shapes = args.shape
    gray = load_grayscale(args.image)
    mask = binarize(gray, args.threshold)

    start = time.perf_counter()
    table = ChamferDistance().compute_to_foreground(mask)
    transform_ms = (time.perf_counter() - start) * 1000.0
    logger.info("Distance transform of %dx%d image took %.1f ms", table.width, table.height, transform_ms)

    factory = TemplateFactory(shapes=shapes)
    catalog = factory.get_catalog(args.interline)
    matcher = DistanceMatcher(
        table,
        MatcherParams(reference_depth=args.reference_depth, workers=args.workers),
    )

    reported: list[tuple[Template, PixelDistance]] = []
    for shape in shapes:
        template = catalog.lookup(shape)
        if args.dump:
            print(template.dump())
            print()

        start = time.perf_counter()
        locations = matcher.match_all(template, args.max_score)
        match_ms = (time.perf_counter() - start) * 1000.0
        best = best_matches(locations, template, limit=args.limit)

        print(f"{shape.name}: {len(locations)} candidates, {len(best)} reported, {match_ms:.1f} ms")
        for rank, location in enumerate(best, start=1):
            print(f"  {rank:3d} | x={location.x:5d} y={location.y:5d} | score={location.score:8.4f}")
            reported.append((template, location))

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        cv2.imwrite(str(args.output), render_visualization(gray, reported))
        logger.info("Annotated image written to %s", args.output)


if __name__ == "__main__":
    run()
