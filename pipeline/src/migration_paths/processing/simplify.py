"""
Ramer-Douglas-Peucker polyline simplification.

Distances are planar and measured directly on (lon, lat) degrees, so the
tolerance is in degrees too. Runs on an explicit stack so long tracks do not
hit the recursion limit.
"""

import logging
from typing import List, Sequence, Tuple
import numpy as np

from .models import Coordinate

logger = logging.getLogger(__name__)


def perpendicular_distance(
    point: Coordinate,
    line_start: Coordinate,
    line_end: Coordinate
) -> float:
    """
    Planar distance from point to the infinite line through start and end.

    A zero-length chord gives 0.
    """
    x0, y0 = point
    x1, y1 = line_start
    x2, y2 = line_end

    denominator = np.sqrt((y2 - y1) ** 2 + (x2 - x1) ** 2)
    if denominator == 0:
        return 0.0

    numerator = abs((y2 - y1) * x0 - (x2 - x1) * y0 + x2 * y1 - y2 * x1)
    return float(numerator / denominator)


def _chord_distances(points: np.ndarray, start: int, end: int) -> np.ndarray:
    """Distances of points[start+1:end] from the chord points[start]-points[end]."""
    x1, y1 = points[start]
    x2, y2 = points[end]
    interior = points[start + 1:end]

    denominator = np.sqrt((y2 - y1) ** 2 + (x2 - x1) ** 2)
    if denominator == 0:
        return np.zeros(len(interior))

    numerator = np.abs(
        (y2 - y1) * interior[:, 0] - (x2 - x1) * interior[:, 1] + x2 * y1 - y2 * x1
    )
    return numerator / denominator


def simplify_path(
    coordinates: Sequence[Coordinate],
    tolerance: float
) -> List[Coordinate]:
    """
    Simplify a polyline, always keeping its first and last vertex.

    Args:
        coordinates: (lon, lat) vertices
        tolerance: Maximum allowed deviation in degrees; negative means 0

    Returns:
        Subsequence of the input vertices
    """
    if len(coordinates) <= 2:
        return list(coordinates)

    tolerance = max(tolerance, 0.0)
    points = np.asarray(coordinates, dtype=np.float64)
    keep = np.zeros(len(points), dtype=bool)
    keep[0] = keep[-1] = True

    stack: List[Tuple[int, int]] = [(0, len(points) - 1)]
    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue

        distances = _chord_distances(points, start, end)
        # argmax picks the first of equal maxima
        offset = int(np.argmax(distances))
        max_distance = distances[offset]

        if max_distance > tolerance:
            split = start + 1 + offset
            keep[split] = True
            stack.append((split, end))
            stack.append((start, split))

    simplified = [coordinates[i] for i in np.flatnonzero(keep)]
    logger.debug(f"Simplified {len(coordinates)} -> {len(simplified)} points (tolerance={tolerance})")

    return simplified
