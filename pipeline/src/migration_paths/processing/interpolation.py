"""
Playhead positioning along a path.

The path is treated as N-1 equal parametric segments regardless of their
geographic length, and longitude/latitude are interpolated linearly.
"""

import math
from typing import List, Optional, Sequence

from .models import Coordinate


def interpolate_path(
    coordinates: Sequence[Coordinate],
    progress: float
) -> Optional[Coordinate]:
    """
    Position at a fractional progress along a polyline.

    Args:
        coordinates: (lon, lat) vertices in travel order
        progress: Position in [0, 1]; values outside are clamped

    Returns:
        Interpolated (lon, lat), or None for an empty path
    """
    if len(coordinates) == 0:
        return None
    if len(coordinates) == 1:
        return coordinates[0]

    progress = min(max(progress, 0.0), 1.0)

    total_segments = len(coordinates) - 1
    segment_progress = progress * total_segments
    segment_index = math.floor(segment_progress)
    local_progress = segment_progress - segment_index

    if segment_index >= total_segments:
        return coordinates[-1]

    lon1, lat1 = coordinates[segment_index]
    lon2, lat2 = coordinates[segment_index + 1]

    return (
        lon1 + (lon2 - lon1) * local_progress,
        lat1 + (lat2 - lat1) * local_progress
    )


def visible_coordinates(
    coordinates: Sequence[Coordinate],
    progress: float
) -> List[Coordinate]:
    """Vertices already passed by the playhead, including the current one."""
    n = len(coordinates)
    if n == 0:
        return []

    progress = min(max(progress, 0.0), 1.0)
    n_visible = min(n, math.floor(progress * n) + 1)

    return list(coordinates[:n_visible])
