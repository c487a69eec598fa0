"""
Coordinate Transformation Module

Geographic extents and camera placement for the 2D map, plus projection of
(lat, lon) onto the 3D globe used by the globe view.
"""

import logging
import math
from functools import reduce
from typing import Iterable, List, Optional, Sequence
import numpy as np

from .models import BoundingBox, Coordinate, Sample, ViewSpec

logger = logging.getLogger(__name__)

DEFAULT_VIEW = ViewSpec(center=(20.0, 0.0), zoom=2)

BASE_ZOOM = 14
MIN_ZOOM = 1
MAX_ZOOM = 18
ZOOM_PADDING = 1

GLOBE_RADIUS = 5.0
ALTITUDE_SCALE = 10000.0  # altitude meters per globe unit


def bounding_box(coordinates: Sequence[Coordinate]) -> Optional[BoundingBox]:
    """
    Compute the geographic extent of (lon, lat) coordinates.

    Returns:
        BoundingBox, or None for empty input
    """
    if len(coordinates) == 0:
        return None

    coords = np.asarray(coordinates, dtype=np.float64)
    lons, lats = coords[:, 0], coords[:, 1]

    return BoundingBox(
        north=float(np.max(lats)),
        south=float(np.min(lats)),
        east=float(np.max(lons)),
        west=float(np.min(lons))
    )


def optimal_view(
    boxes: Sequence[BoundingBox],
    base_zoom: int = BASE_ZOOM,
    min_zoom: int = MIN_ZOOM,
    max_zoom: int = MAX_ZOOM,
    padding: int = ZOOM_PADDING,
    default: ViewSpec = DEFAULT_VIEW
) -> ViewSpec:
    """
    Center and zoom that frame all boxes.

    The boxes are merged into one envelope; zoom is
    floor(base_zoom - log2(max_span * 2)) clamped to [min_zoom, max_zoom],
    then reduced by the padding.

    Args:
        boxes: Extents to frame
        base_zoom: Zoom for a half-degree span
        min_zoom, max_zoom: Clamp range before padding
        padding: Levels subtracted after clamping
        default: View returned when there is nothing to frame

    Returns:
        ViewSpec with center as (lat, lon)
    """
    if not boxes:
        return default

    envelope = reduce(lambda a, b: a.merge(b), boxes)
    span = envelope.max_span

    if span > 0:
        zoom = math.floor(base_zoom - math.log2(span * 2))
    else:
        zoom = max_zoom
    zoom = min(max(zoom, min_zoom), max_zoom) - padding

    return ViewSpec(center=envelope.center, zoom=int(zoom))


def species_bounding_box(
    samples: Iterable[Sample],
    species_ids: Iterable[str],
    **view_kwargs
) -> ViewSpec:
    """
    View framing every sample of the given species.

    Falls back to the default world view when no sample qualifies.
    """
    wanted = set(species_ids)
    coords: List[Coordinate] = [s.coordinate for s in samples if s.species_id in wanted]

    box = bounding_box(coords)
    if box is None:
        logger.debug(f"No samples for species {sorted(wanted)}, using default view")
        return view_kwargs.get("default", DEFAULT_VIEW)

    return optimal_view([box], **view_kwargs)


def lat_lon_to_vector3(
    lat: float,
    lon: float,
    radius: float = GLOBE_RADIUS,
    altitude: float = 0.0
) -> np.ndarray:
    """
    Project a geographic point onto the globe.

    Args:
        lat, lon: Position in degrees
        radius: Globe radius in scene units
        altitude: Height above the surface in meters

    Returns:
        (x, y, z) with y pointing to the north pole
    """
    phi = np.radians(90 - lat)
    theta = np.radians(lon + 180)
    r = radius + altitude / ALTITUDE_SCALE

    return np.array([
        -(r * np.sin(phi) * np.cos(theta)),
        r * np.cos(phi),
        r * np.sin(phi) * np.sin(theta)
    ])


def great_circle_arc(
    start: np.ndarray,
    end: np.ndarray,
    segments: int = 50,
    radius: float = GLOBE_RADIUS + 0.1,
    lift: float = 0.5
) -> np.ndarray:
    """
    Arc between two globe points by spherical linear interpolation.

    Each point is pushed out to radius + sin(t*pi) * lift so the arc rises
    above the surface mid-way.

    Returns:
        (segments + 1, 3) array of points
    """
    start = np.asarray(start, dtype=np.float64)
    end = np.asarray(end, dtype=np.float64)

    norms = np.linalg.norm(start) * np.linalg.norm(end)
    cos_angle = np.dot(start, end) / norms if norms > 0 else 1.0
    angle = np.arccos(np.clip(cos_angle, -1.0, 1.0))
    sin_angle = np.sin(angle)

    points = []
    for i in range(segments + 1):
        t = i / segments

        if np.isclose(sin_angle, 0.0, atol=1e-12):
            points.append(start.copy())
            continue

        a = np.sin((1 - t) * angle) / sin_angle
        b = np.sin(t * angle) / sin_angle
        point = start * a + end * b

        height = np.sin(t * np.pi) * lift
        points.append(point / np.linalg.norm(point) * (radius + height))

    return np.array(points)
