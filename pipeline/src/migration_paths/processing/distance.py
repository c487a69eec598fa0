"""
Great-circle distance calculations.

Distances use the law of haversines on a sphere of mean Earth radius, so
totals stay numerically reproducible for the same float inputs.
"""

from typing import Sequence, Union
import numpy as np

from .models import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine(
    lat1: Union[float, np.ndarray],
    lon1: Union[float, np.ndarray],
    lat2: Union[float, np.ndarray],
    lon2: Union[float, np.ndarray],
    radius_km: float = EARTH_RADIUS_KM
) -> Union[float, np.ndarray]:
    """
    Compute great-circle distance between points.

    Args:
        lat1, lon1: First point(s) in degrees
        lat2, lon2: Second point(s) in degrees
        radius_km: Sphere radius

    Returns:
        Distance(s) in kilometers
    """
    d_lat = np.radians(np.subtract(lat2, lat1))
    d_lon = np.radians(np.subtract(lon2, lon1))

    a = (
        np.sin(d_lat / 2) * np.sin(d_lat / 2) +
        np.cos(np.radians(lat1)) * np.cos(np.radians(lat2)) *
        np.sin(d_lon / 2) * np.sin(d_lon / 2)
    )
    # Rounding can push antipodal pairs just past 1
    a = np.clip(a, 0.0, 1.0)

    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    distance = radius_km * c

    if np.ndim(distance) == 0:
        return float(distance)
    return distance


def segment_distances(
    coordinates: Sequence[Coordinate],
    radius_km: float = EARTH_RADIUS_KM
) -> np.ndarray:
    """Per-segment distances in km for a (lon, lat) polyline, length N-1."""
    if len(coordinates) < 2:
        return np.zeros(0)

    coords = np.asarray(coordinates, dtype=np.float64)
    lons, lats = coords[:, 0], coords[:, 1]

    return haversine(lats[:-1], lons[:-1], lats[1:], lons[1:], radius_km)


def path_distance(
    coordinates: Sequence[Coordinate],
    radius_km: float = EARTH_RADIUS_KM
) -> float:
    """
    Total length of a (lon, lat) polyline.

    Returns 0 for fewer than two points.
    """
    segments = segment_distances(coordinates, radius_km)
    total = 0.0
    for d in segments:
        total += float(d)
    return total


def initial_bearing(
    lat1: Union[float, np.ndarray],
    lon1: Union[float, np.ndarray],
    lat2: Union[float, np.ndarray],
    lon2: Union[float, np.ndarray]
) -> Union[float, np.ndarray]:
    """
    Compute initial compass bearing from point 1 to point 2.

    Returns:
        Bearing in degrees (0=North, 90=East), normalized to [0, 360)
    """
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    d_lon = np.radians(np.subtract(lon2, lon1))

    x = np.sin(d_lon) * np.cos(phi2)
    y = np.cos(phi1) * np.sin(phi2) - np.sin(phi1) * np.cos(phi2) * np.cos(d_lon)

    bearing = np.mod(np.degrees(np.arctan2(x, y)), 360)
    bearing = np.where(bearing >= 360, 0.0, bearing)

    if np.ndim(bearing) == 0:
        return float(bearing)
    return bearing
