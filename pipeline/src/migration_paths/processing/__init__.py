"""
Path processing modules for animal migration data.
"""

from .models import (
    Sample,
    TrackKey,
    Species,
    TimeWindow,
    MigrationPath,
    BoundingBox,
    ViewSpec,
)
from .path_processor import PathProcessor, process_movement_paths
from .distance import haversine, path_distance, segment_distances, initial_bearing
from .interpolation import interpolate_path, visible_coordinates
from .simplify import simplify_path, perpendicular_distance
from .coordinate_transform import (
    bounding_box,
    optimal_view,
    species_bounding_box,
    lat_lon_to_vector3,
    great_circle_arc,
)

__all__ = [
    "Sample", "TrackKey", "Species", "TimeWindow", "MigrationPath",
    "BoundingBox", "ViewSpec",
    "PathProcessor", "process_movement_paths",
    "haversine", "path_distance", "segment_distances", "initial_bearing",
    "interpolate_path", "visible_coordinates",
    "simplify_path", "perpendicular_distance",
    "bounding_box", "optimal_view", "species_bounding_box",
    "lat_lon_to_vector3", "great_circle_arc",
]
