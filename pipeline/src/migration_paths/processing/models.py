"""
Data model for migration path processing.

Samples come in from the data layer; paths, bounding boxes and views are
derived values recomputed on every call. Coordinates are (longitude, latitude)
pairs in degrees throughout.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple

Coordinate = Tuple[float, float]  # (lon, lat)

SPECIES_TYPES = ("bird", "mammal", "marine", "reptile", "insect")


@dataclass(frozen=True)
class Sample:
    """A single GPS fix for one tagged animal."""
    id: str
    species_id: str
    animal_id: str
    timestamp: str  # ISO-8601
    latitude: float
    longitude: float
    altitude: Optional[float] = None  # meters
    speed: Optional[float] = None  # km/h
    heading: Optional[float] = None  # degrees
    accuracy: Optional[float] = None  # meters

    @property
    def key(self) -> "TrackKey":
        return TrackKey(self.species_id, self.animal_id)

    @property
    def coordinate(self) -> Coordinate:
        return (self.longitude, self.latitude)


@dataclass(frozen=True)
class TrackKey:
    """Identifies one animal's movement history."""
    species_id: str
    animal_id: str


@dataclass(frozen=True)
class Species:
    """Display metadata for a tracked species."""
    id: str
    name: str
    scientific_name: str = ""
    icon: str = ""
    color: str = "#888888"
    type: str = "bird"

    def __post_init__(self):
        if self.type not in SPECIES_TYPES:
            raise ValueError(f"Unknown species type {self.type!r}, expected one of {SPECIES_TYPES}")


@dataclass(frozen=True)
class TimeWindow:
    """
    Percentage range [0, 100] of a track's elapsed duration.

    The window is relative to each track's own first and last fix, not to
    calendar time.
    """
    start: float = 0.0
    end: float = 100.0

    @property
    def is_inverted(self) -> bool:
        return self.start > self.end


@dataclass
class MigrationPath:
    """Windowed, renderable form of one track."""
    species_id: str
    animal_id: str
    coordinates: List[Coordinate] = field(default_factory=list)
    timestamps: List[str] = field(default_factory=list)
    total_distance: float = 0.0  # km
    duration: float = 0.0  # ms

    @property
    def key(self) -> TrackKey:
        return TrackKey(self.species_id, self.animal_id)

    @property
    def n_points(self) -> int:
        return len(self.coordinates)

    @property
    def is_empty(self) -> bool:
        return not self.coordinates

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speciesId": self.species_id,
            "animalId": self.animal_id,
            "coordinates": [[lon, lat] for lon, lat in self.coordinates],
            "timestamps": list(self.timestamps),
            "totalDistance": self.total_distance,
            "duration": self.duration
        }


@dataclass(frozen=True)
class BoundingBox:
    """Geographic extent in degrees."""
    north: float
    south: float
    east: float
    west: float

    @property
    def lat_span(self) -> float:
        return self.north - self.south

    @property
    def lon_span(self) -> float:
        return self.east - self.west

    @property
    def max_span(self) -> float:
        return max(self.lat_span, self.lon_span)

    @property
    def center(self) -> Tuple[float, float]:
        """Midpoint as (lat, lon)."""
        return (
            (self.north + self.south) / 2,
            (self.east + self.west) / 2
        )

    def merge(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(
            north=max(self.north, other.north),
            south=min(self.south, other.south),
            east=max(self.east, other.east),
            west=min(self.west, other.west)
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "north": self.north,
            "south": self.south,
            "east": self.east,
            "west": self.west
        }


@dataclass(frozen=True)
class ViewSpec:
    """Map camera: center as (lat, lon) and an integer zoom level."""
    center: Tuple[float, float]
    zoom: int

    def to_dict(self) -> Dict[str, Any]:
        return {"center": list(self.center), "zoom": self.zoom}
