"""
Configuration and constants for path processing.

Defaults match what the map and globe views expect; a JSON or YAML file can
override any field.
"""

from dataclasses import dataclass, field, fields, asdict
from typing import Optional, Dict, Any, Tuple
import json
from pathlib import Path

import yaml

from .processing.distance import EARTH_RADIUS_KM
from .processing.coordinate_transform import (
    BASE_ZOOM, MIN_ZOOM, MAX_ZOOM, ZOOM_PADDING, GLOBE_RADIUS, DEFAULT_VIEW
)
from .processing.models import TimeWindow, ViewSpec


@dataclass
class PathConfig:
    """
    Global configuration for path processing.

    Tolerances are in degrees, distances in kilometers.
    """

    # Path simplification (degrees of lon/lat)
    simplify_tolerance: float = 0.1

    # Default time window (percent of each track's duration)
    window_start: float = 0.0
    window_end: float = 100.0

    earth_radius_km: float = EARTH_RADIUS_KM

    # Map framing
    base_zoom: int = BASE_ZOOM
    min_zoom: int = MIN_ZOOM
    max_zoom: int = MAX_ZOOM
    zoom_padding: int = ZOOM_PADDING
    default_center: Tuple[float, float] = DEFAULT_VIEW.center  # (lat, lon)
    default_zoom: int = DEFAULT_VIEW.zoom

    globe_radius: float = GLOBE_RADIUS

    # Synthetic data (None = scale with number of species)
    samples_per_species: Optional[int] = None

    output_dir: Path = field(default_factory=lambda: Path("output"))

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.window_start, self.window_end)

    @property
    def default_view(self) -> ViewSpec:
        return ViewSpec(center=tuple(self.default_center), zoom=self.default_zoom)

    def view_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for optimal_view / species_bounding_box."""
        return {
            "base_zoom": self.base_zoom,
            "min_zoom": self.min_zoom,
            "max_zoom": self.max_zoom,
            "padding": self.zoom_padding,
            "default": self.default_view
        }

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["default_center"] = list(self.default_center)
        data["output_dir"] = str(self.output_dir)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PathConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")

        data = dict(data)
        if "default_center" in data:
            data["default_center"] = tuple(data["default_center"])
        if "output_dir" in data:
            data["output_dir"] = Path(data["output_dir"])
        return cls(**data)

    @classmethod
    def from_json(cls, path: Path) -> "PathConfig":
        """Load config from JSON file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def from_yaml(cls, path: Path) -> "PathConfig":
        """Load config from YAML file."""
        with open(path) as f:
            return cls.from_dict(yaml.safe_load(f) or {})

    @classmethod
    def load(cls, path: Path) -> "PathConfig":
        """Load config from a .json, .yaml or .yml file."""
        path = Path(path)
        if path.suffix in (".yaml", ".yml"):
            return cls.from_yaml(path)
        return cls.from_json(path)

    def save(self, path: Path) -> None:
        """Save config as YAML or JSON depending on the suffix."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            if path.suffix in (".yaml", ".yml"):
                yaml.safe_dump(self.to_dict(), f, sort_keys=False)
            else:
                json.dump(self.to_dict(), f, indent=2)


# Global default config
DEFAULT_CONFIG = PathConfig()
