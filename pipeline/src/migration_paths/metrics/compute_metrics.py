"""
Metrics Calculation Module

Computes dashboard analytics for migration data:
- Summary: record, animal and distance totals, reported speeds
- Species distribution: sample share per selected species
- Species comparison: distance, speed, duration and route efficiency
- Route Coherence: how tightly bundled a species' paths are
"""

import logging
from typing import List, Dict, Optional, Sequence
from dataclasses import dataclass, field
import numpy as np

from ..processing.distance import haversine, initial_bearing
from ..processing.models import MigrationPath, Sample, Species
from ..processing.path_processor import PathProcessor

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3600 * 1000.0
MS_PER_DAY = 24 * MS_PER_HOUR

# Net displacement below this is reported as "Stable"
STABLE_DISPLACEMENT_KM = 1.0

COMPASS_POINTS = ["North", "Northeast", "East", "Southeast", "South", "Southwest", "West", "Northwest"]


@dataclass
class SpeciesShare:
    name: str
    value: int
    color: str

    def to_dict(self) -> Dict:
        return {"name": self.name, "value": self.value, "color": self.color}


@dataclass
class MigrationSummary:
    """Headline numbers for the current selection."""
    total_records: int
    total_animals: int
    total_distance_km: float
    average_speed: float  # mean reported speed, km/h
    active_tracks: int  # selected species
    species_distribution: List[SpeciesShare] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "totalRecords": self.total_records,
            "totalAnimals": self.total_animals,
            "totalDistance": round(self.total_distance_km, 2),
            "averageSpeed": round(self.average_speed, 2),
            "activeTracks": self.active_tracks,
            "speciesDistribution": [s.to_dict() for s in self.species_distribution]
        }


@dataclass
class SpeciesComparison:
    """Route metrics for one species, averaged over its animals."""
    species_id: str
    name: str
    icon: str
    n_animals: int
    avg_distance_km: float
    avg_speed_kmh: float
    avg_duration_days: float
    efficiency: float  # straight-line / travelled, percent
    efficiency_rating: str
    detour_factor: float
    coherence: float
    coherence_rating: str
    direction: str

    def to_dict(self) -> Dict:
        return {
            "speciesId": self.species_id,
            "name": self.name,
            "icon": self.icon,
            "animals": self.n_animals,
            "avgDistance": round(self.avg_distance_km, 1),
            "avgSpeed": round(self.avg_speed_kmh, 2),
            "duration": round(self.avg_duration_days, 1),
            "efficiency": {
                "value": round(self.efficiency, 1),
                "rating": self.efficiency_rating
            },
            "detourFactor": round(self.detour_factor, 3),
            "coherence": {
                "value": round(self.coherence, 3),
                "rating": self.coherence_rating
            },
            "direction": self.direction
        }


class MetricsCalculator:
    """
    Calculates analytics for the dashboard from samples and processed paths.

    Everything here is derived from the data itself; nothing is simulated.
    """

    def __init__(
        self,
        resample_points: int = 100,
        processor: Optional[PathProcessor] = None
    ):
        """
        Initialize calculator.

        Args:
            resample_points: Points per path when comparing route shapes
            processor: Path processor used to build tracks from samples
        """
        self.resample_points = resample_points
        self.processor = processor or PathProcessor()

    def summarize(
        self,
        samples: Sequence[Sample],
        species: Sequence[Species]
    ) -> MigrationSummary:
        """
        Headline totals for a selection.

        Distance is summed over each animal's time-ordered track. Average
        speed uses reported sample speeds, skipping each track's first fix
        and fixes without a speed.

        Args:
            samples: Movement samples
            species: Selected species (for the distribution)

        Returns:
            MigrationSummary
        """
        paths = self.processor.process(samples)
        total_distance = sum(p.total_distance for p in paths)

        speeds = []
        frame = self.processor.to_frame(samples) if len(samples) else None
        if frame is not None:
            frame["speed"] = [s.speed for s in samples]
            frame = frame[frame["t_ms"].notna()]
            for _, group in frame.groupby(["species_id", "animal_id"], sort=False):
                group = group.sort_values("t_ms", kind="stable")
                speeds.extend(float(v) for v in group["speed"].iloc[1:].dropna() if v)

        average_speed = float(np.mean(speeds)) if speeds else 0.0

        distribution = [
            SpeciesShare(
                name=s.name,
                value=sum(1 for m in samples if m.species_id == s.id),
                color=s.color
            )
            for s in species
        ]

        summary = MigrationSummary(
            total_records=len(samples),
            total_animals=len(paths),
            total_distance_km=float(total_distance),
            average_speed=average_speed,
            active_tracks=len(species),
            species_distribution=distribution
        )
        logger.info(f"Summary: {summary.total_animals} animals, {summary.total_distance_km:.0f} km")
        return summary

    def species_comparison(
        self,
        paths: Sequence[MigrationPath],
        species: Sequence[Species]
    ) -> List[SpeciesComparison]:
        """
        Compare route metrics across species.

        Args:
            paths: Processed paths (any window)
            species: Species to report, in display order

        Returns:
            One SpeciesComparison per species with at least one non-empty path
        """
        results = []

        for sp in species:
            own = [p for p in paths if p.species_id == sp.id and not p.is_empty]
            if not own:
                continue

            distances = [p.total_distance for p in own]
            durations = [p.duration for p in own]
            speeds = [
                p.total_distance / (p.duration / MS_PER_HOUR)
                for p in own if p.duration > 0
            ]

            direct = [self._direct_distance(p) for p in own]
            travelled = float(np.sum(distances))
            straight = float(np.sum(direct))
            efficiency = self.calculate_efficiency(straight, travelled)
            detour = travelled / straight if straight > 0 else 1.0

            coherence = self.calculate_coherence(own)

            results.append(SpeciesComparison(
                species_id=sp.id,
                name=sp.name,
                icon=sp.icon,
                n_animals=len(own),
                avg_distance_km=float(np.mean(distances)),
                avg_speed_kmh=float(np.mean(speeds)) if speeds else 0.0,
                avg_duration_days=float(np.mean(durations)) / MS_PER_DAY,
                efficiency=efficiency,
                efficiency_rating=self._rate_efficiency(efficiency),
                detour_factor=detour,
                coherence=coherence,
                coherence_rating=self._rate_coherence(coherence),
                direction=self.calculate_direction(own)
            ))

        return results

    def _direct_distance(self, path: MigrationPath) -> float:
        (lon1, lat1), (lon2, lat2) = path.coordinates[0], path.coordinates[-1]
        return haversine(lat1, lon1, lat2, lon2)

    def calculate_efficiency(self, straight_km: float, travelled_km: float) -> float:
        """Straight-line over travelled distance, as a percentage."""
        if travelled_km <= 0:
            return 100.0
        return float(np.clip(straight_km / travelled_km * 100, 0, 100))

    def calculate_coherence(self, paths: Sequence[MigrationPath]) -> float:
        """
        Calculate route coherence (bundle tightness).

        Coherence is the inverse of average deviation from the median path.
        High coherence = all animals following similar routes.

        Args:
            paths: Paths of one species

        Returns:
            Coherence score (0-1)
        """
        normalized = []
        t_new = np.linspace(0, 1, self.resample_points)

        for path in paths:
            if path.n_points < 2:
                continue
            coords = np.asarray(path.coordinates, dtype=np.float64)
            t_orig = np.linspace(0, 1, len(coords))
            normalized.append(np.column_stack([
                np.interp(t_new, t_orig, coords[:, 0]),
                np.interp(t_new, t_orig, coords[:, 1])
            ]))

        if len(normalized) < 2:
            return 1.0

        normalized = np.array(normalized)  # (n_paths, n_points, 2)
        median_path = np.median(normalized, axis=0)

        deviations = [
            np.mean(np.sqrt(np.sum((track - median_path) ** 2, axis=1)))
            for track in normalized
        ]
        mean_deviation = np.mean(deviations)

        scale = np.sqrt(np.sum((median_path[-1] - median_path[0]) ** 2))
        if scale == 0:
            return 1.0

        coherence = np.exp(-(mean_deviation / scale) * 5)
        return float(np.clip(coherence, 0, 1))

    def calculate_direction(self, paths: Sequence[MigrationPath]) -> str:
        """
        Dominant travel direction as a compass octant.

        Uses the mean of each path's start and end points.
        """
        starts = np.array([p.coordinates[0] for p in paths if not p.is_empty])
        ends = np.array([p.coordinates[-1] for p in paths if not p.is_empty])
        if len(starts) == 0:
            return "Unknown"

        lon1, lat1 = starts.mean(axis=0)
        lon2, lat2 = ends.mean(axis=0)

        if haversine(lat1, lon1, lat2, lon2) < STABLE_DISPLACEMENT_KM:
            return "Stable"

        bearing = initial_bearing(lat1, lon1, lat2, lon2)
        return COMPASS_POINTS[int(((bearing + 22.5) % 360) // 45)]

    def _rate_coherence(self, value: float) -> str:
        """Convert coherence value to qualitative rating."""
        if value >= 0.7:
            return "High"
        elif value >= 0.4:
            return "Moderate"
        else:
            return "Low"

    def _rate_efficiency(self, value: float) -> str:
        """Convert route efficiency to qualitative rating."""
        if value >= 80:
            return "High"
        elif value >= 50:
            return "Moderate"
        else:
            return "Low"
