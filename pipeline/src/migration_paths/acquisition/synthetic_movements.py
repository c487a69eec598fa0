"""
Synthetic movement generation.

Produces plausible tracks along known migration routes so the map can be
exercised without a tracking data source. Routes are coarse waypoint lists;
animals follow them with about a degree of jitter over one year.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np

from ..processing.models import Sample, Species

logger = logging.getLogger(__name__)

# (lat, lon) waypoints
MIGRATION_ROUTES: Dict[str, List[Tuple[float, float]]] = {
    "arctic-tern": [
        (71.0, -8.0),     # Arctic
        (60.0, -3.0),     # North Sea
        (45.0, -10.0),    # Atlantic
        (20.0, -20.0),    # West Africa
        (-10.0, -15.0),   # South Atlantic
        (-35.0, 20.0),    # South Africa
        (-60.0, 0.0),     # Antarctic
    ],
    "gray-whale": [
        (60.0, -165.0),   # Alaska
        (55.0, -160.0),   # Bering Sea
        (45.0, -125.0),   # Pacific Northwest
        (35.0, -120.0),   # California
        (25.0, -110.0),   # Baja California
    ],
    "monarch-butterfly": [
        (45.0, -75.0),    # Canada
        (40.0, -85.0),    # Great Lakes
        (35.0, -95.0),    # Texas
        (25.0, -100.0),   # Central Mexico
        (19.0, -100.0),   # Michoacan
    ],
    "caribou": [
        (68.0, -133.0),   # Arctic Canada
        (65.0, -125.0),   # Mackenzie River
        (60.0, -115.0),   # Alberta
        (55.0, -110.0),   # Saskatchewan
    ],
    "sea-turtle": [
        (26.0, -80.0),    # Florida
        (30.0, -75.0),    # Atlantic
        (35.0, -65.0),    # Sargasso Sea
        (40.0, -50.0),    # North Atlantic
        (45.0, -40.0),    # Newfoundland
    ],
    "wildebeest": [
        (-1.5, 34.8),     # Serengeti
        (-1.0, 35.2),     # Northern Serengeti
        (-1.3, 35.0),     # Mara River
        (-1.8, 34.5),     # Southern Serengeti
    ],
}

DEFAULT_ROUTE = "arctic-tern"
MAX_ANIMALS_PER_SPECIES = 3
BASE_DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def samples_for_selection(n_species: int) -> int:
    """Points per species; fewer when many species are on screen."""
    if n_species <= 2:
        return 20
    if n_species <= 4:
        return 15
    if n_species <= 6:
        return 10
    return 8


def _format_timestamp(ts: datetime) -> str:
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def generate_species_movements(
    species: Species,
    count: int,
    rng: Optional[np.random.Generator] = None
) -> List[Sample]:
    """
    Generate movements for one species.

    Args:
        species: Species to simulate; unknown ids follow the arctic tern route
        count: Approximate number of samples
        rng: Random generator (default: fresh, unseeded)

    Returns:
        Samples sorted by timestamp
    """
    rng = rng or np.random.default_rng()
    route = MIGRATION_ROUTES.get(species.id, MIGRATION_ROUTES[DEFAULT_ROUTE])

    if count <= 0:
        return []

    n_animals = min(math.ceil(count / 15), MAX_ANIMALS_PER_SPECIES)
    points_per_animal = count // n_animals

    samples = []
    for animal_index in range(n_animals):
        animal_id = f"{species.id}-{animal_index + 1}"

        for i in range(points_per_animal):
            progress = i / (points_per_animal - 1) if points_per_animal > 1 else 0.0
            route_index = progress * (len(route) - 1)
            lower = math.floor(route_index)
            upper = min(lower + 1, len(route) - 1)
            local = route_index - lower

            lat = route[lower][0] + (route[upper][0] - route[lower][0]) * local
            lon = route[lower][1] + (route[upper][1] - route[lower][1]) * local

            lat_jitter, lon_jitter = rng.uniform(-1.0, 1.0, size=2)
            day_offset = math.floor(progress * 365)

            samples.append(Sample(
                id=f"{animal_id}-{i}",
                species_id=species.id,
                animal_id=animal_id,
                timestamp=_format_timestamp(BASE_DATE + timedelta(days=day_offset)),
                latitude=float(np.clip(lat + lat_jitter, -90, 90)),
                longitude=float(np.clip(lon + lon_jitter, -180, 180)),
                altitude=float(rng.uniform(0, 1000)),
                speed=float(rng.uniform(5, 25)),
                heading=float(rng.uniform(0, 360)),
                accuracy=float(rng.uniform(5, 15))
            ))

    samples.sort(key=lambda s: s.timestamp)
    logger.debug(f"Generated {len(samples)} samples for {species.id} ({n_animals} animals)")
    return samples


def generate_movements(
    species_list: Sequence[Species],
    count: Optional[int] = None,
    seed: Optional[int] = None
) -> List[Sample]:
    """
    Generate movements for a species selection.

    Args:
        species_list: Selected species
        count: Samples per species (default: scaled to selection size)
        seed: Seed for reproducible output

    Returns:
        Concatenated samples, species in selection order
    """
    if not species_list:
        return []

    rng = np.random.default_rng(seed)
    count = count if count is not None else samples_for_selection(len(species_list))

    movements = []
    for species in species_list:
        movements.extend(generate_species_movements(species, count, rng))

    logger.info(f"Generated {len(movements)} samples for {len(species_list)} species")
    return movements
