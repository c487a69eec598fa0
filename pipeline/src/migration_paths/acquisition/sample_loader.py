"""
Sample loading and validation.

This is the boundary where raw tracking records become Sample objects.
Malformed records are rejected here with ValueError so the processing
functions never see them.
"""

import logging
from pathlib import Path
from typing import List, Dict, Any, Iterable, Optional, Sequence
import numpy as np
import pandas as pd

from ..processing.models import Sample
from ..processing.path_processor import parse_timestamps
from .species import AVAILABLE_SPECIES

logger = logging.getLogger(__name__)

# Candidate column names, first match wins. Movebank names included.
ID_COLUMNS = ["id", "event-id"]
SPECIES_COLUMNS = ["species_id", "speciesId"]
TAXON_COLUMNS = ["taxon-canonical-name", "individual-taxon-canonical-name", "species"]
ANIMAL_COLUMNS = ["animal_id", "animalId", "individual-local-identifier", "tag-local-identifier"]
TIME_COLUMNS = ["timestamp", "study-local-timestamp"]
LON_COLUMNS = ["longitude", "location-long", "lon"]
LAT_COLUMNS = ["latitude", "location-lat", "lat"]
OPTIONAL_COLUMNS = {
    "altitude": ["altitude", "height-above-msl"],
    "speed": ["speed"],
    "heading": ["heading"],
    "accuracy": ["accuracy"],
}

TAXON_TO_SPECIES_ID = {s.scientific_name.lower(): s.id for s in AVAILABLE_SPECIES}


def _find_column(df: pd.DataFrame, candidates: List[str]) -> Optional[str]:
    """Find first matching column name from candidates."""
    for col in candidates:
        if col in df.columns:
            return col
    return None


def normalize_species_id(name: str) -> str:
    """Map a scientific name to a species id, or slugify it."""
    name = str(name).lower().strip()

    for sci_name, species_id in TAXON_TO_SPECIES_ID.items():
        if sci_name in name:
            return species_id

    return "-".join(name.split())


def _optional(value: Any) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def validate_samples(samples: Sequence[Sample]) -> None:
    """
    Check timestamps and coordinate ranges.

    Raises:
        ValueError: On the first malformed sample
    """
    if len(samples) == 0:
        return

    t_ms = parse_timestamps([s.timestamp for s in samples])
    for i, (sample, t) in enumerate(zip(samples, t_ms)):
        if np.isnan(t):
            raise ValueError(f"Sample {i} ({sample.id}): unparseable timestamp {sample.timestamp!r}")
        if not -90 <= sample.latitude <= 90:
            raise ValueError(f"Sample {i} ({sample.id}): latitude {sample.latitude} outside [-90, 90]")
        if not -180 <= sample.longitude <= 180:
            raise ValueError(f"Sample {i} ({sample.id}): longitude {sample.longitude} outside [-180, 180]")


def samples_from_dataframe(df: pd.DataFrame, species_id: Optional[str] = None) -> List[Sample]:
    """
    Parse tracking rows into validated Sample objects.

    Expected columns (any of the listed spellings):
    - species_id / speciesId, or a taxon name column
    - animal_id / animalId / individual-local-identifier / tag-local-identifier
    - timestamp
    - longitude / location-long, latitude / location-lat

    Args:
        df: Tracking data
        species_id: Species for every row when the data has no species column

    Returns:
        List of Sample objects in row order

    Raises:
        ValueError: If required columns are missing or a row is malformed
    """
    animal_col = _find_column(df, ANIMAL_COLUMNS)
    time_col = _find_column(df, TIME_COLUMNS)
    lon_col = _find_column(df, LON_COLUMNS)
    lat_col = _find_column(df, LAT_COLUMNS)

    missing = [
        name for name, col in [
            ("animal id", animal_col), ("timestamp", time_col),
            ("longitude", lon_col), ("latitude", lat_col)
        ] if col is None
    ]
    if missing:
        raise ValueError(f"Missing {', '.join(missing)} column(s) in {df.columns.tolist()}")

    species_col = _find_column(df, SPECIES_COLUMNS)
    taxon_col = None if species_col else _find_column(df, TAXON_COLUMNS)
    if species_col is None and taxon_col is None and species_id is None:
        raise ValueError(f"No species column in {df.columns.tolist()} and no species_id given")

    if species_col:
        species = df[species_col].astype(str).tolist()
    elif taxon_col:
        species = [normalize_species_id(name) for name in df[taxon_col]]
    else:
        species = [species_id] * len(df)

    id_col = _find_column(df, ID_COLUMNS)
    optional_cols = {name: _find_column(df, cands) for name, cands in OPTIONAL_COLUMNS.items()}

    samples = []
    for i, row in enumerate(df.itertuples(index=False)):
        values = dict(zip(df.columns, row))
        animal_id = str(values[animal_col])

        samples.append(Sample(
            id=str(values[id_col]) if id_col else f"{animal_id}-{i}",
            species_id=species[i],
            animal_id=animal_id,
            timestamp=str(values[time_col]),
            latitude=float(values[lat_col]),
            longitude=float(values[lon_col]),
            **{name: _optional(values[col]) if col else None for name, col in optional_cols.items()}
        ))

    validate_samples(samples)
    logger.info(f"Parsed {len(samples)} samples for {len(set(species))} species")
    return samples


def samples_from_records(records: Iterable[Dict[str, Any]]) -> List[Sample]:
    """Parse a list of dicts (e.g. decoded JSON) into validated samples."""
    df = pd.DataFrame(list(records))
    if df.empty:
        return []
    return samples_from_dataframe(df)


def load_samples(path: Path, species_id: Optional[str] = None) -> List[Sample]:
    """
    Load samples from a CSV or parquet file.

    Args:
        path: Path to data file
        species_id: Species for every row when the file has no species column

    Returns:
        Validated samples
    """
    path = Path(path)

    if path.suffix == '.parquet':
        df = pd.read_parquet(path)
    else:
        df = pd.read_csv(path)

    logger.info(f"Loaded {len(df)} rows from {path}")
    return samples_from_dataframe(df, species_id)


def samples_to_dataframe(samples: Sequence[Sample]) -> pd.DataFrame:
    """Tabulate samples using the column names load_samples reads back."""
    return pd.DataFrame({
        "id": [s.id for s in samples],
        "species_id": [s.species_id for s in samples],
        "animal_id": [s.animal_id for s in samples],
        "timestamp": [s.timestamp for s in samples],
        "latitude": [s.latitude for s in samples],
        "longitude": [s.longitude for s in samples],
        "altitude": [s.altitude for s in samples],
        "speed": [s.speed for s in samples],
        "heading": [s.heading for s in samples],
        "accuracy": [s.accuracy for s in samples],
    })
