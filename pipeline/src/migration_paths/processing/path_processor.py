"""
Path Processor Module

Groups raw movement samples into per-animal tracks, windows them by a
percentage of each track's elapsed time, and emits renderable paths.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence
import numpy as np
import pandas as pd

from .distance import EARTH_RADIUS_KM, path_distance
from .models import MigrationPath, Sample, TimeWindow

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def _parse_one(value) -> float:
    """Epoch milliseconds for a timestamp pandas cannot hold in nanoseconds."""
    try:
        ts = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        return np.nan

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return float((ts - _EPOCH) // _ONE_MS)


def parse_timestamps(values: Sequence[str]) -> np.ndarray:
    """
    Parse ISO-8601 strings into whole epoch milliseconds.

    Naive timestamps are taken as UTC. Unparseable values become NaN.
    Values outside the datetime64[ns] range (e.g. year 1500) are still
    converted.
    """
    raw = pd.Series(list(values), dtype=object)
    if raw.empty:
        return np.empty(0, dtype=np.float64)

    parsed = pd.to_datetime(raw, utc=True, errors="coerce", format="ISO8601")

    stamps = parsed.dt.tz_localize(None).dt.as_unit("ms").to_numpy()
    t_ms = stamps.astype(np.int64).astype(np.float64)

    missing = np.isnat(stamps)
    if missing.any():
        t_ms[missing] = [_parse_one(v) for v in raw[missing]]
    return t_ms


class PathProcessor:
    """
    Turns samples into windowed migration paths.

    Pipeline stages:
    1. Parse timestamps, dropping unparseable samples
    2. Group by (species, animal) in order of first appearance
    3. Sort each group by time (stable, so equal timestamps keep input order)
    4. Window by percentage of the group's duration, optionally cut at a playhead
    5. Emit coordinates, timestamps, distance and duration
    """

    def __init__(self, earth_radius_km: float = EARTH_RADIUS_KM):
        """
        Initialize path processor.

        Args:
            earth_radius_km: Sphere radius for path distances
        """
        self.earth_radius_km = earth_radius_km

    def to_frame(self, samples: Sequence[Sample]) -> pd.DataFrame:
        """Tabulate samples with a parsed epoch-millisecond column."""
        frame = pd.DataFrame({
            "species_id": [s.species_id for s in samples],
            "animal_id": [s.animal_id for s in samples],
            "timestamp": [s.timestamp for s in samples],
            "longitude": np.array([s.longitude for s in samples], dtype=np.float64),
            "latitude": np.array([s.latitude for s in samples], dtype=np.float64),
        })
        frame["t_ms"] = parse_timestamps(frame["timestamp"])
        return frame

    def process(
        self,
        samples: Sequence[Sample],
        window: Optional[TimeWindow] = None,
        current_time_percent: Optional[float] = None
    ) -> List[MigrationPath]:
        """
        Build one path per (species, animal) pair.

        Args:
            samples: Movement samples, in any order
            window: Percentage range of each track's duration (default: full)
            current_time_percent: Optional playhead within the window; only
                the prefix up to it is kept

        Returns:
            Paths in order of first appearance of each pair. A pair whose
            samples all fall outside the window yields an empty path.
        """
        window = window or TimeWindow()
        if len(samples) == 0:
            return []

        frame = self.to_frame(samples)

        invalid = frame["t_ms"].isna()
        if invalid.any():
            bad = frame.loc[invalid, "timestamp"].head(3).tolist()
            logger.warning(f"Dropping {int(invalid.sum())} samples with unparseable timestamps (e.g. {bad})")
            frame = frame[~invalid]

        if window.is_inverted:
            logger.debug(f"Inverted window {window.start}-{window.end}, all paths will be empty")

        paths = []
        for (species_id, animal_id), group in frame.groupby(["species_id", "animal_id"], sort=False):
            group = group.sort_values("t_ms", kind="stable")
            paths.append(self._build_path(species_id, animal_id, group, window, current_time_percent))

        logger.debug(f"Built {len(paths)} paths from {len(frame)} samples")
        return paths

    def _build_path(
        self,
        species_id: str,
        animal_id: str,
        group: pd.DataFrame,
        window: TimeWindow,
        current_time_percent: Optional[float]
    ) -> MigrationPath:
        """Window one time-sorted group and assemble its path."""
        t_ms = group["t_ms"].to_numpy()
        first = t_ms[0]
        total_duration = t_ms[-1] - first

        range_start = first + total_duration * window.start / 100
        range_end = first + total_duration * window.end / 100

        if current_time_percent is not None:
            upper = range_start + (range_end - range_start) * current_time_percent / 100
        else:
            upper = range_end

        in_range = (t_ms >= range_start) & (t_ms <= upper)

        lons = group["longitude"].to_numpy()[in_range]
        lats = group["latitude"].to_numpy()[in_range]
        selected_t = t_ms[in_range]

        coordinates = [(float(lon), float(lat)) for lon, lat in zip(lons, lats)]
        timestamps = group["timestamp"].to_numpy()[in_range].tolist()

        duration = float(selected_t[-1] - selected_t[0]) if len(selected_t) > 1 else 0.0

        return MigrationPath(
            species_id=species_id,
            animal_id=animal_id,
            coordinates=coordinates,
            timestamps=timestamps,
            total_distance=path_distance(coordinates, self.earth_radius_km),
            duration=duration
        )


def process_movement_paths(
    samples: Sequence[Sample],
    window: Optional[TimeWindow] = None,
    current_time_percent: Optional[float] = None
) -> List[MigrationPath]:
    """Convenience wrapper around PathProcessor.process with default settings."""
    return PathProcessor().process(samples, window, current_time_percent)
