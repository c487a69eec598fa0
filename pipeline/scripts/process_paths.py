#!/usr/bin/env python3
"""
Main path processing script.

Turns movement samples into map-ready JSON:
1. Load samples from CSV/parquet, or generate synthetic ones per species
2. Group into per-animal paths and window them by time
3. Simplify dense paths and place the playhead marker
4. Frame the map view and compute dashboard metrics
5. Write everything to a JSON file

Usage:
    python process_paths.py --species arctic-tern,gray-whale --seed 42
    python process_paths.py --input data/tracks.csv --window 25 75 --current-time 50
"""

import sys
import json
import logging
import argparse
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from migration_paths.config import PathConfig
from migration_paths.acquisition import AVAILABLE_SPECIES, find_species, generate_movements, load_samples
from migration_paths.acquisition.species import SPECIES_BY_ID
from migration_paths.metrics import MetricsCalculator
from migration_paths.processing import (
    PathProcessor, TimeWindow, Species,
    interpolate_path, simplify_path, species_bounding_box,
)

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "path_config.yaml"


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Process animal movement samples into migration paths"
    )

    parser.add_argument(
        "--input",
        type=Path,
        help="CSV or parquet file of movement samples"
    )

    parser.add_argument(
        "--species",
        type=str,
        help="Comma-separated species ids to generate or keep (e.g. arctic-tern,caribou)"
    )

    parser.add_argument(
        "--window",
        type=float,
        nargs=2,
        metavar=("START", "END"),
        default=None,
        help="Time window as percent of each track's duration (default from config)"
    )

    parser.add_argument(
        "--current-time",
        type=float,
        default=None,
        help="Playhead position within the window, in percent"
    )

    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Simplification tolerance in degrees (default from config, 0 disables)"
    )

    parser.add_argument(
        "--count",
        type=int,
        default=None,
        help="Synthetic samples per species"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for synthetic data"
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Config file (default: {DEFAULT_CONFIG_PATH} if present)"
    )

    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output JSON path (default: <output_dir>/paths.json)"
    )

    return parser.parse_args(argv)


def load_config(path):
    """Load the given config file, the default one, or built-in defaults."""
    if path is not None:
        return PathConfig.load(path)
    if DEFAULT_CONFIG_PATH.exists():
        return PathConfig.load(DEFAULT_CONFIG_PATH)
    return PathConfig()


def resolve_species(species_arg, samples=None):
    """Species for the run: explicit ids, else whatever the samples contain."""
    if species_arg:
        return find_species(s.strip() for s in species_arg.split(",") if s.strip())

    if samples is None:
        return list(AVAILABLE_SPECIES)

    seen = dict.fromkeys(s.species_id for s in samples)
    return [SPECIES_BY_ID.get(sid, Species(id=sid, name=sid)) for sid in seen]


def build_payload(samples, species, config, window, current_time=None, tolerance=0.0):
    """Process samples into the JSON structure consumed by the map."""
    processor = PathProcessor(earth_radius_km=config.earth_radius_km)
    paths = processor.process(samples, window, current_time)
    logger.info(f"  Built {len(paths)} paths ({sum(p.is_empty for p in paths)} empty in window)")

    path_dicts = []
    for path in paths:
        data = path.to_dict()
        if tolerance > 0:
            data["simplified"] = [list(c) for c in simplify_path(path.coordinates, tolerance)]
        # Paths are already cut at the playhead, so the marker sits at their end
        position = interpolate_path(path.coordinates, 1.0)
        data["position"] = list(position) if position is not None else None
        path_dicts.append(data)

    view = species_bounding_box(samples, [s.id for s in species], **config.view_kwargs())

    calculator = MetricsCalculator(processor=processor)
    summary = calculator.summarize(samples, species)
    comparison = calculator.species_comparison(paths, species)

    return {
        "window": {"start": window.start, "end": window.end},
        "currentTime": current_time,
        "view": view.to_dict(),
        "paths": path_dicts,
        "summary": summary.to_dict(),
        "comparison": [c.to_dict() for c in comparison]
    }


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load config: {e}")
        return 1

    window = TimeWindow(*args.window) if args.window else config.window
    tolerance = args.tolerance if args.tolerance is not None else config.simplify_tolerance
    output_path = args.output or (config.output_dir / "paths.json")

    logger.info("=" * 60)
    logger.info("Migration Paths - Path Processing")
    logger.info("=" * 60)
    logger.info(f"Window: {window.start}% - {window.end}%")
    if args.current_time is not None:
        logger.info(f"Playhead: {args.current_time}%")
    logger.info(f"Simplify tolerance: {tolerance} deg")
    logger.info("")

    try:
        if args.input:
            samples = load_samples(args.input)
            species = resolve_species(args.species, samples)
            wanted = {s.id for s in species}
            samples = [s for s in samples if s.species_id in wanted]
        else:
            species = resolve_species(args.species)
            count = args.count if args.count is not None else config.samples_per_species
            samples = generate_movements(species, count=count, seed=args.seed)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load samples: {e}")
        return 1

    logger.info(f"Processing {len(samples)} samples for {len(species)} species:")
    for sp in species:
        logger.info(f"  - {sp.id}")

    payload = build_payload(samples, species, config, window, args.current_time, tolerance)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)

    logger.info("")
    logger.info("=" * 60)
    logger.info(f"Wrote {len(payload['paths'])} paths to {output_path}")
    logger.info("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
