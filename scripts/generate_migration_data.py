#!/usr/bin/env python3
"""
Generate synthetic migration movement data.

Creates one CSV per species in the format read by load_samples:
- id, species_id, animal_id, timestamp, latitude, longitude,
  altitude, speed, heading, accuracy

Routes follow the waypoint templates in
migration_paths.acquisition.synthetic_movements.
"""

import sys
import logging
import argparse
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "pipeline" / "src"))

from migration_paths.acquisition import (
    AVAILABLE_SPECIES, find_species, generate_movements, samples_to_dataframe
)

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate synthetic migration tracks")
    parser.add_argument(
        "--species",
        type=str,
        default=None,
        help="Comma-separated species ids (default: all)"
    )
    parser.add_argument("--count", type=int, default=45, help="Samples per species")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(__file__).parent.parent / "data" / "raw" / "synthetic",
        help="Directory for the CSV files"
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    if args.species:
        try:
            species_list = find_species(s.strip() for s in args.species.split(","))
        except ValueError as e:
            logger.error(str(e))
            return 1
    else:
        species_list = list(AVAILABLE_SPECIES)

    args.output_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Generating migration track datasets...")
    logger.info("=" * 60)

    samples = generate_movements(species_list, count=args.count, seed=args.seed)

    for species in species_list:
        own = [s for s in samples if s.species_id == species.id]
        df = samples_to_dataframe(own)
        output_path = args.output_dir / f"{species.id}.csv"
        df.to_csv(output_path, index=False)

        logger.info(f"{species.name}")
        logger.info(f"  Points: {len(df)}, Animals: {df['animal_id'].nunique()}")
        logger.info(f"  Saved: {output_path}")

    logger.info("=" * 60)
    logger.info(f"Generated {len(species_list)} datasets in {args.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
