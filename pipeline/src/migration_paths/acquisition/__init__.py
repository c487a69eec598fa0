"""
Data acquisition: loading tracking records and generating synthetic ones.
"""

from .sample_loader import (
    load_samples,
    samples_from_dataframe,
    samples_from_records,
    samples_to_dataframe,
    validate_samples,
)
from .species import AVAILABLE_SPECIES, find_species, search_species
from .synthetic_movements import generate_movements, generate_species_movements

__all__ = [
    "load_samples", "samples_from_dataframe", "samples_from_records",
    "samples_to_dataframe", "validate_samples",
    "AVAILABLE_SPECIES", "find_species", "search_species",
    "generate_movements", "generate_species_movements",
]
