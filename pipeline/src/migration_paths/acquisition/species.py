"""
Catalog of species available for selection.
"""

from typing import Dict, Iterable, List

from ..processing.models import Species

AVAILABLE_SPECIES: List[Species] = [
    Species("arctic-tern", "Arctic Tern", "Sterna paradisaea", "🐦", "#3b82f6", "bird"),
    Species("gray-whale", "Gray Whale", "Eschrichtius robustus", "🐋", "#6366f1", "marine"),
    Species("monarch-butterfly", "Monarch Butterfly", "Danaus plexippus", "🦋", "#f59e0b", "insect"),
    Species("caribou", "Caribou", "Rangifer tarandus", "🦌", "#10b981", "mammal"),
    Species("sea-turtle", "Sea Turtle", "Chelonia mydas", "🐢", "#06b6d4", "reptile"),
    Species("wildebeest", "Wildebeest", "Connochaetes taurinus", "🦬", "#8b5cf6", "mammal"),
]

SPECIES_BY_ID: Dict[str, Species] = {s.id: s for s in AVAILABLE_SPECIES}


def find_species(species_ids: Iterable[str]) -> List[Species]:
    """
    Look up catalog entries, keeping the requested order.

    Raises:
        ValueError: If an id is not in the catalog
    """
    selected = []
    for species_id in species_ids:
        if species_id not in SPECIES_BY_ID:
            raise ValueError(f"Unknown species {species_id!r}, expected one of {sorted(SPECIES_BY_ID)}")
        selected.append(SPECIES_BY_ID[species_id])
    return selected


def search_species(term: str) -> List[Species]:
    """Case-insensitive match on common or scientific name."""
    term = term.lower()
    return [
        s for s in AVAILABLE_SPECIES
        if term in s.name.lower() or term in s.scientific_name.lower()
    ]
