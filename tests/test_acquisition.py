"""
Tests for sample loading and synthetic data.

Tests cover:
- Column detection (app records, Movebank exports)
- Boundary validation of timestamps and coordinate ranges
- CSV round trip
- Species catalog lookups
- Synthetic movement generator shape and determinism
"""

import pytest
import numpy as np
import pandas as pd
from pathlib import Path
import sys

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "pipeline" / "src"))

from migration_paths.processing.models import Species
from migration_paths.acquisition.sample_loader import (
    load_samples,
    normalize_species_id,
    samples_from_dataframe,
    samples_from_records,
    samples_to_dataframe,
    validate_samples,
)
from migration_paths.acquisition.species import AVAILABLE_SPECIES, SPECIES_BY_ID, find_species, search_species
from migration_paths.acquisition.synthetic_movements import (
    MIGRATION_ROUTES,
    generate_movements,
    generate_species_movements,
    samples_for_selection,
)


# ============== Fixtures ==============

@pytest.fixture
def app_records():
    """Records as the browser app holds them."""
    return [
        {
            "id": "caribou-1-0", "speciesId": "caribou", "animalId": "caribou-1",
            "timestamp": "2024-01-01T00:00:00.000Z", "latitude": 68.0, "longitude": -133.0,
            "speed": 7.5
        },
        {
            "id": "caribou-1-1", "speciesId": "caribou", "animalId": "caribou-1",
            "timestamp": "2024-01-02T00:00:00.000Z", "latitude": 67.5, "longitude": -132.0
        },
    ]


@pytest.fixture
def movebank_frame():
    return pd.DataFrame({
        "event-id": [101, 102],
        "timestamp": ["2015-04-01 00:00:00.000", "2015-04-01 01:00:00.000"],
        "location-long": [-120.0, -120.1],
        "location-lat": [34.0, 34.1],
        "individual-local-identifier": ["ER-7", "ER-7"],
        "individual-taxon-canonical-name": ["Eschrichtius robustus", "Eschrichtius robustus"],
    })


@pytest.fixture
def tern():
    return SPECIES_BY_ID["arctic-tern"]


# ============== Loader Tests ==============

class TestSamplesFromRecords:
    """Test parsing of app-style records."""

    def test_fields(self, app_records):
        samples = samples_from_records(app_records)

        assert len(samples) == 2
        first = samples[0]
        assert first.id == "caribou-1-0"
        assert first.species_id == "caribou"
        assert first.animal_id == "caribou-1"
        assert first.coordinate == (-133.0, 68.0)
        assert first.speed == 7.5

    def test_missing_optional_is_none(self, app_records):
        samples = samples_from_records(app_records)
        assert samples[1].speed is None
        assert samples[0].altitude is None

    def test_empty(self):
        assert samples_from_records([]) == []


class TestSamplesFromDataframe:
    """Test column detection and validation."""

    def test_movebank_columns(self, movebank_frame):
        samples = samples_from_dataframe(movebank_frame)

        assert [s.id for s in samples] == ["101", "102"]
        assert all(s.species_id == "gray-whale" for s in samples)
        assert samples[1].coordinate == (-120.1, 34.1)

    def test_species_override_when_no_column(self, movebank_frame):
        frame = movebank_frame.drop(columns=["individual-taxon-canonical-name"])
        samples = samples_from_dataframe(frame, species_id="fin-whale")
        assert {s.species_id for s in samples} == {"fin-whale"}

    def test_no_species_raises(self, movebank_frame):
        frame = movebank_frame.drop(columns=["individual-taxon-canonical-name"])
        with pytest.raises(ValueError, match="species"):
            samples_from_dataframe(frame)

    def test_missing_latitude_raises(self, movebank_frame):
        frame = movebank_frame.drop(columns=["location-lat"])
        with pytest.raises(ValueError, match="latitude"):
            samples_from_dataframe(frame)

    def test_bad_timestamp_raises(self, app_records):
        app_records[1]["timestamp"] = "next tuesday"
        with pytest.raises(ValueError, match="unparseable timestamp"):
            samples_from_records(app_records)

    def test_latitude_out_of_range_raises(self, app_records):
        app_records[0]["latitude"] = 95.0
        with pytest.raises(ValueError, match="latitude"):
            samples_from_records(app_records)

    def test_longitude_out_of_range_raises(self, app_records):
        app_records[0]["longitude"] = -181.0
        with pytest.raises(ValueError, match="longitude"):
            samples_from_records(app_records)

    def test_generated_ids_when_missing(self, movebank_frame):
        frame = movebank_frame.drop(columns=["event-id"])
        samples = samples_from_dataframe(frame)
        assert [s.id for s in samples] == ["ER-7-0", "ER-7-1"]


class TestNormalizeSpecies:
    """Test mapping of taxon names to species ids."""

    def test_known_taxon(self):
        assert normalize_species_id("Sterna paradisaea") == "arctic-tern"
        assert normalize_species_id("  Danaus plexippus plexippus ") == "monarch-butterfly"

    def test_unknown_taxon_slugified(self):
        assert normalize_species_id("Balaenoptera  musculus") == "balaenoptera-musculus"


class TestValidateSamples:
    """Test validation of already-built samples."""

    def test_generated_samples_are_valid(self, tern):
        validate_samples(generate_species_movements(tern, 30, np.random.default_rng(0)))

    def test_empty_is_valid(self):
        validate_samples([])


class TestCsvRoundTrip:
    """Test writing samples and reading them back."""

    def test_round_trip(self, tmp_path, tern):
        samples = generate_species_movements(tern, 15, np.random.default_rng(3))
        path = tmp_path / "tern.csv"
        samples_to_dataframe(samples).to_csv(path, index=False)

        loaded = load_samples(path)

        assert [s.id for s in loaded] == [s.id for s in samples]
        assert [s.timestamp for s in loaded] == [s.timestamp for s in samples]
        np.testing.assert_allclose(
            [s.latitude for s in loaded], [s.latitude for s in samples]
        )

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            load_samples(tmp_path / "absent.csv")


# ============== Species Catalog Tests ==============

class TestSpeciesCatalog:
    """Test species lookups."""

    def test_catalog_ids_match_routes(self):
        assert {s.id for s in AVAILABLE_SPECIES} == set(MIGRATION_ROUTES)

    def test_find_keeps_order(self):
        found = find_species(["wildebeest", "caribou"])
        assert [s.id for s in found] == ["wildebeest", "caribou"]

    def test_find_unknown_raises(self):
        with pytest.raises(ValueError, match="dodo"):
            find_species(["dodo"])

    def test_search(self):
        assert [s.id for s in search_species("whale")] == ["gray-whale"]
        assert [s.id for s in search_species("RANGIFER")] == ["caribou"]

    def test_invalid_type_rejected(self):
        with pytest.raises(ValueError):
            Species(id="x", name="X", type="plant")


# ============== Synthetic Movement Tests ==============

class TestSyntheticMovements:
    """Test the mock movement generator."""

    def test_detail_level(self):
        assert samples_for_selection(1) == 20
        assert samples_for_selection(2) == 20
        assert samples_for_selection(3) == 15
        assert samples_for_selection(5) == 10
        assert samples_for_selection(7) == 8

    def test_animals_and_points(self, tern):
        samples = generate_species_movements(tern, 45, np.random.default_rng(1))

        assert len(samples) == 45
        assert {s.animal_id for s in samples} == {"arctic-tern-1", "arctic-tern-2", "arctic-tern-3"}

    def test_animal_count_capped(self, tern):
        samples = generate_species_movements(tern, 100, np.random.default_rng(1))
        assert len({s.animal_id for s in samples}) == 3
        assert len(samples) == 99

    def test_few_points_fewer_animals(self, tern):
        samples = generate_species_movements(tern, 20, np.random.default_rng(1))
        assert len({s.animal_id for s in samples}) == 2
        assert len(samples) == 20

    def test_sorted_by_time(self, tern):
        samples = generate_species_movements(tern, 30, np.random.default_rng(2))
        timestamps = [s.timestamp for s in samples]
        assert timestamps == sorted(timestamps)

    def test_spans_one_year(self, tern):
        samples = generate_species_movements(tern, 15, np.random.default_rng(2))
        assert samples[0].timestamp == "2024-01-01T00:00:00.000Z"
        assert samples[-1].timestamp == "2024-12-31T00:00:00.000Z"

    def test_follows_route(self, tern):
        samples = generate_species_movements(tern, 15, np.random.default_rng(4))
        start_lat, start_lon = MIGRATION_ROUTES["arctic-tern"][0]

        assert abs(samples[0].latitude - start_lat) <= 1
        assert abs(samples[0].longitude - start_lon) <= 1

    def test_unknown_species_uses_default_route(self):
        dodo = Species(id="dodo", name="Dodo")
        samples = generate_species_movements(dodo, 15, np.random.default_rng(5))

        assert all(s.species_id == "dodo" for s in samples)
        assert abs(samples[0].latitude - MIGRATION_ROUTES["arctic-tern"][0][0]) <= 1

    def test_seed_is_reproducible(self):
        species = AVAILABLE_SPECIES[:2]
        assert generate_movements(species, seed=7) == generate_movements(species, seed=7)

    def test_selection_scaled_count(self):
        species = AVAILABLE_SPECIES[:3]
        samples = generate_movements(species, seed=0)
        assert len(samples) == 3 * 15

    def test_empty_selection(self):
        assert generate_movements([]) == []

    def test_zero_count(self, tern):
        assert generate_species_movements(tern, 0) == []
