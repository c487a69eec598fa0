"""
Tests for the metrics module.

Tests cover:
- Summary totals and reported-speed averaging
- Species comparison (speed, efficiency, direction)
- Route coherence
- Qualitative ratings
"""

import pytest
from pathlib import Path
import sys

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "pipeline" / "src"))

from migration_paths.processing.models import MigrationPath, Sample, Species
from migration_paths.processing.distance import haversine
from migration_paths.metrics.compute_metrics import MetricsCalculator


HOUR_MS = 3600 * 1000.0


def make_path(coords, duration=HOUR_MS, species_id="arctic-tern", animal_id="a"):
    return MigrationPath(
        species_id=species_id,
        animal_id=animal_id,
        coordinates=list(coords),
        timestamps=[f"t{i}" for i in range(len(coords))],
        total_distance=sum(
            haversine(a[1], a[0], b[1], b[0]) for a, b in zip(coords[:-1], coords[1:])
        ),
        duration=duration
    )


# ============== Fixtures ==============

@pytest.fixture
def calculator():
    return MetricsCalculator()


@pytest.fixture
def tern():
    return Species("arctic-tern", "Arctic Tern", "Sterna paradisaea", "🐦", "#3b82f6", "bird")


@pytest.fixture
def caribou():
    return Species("caribou", "Caribou", "Rangifer tarandus", "🦌", "#10b981", "mammal")


@pytest.fixture
def speed_samples():
    """Two tern fixes per animal; the first fix of each track carries speed 99."""
    return [
        Sample("1", "arctic-tern", "a", "2024-01-01T00:00:00Z", 0.0, 0.0, speed=99.0),
        Sample("2", "arctic-tern", "a", "2024-01-01T01:00:00Z", 0.0, 1.0, speed=10.0),
        Sample("3", "arctic-tern", "b", "2024-01-01T00:00:00Z", 10.0, 0.0, speed=99.0),
        Sample("4", "arctic-tern", "b", "2024-01-01T01:00:00Z", 10.0, 1.0, speed=20.0),
        Sample("5", "caribou", "c", "2024-01-01T00:00:00Z", 60.0, -110.0),
    ]


# ============== Summary Tests ==============

class TestSummary:
    """Test headline totals."""

    def test_counts(self, calculator, speed_samples, tern, caribou):
        summary = calculator.summarize(speed_samples, [tern, caribou])

        assert summary.total_records == 5
        assert summary.total_animals == 3
        assert summary.active_tracks == 2

    def test_average_speed_skips_first_fix(self, calculator, speed_samples, tern, caribou):
        summary = calculator.summarize(speed_samples, [tern, caribou])
        assert summary.average_speed == pytest.approx(15.0)

    def test_total_distance(self, calculator, speed_samples, tern, caribou):
        summary = calculator.summarize(speed_samples, [tern, caribou])
        expected = haversine(0, 0, 0, 1) + haversine(10, 0, 10, 1)

        assert summary.total_distance_km == pytest.approx(expected)

    def test_distribution(self, calculator, speed_samples, tern, caribou):
        summary = calculator.summarize(speed_samples, [tern, caribou])

        assert [(s.name, s.value) for s in summary.species_distribution] == [
            ("Arctic Tern", 4), ("Caribou", 1)
        ]
        assert summary.species_distribution[1].color == "#10b981"

    def test_empty(self, calculator, tern):
        summary = calculator.summarize([], [tern])

        assert summary.total_records == 0
        assert summary.total_distance_km == 0
        assert summary.average_speed == 0

    def test_to_dict(self, calculator, speed_samples, tern, caribou):
        data = calculator.summarize(speed_samples, [tern, caribou]).to_dict()

        assert data["totalRecords"] == 5
        assert data["averageSpeed"] == 15.0
        assert data["speciesDistribution"][0]["name"] == "Arctic Tern"


# ============== Species Comparison Tests ==============

class TestSpeciesComparison:
    """Test per-species route metrics."""

    def test_straight_eastward_path(self, calculator, tern):
        path = make_path([(0.0, 0.0), (0.5, 0.0), (1.0, 0.0)])
        result = calculator.species_comparison([path], [tern])[0]

        assert result.n_animals == 1
        assert result.avg_distance_km == pytest.approx(111.19, abs=0.01)
        assert result.avg_speed_kmh == pytest.approx(111.19, abs=0.01)
        assert result.efficiency == pytest.approx(100.0)
        assert result.efficiency_rating == "High"
        assert result.detour_factor == pytest.approx(1.0)
        assert result.direction == "East"

    def test_detour_lowers_efficiency(self, calculator, tern):
        path = make_path([(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)])
        result = calculator.species_comparison([path], [tern])[0]

        assert result.efficiency < 100
        assert result.detour_factor > 1

    def test_species_without_paths_skipped(self, calculator, tern, caribou):
        path = make_path([(0.0, 0.0), (1.0, 0.0)])
        empty = make_path([], species_id="caribou")

        results = calculator.species_comparison([path, empty], [caribou, tern])
        assert [r.species_id for r in results] == ["arctic-tern"]

    def test_zero_duration_speed(self, calculator, tern):
        path = make_path([(0.0, 0.0)], duration=0)
        result = calculator.species_comparison([path], [tern])[0]

        assert result.avg_speed_kmh == 0.0
        assert result.direction == "Stable"

    def test_to_dict(self, calculator, tern):
        path = make_path([(0.0, 0.0), (0.0, 1.0)])
        data = calculator.species_comparison([path], [tern])[0].to_dict()

        assert data["speciesId"] == "arctic-tern"
        assert data["direction"] == "North"
        assert data["efficiency"]["rating"] == "High"
        assert set(data["coherence"]) == {"value", "rating"}


# ============== Coherence Tests ==============

class TestCoherence:
    """Test route bundling score."""

    def test_identical_paths(self, calculator):
        coords = [(0.0, 0.0), (5.0, 5.0), (10.0, 0.0)]
        paths = [make_path(coords, animal_id="a"), make_path(coords, animal_id="b")]

        assert calculator.calculate_coherence(paths) == pytest.approx(1.0)

    def test_spread_paths_less_coherent(self, calculator):
        tight = [
            make_path([(0.0, 0.0), (10.0, 0.0)], animal_id="a"),
            make_path([(0.0, 0.1), (10.0, 0.1)], animal_id="b"),
        ]
        loose = [
            make_path([(0.0, 0.0), (10.0, 0.0)], animal_id="a"),
            make_path([(0.0, 5.0), (10.0, 5.0)], animal_id="b"),
        ]

        assert calculator.calculate_coherence(tight) > calculator.calculate_coherence(loose)

    def test_single_path(self, calculator):
        assert calculator.calculate_coherence([make_path([(0.0, 0.0), (1.0, 1.0)])]) == 1.0


# ============== Direction and Rating Tests ==============

class TestDirection:

    @pytest.mark.parametrize("end,expected", [
        ((0.0, 5.0), "North"),
        ((5.0, 0.0), "East"),
        ((0.0, -5.0), "South"),
        ((-5.0, 0.0), "West"),
        ((5.0, 5.0), "Northeast"),
        ((-5.0, -5.0), "Southwest"),
    ])
    def test_octants(self, calculator, end, expected):
        path = make_path([(0.0, 0.0), end])
        assert calculator.calculate_direction([path]) == expected


class TestRatings:

    def test_coherence_rating(self, calculator):
        assert calculator._rate_coherence(0.9) == "High"
        assert calculator._rate_coherence(0.5) == "Moderate"
        assert calculator._rate_coherence(0.1) == "Low"

    def test_efficiency_rating(self, calculator):
        assert calculator._rate_efficiency(85) == "High"
        assert calculator._rate_efficiency(60) == "Moderate"
        assert calculator._rate_efficiency(20) == "Low"

    def test_efficiency_bounds(self, calculator):
        assert calculator.calculate_efficiency(10, 0) == 100.0
        assert calculator.calculate_efficiency(50, 100) == 50.0
