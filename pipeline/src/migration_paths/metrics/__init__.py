"""
Dashboard analytics derived from migration paths.
"""

from .compute_metrics import MetricsCalculator, MigrationSummary, SpeciesComparison, SpeciesShare

__all__ = ["MetricsCalculator", "MigrationSummary", "SpeciesComparison", "SpeciesShare"]
