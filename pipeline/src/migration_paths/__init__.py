"""
Geospatial path processing for animated wildlife migration maps.

Samples → per-animal paths (windowed by time) → interpolation, simplification
and map framing for the rendering layer.
"""

__version__ = "0.1.0"
