"""
Occurrence data acquisition and cleaning.
"""

from .gbif import fetch_gbif_occurrences
from .cleaning import occurrences_to_points, deduplicate_points, points_in_window

__all__ = [
    'fetch_gbif_occurrences',
    'occurrences_to_points',
    'deduplicate_points',
    'points_in_window',
]
