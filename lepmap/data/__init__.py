"""
Reference boundary data.
"""

from .boundaries import fetch_country_boundary, BoundaryScale

__all__ = [
    'fetch_country_boundary',
    'BoundaryScale',
]
