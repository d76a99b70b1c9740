from .summary import elevation_histogram, describe_elevation

__all__ = [
    "elevation_histogram",
    "describe_elevation",
]
