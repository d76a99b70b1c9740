# lepmap/raster/__init__.py
from .utils import construct_transform_shift_bounds, generate_grid, cell_edges
from .elevation import load_elevation, sample_elevation, join_elevation, drop_missing_elevation

__all__ = [
    "construct_transform_shift_bounds",
    "generate_grid",
    "cell_edges",
    "load_elevation",
    "sample_elevation",
    "join_elevation",
    "drop_missing_elevation",
]
