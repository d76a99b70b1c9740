from .maps import plot_density_map, plot_elevation_map, plot_elevation_histogram

__all__ = [
    "plot_density_map",
    "plot_elevation_map",
    "plot_elevation_histogram",
]
