"""
Kernel density estimation of occurrence points.
"""

from .kde import window_from_boundary, kernel_density, mask_to_boundary

__all__ = [
    'window_from_boundary',
    'kernel_density',
    'mask_to_boundary',
]
