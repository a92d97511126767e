"""Core numerical utilities: index math and interpolation kernels."""

from .indexing import floor_mod, floor_mod_many, normalize_lon_deg, to_grid_index, to_grid_index_many
from .kernels import (
    bilinear_interpolate_scalar,
    bilinear_interpolate_scalar_many,
    bilinear_interpolate_vector,
    bilinear_interpolate_vector_many,
)

__all__ = [
    "floor_mod",
    "floor_mod_many",
    "normalize_lon_deg",
    "to_grid_index",
    "to_grid_index_many",
    "bilinear_interpolate_scalar",
    "bilinear_interpolate_scalar_many",
    "bilinear_interpolate_vector",
    "bilinear_interpolate_vector_many",
]
