"""Wrapped modulo and fractional grid index arithmetic."""

from __future__ import annotations

import math

import numpy as np


def floor_mod(value: float, modulus: float) -> float:
    """Mathematical modulo with the result in ``[0, modulus)``.

    Unlike ``math.fmod`` the sign follows the modulus, so negative longitude
    offsets wrap forward. A tiny negative value can round up to exactly
    ``modulus`` in floating point; that case folds back to zero.
    """
    if not math.isfinite(value):
        return math.nan
    r = value - modulus * math.floor(value / modulus)
    if r >= modulus:
        return 0.0
    return r


def floor_mod_many(values, modulus: float) -> np.ndarray:
    v = np.asarray(values, dtype=float)
    r = v - modulus * np.floor(v / modulus)
    return np.where(r >= modulus, 0.0, r)


def to_grid_index(
    lon: float,
    lat: float,
    lon0: float,
    lat0: float,
    dlon: float,
    dlat: float,
) -> tuple[float, float]:
    # Latitude decreases with row number, longitude is wrapped to [0, 360).
    i = floor_mod(lon - lon0, 360.0) / dlon
    j = (lat0 - lat) / dlat
    return i, j


def to_grid_index_many(lon, lat, lon0: float, lat0: float, dlon: float, dlat: float):
    i = floor_mod_many(np.asarray(lon, dtype=float) - lon0, 360.0) / dlon
    j = (lat0 - np.asarray(lat, dtype=float)) / dlat
    return i, j


def normalize_lon_deg(lon: float) -> float:
    """Map a longitude onto ``[-180, 180)``."""
    return floor_mod(180.0 + lon, 360.0) - 180.0
