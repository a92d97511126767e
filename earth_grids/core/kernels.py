"""Bilinear interpolation kernels for scalar and 2-component vector cells."""

from __future__ import annotations

import math

import numpy as np


def bilinear_interpolate_scalar(x: float, y: float, g00: float, g10: float, g01: float, g11: float) -> float:
    rx = 1.0 - x
    ry = 1.0 - y
    return g00 * rx * ry + g10 * x * ry + g01 * rx * y + g11 * x * y


def bilinear_interpolate_vector(x: float, y: float, g00, g10, g01, g11) -> tuple[float, float, float]:
    """Interpolate ``(u, v)`` corners and append the vector magnitude."""
    rx = 1.0 - x
    ry = 1.0 - y
    a = rx * ry
    b = x * ry
    c = rx * y
    d = x * y
    u = g00[0] * a + g10[0] * b + g01[0] * c + g11[0] * d
    v = g00[1] * a + g10[1] * b + g01[1] * c + g11[1] * d
    return u, v, math.sqrt(u * u + v * v)


def bilinear_interpolate_scalar_many(x, y, g00, g10, g01, g11) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    rx = 1.0 - x
    ry = 1.0 - y
    return g00 * rx * ry + g10 * x * ry + g01 * rx * y + g11 * x * y


def bilinear_interpolate_vector_many(x, y, g00, g10, g01, g11) -> np.ndarray:
    """Batch form of :func:`bilinear_interpolate_vector`.

    Corners have shape ``(N, 2)``; the result has shape ``(N, 3)`` holding
    ``u``, ``v`` and magnitude.
    """
    x = np.asarray(x, dtype=float)[:, None]
    y = np.asarray(y, dtype=float)[:, None]
    rx = 1.0 - x
    ry = 1.0 - y
    uv = g00 * rx * ry + g10 * x * ry + g01 * rx * y + g11 * x * y
    magnitude = np.hypot(uv[:, 0], uv[:, 1])
    return np.column_stack([uv, magnitude])
