"""Errors raised while turning decoded records into a queryable field."""

from __future__ import annotations


class GridError(ValueError):
    """Base class for field construction failures."""


class ClassificationError(GridError):
    """The record set does not describe a scalar field or a u/v pair."""


class GeometryMismatchError(GridError):
    """Vector component records do not share the same grid geometry."""


class SampleCountError(GridError):
    """A record's sample array does not hold nx * ny values."""


class UnsupportedScanModeError(GridError):
    """A record uses a scan mode other than 0 (west->east, north->south)."""
