"""Gridded weather/ocean field assembly and bilinear interpolation."""

from .config import EngineConfig, load_config
from .errors import (
    ClassificationError,
    GeometryMismatchError,
    GridError,
    SampleCountError,
    UnsupportedScanModeError,
)
from .grids import BuilderKind, GridField, build_grid
from .recipes import RecipeCatalog, RecipeMetadata, default_catalog
from .records import RawRecord, RecordHeader

__all__ = [
    "EngineConfig",
    "load_config",
    "ClassificationError",
    "GeometryMismatchError",
    "GridError",
    "SampleCountError",
    "UnsupportedScanModeError",
    "BuilderKind",
    "GridField",
    "build_grid",
    "RecipeCatalog",
    "RecipeMetadata",
    "default_catalog",
    "RawRecord",
    "RecordHeader",
]
