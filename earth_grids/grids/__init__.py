"""Builder selection, grid assembly, and the queryable field."""

from .assembly import Grid, assemble_grid, data_source, is_continuous, valid_time
from .builders import BuilderKind, OceanBuilder, ScalarBuilder, WindBuilder, create_builder
from .field import GridField, build_grid

__all__ = [
    "Grid",
    "assemble_grid",
    "data_source",
    "is_continuous",
    "valid_time",
    "BuilderKind",
    "OceanBuilder",
    "ScalarBuilder",
    "WindBuilder",
    "create_builder",
    "GridField",
    "build_grid",
]
