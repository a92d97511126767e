"""Queryable, immutable interpolated field built from one dataset load."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable

import numpy as np

from ..config import EngineConfig
from ..core.indexing import normalize_lon_deg, to_grid_index, to_grid_index_many
from ..core.kernels import bilinear_interpolate_scalar_many, bilinear_interpolate_vector_many
from ..records import RawRecord, RecordHeader
from .assembly import Grid, assemble_grid, data_source, valid_time
from .builders import BuilderKind, create_builder

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GridField:
    source: str | None
    date: datetime
    recipe_key: str
    recipe: Any
    kind: BuilderKind
    header: RecordHeader
    grid: Grid
    kernel: Callable = field(repr=False)

    @property
    def is_vector(self) -> bool:
        return self.kind is not BuilderKind.SCALAR

    def interpolate(self, lon: float, lat: float):
        """Bilinearly interpolate the field at ``(lon, lat)``.

        Returns a float for scalar fields, ``(u, v, magnitude)`` for vector
        fields, or ``None`` when any of the four surrounding cells is missing
        or outside the grid.
        """
        h = self.header
        i, j = to_grid_index(lon, lat, h.lon0, h.lat0, h.dlon, h.dlat)
        if not (math.isfinite(i) and math.isfinite(j)):
            return None

        #      fi  i   ci
        #   ---G---|---G--- fj
        #   j  |   .   |
        #   ---G-------G--- cj
        fi = math.floor(i)
        fj = math.floor(j)
        cell = self.grid.cell

        g00 = cell(fi, fj)
        if g00 is None:
            return None
        g10 = cell(fi + 1, fj)
        if g10 is None:
            return None
        g01 = cell(fi, fj + 1)
        if g01 is None:
            return None
        g11 = cell(fi + 1, fj + 1)
        if g11 is None:
            return None
        return self.kernel(i - fi, j - fj, g00, g10, g01, g11)

    def interpolate_points(self, lons, lats) -> tuple[np.ndarray, np.ndarray]:
        """Vectorized :meth:`interpolate` over matching arrays of coordinates.

        Returns ``(values, valid)``. ``values`` has the input shape for scalar
        fields and an extra trailing axis of 3 (u, v, magnitude) for vector
        fields; entries where ``valid`` is False are zero and carry no data.
        """
        lon = np.asarray(lons, dtype=float)
        lat = np.asarray(lats, dtype=float)
        if lon.shape != lat.shape:
            raise ValueError("lons and lats must have matching shape")
        shape = lon.shape

        h = self.header
        g = self.grid
        i, j = to_grid_index_many(lon.reshape(-1), lat.reshape(-1), h.lon0, h.lat0, h.dlon, h.dlat)
        finite = np.isfinite(i) & np.isfinite(j)
        i = np.where(finite, i, 0.0)
        j = np.where(finite, j, 0.0)

        fi = np.clip(np.floor(i), -1, g.cols).astype(np.int64)
        fj = np.clip(np.floor(j), -1, g.ny).astype(np.int64)
        in_range = finite & (fi >= 0) & (fi + 1 < g.cols) & (fj >= 0) & (fj + 1 < g.ny)

        p00 = np.where(in_range, fj * g.cols + fi, 0)
        p10 = p00 + 1
        p01 = p00 + g.cols
        p11 = p01 + 1
        # Out-of-range positions point at cell 0; they are masked by in_range.
        p10 = np.where(in_range, p10, 0)
        p01 = np.where(in_range, p01, 0)
        p11 = np.where(in_range, p11, 0)

        present = g.present
        valid = in_range & present[p00] & present[p10] & present[p01] & present[p11]

        x = i - fi
        y = j - fj
        vals = g.values
        if self.is_vector:
            out = bilinear_interpolate_vector_many(x, y, vals[p00], vals[p10], vals[p01], vals[p11])
            out[~valid] = 0.0
            return out.reshape(shape + (3,)), valid.reshape(shape)

        out = bilinear_interpolate_scalar_many(x, y, vals[p00], vals[p10], vals[p01], vals[p11])
        out[~valid] = 0.0
        return out.reshape(shape), valid.reshape(shape)

    def for_each_point(self, callback: Callable[[float, float, Any], None]) -> None:
        """Visit every materialized cell once, row-major, including the wrap column.

        ``callback`` receives ``(lon, lat, sample)`` with ``lon`` normalized to
        ``[-180, 180)`` and ``sample`` set to ``None`` for missing cells.
        """
        h = self.header
        g = self.grid
        for j in range(g.ny):
            lat = h.lat0 - j * h.dlat
            for i in range(g.cols):
                callback(normalize_lon_deg(h.lon0 + i * h.dlon), lat, g.cell(i, j))


def build_grid(
    records: Iterable[RawRecord],
    recipe_for: Callable[[str], Any] | None = None,
    config: EngineConfig | None = None,
) -> GridField:
    """Classify ``records``, assemble the grid, and return the ready field.

    ``recipe_for`` maps the field's recipe key to display metadata; whatever
    it returns (including ``None``) is stored on the field as-is.
    """
    cfg = config or EngineConfig()
    builder = create_builder(records)
    grid = assemble_grid(
        builder,
        row_workers=cfg.assembly.row_workers,
        rows_per_task=cfg.assembly.rows_per_task,
    )

    header = builder.header
    key = builder.recipe_key
    recipe = recipe_for(key) if recipe_for is not None else None
    if recipe_for is not None and recipe is None:
        logger.debug(f"No recipe cataloged for key {key!r}")

    result = GridField(
        source=data_source(header),
        date=valid_time(header),
        recipe_key=key,
        recipe=recipe,
        kind=builder.kind,
        header=header,
        grid=grid,
        kernel=builder.kernel,
    )
    logger.info(
        f"Built {builder.kind.value} field {key!r} ({grid.ny}x{grid.cols}) valid {result.date.isoformat()}"
    )
    return result
