"""Materialization of a builder into a flat, wraparound-aware sample table."""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timedelta

import numpy as np

from ..records import RecordHeader
from .builders import Builder

logger = logging.getLogger(__name__)

OSCAR_CENTER = -3
NCEP_CENTER = 7


@dataclass(frozen=True, slots=True)
class Grid:
    """Row-major table of ``ny`` rows by ``cols`` columns.

    ``values`` has shape ``(ny * cols,)`` for scalar fields and
    ``(ny * cols, 2)`` for vector fields; ``present`` flags which cells hold a
    sample. When the grid spans the full circle, column ``nx`` repeats
    column 0 so the ceiling column of a lookup never needs wrapping.
    """

    values: np.ndarray
    present: np.ndarray
    nx: int
    ny: int
    is_continuous: bool

    @property
    def cols(self) -> int:
        return self.nx + 1 if self.is_continuous else self.nx

    @property
    def size(self) -> int:
        return self.ny * self.cols

    def cell(self, i: int, j: int):
        """Sample at column ``i``, row ``j``, or ``None`` when missing or out of range."""
        if j < 0 or j >= self.ny or i < 0 or i >= self.cols:
            return None
        p = j * self.cols + i
        if not self.present[p]:
            return None
        if self.values.ndim == 1:
            return float(self.values[p])
        return float(self.values[p, 0]), float(self.values[p, 1])


def is_continuous(header: RecordHeader) -> bool:
    return math.floor(header.nx * header.dlon) >= 360


def valid_time(header: RecordHeader) -> datetime:
    return header.reference_time + timedelta(hours=header.forecast_offset_hours)


def data_source(header: RecordHeader) -> str | None:
    if header.center == OSCAR_CENTER:
        return "OSCAR / Earth & Space Research"
    if header.center == NCEP_CENTER:
        return "GFS / NCEP / US National Weather Service"
    return header.center_name


def _fill_rows(builder: Builder, values: np.ndarray, present: np.ndarray, cols: int, start: int, stop: int):
    nx = builder.header.nx
    block_values, block_present = builder.rows(start, stop)
    shape = (stop - start, cols) + values.shape[1:]
    out_values = values[start * cols : stop * cols].reshape(shape)
    out_present = present[start * cols : stop * cols].reshape(stop - start, cols)
    out_values[:, :nx] = block_values
    out_present[:, :nx] = block_present
    if cols > nx:
        out_values[:, nx] = block_values[:, 0]
        out_present[:, nx] = block_present[:, 0]


def assemble_grid(builder: Builder, *, row_workers: int = 1, rows_per_task: int = 64) -> Grid:
    """Build the :class:`Grid` for ``builder`` (scan mode 0 assumed).

    With ``row_workers > 1`` blocks of ``rows_per_task`` rows are filled
    concurrently; every block writes a disjoint slice of the shared buffer,
    so the resulting row-major order does not depend on scheduling.
    """
    header = builder.header
    nx, ny = header.nx, header.ny
    continuous = is_continuous(header)
    cols = nx + 1 if continuous else nx

    if builder.components == 1:
        values = np.zeros(ny * cols, dtype=np.float64)
    else:
        values = np.zeros((ny * cols, builder.components), dtype=np.float64)
    present = np.zeros(ny * cols, dtype=bool)

    logger.debug(f"Assembling {ny}x{cols} grid (nx={nx}, continuous={continuous})")

    step = max(1, int(rows_per_task))
    blocks = [(start, min(start + step, ny)) for start in range(0, ny, step)]

    if row_workers <= 1 or len(blocks) <= 1:
        for start, stop in blocks:
            _fill_rows(builder, values, present, cols, start, stop)
    else:
        with ThreadPoolExecutor(max_workers=row_workers) as pool:
            futures = [pool.submit(_fill_rows, builder, values, present, cols, start, stop) for start, stop in blocks]
            for f in futures:
                f.result()

    values.flags.writeable = False
    present.flags.writeable = False
    return Grid(values=values, present=present, nx=nx, ny=ny, is_continuous=continuous)
