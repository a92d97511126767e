"""Classification of parallel records into a scalar or vector field builder."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import numpy as np

from ..core.kernels import bilinear_interpolate_scalar, bilinear_interpolate_vector
from ..errors import ClassificationError, GeometryMismatchError
from ..records import RawRecord, RecordHeader, check_geometry, check_sample_count, check_scan_mode

logger = logging.getLogger(__name__)


class BuilderKind(str, Enum):
    SCALAR = "scalar"
    WIND = "wind"
    OCEAN = "ocean"


# (discipline, parameter_category, parameter_number)
U_COMPONENT_CODES = frozenset({(10, 1, 2), (0, 2, 2)})
V_COMPONENT_CODES = frozenset({(10, 1, 3), (0, 2, 3)})
OCEAN_DISCIPLINE = 10


def _key_number(value) -> str:
    f = float(value)
    if f.is_integer():
        return str(int(f))
    return repr(f)


def _sample(value: float) -> float | None:
    return float(value) if np.isfinite(value) else None


@dataclass(frozen=True, slots=True)
class ScalarBuilder:
    record: RawRecord
    kind = BuilderKind.SCALAR
    components = 1
    kernel = staticmethod(bilinear_interpolate_scalar)

    @property
    def header(self) -> RecordHeader:
        return self.record.header

    @property
    def recipe_key(self) -> str:
        h = self.header
        return ",".join(
            _key_number(x)
            for x in (h.parameter_category, h.parameter_number, h.surface1_type, h.surface1_value)
        )

    def data(self, i: int) -> float | None:
        return _sample(self.record.samples[i])

    def rows(self, start: int, stop: int) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(values, present)`` for rows ``[start, stop)``, shape ``(rows, nx)``."""
        nx = self.header.nx
        block = self.record.samples[start * nx : stop * nx].reshape(-1, nx)
        present = np.isfinite(block)
        return np.where(present, block, 0.0), present


@dataclass(frozen=True, slots=True)
class _VectorBuilder:
    u: RawRecord
    v: RawRecord
    components = 2
    kernel = staticmethod(bilinear_interpolate_vector)

    @property
    def header(self) -> RecordHeader:
        return self.u.header

    @property
    def recipe_key(self) -> str:
        h = self.header
        return f"{self.kind.value},{_key_number(h.surface1_type)},{_key_number(h.surface1_value)}"

    def _blocks(self, start: int, stop: int) -> tuple[np.ndarray, np.ndarray]:
        nx = self.header.nx
        u = self.u.samples[start * nx : stop * nx].reshape(-1, nx)
        v = self.v.samples[start * nx : stop * nx].reshape(-1, nx)
        return u, v

    def data(self, i: int) -> tuple[float, float] | None:
        u = _sample(self.u.samples[i])
        v = _sample(self.v.samples[i])
        if u is None or v is None:
            return None
        return u, v

    def rows(self, start: int, stop: int) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(values, present)``; a gap in either component is a gap in the sample."""
        u, v = self._blocks(start, stop)
        values = np.stack([u, v], axis=-1)
        present = np.isfinite(u) & np.isfinite(v)
        if not present.all():
            values[~present] = 0.0
        return values, present


@dataclass(frozen=True, slots=True)
class WindBuilder(_VectorBuilder):
    """Model wind; normally complete, but a decoded gap still reads as missing."""

    kind = BuilderKind.WIND


@dataclass(frozen=True, slots=True)
class OceanBuilder(_VectorBuilder):
    """Ocean currents: land cells are gaps in both components."""

    kind = BuilderKind.OCEAN


Builder = ScalarBuilder | WindBuilder | OceanBuilder


def create_builder(records: Iterable[RawRecord]) -> Builder:
    """Select the builder for one dataset load.

    Records are scanned once against a closed table of parameter codes. A u
    component makes the result a vector builder (ocean when its discipline
    is 10, wind otherwise); otherwise the last unmatched record becomes a
    scalar builder.
    """
    records = list(records)
    u_comp: RawRecord | None = None
    v_comp: RawRecord | None = None
    scalar: RawRecord | None = None

    for index, record in enumerate(records):
        check_scan_mode(record, index)
        check_geometry(record, index)
        check_sample_count(record, index)

        code = record.header.parameter_code
        if code in U_COMPONENT_CODES:
            u_comp = record
        elif code in V_COMPONENT_CODES:
            v_comp = record
        else:
            if scalar is not None:
                logger.warning(
                    f"Record {index} {code} replaces earlier scalar record {scalar.header.parameter_code}"
                )
            scalar = record

    if u_comp is not None:
        if v_comp is None:
            raise ClassificationError(
                f"Found u component {u_comp.header.parameter_code} without a matching v component"
            )
        if u_comp.header.geometry != v_comp.header.geometry:
            raise GeometryMismatchError(
                f"u/v geometry differs: u={u_comp.header.geometry} v={v_comp.header.geometry}"
            )
        if u_comp.header.discipline == OCEAN_DISCIPLINE:
            builder: Builder = OceanBuilder(u_comp, v_comp)
        else:
            builder = WindBuilder(u_comp, v_comp)
    elif scalar is not None:
        builder = ScalarBuilder(scalar)
    else:
        raise ClassificationError(
            f"No scalar record or u component among {len(records)} record(s)"
        )

    logger.debug(f"Selected {builder.kind.value} builder, recipe key {builder.recipe_key!r}")
    return builder
