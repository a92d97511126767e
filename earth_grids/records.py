"""Decoded measurement records: header geometry plus a flat sample array."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

import numpy as np

from .errors import GridError, SampleCountError, UnsupportedScanModeError


def _parse_time_iso(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        value = value.strip()
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True, slots=True)
class RecordHeader:
    discipline: int
    parameter_category: int
    parameter_number: int
    surface1_type: int
    surface1_value: float
    reference_time: datetime
    forecast_offset_hours: float
    scan_mode: int
    nx: int
    ny: int
    lon0: float
    lat0: float
    dlon: float
    dlat: float
    center: int | None = None
    center_name: str | None = None

    @property
    def geometry(self) -> tuple[int, int, float, float, float, float]:
        return (self.nx, self.ny, self.lon0, self.lat0, self.dlon, self.dlat)

    @property
    def parameter_code(self) -> tuple[int, int, int]:
        return (self.discipline, self.parameter_category, self.parameter_number)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RecordHeader":
        """Build a header from a grib2json-style mapping.

        Step sizes are stored as magnitudes; latitude always decreases from
        the origin under scan mode 0.
        """
        return cls(
            discipline=int(data.get("discipline", 0)),
            parameter_category=int(data["parameterCategory"]),
            parameter_number=int(data["parameterNumber"]),
            surface1_type=int(data.get("surface1Type", 0)),
            surface1_value=float(data.get("surface1Value", 0.0)),
            reference_time=_parse_time_iso(data["refTime"]),
            forecast_offset_hours=float(data.get("forecastTime", 0)),
            scan_mode=int(data.get("scanMode", 0)),
            nx=int(data["nx"]),
            ny=int(data["ny"]),
            lon0=float(data["lo1"]),
            lat0=float(data["la1"]),
            dlon=abs(float(data["dx"])),
            dlat=abs(float(data["dy"])),
            center=None if data.get("center") is None else int(data["center"]),
            center_name=data.get("centerName"),
        )


@dataclass(frozen=True, slots=True)
class RawRecord:
    header: RecordHeader
    samples: np.ndarray

    def __post_init__(self):
        # None entries become NaN, which every builder reads as "missing".
        samples = np.asarray(self.samples, dtype=float).reshape(-1)
        object.__setattr__(self, "samples", samples)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RawRecord":
        if "header" not in data:
            raise ValueError("Record mapping must have a 'header' key")
        return cls(header=RecordHeader.from_dict(data["header"]), samples=data.get("data", []))


def check_sample_count(record: RawRecord, index: int = 0) -> None:
    h = record.header
    expected = h.nx * h.ny
    if record.samples.size != expected:
        raise SampleCountError(
            f"Record {index} has {record.samples.size} samples, expected nx*ny = {h.nx}*{h.ny} = {expected}"
        )


def check_scan_mode(record: RawRecord, index: int = 0) -> None:
    if record.header.scan_mode != 0:
        raise UnsupportedScanModeError(
            f"Record {index} uses scan mode {record.header.scan_mode}; only scan mode 0 is supported"
        )


def check_geometry(record: RawRecord, index: int = 0) -> None:
    h = record.header
    if h.nx <= 0 or h.ny <= 0:
        raise GridError(f"Record {index} has empty grid dimensions nx={h.nx}, ny={h.ny}")
    if not (h.dlon > 0.0 and h.dlat > 0.0):
        raise GridError(f"Record {index} has non-positive grid step dlon={h.dlon}, dlat={h.dlat}")
