from datetime import datetime, timezone

import numpy as np
import pytest

from earth_grids.records import RawRecord, RecordHeader

REF_TIME = datetime(2013, 11, 30, 18, tzinfo=timezone.utc)


def make_header(**overrides) -> RecordHeader:
    values = dict(
        discipline=0,
        parameter_category=0,
        parameter_number=0,
        surface1_type=103,
        surface1_value=2.0,
        reference_time=REF_TIME,
        forecast_offset_hours=6,
        scan_mode=0,
        nx=4,
        ny=3,
        lon0=0.0,
        lat0=90.0,
        dlon=90.0,
        dlat=90.0,
        center=7,
        center_name="US National Weather Service - NCEP",
    )
    values.update(overrides)
    return RecordHeader(**values)


def make_record(samples, **overrides) -> RawRecord:
    return RawRecord(header=make_header(**overrides), samples=np.asarray(samples, dtype=float))


@pytest.fixture
def scalar_record():
    return make_record(np.arange(1, 13, dtype=float))


@pytest.fixture
def wind_records():
    u = np.arange(12, dtype=float)
    v = np.arange(12, dtype=float) * -2.0
    return [
        make_record(u, parameter_category=2, parameter_number=2, surface1_type=100, surface1_value=25000.0),
        make_record(v, parameter_category=2, parameter_number=3, surface1_type=100, surface1_value=25000.0),
    ]


@pytest.fixture
def ocean_records():
    u = np.ones(12)
    v = np.full(12, 2.0)
    v[5] = np.nan
    common = dict(discipline=10, parameter_category=1, surface1_type=160, surface1_value=15.0, center=-3)
    return [
        make_record(u, parameter_number=2, **common),
        make_record(v, parameter_number=3, **common),
    ]
