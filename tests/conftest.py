import pandas as pd
import pytest

from esbhdf import canon, utils
from esbhdf.types import MeterSeries

TZ = "Europe/Dublin"
HEADER = "MPRN,Meter Serial Number,Read Value,Read Type,Read Date and End Time"


def make_hdf(rows, mprn="123", serial="45", read_type=canon.READ_TYPE) -> bytes:
    """HDF bytes from (value, 'DD-MM-YYYY HH:MM') pairs, newest first."""
    lines = [HEADER] + [f"{mprn},{serial},{v},{read_type},{ts}" for v, ts in rows]
    return "\n".join(lines).encode()


def make_series(idx: pd.DatetimeIndex, kw=None) -> MeterSeries:
    kw = [0.1] * len(idx) if kw is None else kw
    reads = utils.build_reads_frame(idx, kw)
    return MeterSeries("123", "45", canon.READ_TYPE, reads)


@pytest.fixture
def dublin():
    return utils.CivilZone.from_key(TZ)


@pytest.fixture
def azores():
    # repeated hour is 00:00-00:59 local when clocks go back
    return utils.CivilZone.from_key("Atlantic/Azores")


@pytest.fixture
def good_hdf():
    return make_hdf(
        [
            ("0.194000", "15-01-2023 23:30"),
            ("0.157000", "15-01-2023 23:00"),
            ("0.111000", "15-01-2023 22:30"),
        ]
    )


@pytest.fixture
def holes_hdf():
    return make_hdf(
        [
            ("0.6", "20-01-2023 02:30"),
            ("0.5", "20-01-2023 00:30"),
            ("0.4", "20-01-2023 00:00"),
            ("0.3", "15-01-2023 23:30"),
            ("0.2", "15-01-2023 23:00"),
            ("0.1", "15-01-2023 22:30"),
        ]
    )


@pytest.fixture
def spring_hdf():
    return make_hdf(
        [
            ("0.1", "26-03-2023 02:30"),
            ("0.1", "26-03-2023 02:00"),
            ("0.1", "26-03-2023 00:30"),
            ("0.1", "26-03-2023 00:00"),
        ]
    )


@pytest.fixture
def autumn_hdf():
    return make_hdf(
        [
            ("0.1", "29-10-2023 01:00"),
            ("0.1", "29-10-2023 00:30"),
            ("0.1", "29-10-2023 00:00"),
            ("0.1", "29-10-2023 00:30"),
        ]
    )


@pytest.fixture
def halfhour_rng():
    return pd.date_range("2023-01-15 00:00", periods=6, freq="30min", tz=TZ)
