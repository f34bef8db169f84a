"""Ingestion of HDF exports: header, row checks, ordering and localisation."""

import io

import pandas as pd
import pytest

from esbhdf import canon, ingest
from esbhdf.config import HDFConfig
from esbhdf.exceptions import FormatError

from conftest import HEADER, make_hdf

ROW = "123,45,0.194000,Active Import Interval (kW),15-01-2023 23:30"


def test_from_hdf_returns_ascending_series(good_hdf):
    s = ingest.from_hdf(good_hdf)
    assert s.mprn == "123"
    assert s.serial_number == "45"
    assert s.read_type == canon.READ_TYPE
    assert s.index.name == canon.INDEX_NAME
    assert s.index.is_monotonic_increasing
    assert list(s.kw) == [0.111, 0.157, 0.194]
    assert s.index[0] == pd.Timestamp("2023-01-15 22:30", tz="UTC")
    assert (s.index.to_series().diff().dropna() == pd.Timedelta(minutes=30)).all()


def test_from_hdf_readings_are_typed(good_hdf):
    readings = ingest.from_hdf(good_hdf).readings
    assert len(readings) == 3
    assert readings[-1].value == 0.194
    assert readings[-1].end_time == pd.Timestamp("2023-01-15 23:30", tz="UTC")
    assert str(readings[-1].end_time.tz) == "Europe/Dublin"


def test_from_hdf_accepts_text_stream_and_path(good_hdf, tmp_path):
    from_stream = ingest.from_hdf(io.StringIO(good_hdf.decode()))
    path = tmp_path / "hdf.csv"
    path.write_bytes(good_hdf)
    from_path = ingest.from_hdf(str(path))
    pd.testing.assert_frame_equal(from_stream.reads, from_path.reads)


def test_from_hdf_strips_byte_order_mark(good_hdf):
    s = ingest.from_hdf(b"\xef\xbb\xbf" + good_hdf)
    assert len(s) == 3


def test_from_hdf_keeps_identifier_text():
    s = ingest.from_hdf(make_hdf([("1.0", "15-01-2023 23:30")], mprn="0012"))
    assert s.mprn == "0012"


def test_from_hdf_header_only_is_empty():
    s = ingest.from_hdf(HEADER.encode())
    assert s.empty
    assert s.index.tz is not None


def test_from_hdf_spring_forward_is_thirty_minutes(spring_hdf):
    s = ingest.from_hdf(spring_hdf)
    offsets = [ts.utcoffset() for ts in s.index]
    assert offsets == [pd.Timedelta(0)] * 2 + [pd.Timedelta(hours=1)] * 2
    assert (s.index.to_series().diff().dropna() == pd.Timedelta(minutes=30)).all()


def test_from_hdf_custom_read_type():
    data = make_hdf([("1.0", "15-01-2023 23:30")], read_type="Export")
    s = ingest.from_hdf(data, config=HDFConfig(read_type="Export"))
    assert s.read_type == "Export"


@pytest.mark.parametrize(
    "data",
    [
        pytest.param("", id="empty file"),
        pytest.param(
            f"{HEADER}\n123,45,0.194000,Active Import Interval (kW),15-07-2023 99:99",
            id="invalid timestamp",
        ),
        pytest.param(
            f"{HEADER}\n123,45,NO,Active Import Interval (kW),15-07-2023 23:30",
            id="invalid value",
        ),
        pytest.param(
            f"{HEADER}\n123,45,-0.5,Active Import Interval (kW),15-07-2023 23:30",
            id="negative value",
        ),
        pytest.param(f"{HEADER},EXTRA\n{ROW}", id="long header"),
        pytest.param(
            f"MPRN,Meter Serial Number,Read Value,Read Type,DIFFERENT\n{ROW}",
            id="invalid header",
        ),
        pytest.param(
            f"{HEADER}\n123,45,0.194000,WRONG,15-07-2023 23:30", id="invalid type"
        ),
        pytest.param(
            f"{HEADER}\n123,45,0.194000,Active Import Interval (kW)",
            id="missing field",
        ),
        pytest.param(f"{HEADER}\n{ROW},EXTRA", id="extra field"),
        pytest.param(
            f"{HEADER}\n{ROW}\n321,45,0.157000,Active Import Interval (kW),15-01-2023 23:00",
            id="different MPRN",
        ),
        pytest.param(
            f"{HEADER}\n{ROW}\n123,00,0.157000,Active Import Interval (kW),15-01-2023 23:00",
            id="different serial number",
        ),
    ],
)
def test_from_hdf_rejects_malformed_input(data):
    with pytest.raises(FormatError):
        ingest.from_hdf(data.encode())


def test_header_error_names_discrepancy():
    data = f"MPRN,Meter Serial Number,Value,Read Type,Read Date and End Time\n{ROW}"
    with pytest.raises(FormatError, match="record 2 in header is 'Value'"):
        ingest.from_hdf(data.encode())


def test_header_length_error():
    with pytest.raises(FormatError, match="header is 4 long, want 5"):
        ingest.from_hdf(b"MPRN,Meter Serial Number,Read Value,Read Type")


def test_short_header_with_full_rows_reports_header_length():
    data = f"MPRN,Meter Serial Number,Read Value,Read Type\n{ROW}\n{ROW}"
    with pytest.raises(FormatError, match="header is 4 long, want 5") as exc:
        ingest.from_hdf(data.encode())
    assert exc.value.row == 0


@pytest.mark.parametrize("extra", [",EXTRA", ",", ",X,Y,Z"])
def test_extra_field_reports_data_row(extra):
    data = make_hdf([("0.1", "15-01-2023 23:30")]) + f"\n{ROW}{extra}".encode()
    with pytest.raises(FormatError, match="line 2 has more than 5 fields") as exc:
        ingest.from_hdf(data)
    assert exc.value.row == 2
    assert exc.value.field == "fields"


def test_extra_field_on_first_row():
    with pytest.raises(FormatError, match="line 1 has more than 5 fields") as exc:
        ingest.from_hdf(f"{HEADER}\n{ROW},X,Y".encode())
    assert exc.value.row == 1


def test_row_error_reports_first_offending_row():
    data = make_hdf(
        [
            ("0.3", "15-01-2023 23:30"),
            ("oops", "15-01-2023 23:00"),
            ("0.1", "15-01-2023 22:61"),
        ]
    )
    with pytest.raises(FormatError, match="line 2") as exc:
        ingest.from_hdf(data)
    assert exc.value.row == 2
    assert exc.value.field == "value"


def test_row_error_checks_read_type_before_value():
    data = f"{HEADER}\n123,45,NO,WRONG,15-01-2023 23:30".encode()
    with pytest.raises(FormatError, match="read type 'WRONG'") as exc:
        ingest.from_hdf(data)
    assert exc.value.row == 1
    assert exc.value.field == "read_type"


def test_mismatched_identifier_reports_both_values():
    data = make_hdf([("0.1", "15-01-2023 23:30")]) + (
        b"\n999,45,0.1,Active Import Interval (kW),15-01-2023 23:00"
    )
    with pytest.raises(FormatError, match="'123' and '999'") as exc:
        ingest.from_hdf(data)
    assert exc.value.row == 2
    assert exc.value.field == "mprn"


def test_short_row_is_missing_fields():
    data = make_hdf([("0.1", "15-01-2023 23:30")]) + b"\n123,45,0.2,Active Import Interval (kW)"
    with pytest.raises(FormatError, match="missing fields: end_time") as exc:
        ingest.from_hdf(data)
    assert exc.value.row == 2
    assert exc.value.field == "fields"
