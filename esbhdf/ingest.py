from __future__ import annotations
import io
import logging
import os
from pathlib import Path
from typing import IO, Optional, Union

import numpy as np
import pandas as pd

from . import canon, utils
from .config import HDFConfig, default_config
from .exceptions import FormatError
from .types import MeterSeries

LOGGER = logging.getLogger(__name__)

Source = Union[str, os.PathLike, bytes, IO[bytes], IO[str]]

# Row checks in the order they apply to a single line.
_CHECKS = ("fields", "read_type", "value", "end_time", "mprn", "serial_number")
_OVERFLOW = "overflow"


def _read_text(file_like: Source) -> str:
    if isinstance(file_like, (bytes, bytearray)):
        data: str | bytes = bytes(file_like)
    elif isinstance(file_like, (str, os.PathLike)):
        data = Path(file_like).read_bytes()
    else:
        data = file_like.read()
    if isinstance(data, bytes):
        data = data.decode("utf-8-sig")
    return data.lstrip("\ufeff")


def _read_header(text: str) -> list[str]:
    """The first line on its own, so its width is not forced on the rows."""
    try:
        head = pd.read_csv(
            io.StringIO(text),
            header=None,
            nrows=1,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
        )
    except pd.errors.EmptyDataError as e:
        raise FormatError("invalid format: cannot read header: empty input") from e
    except pd.errors.ParserError as e:
        raise FormatError(f"invalid format: cannot read header: {e}", row=0) from e
    return head.iloc[0].tolist()


def _fold_overflow(line: list[str]) -> list[str]:
    # keep the row in place with every surplus field in the overflow column
    n = len(canon.HEADER)
    return line[:n] + [",".join(line[n:])]


def _read_rows(text: str) -> pd.DataFrame:
    """
    Data lines as text cells under the canonical field names.

    Short lines are padded with NaN. Fields beyond the header land in
    _OVERFLOW, which is NaN on every well-formed line. The header line is
    parsed as row 0 and dropped; being no wider than the names, it keeps
    pandas from taking surplus fields of the first data line as an index.
    """
    names = list(canon.FIELD_NAMES.values()) + [_OVERFLOW]
    try:
        table = pd.read_csv(
            io.StringIO(text),
            header=None,
            names=names,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            engine="python",
            on_bad_lines=_fold_overflow,
        )
    except pd.errors.ParserError as e:
        raise FormatError(f"invalid format: {e}") from e
    return table.iloc[1:].reset_index(drop=True)


def _validate_header(header: list[str]) -> None:
    want = len(canon.HEADER)
    if len(header) != want:
        raise FormatError(
            f"invalid format: header is {len(header)} long, want {want}", row=0
        )
    for i, (got, expected) in enumerate(zip(header, canon.HEADER)):
        if got != expected:
            raise FormatError(
                f"invalid format: record {i} in header is {got!r}, want {expected!r}",
                row=0,
                field=expected,
            )


def _row_checks(
    rows: pd.DataFrame, overflow: pd.Series, read_type: str
) -> tuple[pd.DataFrame, pd.Series, pd.Series]:
    """
    Evaluate every check on every row.

    Returns a boolean frame (rows x checks, True = failed) plus the parsed
    values and wall-clock timestamps.
    """
    values = pd.to_numeric(rows["value"], errors="coerce").astype(float)
    walls = pd.to_datetime(
        rows["end_time"], format=canon.TIMESTAMP_FORMAT, errors="coerce"
    )
    first = rows.iloc[0]
    checks = pd.DataFrame(
        {
            "fields": (
                rows.isna().any(axis=1) | (rows == "").any(axis=1) | overflow
            ).to_numpy(dtype=bool),
            "read_type": (rows["read_type"] != read_type).to_numpy(),
            "value": ~(np.isfinite(values) & (values >= 0)).to_numpy(),
            "end_time": walls.isna().to_numpy(),
            "mprn": (rows["mprn"] != first["mprn"]).to_numpy(),
            "serial_number": (rows["serial_number"] != first["serial_number"]).to_numpy(),
        },
        columns=list(_CHECKS),
    )
    return checks, values, walls


def _row_error(
    check: str, row: int, cells: pd.Series, first: pd.Series, read_type: str
) -> FormatError:
    if check == "fields":
        missing = [name for name, v in cells.items() if pd.isna(v) or v == ""]
        if missing:
            msg = f"invalid format: line {row} has missing fields: {', '.join(missing)}"
        else:
            msg = f"invalid format: line {row} has more than {len(canon.HEADER)} fields"
    elif check == "read_type":
        msg = f"invalid format: on line {row} got read type {cells['read_type']!r}, want {read_type!r}"
    elif check == "value":
        msg = f"invalid format: cannot parse line {row}: read value {cells['value']!r} is not a non-negative number"
    elif check == "end_time":
        msg = (
            f"invalid format: cannot parse line {row}: timestamp "
            f"{cells['end_time']!r} does not match DD-MM-YYYY HH:MM"
        )
    elif check == "mprn":
        msg = f"invalid format: multiple MPRN found ({first['mprn']!r} and {cells['mprn']!r})"
    else:
        msg = (
            "invalid format: multiple meter serial numbers found "
            f"({first['serial_number']!r} and {cells['serial_number']!r})"
        )
    return FormatError(msg, row=row, field=check)


def from_hdf(
    file_like: Source,
    *,
    zone: Optional[utils.CivilZone] = None,
    config: Optional[HDFConfig] = None,
) -> MeterSeries:
    """
    Parse an HDF export into a MeterSeries with ascending end times.

    The export lists readings newest first; the result is reversed.
    Spacing and alignment are not checked here, the repeated hour has to be
    repaired first (see disambiguate.fix_timezone).
    """
    cfg = config or default_config()
    zone = zone or utils.CivilZone.from_key(cfg.tz)

    text = _read_text(file_like)
    _validate_header(_read_header(text))

    table = _read_rows(text)
    if table.empty:
        return MeterSeries("", "", cfg.read_type, utils.empty_reads_frame(zone.tz))

    rows = table[list(canon.FIELD_NAMES.values())]
    overflow = table[_OVERFLOW].notna()

    checks, values, walls = _row_checks(rows, overflow, cfg.read_type)
    failed = checks.any(axis=1)
    if failed.any():
        pos = int(np.flatnonzero(failed.to_numpy())[0])
        check = str(checks.iloc[pos].idxmax())
        raise _row_error(
            check, pos + 1, rows.iloc[pos], rows.iloc[0], cfg.read_type
        )

    # newest first in the file; flip to ascending
    walls = pd.DatetimeIndex(walls[::-1])
    idx = zone.localize_index(walls).rename(canon.INDEX_NAME)
    reads = utils.build_reads_frame(idx, values.to_numpy()[::-1])

    first = rows.iloc[0]
    LOGGER.debug("parsed %d readings for MPRN %s", len(reads), first["mprn"])
    return MeterSeries(
        mprn=str(first["mprn"]),
        serial_number=str(first["serial_number"]),
        read_type=cfg.read_type,
        reads=reads,
    )
