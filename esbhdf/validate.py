from __future__ import annotations
from typing import List, cast

import numpy as np
import pandas as pd

from . import canon, exceptions, utils
from .types import MeterSeries


def assert_reads(df: pd.DataFrame) -> None:
    if df.index.name != canon.INDEX_NAME:
        raise exceptions.CanonError(f"Index must be '{canon.INDEX_NAME}'.")
    if not isinstance(df.index, pd.DatetimeIndex):
        raise exceptions.CanonError("Index must be a DatetimeIndex.")
    tz_index = cast(pd.DatetimeIndex, df.index)
    if tz_index.tz is None:
        raise exceptions.CanonError("Index must be tz-aware.")
    if canon.VALUE_COL not in df.columns:
        raise exceptions.CanonError(f"Missing required column '{canon.VALUE_COL}'.")
    if (df[canon.VALUE_COL] < 0).any():
        raise exceptions.CanonError(
            "Negative kW values detected; readings should be non-negative."
        )


def split_segments(series: MeterSeries) -> List[MeterSeries]:
    """
    Split an ascending series into blocks with exact half an hour increments.

    Exports sometimes have holes: every gap starts a new segment.
    Readings are checked in order and the first offending one raises:
      - AlignmentError when an end time is not on minute 0 or 30;
      - OrderingError when an end time is not after the previous one.
    """
    assert_reads(series.reads)
    if series.empty:
        return []

    idx = series.index
    step = utils.half_hour().to_timedelta64()
    deltas = idx.to_series().diff().to_numpy()

    misaligned = ~utils.on_minutes(idx)
    unsorted = np.zeros(len(idx), dtype=bool)
    unsorted[1:] = deltas[1:] <= np.timedelta64(0, "ns")

    bad = np.flatnonzero(misaligned | unsorted)
    if bad.size:
        pos = int(bad[0])
        if misaligned[pos]:
            raise exceptions.AlignmentError(
                f"timestamp {idx[pos].isoformat()} is not aligned with 30 minutes"
            )
        raise exceptions.OrderingError(
            f"data is not sorted by time: last {idx[pos - 1].isoformat()}, "
            f"current {idx[pos].isoformat()}"
        )

    # a new block opens on the first reading and after every gap
    opens = np.ones(len(idx), dtype=bool)
    opens[1:] = deltas[1:] != step
    block = np.cumsum(opens) - 1

    return [
        series.with_reads(series.reads.iloc[block == b])
        for b in range(int(block[-1]) + 1)
    ]
