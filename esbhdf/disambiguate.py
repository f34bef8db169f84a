"""
Repair of the repeated hour at the end of daylight-saving time.

The export carries wall-clock end times only. When clocks go back one
local hour happens twice and the zone resolves both occurrences to the
first one, so the second pass through the hour lands one hour early.
Readings come every 30 minutes, which makes the reading two positions away
exactly one hour away and gives a way to spot the misplaced ones.
"""

from __future__ import annotations
import logging
import warnings

import pandas as pd

from . import canon, utils
from .exceptions import InsufficientContextWarning
from .types import MeterSeries

LOGGER = logging.getLogger(__name__)

_HOUR = pd.Timedelta(hours=1)


def _is_candidate(ts: pd.Timestamp, zone: utils.CivilZone) -> bool:
    return zone.is_daylight(ts) and zone.is_ambiguous(ts)


def fix_timezone(series: MeterSeries, zone: utils.CivilZone) -> MeterSeries:
    """
    Move readings of the second pass through the repeated hour onto the
    standard offset.

    For each reading resolved on the daylight-saving offset inside the
    repeated hour:
      - if the reading two positions earlier is the same instant, it is the
        second occurrence: take the standard-offset instant;
      - otherwise, if the standard-offset instant is exactly one hour before
        the reading two positions later, take it;
      - with neither neighbour available the reading is left as is and an
        InsufficientContextWarning is emitted.

    Input must be ascending by file position (see ingest.from_hdf). Data
    that has already been repaired is returned unchanged.
    """
    times = list(series.index)
    n = len(times)
    fixed = 0

    for i in range(n):
        ts = times[i]
        if not _is_candidate(ts, zone):
            continue

        if i >= 2 and times[i - 2] == ts:
            times[i] = zone.to_standard(ts)
            fixed += 1
        elif i + 2 < n:
            fix = zone.to_standard(ts)
            if times[i + 2] - fix == _HOUR:
                times[i] = fix
                fixed += 1
        elif i < 2:
            msg = (
                f"too little data to fix timezone of {ts.isoformat()} "
                f"(reading {i} of {n})"
            )
            LOGGER.warning(msg)
            warnings.warn(msg, InsufficientContextWarning, stacklevel=2)

    if not fixed:
        return series

    LOGGER.info("moved %d readings onto the standard offset", fixed)
    idx = pd.DatetimeIndex(times, name=canon.INDEX_NAME).tz_convert(zone.tz)
    reads = series.reads.copy()
    reads.index = idx
    return series.with_reads(reads)
