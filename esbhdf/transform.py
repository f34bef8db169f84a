from __future__ import annotations
from typing import Optional

import pandas as pd

from . import canon, utils
from .exceptions import AggregationError
from .types import MeterSeries, StatisticMetadata, Statistics, StatPoint


def default_metadata(segment: MeterSeries) -> StatisticMetadata:
    return StatisticMetadata(statistic_id=f"{canon.STATISTIC_ID_PREFIX}{segment.mprn}")


def to_statistics(
    segment: MeterSeries, *, metadata: Optional[StatisticMetadata] = None
) -> Statistics:
    """
    Turn one contiguous segment of half-hourly kW readings into hourly kWh.

    Readings are kW averaged over the half hour ending at their end time,
    so each one adds kW * 0.5 kWh. The segment is started on a half hour
    (a leading on-the-hour reading is dropped); a point is emitted at every
    even reading index after the first, stamped with the previous reading's
    end time so the hourly start sits between the two values it covers.
    The first point therefore folds three readings, later ones two, and an
    odd reading left at the end is discarded. A segment too short for a
    single point raises AggregationError.

    'sum' runs from zero within this segment only.
    """
    out = Statistics(metadata=metadata or default_metadata(segment))

    reads = segment.reads
    if reads.empty:
        raise AggregationError("not enough data")
    if utils.on_minutes(reads.index[:1], (0,))[0]:
        # we want to start from a half an hour
        reads = reads.iloc[1:]
    if reads.empty:
        raise AggregationError("not enough data")

    step = utils.half_hour()
    times = list(pd.DatetimeIndex(reads.index))
    values = reads[canon.VALUE_COL].to_numpy(dtype=float)

    last = times[0] - step
    value = 0.0  # the current hour
    total = 0.0
    for i, (ts, kw) in enumerate(zip(times, values)):
        delta = ts - last
        if delta != step:
            raise AggregationError(
                f"value {i}: entries should be recorded at 30 minutes increment, "
                f"got {delta} ({last.isoformat()} -> {ts.isoformat()})"
            )
        last = ts

        value += float(kw) * 0.5

        if i % 2 == 0 and i > 0:
            total += value
            out.stats.append(StatPoint(start=times[i - 1], state=value, sum=total))
            value = 0.0

    if not out.stats:
        raise AggregationError(
            f"not enough data: {len(times)} readings give no full hour"
        )
    return out


def stats_frame(statistics: Statistics) -> pd.DataFrame:
    """Hourly points as a frame indexed by 'start' with 'state' and 'sum'."""
    if not statistics.stats:
        idx = pd.DatetimeIndex([], tz="UTC", name="start")
        return pd.DataFrame({"state": [], "sum": []}, index=idx, dtype=float)
    out = pd.DataFrame(
        {
            "start": [p.start for p in statistics.stats],
            "state": [p.state for p in statistics.stats],
            "sum": [p.sum for p in statistics.stats],
        }
    ).set_index("start")
    return out
