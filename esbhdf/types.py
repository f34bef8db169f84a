from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import List, Optional

import pandas as pd

from . import canon


@dataclass(frozen=True)
class Reading:
    value: float  # kW averaged over the half hour
    end_time: pd.Timestamp  # tz-aware, end of the 30 minute interval


@dataclass(frozen=True, eq=False)
class MeterSeries:
    """
    Readings of a single meter, ordered by end time.

    Expected reads frame:
      - DatetimeIndex named 't_end', tz-aware
      - Columns: ['kw']
    """

    mprn: str
    serial_number: str
    read_type: str
    reads: pd.DataFrame

    def __len__(self) -> int:
        return len(self.reads)

    @property
    def empty(self) -> bool:
        return self.reads.empty

    @property
    def index(self) -> pd.DatetimeIndex:
        return pd.DatetimeIndex(self.reads.index)

    @property
    def kw(self) -> pd.Series:
        return self.reads[canon.VALUE_COL]

    @property
    def readings(self) -> List[Reading]:
        return [
            Reading(value=float(v), end_time=t)
            for t, v in zip(self.index, self.kw.to_numpy())
        ]

    def with_reads(self, reads: pd.DataFrame) -> "MeterSeries":
        return replace(self, reads=reads)


@dataclass(frozen=True)
class StatPoint:
    start: pd.Timestamp
    state: float  # kWh in the hour
    sum: float  # kWh, cumulative within one segment


@dataclass
class StatisticMetadata:
    statistic_id: str
    name: Optional[str] = None
    unit_of_measurement: str = canon.UNIT_OF_MEASUREMENT
    has_sum: bool = True
    has_mean: bool = False
    source: str = canon.STATISTIC_SOURCE


@dataclass
class Statistics:
    """One import batch for the statistics store."""

    metadata: StatisticMetadata
    stats: List[StatPoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.stats)


@dataclass
class SegmentFailure:
    segment: int  # position in Conversion.segments
    message: str


@dataclass(eq=False)
class Conversion:
    series: MeterSeries
    segments: List[MeterSeries]
    statistics: List[Statistics]
    failures: List[SegmentFailure] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
