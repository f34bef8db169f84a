# esbhdf/utils.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

import numpy as np
import pandas as pd

from . import canon


def setup_logging(level: str | int = logging.INFO) -> None:
    """Initialize application logging."""
    resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


@dataclass(frozen=True)
class CivilZone:
    """
    Read-only handle on the civil time-zone rules of the export.

    Wall-clock times are resolved to instants the way the export is
    written: an ambiguous wall time (the repeated hour when clocks go back)
    resolves to its first occurrence, on the daylight-saving offset, and a
    skipped wall time uses the offset in force before the transition.
    """

    key: str
    tz: ZoneInfo

    @classmethod
    def from_key(cls, key: str = canon.DEFAULT_TZ) -> "CivilZone":
        return _load_zone(key)

    def _to_utc(self, wall: datetime) -> datetime:
        return wall.replace(tzinfo=self.tz, fold=0).astimezone(timezone.utc)

    def localize(self, wall: datetime | pd.Timestamp) -> pd.Timestamp:
        wall = pd.Timestamp(wall).to_pydatetime()
        return pd.Timestamp(self._to_utc(wall)).tz_convert(self.tz)

    def localize_index(self, walls: pd.DatetimeIndex) -> pd.DatetimeIndex:
        """Vector form of localize() for naive wall-clock indices."""
        if walls.tz is not None:
            raise ValueError("Expected naive wall-clock timestamps.")
        utc = [self._to_utc(w) for w in walls.to_pydatetime()]
        return pd.DatetimeIndex(utc, tz="UTC").tz_convert(self.tz)

    def standard_offset(self, year: int) -> timedelta:
        """The lower of the two offsets the zone alternates between in a year."""
        return min(
            datetime(year, month, 1, 12, tzinfo=self.tz).utcoffset() or timedelta(0)
            for month in (1, 7)
        )

    def is_daylight(self, ts: pd.Timestamp) -> bool:
        return ts.utcoffset() > self.standard_offset(ts.year)

    def is_ambiguous(self, wall: datetime | pd.Timestamp) -> bool:
        """True when the wall time occurs twice (clocks going back)."""
        wall = pd.Timestamp(wall)
        if wall.tz is not None:
            wall = wall.tz_localize(None)
        w = wall.to_pydatetime()
        first = w.replace(tzinfo=self.tz, fold=0).utcoffset()
        second = w.replace(tzinfo=self.tz, fold=1).utcoffset()
        return first > second

    def to_standard(self, ts: pd.Timestamp) -> pd.Timestamp:
        """Same wall-clock reading, taken on the standard offset instead."""
        return ts + (ts.utcoffset() - self.standard_offset(ts.year))


@lru_cache(maxsize=None)
def _load_zone(key: str) -> CivilZone:
    return CivilZone(key=key, tz=ZoneInfo(key))


def empty_reads_frame(tz: str | ZoneInfo = canon.DEFAULT_TZ) -> pd.DataFrame:
    """
    Return an empty reads frame with the correct tz-aware index and value column.
    """
    idx = pd.DatetimeIndex([], tz=tz, name=canon.INDEX_NAME)
    return pd.DataFrame({canon.VALUE_COL: pd.Series([], dtype=float)}, index=idx)


def build_reads_frame(idx: pd.DatetimeIndex, kw) -> pd.DataFrame:
    out = pd.DataFrame({canon.VALUE_COL: pd.Series(kw, dtype=float).to_numpy()}, index=idx)
    out.index.name = canon.INDEX_NAME
    return out


def half_hour() -> pd.Timedelta:
    return pd.Timedelta(minutes=canon.DEFAULT_CADENCE_MIN)


def on_minutes(idx: pd.DatetimeIndex, minutes=(0, 30)) -> np.ndarray:
    """Mask of timestamps sitting exactly on one of the given minutes."""
    return (
        np.isin(idx.minute, minutes)
        & (idx.second == 0)
        & (idx.microsecond == 0)
        & (idx.nanosecond == 0)
    )
