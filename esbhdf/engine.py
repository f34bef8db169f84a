from __future__ import annotations

import logging
import warnings
from typing import List, Optional

from . import ingest, utils
from .config import HDFConfig, default_config
from .disambiguate import fix_timezone
from .exceptions import AggregationError, InsufficientContextWarning
from .transform import to_statistics
from .types import Conversion, SegmentFailure, StatisticMetadata, Statistics
from .validate import split_segments

LOGGER = logging.getLogger(__name__)


def convert(
    file_like: ingest.Source,
    *,
    config: Optional[HDFConfig] = None,
    zone: Optional[utils.CivilZone] = None,
) -> Conversion:
    """Parse an HDF export and build one statistics batch per contiguous segment.

    Format, alignment and ordering problems abort the whole conversion. A
    segment the aggregator cannot use is recorded in ``failures`` and the
    remaining segments are still converted.
    """
    cfg = config or default_config()
    zone = zone or utils.CivilZone.from_key(cfg.tz)

    series = ingest.from_hdf(file_like, zone=zone, config=cfg)
    if series.empty:
        raise AggregationError("nothing to convert")

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", InsufficientContextWarning)
        series = fix_timezone(series, zone)
    diagnostics: List[str] = []
    for w in caught:
        if issubclass(w.category, InsufficientContextWarning):
            diagnostics.append(str(w.message))
        else:
            warnings.warn(w.message, stacklevel=2)

    segments = split_segments(series)
    LOGGER.info(
        "MPRN %s: %d readings in %d segments", series.mprn, len(series), len(segments)
    )

    statistics: List[Statistics] = []
    failures: List[SegmentFailure] = []
    for i, segment in enumerate(segments):
        try:
            metadata = StatisticMetadata(
                statistic_id=cfg.statistic_id_for(series.mprn), name=cfg.name
            )
            statistics.append(to_statistics(segment, metadata=metadata))
        except AggregationError as e:
            LOGGER.warning("segment %d skipped: %s", i, e)
            failures.append(SegmentFailure(segment=i, message=str(e)))

    return Conversion(
        series=series,
        segments=segments,
        statistics=statistics,
        failures=failures,
        diagnostics=diagnostics,
    )
