from __future__ import annotations

import json
from typing import Any, Dict, List

from .types import StatisticMetadata, Statistics, StatPoint

IMPORT_MESSAGE_TYPE = "recorder/import_statistics"


def metadata_to_dict(meta: StatisticMetadata) -> Dict[str, Any]:
    return {
        "source": meta.source,
        "has_mean": meta.has_mean,
        "has_sum": meta.has_sum,
        "name": meta.name,
        "statistic_id": meta.statistic_id,
        "unit_of_measurement": meta.unit_of_measurement,
    }


def stat_to_dict(point: StatPoint) -> Dict[str, Any]:
    # start keeps its UTC offset, the store interprets it as an instant
    return {
        "start": point.start.isoformat(),
        "state": float(point.state),
        "sum": float(point.sum),
    }


def to_import_message(statistics: Statistics, message_id: int) -> Dict[str, Any]:
    """
    Build the JSON-ready import message for one batch of statistics.

    Shape:
        {
          "type": "recorder/import_statistics",
          "id": <message_id>,
          "metadata": {...},
          "stats": [{"start": ISO-8601, "state": kWh, "sum": kWh}, ...]
        }
    """
    stats: List[Dict[str, Any]] = [stat_to_dict(p) for p in statistics.stats]
    return {
        "type": IMPORT_MESSAGE_TYPE,
        "id": int(message_id),
        "metadata": metadata_to_dict(statistics.metadata),
        "stats": stats,
    }


def to_json(statistics: Statistics, message_id: int) -> str:
    return json.dumps(to_import_message(statistics, message_id))
