from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from . import canon


@dataclass
class HDFConfig:
    # Civil zone the export's wall-clock timestamps are written in
    tz: str = canon.DEFAULT_TZ

    # Only this read type is accepted in the export
    read_type: str = canon.READ_TYPE

    # Statistics store target; derived from the MPRN when unset
    statistic_id: Optional[str] = None
    name: Optional[str] = None

    def statistic_id_for(self, mprn: str) -> str:
        return self.statistic_id or f"{canon.STATISTIC_ID_PREFIX}{mprn}"


def default_config() -> HDFConfig:
    return HDFConfig()
