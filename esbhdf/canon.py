from __future__ import annotations
from typing import Final

INDEX_NAME: Final[str] = "t_end"
VALUE_COL: Final[str] = "kw"
DEFAULT_TZ: Final[str] = "Europe/Dublin"
DEFAULT_CADENCE_MIN: Final[int] = 30
UNIT_OF_MEASUREMENT: Final[str] = "kWh"
STATISTIC_SOURCE: Final[str] = "recorder"
STATISTIC_ID_PREFIX: Final[str] = "sensor.esb_"

# Harmonised Downloadable File (HDF) layout
HEADER: Final[tuple[str, ...]] = (
    "MPRN",
    "Meter Serial Number",
    "Read Value",
    "Read Type",
    "Read Date and End Time",
)
READ_TYPE: Final[str] = "Active Import Interval (kW)"
TIMESTAMP_FORMAT: Final[str] = "%d-%m-%Y %H:%M"

# Raw header column -> internal field name
FIELD_NAMES: Final[dict[str, str]] = {
    "MPRN": "mprn",
    "Meter Serial Number": "serial_number",
    "Read Value": "value",
    "Read Type": "read_type",
    "Read Date and End Time": "end_time",
}
