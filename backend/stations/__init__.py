"""
Stations Module
气象站数据模块

Offline conversion of the fixed-width station list into the lookup table
consumed by the web client. Not used by the server at runtime.
"""

from .models import Station
from .generator import (
    StationFormatError,
    convert,
    degrees_to_decimal,
    normalize_city,
    parse_station_line,
)

__all__ = [
    "Station",
    "StationFormatError",
    "convert",
    "degrees_to_decimal",
    "normalize_city",
    "parse_station_line",
]
