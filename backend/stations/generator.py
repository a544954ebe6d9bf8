"""
Station Table Generator

Converts the fixed-width station list (stations.txt) into the JavaScript
lookup table the web client loads (stations.js):

    var _StationInfo = {KDEN:{"StationId":"KDEN","City":"Denver",...},...}

Record layout (83 characters per line):
- [0:2]   state
- [3:19]  city
- [20:24] ICAO station id
- [39:46] latitude  "DD MMH"
- [47:54] longitude "DDD MMH"
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO, Union

from .models import Station

logger = logging.getLogger(__name__)

RECORD_LENGTH = 83
HEADER_STATION_ID = "ICAO"
TABLE_PREFIX = "var _StationInfo = {"
TABLE_SUFFIX = "}"

_WORD = re.compile(r"[A-Za-z0-9_]+")


class StationFormatError(ValueError):
    """A record field could not be parsed."""


def normalize_city(raw: str) -> str:
    """'DENVER/STAPLETON ' -> 'Denver/Stapleton'"""
    lowered = raw.strip().lower()
    return _WORD.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:], lowered)


def degrees_to_decimal(degrees_minutes: str) -> str:
    """
    Convert a "DD MMH" coordinate to sign * DD + MM/60.

    The minutes are always added, also for S/W coordinates, which is the
    form the client's table has always carried.

    Example: "39 51N" -> "39.85", "104 39W" -> "-103.35"
    """
    parts = degrees_minutes.split()
    if len(parts) != 2 or len(parts[1]) < 3:
        raise StationFormatError(f"bad coordinate {degrees_minutes!r}")
    try:
        degrees = float(parts[0])
        minutes = float(parts[1][:2])
    except ValueError as e:
        raise StationFormatError(f"bad coordinate {degrees_minutes!r}: {e}") from e

    sign = -1 if parts[1][2] in ("S", "W") else 1
    return f"{sign * degrees + minutes / 60:.2f}"


def parse_station_line(line: str) -> Optional[Station]:
    """
    Parse one line of stations.txt.

    Returns None for lines that are not station records (wrong length,
    comments, blanks, the header, rows without a state or id).
    """
    line = line.rstrip("\r\n")
    if len(line) != RECORD_LENGTH:
        return None
    if line.startswith("!") or not line.strip():
        return None

    state = line[0:2]
    city = line[3:19]
    station_id = line[20:24]
    latitude = line[39:46]
    longitude = line[47:54]

    if not station_id.strip() or not state.strip():
        return None
    if station_id == HEADER_STATION_ID:
        return None

    return Station(
        station_id=station_id,
        city=normalize_city(city),
        state=state,
        latitude=degrees_to_decimal(latitude),
        longitude=degrees_to_decimal(longitude),
    )


def iter_stations(lines: Iterable[str]) -> Iterator[Station]:
    for line_number, line in enumerate(lines, start=1):
        try:
            station = parse_station_line(line)
        except StationFormatError as e:
            raise StationFormatError(f"line {line_number}: {e}") from e
        if station is not None:
            yield station


def write_station_table(stations: Iterable[Station], output: TextIO) -> int:
    """Write the JavaScript table. Returns the number of stations written."""
    count = 0
    output.write(TABLE_PREFIX)
    for station in stations:
        output.write(f"{station.station_id}:{station.to_json()},")
        count += 1
    output.write(TABLE_SUFFIX)
    return count


def convert(input_path: Union[str, Path], output_path: Union[str, Path]) -> int:
    """
    Convert stations.txt to stations.js.

    Returns:
        Number of stations written.
    """
    # latin-1 keeps one character per byte so the fixed widths line up
    with open(input_path, "r", encoding="latin-1", newline="") as source, \
            open(output_path, "w", encoding="utf-8") as output:
        count = write_station_table(iter_stations(source), output)

    logger.info(f"[Stations] Wrote {count} stations to {output_path}")
    return count
