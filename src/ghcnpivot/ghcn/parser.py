"""GHCN-Daily fixed-width line parsing.

One line of a station file holds one element (e.g. TMAX) for one
station-month, in wide format: an 11-character station id, 4-digit year,
2-digit month, 4-character element code, then one 8-byte field per day
of the month. Each day field is a 5-character value in tenths of a degree
followed by the MFLAG, QFLAG and SFLAG bytes.

Format reference: ftp://ftp.ncdc.noaa.gov/pub/data/ghcn/daily/readme.txt
"""

import calendar
import logging
from typing import Iterator, NamedTuple, Optional

__all__ = [
    'GhcnLineParser',
    'LineHeader',
    'MalformedLineError',
    'Observation',
    'iter_valid_values',
    'parse_header',
]

logger = logging.getLogger(__name__)

STATION_WIDTH = 11
HEADER_WIDTH = 21
FIELD_WIDTH = 8
VALUE_WIDTH = 5
QFLAG_OFFSET = 6
MAX_DAYS = 31
MISSING_VALUE = -9999
ELEMENTS = ("TMAX", "TMIN")


class MalformedLineError(ValueError):
    """A line whose station, year or month cannot be parsed.

    Downstream partitioning depends on these fields, so the line cannot be
    salvaged by dropping single values.
    """

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"{reason}: {line[:HEADER_WIDTH]!r}")


class Observation(NamedTuple):
    """One daily reading in degrees C.

    Tuple order is the composite sort key (station, year, month, day),
    with the value last. ``year`` is the partition.
    """
    station: str
    year: int
    month: int
    day: int
    value: float


class LineHeader(NamedTuple):
    station: str
    year: int
    month: int
    element: str


def parse_header(line: str) -> LineHeader:
    """Parse the station/year/month/element header of a line.

    Raises
    ------
    MalformedLineError
        If the line is shorter than the header or any key field is unusable.
    """
    if len(line) < HEADER_WIDTH:
        raise MalformedLineError(line, f"line shorter than {HEADER_WIDTH}-byte header")

    station = line[0:STATION_WIDTH]
    if not (station.isascii() and station.isalnum()):
        raise MalformedLineError(line, f"bad station id {station!r}")

    year_s = line[11:15]
    if not (year_s.isascii() and year_s.isdigit()) or int(year_s) < 1:
        raise MalformedLineError(line, f"bad year {year_s!r}")

    month_s = line[15:17]
    if not (month_s.isascii() and month_s.isdigit()) or not 1 <= int(month_s) <= 12:
        raise MalformedLineError(line, f"bad month {month_s!r}")

    return LineHeader(station, int(year_s), int(month_s), line[17:HEADER_WIDTH])


def iter_valid_values(line: str, header: LineHeader) -> Iterator[tuple[int, int]]:
    """Yield ``(day, raw_value)`` for every usable day field of a line.

    Raw values are in tenths of a degree. A field is dropped when its
    quality flag is set, its value is the missing sentinel, the value text
    is not an integer, or the day does not exist in that month.
    """
    days_in_month = calendar.monthrange(header.year, header.month)[1]
    end = min(len(line), HEADER_WIDTH + MAX_DAYS * FIELD_WIDTH)

    for pos in range(HEADER_WIDTH, end, FIELD_WIDTH):
        day = (pos - HEADER_WIDTH) // FIELD_WIDTH + 1

        text = line[pos:pos + VALUE_WIDTH]
        if len(text) < VALUE_WIDTH:
            break

        # Missing trailing flag bytes count as blank
        qflag = line[pos + QFLAG_OFFSET:pos + QFLAG_OFFSET + 1]
        if qflag.strip():
            continue

        try:
            raw = int(text)
        except ValueError:
            logger.debug("Unparseable value %r for %s %04d-%02d day %d",
                         text, header.station, header.year, header.month, day)
            continue

        if raw == MISSING_VALUE:
            continue

        if day > days_in_month:
            logger.debug("Value on nonexistent day %04d-%02d-%02d for %s",
                         header.year, header.month, day, header.station)
            continue

        yield day, raw


class GhcnLineParser:
    """Turns station-file lines into Observations for one element type.

    Example usage::

        parser = GhcnLineParser("TMAX")
        for obs in parser.parse(line):
            store.route(obs)
    """

    def __init__(self, element: str):
        if element not in ELEMENTS:
            raise ValueError(f"element must be one of {ELEMENTS}, got {element!r}")
        self.element = element

    def header(self, line: str) -> Optional[LineHeader]:
        """Return the parsed header, or None for blank or other-element lines."""
        line = line.rstrip("\r\n")
        if not line.strip():
            return None
        if line[17:HEADER_WIDTH] != self.element and len(line) >= HEADER_WIDTH:
            return None
        return parse_header(line)

    def parse(self, line: str) -> list[Observation]:
        """Parse one line into zero or more Observations.

        Values are converted from tenths of a degree to degrees.

        Raises
        ------
        MalformedLineError
            If the line matches the element but its key fields are unusable.
        """
        header = self.header(line)
        if header is None:
            return []

        line = line.rstrip("\r\n")
        return [
            Observation(header.station, header.year, header.month, day, raw / 10)
            for day, raw in iter_valid_values(line, header)
        ]
