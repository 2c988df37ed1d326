"""Builders for GHCN-Daily fixed-width lines and station files."""

import gzip
import random
from pathlib import Path

MISSING = -9999


def make_line(station, year, month, element="TMAX", values=(), qflags=None, ndays=31):
    """Build one station-month line.

    ``values`` are raw tenths of a degree per day starting at day 1; ``None``
    or days past the end of ``values`` are written as the missing sentinel.
    ``qflags`` maps day -> quality flag character.
    """
    qflags = qflags or {}
    fields = []
    for day in range(1, ndays + 1):
        v = values[day - 1] if day <= len(values) else None
        if v is None:
            v = MISSING
        q = qflags.get(day, " ")
        fields.append(f"{v:5d} {q} ")
    return f"{station}{year:04d}{month:02d}{element}" + "".join(fields)


def write_station_file(directory, station, lines, gz=True):
    """Write lines to ``<station>.dly[.gz]`` and return the path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    text = "".join(line + "\n" for line in lines)
    if gz:
        path = directory / f"{station}.dly.gz"
        with gzip.open(path, "wt", encoding="ascii") as fh:
            fh.write(text)
    else:
        path = directory / f"{station}.dly"
        path.write_text(text, encoding="ascii")
    return path


def make_dataset(directory, n_stations=6, years=(1999, 2000, 2001), seed=7):
    """Write a small reproducible GHCN dataset with TMAX and TMIN lines.

    Some values are missing and some quality-flagged. Returns the list of
    all lines written, in file order.
    """
    rng = random.Random(seed)
    all_lines = []
    for i in range(n_stations):
        station = f"USW000{i:05d}"
        lines = []
        for year in years:
            for month in range(1, 13):
                for element in ("TMAX", "TMIN"):
                    values = []
                    qflags = {}
                    for day in range(1, 32):
                        r = rng.random()
                        if r < 0.1:
                            values.append(None)
                        else:
                            values.append(rng.randint(-300, 400))
                        if r > 0.95:
                            qflags[day] = rng.choice("DGIKLMNORSTWXZ")
                    lines.append(make_line(station, year, month, element, values, qflags))
        write_station_file(directory, station, lines)
        all_lines.extend(lines)
    return all_lines
