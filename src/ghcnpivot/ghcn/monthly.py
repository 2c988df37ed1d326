"""Monthly mean summaries of daily temperature lines.

Each station-month line of the selected element collapses to one row
(station, year, month, number of valid days, mean in degrees C). Rows are
written as a gzipped CSV with the header ``Id,Year,Month,Nvalid,Mean``.
"""

import logging
from pathlib import Path
from typing import Iterable, NamedTuple, Optional

import pandas as pd

from ghcnpivot.ghcn.parser import GhcnLineParser, MalformedLineError, iter_valid_values
from ghcnpivot.ghcn.reader import iter_lines

__all__ = ['MonthlySummary', 'summarize_line', 'read_station_summaries', 'write_monthly_csv']

logger = logging.getLogger(__name__)

COLUMNS = ["Id", "Year", "Month", "Nvalid", "Mean"]


class MonthlySummary(NamedTuple):
    station: str
    year: int
    month: int
    n_valid: int
    mean: float


def summarize_line(parser: GhcnLineParser, line: str) -> Optional[MonthlySummary]:
    """Summarize one line, or return None if it is blank or another element.

    A month without a single valid day gets a NaN mean.
    """
    header = parser.header(line)
    if header is None:
        return None

    raw = [v for _, v in iter_valid_values(line.rstrip("\r\n"), header)]
    mean = sum(raw) / len(raw) / 10 if raw else float("nan")
    return MonthlySummary(header.station, header.year, header.month, len(raw), mean)


def read_station_summaries(path: Path, parser: GhcnLineParser,
                           encoding: str = "ascii") -> list[MonthlySummary]:
    """Summarize every matching line of one station file."""
    logger.info("Reading %s", Path(path).name)

    summaries = []
    for lineno, line in enumerate(iter_lines(path, encoding), start=1):
        try:
            summary = summarize_line(parser, line)
        except MalformedLineError as e:
            raise MalformedLineError(e.line, f"{Path(path).name}:{lineno}: {e.reason}") from e
        if summary is not None:
            summaries.append(summary)
    return summaries


def write_monthly_csv(path: Path, summaries: Iterable[MonthlySummary]) -> pd.DataFrame:
    """Write summaries sorted by station, year and month to a gzipped CSV.

    Returns
    -------
    pd.DataFrame
        The table as written
    """
    df = pd.DataFrame(list(summaries), columns=["station", "year", "month", "n_valid", "mean"])
    df.columns = COLUMNS
    df = df.sort_values(["Id", "Year", "Month"], kind="stable").reset_index(drop=True)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, float_format="%.3f", na_rep="NaN",
              compression={"method": "gzip", "mtime": 0})
    logger.info("Wrote %d monthly summaries to %s", len(df), path)
    return df
