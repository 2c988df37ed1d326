"""Station file discovery and reading.

Station files are one file per station, usually gzipped
(``USW00094846.dly.gz``). Plain text files are read as-is.
"""

import gzip
import logging
from pathlib import Path
from typing import Iterator

from ghcnpivot.ghcn.parser import GhcnLineParser, MalformedLineError, Observation

__all__ = ['list_station_files', 'iter_lines', 'read_station_file']

logger = logging.getLogger(__name__)


def list_station_files(data_dir, pattern: str = "*.gz") -> list[Path]:
    """Return the station files in ``data_dir`` matching ``pattern``, sorted by name.

    Raises
    ------
    FileNotFoundError
        If ``data_dir`` does not exist or is not a directory.
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise FileNotFoundError(f"Data directory not found: {data_dir}")
    return sorted(p for p in data_dir.glob(pattern) if p.is_file())


def iter_lines(path: Path, encoding: str = "ascii") -> Iterator[str]:
    """Yield the lines of a station file, decompressing ``.gz`` files."""
    path = Path(path)
    if path.suffix == ".gz":
        fh = gzip.open(path, "rt", encoding=encoding, newline="")
    else:
        fh = open(path, "r", encoding=encoding, newline="")
    with fh:
        yield from fh


def read_station_file(path: Path, parser: GhcnLineParser,
                      encoding: str = "ascii") -> list[Observation]:
    """Parse every matching line of one station file.

    Parameters
    ----------
    path : Path
        Station file (gzipped or plain)
    parser : GhcnLineParser
        Parser configured for the element being extracted
    encoding : str
        Text encoding of the file

    Returns
    -------
    list of Observation
        All observations of the file, in file order

    Raises
    ------
    MalformedLineError
        With the file name and line number, if any matching line is unusable
    OSError
        If the file cannot be opened or decompressed
    """
    logger.info("Reading %s", Path(path).name)

    observations = []
    for lineno, line in enumerate(iter_lines(path, encoding), start=1):
        try:
            observations.extend(parser.parse(line))
        except MalformedLineError as e:
            raise MalformedLineError(e.line, f"{Path(path).name}:{lineno}: {e.reason}") from e

    logger.debug("Parsed %d observations from %s", len(observations), Path(path).name)
    return observations
