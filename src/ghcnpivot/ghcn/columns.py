"""Gzipped column vector files.

Two encodings are used for a year's output triple:

- string columns (station ids, ISO dates): newline-terminated text
- float columns (values): raw little-endian float64, no header

Headers carry no timestamp or file name, so identical columns always
produce identical bytes.
"""

import gzip
from pathlib import Path
from typing import Iterable

import numpy as np

__all__ = ['write_strings', 'write_float64', 'read_strings', 'read_float64']

FLOAT_DTYPE = np.dtype("<f8")


def _gzip_writer(raw, compresslevel: int) -> gzip.GzipFile:
    return gzip.GzipFile(filename="", mode="wb", fileobj=raw,
                         compresslevel=compresslevel, mtime=0)


def write_strings(path: Path, values: Iterable[str], compresslevel: int = 9) -> None:
    """Write a newline-delimited, gzipped string column."""
    payload = "".join(f"{v}\n" for v in values).encode("ascii")
    with open(path, "wb") as raw, _gzip_writer(raw, compresslevel) as gz:
        gz.write(payload)


def write_float64(path: Path, values, compresslevel: int = 9) -> None:
    """Write a gzipped stream of little-endian float64 values."""
    payload = np.ascontiguousarray(values, dtype=FLOAT_DTYPE).tobytes()
    with open(path, "wb") as raw, _gzip_writer(raw, compresslevel) as gz:
        gz.write(payload)


def read_strings(path: Path) -> list[str]:
    with gzip.open(path, "rt", encoding="ascii") as fh:
        return fh.read().splitlines()


def read_float64(path: Path) -> np.ndarray:
    with gzip.open(path, "rb") as fh:
        return np.frombuffer(fh.read(), dtype=FLOAT_DTYPE)
