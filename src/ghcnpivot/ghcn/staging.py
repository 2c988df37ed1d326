"""Per-year buffering of observations and on-disk staging files.

Observations arrive in arbitrary station order and the set of years is not
known up front. Each year gets an in-memory buffer that is appended to a
private staging file (``<root>/<year>/raw.bin``) whenever it grows past the
flush threshold, so peak memory is bounded by (live years x threshold)
rather than by the size of the dataset.

Staging files are flat arrays of fixed-size binary records
(``STAGING_DTYPE``), so any number of flushes concatenate into a file that
numpy reads back in one call.
"""

import logging
import struct
from pathlib import Path
from typing import Iterable, Optional

import numpy as np

from ghcnpivot.contracts import assert_staging_records
from ghcnpivot.ghcn.parser import STATION_WIDTH, Observation

__all__ = [
    'STAGING_DTYPE',
    'PartitionBuffer',
    'PartitionStore',
    'encode_observation',
    'encode_observations',
    'read_staging',
]

logger = logging.getLogger(__name__)

STAGING_DTYPE = np.dtype([
    ("station", f"S{STATION_WIDTH}"),
    ("year", "<i2"),
    ("month", "u1"),
    ("day", "u1"),
    ("value", "<f8"),
])

# Packed layout of one STAGING_DTYPE record
RECORD = struct.Struct(f"<{STATION_WIDTH}shBBd")


def encode_observation(observation: Observation) -> bytes:
    """Serialize one observation to a staging record."""
    station, year, month, day, value = observation
    return RECORD.pack(station.encode("ascii"), year, month, day, value)


def encode_observations(observations: Iterable[Observation]) -> bytes:
    """Serialize observations to staging records."""
    return b"".join(encode_observation(obs) for obs in observations)


def read_staging(path: Path) -> np.ndarray:
    """Load every record of a staging file.

    Raises
    ------
    ContractViolation
        If the file is not a whole number of records
    FileNotFoundError
        If the file does not exist
    """
    path = Path(path)
    nbytes = path.stat().st_size
    assert_staging_records(path, nbytes, STAGING_DTYPE.itemsize)
    return np.fromfile(path, dtype=STAGING_DTYPE)


class PartitionBuffer:
    """Encoded records for one year, not yet written to disk.

    Observations are packed on append, so ``byte_size`` is the memory the
    buffer actually holds.
    """

    def __init__(self, partition: int):
        self.partition = partition
        self.pending = bytearray()

    @property
    def byte_size(self) -> int:
        return len(self.pending)

    def append(self, observation: Observation):
        self.pending += encode_observation(observation)

    def drain(self) -> bytes:
        """Return the pending records and empty the buffer."""
        pending, self.pending = bytes(self.pending), bytearray()
        return pending

    def __len__(self):
        return len(self.pending) // RECORD.size


class PartitionStore:
    """Owns the per-year buffers and their staging files.

    Not thread-safe: a single consumer routes every observation.

    Example usage::

        store = PartitionStore(output_dirs["columns"], flush_threshold_bytes=10_000_000)
        for obs in observations:
            store.route(obs)
        store.flush_all()   # mandatory, or the tail of each year is lost
        for year in store.partitions():
            records = read_staging(store.staging_path(year))
    """

    def __init__(self, root: Path, flush_threshold_bytes: int,
                 staging_filename: str = "raw.bin"):
        self.root = Path(root)
        self.flush_threshold_bytes = flush_threshold_bytes
        self.staging_filename = staging_filename
        self._buffers: dict[int, PartitionBuffer] = {}
        self.observation_count = 0
        self.flush_count = 0

        self.root.mkdir(parents=True, exist_ok=True)
        self._remove_stale_staging()

    def _remove_stale_staging(self):
        """Delete staging files left behind by an interrupted run."""
        for stale in self.root.glob(f"*/{self.staging_filename}"):
            logger.warning("Removing stale staging file: %s", stale)
            stale.unlink()

    def staging_path(self, partition: int) -> Path:
        return self.root / str(partition) / self.staging_filename

    def partitions(self) -> list[int]:
        """Years seen so far, ascending."""
        return sorted(self._buffers)

    def buffer(self, partition: int) -> Optional[PartitionBuffer]:
        return self._buffers.get(partition)

    def _open_partition(self, partition: int) -> PartitionBuffer:
        path = self.staging_path(partition)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"")
        logger.debug("New partition %d: %s", partition, path)

        buf = PartitionBuffer(partition)
        self._buffers[partition] = buf
        return buf

    def route(self, observation: Observation):
        """Buffer one observation, flushing its year if over the threshold."""
        buf = self._buffers.get(observation.year)
        if buf is None:
            buf = self._open_partition(observation.year)

        buf.append(observation)
        self.observation_count += 1

        if buf.byte_size > self.flush_threshold_bytes:
            self.flush(observation.year)

    def flush(self, partition: int) -> int:
        """Append a year's pending observations to its staging file.

        Returns
        -------
        int
            Number of observations written
        """
        buf = self._buffers[partition]
        if not len(buf):
            return 0

        count = len(buf)
        logger.info("Flushing %d (%d observations)", partition, count)
        with open(self.staging_path(partition), "ab") as fh:
            fh.write(buf.drain())
        self.flush_count += 1
        return count

    def flush_all(self) -> int:
        """Flush every non-empty buffer. Must be called once ingest is complete."""
        return sum(self.flush(partition) for partition in self.partitions())
