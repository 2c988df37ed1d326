"""Sort-and-emit stage.

Turns each year's staging file into the final aligned column triple.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, TYPE_CHECKING

import numpy as np

from ghcnpivot.contracts import assert_aligned, assert_sorted, require
from ghcnpivot.contracts.output import SORT_FIELDS
from ghcnpivot.ghcn.columns import write_float64, write_strings
from ghcnpivot.ghcn.staging import read_staging
from ghcnpivot.setup_directories import get_partition_dir

if TYPE_CHECKING:
    from ghcnpivot.schemas import InternalConfig

__all__ = ['ColumnEmitter', 'format_dates']

logger = logging.getLogger(__name__)


def format_dates(records: np.ndarray) -> list[str]:
    """ISO ``YYYY-MM-DD`` strings for the year/month/day fields of staging records."""
    return [
        f"{y:04d}-{m:02d}-{d:02d}"
        for y, m, d in zip(records["year"].tolist(),
                           records["month"].tolist(),
                           records["day"].tolist())
    ]


class ColumnEmitter:
    """Sorts each year's staged observations and writes its output triple.

    For every year the emitter:

    1. Loads the staging file (only one year has to fit in memory).
    2. Sorts by (station, year, month, day). Remaining ties are broken by
       value, so reruns produce identical bytes whatever order the
       observations were staged in.
    3. Projects the records into ids, dates and values columns.
    4. Writes ``ids.gz``, ``dates.gz`` and ``values.gz``.
    5. Deletes the staging file.

    Years are independent and run on a thread pool sized by
    ``config.emit.max_workers`` (CPU count when unset).

    Example usage (typically called by orchestrator)::

        emitter = ColumnEmitter(config, output_dirs)
        counts = emitter.emit_all(store.partitions())
    """

    def __init__(self, config: "InternalConfig", output_dirs: dict):
        self.config = config
        self.output_dirs = output_dirs
        self.staging_filename = config.buffer.staging_filename
        self.compresslevel = config.emit.compresslevel
        self.max_workers = config.emit.max_workers or os.cpu_count() or 1

    def staging_path(self, year: int) -> Path:
        return get_partition_dir(self.output_dirs, year) / self.staging_filename

    def emit_partition(self, year: int) -> int:
        """Sort one year and write its column triple.

        Returns
        -------
        int
            Number of observations written

        Raises
        ------
        ContractViolation
            If the staging file is missing or corrupt, or the sorted output
            breaks the order/alignment invariants
        """
        staging = self.staging_path(year)
        require(staging.exists(), f"Staging contract violated: no staging file for {year} ({staging})")

        records = read_staging(staging)
        records = np.sort(records, order=SORT_FIELDS)
        assert_sorted(records)

        ids = np.char.decode(records["station"], "ascii").tolist()
        dates = format_dates(records)
        values = records["value"]
        assert_aligned(ids, dates, values)

        out_dir = staging.parent
        emit = self.config.emit
        write_strings(out_dir / emit.ids_filename, ids, self.compresslevel)
        write_strings(out_dir / emit.dates_filename, dates, self.compresslevel)
        write_float64(out_dir / emit.values_filename, values, self.compresslevel)

        staging.unlink()
        logger.info("Wrote %d: %d observations", year, len(records))
        return len(records)

    def emit_all(self, years: Iterable[int]) -> dict[int, int]:
        """Emit every year in parallel and wait for all of them.

        The first failure cancels years that have not started and is re-raised.

        Returns
        -------
        dict
            Observations written per year
        """
        years = list(years)
        logger.info("Sorting and writing %d years with %d workers", len(years), self.max_workers)

        counts = {}
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="emit") as pool:
            futures = {pool.submit(self.emit_partition, year): year for year in years}
            try:
                for future in as_completed(futures):
                    counts[futures[future]] = future.result()
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

        return dict(sorted(counts.items()))
