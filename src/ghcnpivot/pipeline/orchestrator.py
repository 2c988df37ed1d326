"""Pipeline orchestration.

Wires the ingest controller, partition store and column emitter together,
sets up logging, and owns the decision of what a failed station file means
for the run.
"""

import time
import logging
from functools import partial
from pathlib import Path
from typing import Optional

from ghcnpivot.contracts import FailurePolicy, IngestError
from ghcnpivot.ghcn.emitter import ColumnEmitter
from ghcnpivot.ghcn.monthly import read_station_summaries, write_monthly_csv
from ghcnpivot.ghcn.parser import GhcnLineParser
from ghcnpivot.ghcn.reader import list_station_files, read_station_file
from ghcnpivot.ghcn.staging import PartitionStore
from ghcnpivot.pipeline.ingest import FileResult, IngestController
from ghcnpivot.schemas import InternalConfig
from ghcnpivot.setup_directories import get_monthly_path

__all__ = ['PipelineOrchestrator']

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """Runs the GHCN pipeline end to end.

    This is the main entry point for running ``ghcnpivot``.

    **Columnize mode** (default):

    1. **Ingest**: Station files are parsed concurrently (at most
       ``ingest.max_open_files`` at once). Observations of the configured
       element are funnelled to a single consumer.

    2. **Stage**: The consumer routes each observation into its year's
       buffer in a PartitionStore; buffers over the flush threshold are
       appended to per-year staging files. After ingest, every buffer is
       flushed.

    3. **Sort-and-emit**: Each year is sorted by (station, date) and written
       as ``columns/YYYY/{ids,dates,values}.gz``; staging files are removed.

    **Monthly mode:**

    Each station-month line is reduced to its mean and count of valid days
    and written to a single gzipped CSV.

    **Failure handling:**

    A station file that cannot be read or holds a malformed line aborts the
    run under ``failure.policy = "fail_fast"`` (default). With
    ``"skip_file"`` the file is logged and left out; since each file is
    delivered as a whole, none of its observations reach the staging files.
    Corrupt or missing staging data is always fatal.

    **Logging:**

    All output goes to both console and ``logs/pipeline_{element}.log``.

    Example usage::

        config = resolve_config(ParamConfig(), UserConfig(data_dir=..., base_dir=...))
        output_dirs = setup_output_directories(config.base_dir)
        stats = PipelineOrchestrator(config, output_dirs).start()
    """

    def __init__(self, config: InternalConfig, output_dirs: dict):
        """Initialize orchestrator with pipeline configuration.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration.

        output_dirs : dict
            Output directory paths from ``setup_output_directories()``:
            base, columns, logs.

        Raises
        ------
        ValueError
            If ``reader.data_dir`` or ``base_dir`` is not set.
        """
        if not config.reader.data_dir:
            raise ValueError("reader.data_dir is required")
        if not config.base_dir:
            raise ValueError("base_dir is required")

        self.config = config
        self.output_dirs = output_dirs
        self.policy = FailurePolicy(config.failure.policy)
        self.parser = GhcnLineParser(config.reader.element)

        self.store: Optional[PartitionStore] = None
        self.skipped_files: list[Path] = []
        self._start_time = None

    def _setup_logging(self):
        """Configure the root logger with file and console handlers."""
        log_level = getattr(logging, self.config.logging.level, logging.INFO)

        log_dir = Path(self.output_dirs["logs"])
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f"pipeline_{self.config.reader.element}.log"

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # Clear existing handlers and add new ones
        root = logging.getLogger()
        root.setLevel(log_level)
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()

        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        logger.info("Logging: level=%s, file=%s", self.config.logging.level, log_path)

    def start(self) -> dict:
        """Run the configured mode to completion.

        Returns
        -------
        dict
            Run statistics (files, failed/skipped files, observations or
            summaries, per-year counts in columnize mode, runtime).

        Raises
        ------
        IngestError
            A station file failed under the fail-fast policy.
        ContractViolation
            Staging or output invariants were broken.
        """
        self._setup_logging()

        logger.info("=" * 60)
        logger.info("Starting GHCN %s pipeline (%s)", self.config.mode, self.config.reader.element)
        logger.info("=" * 60)

        self._start_time = time.time()

        files = list_station_files(self.config.reader.data_dir, self.config.reader.file_pattern)
        logger.info("Found %d station files in %s", len(files), self.config.reader.data_dir)

        if self.config.mode == "monthly":
            stats = self.run_monthly(files)
        else:
            stats = self.run_columnize(files)

        stats["runtime_sec"] = time.time() - self._start_time
        self._log_summary(stats)
        return stats

    def _ingest(self, files, handler, consumer) -> dict:
        controller = IngestController(
            files,
            handler,
            max_open_files=self.config.ingest.max_open_files,
            queue_size=self.config.ingest.queue_size,
        )
        return controller.run(consumer)

    def _on_file_failure(self, result: FileResult):
        """Decide what a failed station file means for the run."""
        if self.policy is FailurePolicy.SKIP_FILE:
            logger.warning("Skipping %s: %s", result.path.name, result.error)
            self.skipped_files.append(result.path)
            return
        logger.error("Aborting on %s: %s", result.path.name, result.error)
        raise IngestError(result.path, str(result.error)) from result.error

    def run_columnize(self, files) -> dict:
        """Ingest, stage, then sort and emit every year."""
        self.store = PartitionStore(
            self.output_dirs["columns"],
            flush_threshold_bytes=self.config.buffer.flush_threshold_bytes,
            staging_filename=self.config.buffer.staging_filename,
        )
        store = self.store

        def route(result: FileResult):
            if not result.ok:
                self._on_file_failure(result)
                return
            for observation in result.items:
                store.route(observation)

        handler = partial(read_station_file, parser=self.parser,
                          encoding=self.config.reader.encoding)
        ingest_stats = self._ingest(files, handler, route)

        # Write whatever is left to disk
        store.flush_all()
        logger.info("Staged %d observations in %d years (%d flushes)",
                    store.observation_count, len(store.partitions()), store.flush_count)

        emitter = ColumnEmitter(self.config, self.output_dirs)
        counts = emitter.emit_all(store.partitions())

        return {
            "mode": "columnize",
            "files": ingest_stats["files"],
            "skipped_files": len(self.skipped_files),
            "observations": store.observation_count,
            "years": counts,
        }

    def run_monthly(self, files) -> dict:
        """Summarize every station-month and write the monthly CSV."""
        summaries = []

        def collect(result: FileResult):
            if not result.ok:
                self._on_file_failure(result)
                return
            summaries.extend(result.items)

        handler = partial(read_station_summaries, parser=self.parser,
                          encoding=self.config.reader.encoding)
        ingest_stats = self._ingest(files, handler, collect)

        path = get_monthly_path(self.output_dirs, self.config.monthly.filename_pattern,
                                self.config.reader.element)
        df = write_monthly_csv(path, summaries)

        return {
            "mode": "monthly",
            "files": ingest_stats["files"],
            "skipped_files": len(self.skipped_files),
            "summaries": len(df),
            "output": str(path),
        }

    def _log_summary(self, stats: dict):
        logger.info("=" * 60)
        logger.info("Pipeline finished. Runtime: %.1f seconds", stats["runtime_sec"])
        logger.info("Files: %d read, %d skipped", stats["files"], stats["skipped_files"])
        if stats["mode"] == "columnize":
            logger.info("Observations: %d in %d years", stats["observations"], len(stats["years"]))
        else:
            logger.info("Monthly summaries: %d -> %s", stats["summaries"], stats["output"])
        logger.info("=" * 60)
