"""Bounded concurrent ingest of station files.

One worker thread per station file parses it in full; a bounded semaphore
caps how many files are open at once. Every worker delivers its result to
a single queue drained by one consumer, so whatever the consumer mutates
(the partition buffers) needs no locking.
"""

import logging
import queue
import threading
from pathlib import Path
from typing import Any, Callable, NamedTuple, Optional, Sequence

from ghcnpivot.contracts import IngestError

__all__ = ['FileResult', 'FileWorker', 'IngestController']

logger = logging.getLogger(__name__)


class FileResult(NamedTuple):
    """Everything one station file produced, or the error that stopped it."""
    path: Path
    items: list
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FileWorker(threading.Thread):
    """Processes one file and releases its semaphore slot when done."""

    def __init__(self, path: Path, handler: Callable[[Path], list],
                 delivery_queue: queue.Queue, slots: threading.BoundedSemaphore):
        super().__init__(daemon=True, name=f"FileWorker-{Path(path).name}")
        self.path = Path(path)
        self.handler = handler
        self.delivery_queue = delivery_queue
        self.slots = slots

    def run(self):
        try:
            try:
                result = FileResult(self.path, self.handler(self.path))
            except Exception as e:
                logger.debug("Worker failed on %s: %s", self.path.name, e)
                result = FileResult(self.path, [], e)
            self.delivery_queue.put(result)
        finally:
            self.slots.release()


class IngestController:
    """Fans station files out to worker threads and funnels results to one consumer.

    **Concurrency:**

    A dispatcher thread walks the file list. Before starting each
    FileWorker it acquires a slot from a ``BoundedSemaphore`` of size
    ``max_open_files``, so at most that many files are open and being parsed.
    The bound exists for the OS open-file limit, not for CPU.

    **Delivery:**

    Each worker puts one ``FileResult`` on the delivery queue. The thread
    that calls ``run()`` is the only consumer. After every dispatched worker
    has finished, the dispatcher enqueues a sentinel and ``run()`` returns.

    **Ordering:**

    None between files. Results arrive in completion order.

    **Failure:**

    Worker errors are delivered as ``FileResult.error``; the consumer decides
    what they mean. If the consumer raises, no further files are dispatched,
    in-flight workers are drained, and the exception propagates. If a worker
    cannot be started, dispatch ends and ``run()`` raises ``IngestError`` after
    the started files are delivered, so a partial ingest never looks complete.

    Example usage::

        controller = IngestController(files, handler, max_open_files=50)
        stats = controller.run(consumer)
    """

    _DONE = object()

    def __init__(self, files: Sequence[Path], handler: Callable[[Path], list],
                 max_open_files: int = 50, queue_size: int = 50):
        if max_open_files < 1:
            raise ValueError("max_open_files must be >= 1")
        self.files = [Path(f) for f in files]
        self.handler = handler
        self.max_open_files = max_open_files

        self.delivery_queue = queue.Queue(maxsize=queue_size)
        self._slots = threading.BoundedSemaphore(max_open_files)
        self._stop_event = threading.Event()
        self._dispatcher: Optional[threading.Thread] = None
        self._dispatched = 0
        self._dispatch_error: Optional[Exception] = None

    def stop(self):
        """Stop dispatching new files. Files already started still finish."""
        self._stop_event.set()

    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def _dispatch(self):
        workers = []
        try:
            for path in self.files:
                self._slots.acquire()
                if self.stopped():
                    self._slots.release()
                    break
                worker = FileWorker(path, self.handler, self.delivery_queue, self._slots)
                try:
                    worker.start()
                except Exception as e:
                    self._slots.release()
                    raise IngestError(path, f"could not start worker: {e}") from e
                workers.append(worker)
                self._dispatched += 1
        except Exception as e:
            # Raised again by run() once every started worker is done
            logger.error("Dispatch stopped after %d of %d files: %s",
                         self._dispatched, len(self.files), e)
            self._dispatch_error = e
        finally:
            for worker in workers:
                worker.join()
            self.delivery_queue.put(self._DONE)

    def _drain(self):
        """Discard results until the dispatcher signals completion."""
        while self.delivery_queue.get() is not self._DONE:
            pass

    def run(self, consumer: Callable[[FileResult], Any]) -> dict:
        """Process every file and hand each result to ``consumer``.

        Blocks until all dispatched files are done.

        Returns
        -------
        dict
            ``files``: files dispatched, ``failed``: results carrying an error

        Raises
        ------
        IngestError
            If a file could not be dispatched
        """
        logger.info("Ingesting %d files (max %d open)", len(self.files), self.max_open_files)

        self._dispatcher = threading.Thread(target=self._dispatch, name="IngestDispatcher", daemon=True)
        self._dispatcher.start()

        failed = 0
        try:
            while True:
                result = self.delivery_queue.get()
                if result is self._DONE:
                    break
                if not result.ok:
                    failed += 1
                consumer(result)
        except BaseException:
            self.stop()
            self._drain()
            raise
        finally:
            self._dispatcher.join()

        if self._dispatch_error is not None:
            raise self._dispatch_error

        return {"files": self._dispatched, "failed": failed}
