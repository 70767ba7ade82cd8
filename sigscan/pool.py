"""Workers signalled through auto-reset events, run by a pool of threads."""

from __future__ import annotations

import queue
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence

from .errors import ERROR_CONTINUE, ERROR_INVALID_PARAMETER, PoolError, ScanError

# One condition shared by every worker event, so that a waiter can watch
# several events at once.
_signals = threading.Condition()

_EXIT = object()


class Worker(ABC):
    """A unit of work run by a :class:`WorkerPool`.

    Each worker owns an auto-reset event that is signalled whenever a run
    finishes, whether it succeeded or failed. A wait that sees the signal
    consumes it.
    """

    def __init__(self) -> None:
        self.error_code = 0
        self._signalled = False

    @abstractmethod
    def run(self) -> None:
        """Do one piece of work; called on a pool thread."""

    def set_error(self, code: int) -> Worker:
        """Record an error code; a non-zero code marks the worker as failed."""
        self.error_code = code
        return self

    def is_worked(self) -> bool:
        """Whether the worker has not failed."""
        return self.error_code == 0

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for this worker's signal and consume it; False on timeout."""
        with _signals:
            if not _signals.wait_for(lambda: self._signalled, timeout):
                return False
            self._signalled = False
            return True

    def _signal(self) -> None:
        with _signals:
            self._signalled = True
            _signals.notify_all()

    def _execute(self) -> None:
        try:
            self.run()
        except ScanError as exc:
            self.set_error(exc.code or ERROR_CONTINUE)
            raise
        except Exception:
            self.set_error(ERROR_CONTINUE)
            raise
        finally:
            self._signal()


def _check_workers(workers: Sequence[Worker]) -> list[Worker]:
    items = list(workers)
    if not items:
        raise PoolError("Error waiting for workers", ERROR_INVALID_PARAMETER)
    return items


def wait_any(workers: Sequence[Worker], timeout: float | None = None) -> int | None:
    """Index of the first signalled worker, consuming its signal; None on timeout."""
    items = _check_workers(workers)
    with _signals:
        if not _signals.wait_for(lambda: any(w._signalled for w in items), timeout):
            return None
        for index, worker in enumerate(items):
            if worker._signalled:
                worker._signalled = False
                return index
    return None


def wait_all(workers: Sequence[Worker], timeout: float | None = None) -> bool:
    """Wait until every worker is signalled, consuming all signals; False on timeout."""
    items = _check_workers(workers)
    with _signals:
        if not _signals.wait_for(lambda: all(w._signalled for w in items), timeout):
            return False
        for worker in items:
            worker._signalled = False
        return True


class WorkerPool:
    """A queue of workers served by a fixed number of threads.

    A worker whose run raises ends the thread that ran it.
    """

    def __init__(self, threads: int) -> None:
        if threads < 0:
            raise PoolError("WorkerPool", ERROR_INVALID_PARAMETER)
        self.threads = threads
        self._queue: queue.Queue[object] = queue.Queue()
        self._threads: list[threading.Thread] = []
        self._closed = False

    def start(self) -> WorkerPool:
        """Start the pool threads."""
        if self._closed:
            raise PoolError("WorkerPool is closed", ERROR_INVALID_PARAMETER)
        for _ in range(self.threads):
            thread = threading.Thread(target=self._receive, daemon=True)
            thread.start()
            self._threads.append(thread)
        return self

    def add(self, worker: Worker) -> WorkerPool:
        """Queue a worker to be run once."""
        if not isinstance(worker, Worker):
            raise PoolError("CheckKey", ERROR_INVALID_PARAMETER)
        if self._closed:
            raise PoolError("WorkerPool is closed", ERROR_INVALID_PARAMETER)
        self._queue.put(worker)
        return self

    def close(self) -> None:
        """Stop every thread after the work queued before it, and wait for them."""
        if self._closed:
            return
        self._closed = True
        for _ in self._threads:
            self._queue.put(_EXIT)
        for thread in self._threads:
            thread.join()
        self._threads.clear()

    def _receive(self) -> None:
        while True:
            item = self._queue.get()
            if item is _EXIT:
                return
            try:
                item._execute()  # type: ignore[attr-defined]
            except Exception:
                return

    def __enter__(self) -> WorkerPool:
        if not self._threads:
            self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()