"""A fixed-size worker thread pool with a bounded, non-blocking job queue."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, Deque, List, Optional

__all__ = ["Job", "Pool"]

Job = Callable[[], object]

_log = logging.getLogger(__name__)


class Pool:
    """Runs submitted jobs on a fixed number of worker threads.

    ``submit`` never blocks: a job is accepted only when the buffer has room
    or an idle worker is ready to take it. Exceptions raised by jobs are
    swallowed so a failing job never brings a worker down. After ``stop``
    queued jobs that no worker has picked up are dropped.
    """

    def __init__(self, workers: int, buffer_size: int) -> None:
        if buffer_size < 0:
            raise ValueError("buffer_size must not be negative")
        self._workers = workers
        self._buffer_size = buffer_size
        self._pending: Deque[Job] = deque()
        self._idle = 0
        self._stopped = False
        self._cond = threading.Condition()
        self._threads: List[threading.Thread] = []

    def __enter__(self) -> "Pool":
        self.start_workers()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def start_workers(self) -> None:
        """Start the configured number of worker threads."""
        for _ in range(self._workers):
            thread = threading.Thread(target=self._work, daemon=True)
            self._threads.append(thread)
            thread.start()

    def submit(self, job: Job) -> bool:
        """Queue a job; return False if the pool is stopped or full."""
        with self._cond:
            if self._stopped:
                return False
            queued = len(self._pending)
            if queued >= self._buffer_size and queued >= self._idle:
                return False
            self._pending.append(job)
            self._cond.notify()
            return True

    def stop(self) -> None:
        """Stop accepting jobs and wait for running jobs to finish."""
        with self._cond:
            self._stopped = True
            self._cond.notify_all()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()

    def _next_job(self) -> Optional[Job]:
        with self._cond:
            while not self._pending and not self._stopped:
                self._idle += 1
                try:
                    self._cond.wait()
                finally:
                    self._idle -= 1
            if self._stopped:
                return None
            return self._pending.popleft()

    def _work(self) -> None:
        while (job := self._next_job()) is not None:
            try:
                job()
            except Exception:
                _log.debug("pool job raised", exc_info=True)