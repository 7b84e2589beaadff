"""A de-duplicating work queue with rate-limited retries processed on a worker thread."""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable
from typing import Any

from kubesync.store import meta_namespace_key, split_meta_namespace_key

ProcessFunc = Callable[[str, str, str], bool]

_logger = logging.getLogger(__name__)


class WorkQueue:
    """Queue of resource keys handed one at a time to a processing function.

    A key enqueued while already pending is not added twice; a key enqueued while
    being processed is processed again afterwards. When the processing function
    returns True or raises, the key is retried after an exponentially growing delay.
    """

    def __init__(
        self,
        name: str = "",
        *,
        error_handler: Callable[[Exception], None] | None = None,
        base_delay: float = 0.005,
        max_delay: float = 1.0,
        poll_interval: float = 0.05,
    ) -> None:
        self.name = name
        self._error_handler = error_handler or self._log_error
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._poll_interval = poll_interval
        self._cond = threading.Condition()
        self._queue: deque[str] = deque()
        self._dirty: set[str] = set()
        self._processing: set[str] = set()
        self._failures: dict[str, int] = {}
        self._timers: set[threading.Timer] = set()
        self._shutting_down = False
        self._worker: threading.Thread | None = None

    def enqueue(self, key: Any) -> None:
        """Add a key, or the key of a resource given in its place, to the queue."""
        self._add(key if isinstance(key, str) else meta_namespace_key(key))

    def num_requeues(self, key: str) -> int:
        """How many times key has been retried since it last succeeded."""
        with self._cond:
            return self._failures.get(key, 0)

    def run(self, stop_event: threading.Event, process: ProcessFunc) -> None:
        """Start a worker thread that calls process(key, name, namespace) until stopped."""
        with self._cond:
            if self._worker is not None:
                raise RuntimeError(f"work queue {self.name!r} is already running")
            self._worker = threading.Thread(
                target=self._work,
                args=(stop_event, process),
                name=f"workqueue-{self.name}",
                daemon=True,
            )
        self._worker.start()

    def shutdown(self) -> None:
        """Stop accepting work, let queued and in-flight items finish, and join the worker."""
        with self._cond:
            self._shutting_down = True
            for timer in self._timers:
                timer.cancel()
            self._timers.clear()
            self._cond.notify_all()
            worker = self._worker
        if worker is not None and worker is not threading.current_thread():
            worker.join()

    def _add(self, key: str) -> None:
        with self._cond:
            if self._shutting_down or key in self._dirty:
                return
            self._dirty.add(key)
            if key in self._processing:
                return
            self._queue.append(key)
            self._cond.notify()

    def _requeue(self, key: str) -> None:
        with self._cond:
            if self._shutting_down:
                return
            count = self._failures.get(key, 0)
            self._failures[key] = count + 1
            delay = min(self._base_delay * 2 ** min(count, 32), self._max_delay)

            def fire() -> None:
                with self._cond:
                    self._timers.discard(timer)
                self._add(key)

            timer = threading.Timer(delay, fire)
            timer.daemon = True
            self._timers.add(timer)
            timer.start()

    def _forget(self, key: str) -> None:
        with self._cond:
            self._failures.pop(key, None)

    def _get(self, stop_event: threading.Event) -> str | None:
        with self._cond:
            while True:
                if stop_event.is_set():
                    return None
                if self._queue:
                    break
                if self._shutting_down:
                    return None
                self._cond.wait(self._poll_interval)
            key = self._queue.popleft()
            self._dirty.discard(key)
            self._processing.add(key)
            return key

    def _done(self, key: str) -> None:
        with self._cond:
            self._processing.discard(key)
            if key in self._dirty:
                self._queue.append(key)
                self._cond.notify()

    def _work(self, stop_event: threading.Event, process: ProcessFunc) -> None:
        while (key := self._get(stop_event)) is not None:
            try:
                self._process_one(key, process)
            finally:
                self._done(key)

    def _process_one(self, key: str, process: ProcessFunc) -> None:
        try:
            namespace, name = split_meta_namespace_key(key)
        except ValueError as exc:
            self._error_handler(exc)
            self._forget(key)
            return

        try:
            requeue = process(key, name, namespace)
        except Exception as exc:  # errors are reported and the key retried
            self._error_handler(exc)
            requeue = True

        if requeue:
            self._requeue(key)
        else:
            self._forget(key)

    def _log_error(self, exc: Exception) -> None:
        _logger.error("Work queue %r: error processing item: %s", self.name, exc)