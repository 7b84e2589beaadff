"""Per-key FIFO queues of pending create/delete operations."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Union

from kubesync.types import Resource


@dataclass(eq=False)
class CreateOperation:
    """A pending create of the given resource."""

    resource: Resource


@dataclass(eq=False)
class DeleteOperation:
    """A pending delete of the given resource."""

    resource: Resource


PendingOperation = Union[CreateOperation, DeleteOperation]


class OperationQueueMap:
    """Thread-safe map from resource key to a queue of pending operations."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._queues: dict[str, deque[Any]] = {}

    def peek(self, key: str) -> Any:
        """Return the oldest pending operation for key, or None."""
        with self._lock:
            queue = self._queues.get(key)
            return queue[0] if queue else None

    def remove(self, key: str, op: Any) -> bool:
        """Drop op if it is at the head of key's queue; return whether more remain."""
        with self._lock:
            queue = self._queues.get(key)
            if not queue:
                return False
            if op is not None and op is queue[0]:
                queue.popleft()
            if not queue:
                del self._queues[key]
                return False
            return True

    def add(self, key: str, op: Any) -> None:
        """Append op to key's queue."""
        with self._lock:
            self._queues.setdefault(key, deque()).append(op)