"""In-memory resource store that notifies registered handlers of changes."""

from __future__ import annotations

import copy
import itertools
import threading
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from kubesync.types import MissingNamespaceError, NotFoundError, Resource

AddHandler = Callable[[Resource], None]
UpdateHandler = Callable[[Resource, Resource], None]
DeleteHandler = Callable[[Resource], None]


def meta_namespace_key(resource: Resource) -> str:
    """Return "namespace/name" for namespaced resources, or just "name" otherwise."""
    metadata = resource.get("metadata") or {}
    name = metadata.get("name") or ""
    namespace = metadata.get("namespace") or ""
    return f"{namespace}/{name}" if namespace else name


def split_meta_namespace_key(key: str) -> tuple[str, str]:
    """Split a key into (namespace, name); raises ValueError on a malformed key."""
    parts = key.split("/")
    if len(parts) == 1:
        return "", parts[0]
    if len(parts) == 2:
        return parts[0], parts[1]
    raise ValueError(f"unexpected key format: {key!r}")


def matches_selector(labels: Mapping[str, str] | None, selector: Mapping[str, str] | None) -> bool:
    """True if every label in the selector is present with the same value; empty selects all."""
    if not selector:
        return True
    labels = labels or {}
    return all(key in labels and labels[key] == value for key, value in selector.items())


@dataclass(frozen=True)
class _Handlers:
    on_add: Optional[AddHandler]
    on_update: Optional[UpdateHandler]
    on_delete: Optional[DeleteHandler]


class ResourceStore:
    """Thread-safe keyed store of resources that emits add, update and delete events.

    If a namespace store is given, namespaced resources can only be created when
    their namespace exists in it.
    """

    def __init__(self, namespace_store: Any = None) -> None:
        self._lock = threading.RLock()
        self._items: dict[str, Resource] = {}
        self._handlers: dict[int, _Handlers] = {}
        self._handles = itertools.count(1)
        self._version = 0
        self._namespace_store = namespace_store

    def add_handler(
        self,
        on_add: AddHandler | None = None,
        on_update: UpdateHandler | None = None,
        on_delete: DeleteHandler | None = None,
    ) -> int:
        """Register event callbacks; existing resources are replayed as adds. Returns a handle."""
        with self._lock:
            handle = next(self._handles)
            self._handlers[handle] = _Handlers(on_add, on_update, on_delete)
            if on_add is not None:
                for resource in list(self._items.values()):
                    on_add(copy.deepcopy(resource))
            return handle

    def remove_handler(self, handle: int) -> None:
        """Stop delivering events to the handlers registered under handle."""
        with self._lock:
            self._handlers.pop(handle, None)

    def create(self, resource: Resource) -> Resource:
        """Store a new resource and return the stored copy."""
        stored = copy.deepcopy(resource)
        metadata = stored.setdefault("metadata", {})
        if not metadata.get("name"):
            raise ValueError("resource name may not be empty")
        namespace = metadata.get("namespace") or ""
        with self._lock:
            if (
                namespace
                and self._namespace_store is not None
                and self._namespace_store.get_by_key(namespace) is None
            ):
                raise MissingNamespaceError(namespace)
            key = meta_namespace_key(stored)
            if key in self._items:
                raise ValueError(f"resource {key!r} already exists")
            metadata.setdefault("uid", str(uuid.uuid4()))
            self._stamp(stored)
            self._items[key] = stored
            for handlers in list(self._handlers.values()):
                if handlers.on_add is not None:
                    handlers.on_add(copy.deepcopy(stored))
            return copy.deepcopy(stored)

    def update(self, resource: Resource) -> Resource:
        """Replace an existing resource and return the stored copy."""
        stored = copy.deepcopy(resource)
        metadata = stored.setdefault("metadata", {})
        key = meta_namespace_key(stored)
        with self._lock:
            old = self._items.get(key)
            if old is None:
                raise NotFoundError(key)
            old_uid = old.get("metadata", {}).get("uid")
            if old_uid is not None:
                metadata["uid"] = old_uid
            self._stamp(stored)
            self._items[key] = stored
            for handlers in list(self._handlers.values()):
                if handlers.on_update is not None:
                    handlers.on_update(copy.deepcopy(old), copy.deepcopy(stored))
            return copy.deepcopy(stored)

    def delete(self, name: str, namespace: str = "") -> None:
        """Remove a resource; raises NotFoundError if it does not exist."""
        key = f"{namespace}/{name}" if namespace else name
        with self._lock:
            old = self._items.pop(key, None)
            if old is None:
                raise NotFoundError(key)
            for handlers in list(self._handlers.values()):
                if handlers.on_delete is not None:
                    handlers.on_delete(copy.deepcopy(old))

    def get_by_key(self, key: str) -> Resource | None:
        """Return a copy of the resource stored under key, or None."""
        with self._lock:
            resource = self._items.get(key)
            return copy.deepcopy(resource) if resource is not None else None

    def list(self) -> list[Resource]:
        """Return copies of all stored resources."""
        with self._lock:
            return [copy.deepcopy(resource) for resource in self._items.values()]

    def list_keys(self) -> list[str]:
        """Return the keys of all stored resources."""
        with self._lock:
            return list(self._items)

    def _stamp(self, resource: Resource) -> None:
        self._version += 1
        resource["metadata"]["resourceVersion"] = str(self._version)