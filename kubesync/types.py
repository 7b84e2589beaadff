"""Core types shared by the resource syncers: directions, operations and label helpers."""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, runtime_checkable

Resource = dict[str, Any]

CLUSTER_ID_LABEL_KEY = "submariner-io/clusterID"
ORIG_NAMESPACE_LABEL_KEY = "submariner-io/originatingNamespace"

DIRECTION_LABEL = "direction"
OPERATION_LABEL = "operation"
SYNCER_NAME_LABEL = "syncer_name"


class SyncDirection(Enum):
    """How resources flow between a local and a remote source."""

    NONE = 0
    # Resources are synced from a local source to a remote source.
    LOCAL_TO_REMOTE = 1
    # Resources are synced from a remote source to a local source.
    REMOTE_TO_LOCAL = 2

    def __str__(self) -> str:
        return _DIRECTION_NAMES[self]


_DIRECTION_NAMES = {
    SyncDirection.NONE: "none",
    SyncDirection.LOCAL_TO_REMOTE: "localToRemote",
    SyncDirection.REMOTE_TO_LOCAL: "remoteToLocal",
}


class Operation(Enum):
    """The kind of change being synced."""

    CREATE = 0
    UPDATE = 1
    DELETE = 2

    def __str__(self) -> str:
        return self.name.lower()


@runtime_checkable
class Federator(Protocol):
    """Something that pushes resources to, or removes them from, a target store."""

    def distribute(self, resource: Resource) -> None:
        """Create or update the resource in the target."""
        ...

    def delete(self, resource: Resource) -> None:
        """Remove the resource from the target; raise NotFoundError if absent."""
        ...


class NotFoundError(LookupError):
    """Raised when a resource does not exist."""

    def __init__(self, name: str = "", message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"resource {name!r} not found")


class MissingNamespaceError(Exception):
    """Raised when a resource cannot be stored because its namespace is missing."""

    def __init__(self, namespace: str, message: str | None = None) -> None:
        self.namespace = namespace
        super().__init__(message or f"namespace {namespace!r} not found")


def get_labels(resource: Resource) -> dict[str, str]:
    """Return a copy of the resource's labels (empty if it has none)."""
    labels = resource.get("metadata", {}).get("labels") or {}
    return dict(labels)


def get_cluster_id_label(resource: Resource) -> str | None:
    """Return the cluster ID label value, or None if the label is absent."""
    return get_labels(resource).get(CLUSTER_ID_LABEL_KEY)


def set_cluster_id_label(resource: Resource, cluster_id: str) -> Resource:
    """Set the cluster ID label, or remove it when cluster_id is empty; returns the resource."""
    metadata = resource.setdefault("metadata", {})
    labels = dict(metadata.get("labels") or {})
    if cluster_id:
        labels[CLUSTER_ID_LABEL_KEY] = cluster_id
    else:
        labels.pop(CLUSTER_ID_LABEL_KEY, None)
    metadata["labels"] = labels
    return resource