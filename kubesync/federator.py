"""Federator that creates or updates resources in a target store."""

from __future__ import annotations

import copy
from collections.abc import Iterable

from kubesync.store import ResourceStore, meta_namespace_key
from kubesync.types import NotFoundError, Resource, set_cluster_id_label

# Server-managed metadata that is not carried over to the target unless asked for.
_SERVER_METADATA = (
    "resourceVersion",
    "uid",
    "creationTimestamp",
    "generation",
    "managedFields",
    "selfLink",
    "ownerReferences",
    "finalizers",
    "deletionTimestamp",
    "deletionGracePeriodSeconds",
)


class CreateOrUpdateFederator:
    """Distributes resources to a store, creating them or updating them when they differ.

    Resources are placed in target_namespace when it is set, and labelled with the
    local cluster ID when one is given.
    """

    def __init__(
        self,
        client: ResourceStore,
        target_namespace: str = "",
        local_cluster_id: str = "",
        keep_metadata_fields: Iterable[str] = (),
    ) -> None:
        self.client = client
        self.target_namespace = target_namespace
        self.local_cluster_id = local_cluster_id
        keep = set(keep_metadata_fields)
        self._stripped = tuple(field for field in _SERVER_METADATA if field not in keep)

    def distribute(self, resource: Resource) -> None:
        """Create the resource in the target, or update it if it differs."""
        prepared = self._prepare(resource)
        key = meta_namespace_key(prepared)

        existing = self.client.get_by_key(key)
        if existing is None:
            try:
                self.client.create(prepared)
                return
            except ValueError:
                existing = self.client.get_by_key(key)
                if existing is None:
                    raise

        if self._strip(existing) == prepared:
            return

        updated = copy.deepcopy(prepared)
        existing_meta = existing.get("metadata", {})
        for field in self._stripped:
            if field in existing_meta:
                updated["metadata"][field] = existing_meta[field]
        try:
            self.client.update(updated)
        except NotFoundError:
            self.client.create(prepared)

    def delete(self, resource: Resource) -> None:
        """Remove the resource from the target; raises NotFoundError if absent."""
        metadata = resource.get("metadata") or {}
        namespace = self.target_namespace or metadata.get("namespace") or ""
        self.client.delete(metadata.get("name") or "", namespace)

    def _prepare(self, resource: Resource) -> Resource:
        prepared = self._strip(resource)
        metadata = prepared.setdefault("metadata", {})
        if self.target_namespace:
            metadata["namespace"] = self.target_namespace
        if self.local_cluster_id:
            set_cluster_id_label(prepared, self.local_cluster_id)
        return prepared

    def _strip(self, resource: Resource) -> Resource:
        stripped = copy.deepcopy(resource)
        metadata = stripped.setdefault("metadata", {})
        for field in self._stripped:
            metadata.pop(field, None)
        return stripped


def new_federator(
    client: ResourceStore,
    target_namespace: str,
    local_cluster_id: str,
    *args: str,
) -> CreateOrUpdateFederator:
    """Create a CreateOrUpdateFederator; extra arguments name metadata fields to keep."""
    return CreateOrUpdateFederator(client, target_namespace, local_cluster_id, args)