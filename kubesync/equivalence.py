"""Functions that decide whether two resources are equivalent for update suppression."""

from __future__ import annotations

from typing import Any

from kubesync.types import Resource


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (dict, list)) and not value)


def _semantic_equal(a: Any, b: Any) -> bool:
    """Deep equality that treats missing and empty containers alike."""
    if _is_empty(a) and _is_empty(b):
        return True
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(_semantic_equal(a[k], b[k]) for k in a)
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(_semantic_equal(x, y) for x, y in zip(a, b))
    return a == b


def _meta(resource: Resource, field: str) -> Any:
    return resource.get("metadata", {}).get(field)


def default_resources_equivalent(obj1: Resource, obj2: Resource) -> bool:
    """Equivalent when labels, annotations and spec all match."""
    return (
        _meta(obj1, "labels") == _meta(obj2, "labels")
        and _meta(obj1, "annotations") == _meta(obj2, "annotations")
        and are_specs_equivalent(obj1, obj2)
    )


def resources_not_equivalent(obj1: Resource, obj2: Resource) -> bool:
    """Never equivalent, so every update is processed."""
    return False


def are_specs_equivalent(obj1: Resource, obj2: Resource) -> bool:
    """Equivalent when the spec sections are semantically equal."""
    return _semantic_equal(obj1.get("spec"), obj2.get("spec"))