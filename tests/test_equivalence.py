import copy

from kubesync.equivalence import (
    are_specs_equivalent,
    default_resources_equivalent,
    resources_not_equivalent,
)


def _pod(image="nginx"):
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {
            "name": "test-pod",
            "namespace": "local-ns",
            "labels": {"app": "test"},
            "annotations": {"foo": "bar"},
        },
        "spec": {"containers": [{"image": image, "name": "httpd"}]},
    }


def test_identical_resources_equivalent():
    assert default_resources_equivalent(_pod(), _pod())


def test_status_change_is_equivalent():
    new = _pod()
    new["status"] = {"phase": "Running"}
    assert default_resources_equivalent(_pod(), new)


def test_metadata_other_fields_ignored():
    new = _pod()
    new["metadata"]["deletionTimestamp"] = "2024-01-01T00:00:00Z"
    assert default_resources_equivalent(_pod(), new)


def test_label_change_not_equivalent():
    new = _pod()
    new["metadata"]["labels"] = {"new-label": "value"}
    assert not default_resources_equivalent(_pod(), new)


def test_annotation_change_not_equivalent():
    new = _pod()
    new["metadata"]["annotations"] = {"new-annotations": "value"}
    assert not default_resources_equivalent(_pod(), new)


def test_spec_change_detected():
    new = _pod()
    new["spec"]["hostname"] = "newHost"
    assert not are_specs_equivalent(_pod(), new)
    assert not default_resources_equivalent(_pod(), new)


def test_spec_equivalence_ignores_status():
    new = copy.deepcopy(_pod())
    new["status"] = {"phase": "Running"}
    assert are_specs_equivalent(_pod(), new)


def test_missing_and_empty_spec_equivalent():
    a = _pod()
    b = _pod()
    del a["spec"]
    b["spec"] = {}
    assert are_specs_equivalent(a, b)


def test_image_change_not_equivalent():
    assert not are_specs_equivalent(_pod("nginx"), _pod("apache"))


def test_not_equivalent_always_false():
    pod = _pod()
    assert resources_not_equivalent(pod, pod) is False