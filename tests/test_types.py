import pytest

from kubesync.types import (
    CLUSTER_ID_LABEL_KEY,
    Federator,
    MissingNamespaceError,
    NotFoundError,
    Operation,
    SyncDirection,
    get_cluster_id_label,
    get_labels,
    set_cluster_id_label,
)


def _pod(labels=None):
    meta = {"name": "test-pod", "namespace": "local-ns"}
    if labels is not None:
        meta["labels"] = labels
    return {"apiVersion": "v1", "kind": "Pod", "metadata": meta}


@pytest.mark.parametrize(
    "direction, text",
    [
        (SyncDirection.NONE, "none"),
        (SyncDirection.LOCAL_TO_REMOTE, "localToRemote"),
        (SyncDirection.REMOTE_TO_LOCAL, "remoteToLocal"),
    ],
)
def test_direction_str(direction, text):
    assert str(direction) == text


@pytest.mark.parametrize(
    "op, text",
    [(Operation.CREATE, "create"), (Operation.UPDATE, "update"), (Operation.DELETE, "delete")],
)
def test_operation_str(op, text):
    assert str(op) == text


def test_get_labels_missing_is_empty():
    assert get_labels(_pod()) == {}


def test_get_labels_returns_copy():
    pod = _pod({"app": "test"})
    labels = get_labels(pod)
    labels["extra"] = "x"
    assert pod["metadata"]["labels"] == {"app": "test"}


def test_cluster_id_round_trip():
    pod = set_cluster_id_label(_pod({"app": "test"}), "remote")
    assert get_cluster_id_label(pod) == "remote"
    assert get_labels(pod)["app"] == "test"


def test_cluster_id_absent():
    assert get_cluster_id_label(_pod({"app": "test"})) is None


def test_set_empty_cluster_id_removes_label():
    pod = _pod({CLUSTER_ID_LABEL_KEY: "east", "app": "test"})
    result = set_cluster_id_label(pod, "")
    assert result is pod
    assert CLUSTER_ID_LABEL_KEY not in get_labels(pod)
    assert get_cluster_id_label(pod) is None


def test_set_cluster_id_on_resource_without_metadata():
    res = set_cluster_id_label({}, "local")
    assert get_cluster_id_label(res) == "local"


def test_federator_protocol():
    class Good:
        def __init__(self):
            self.seen = []

        def distribute(self, resource):
            self.seen.append(get_cluster_id_label(resource))

        def delete(self, resource):
            self.seen.remove(get_cluster_id_label(resource))

    class Bad:
        def distribute(self, resource):
            return None

    good = Good()
    assert isinstance(good, Federator)
    assert not isinstance(Bad(), Federator)

    pod = set_cluster_id_label(_pod({"app": "test"}), "east")
    good.distribute(pod)
    assert good.seen == ["east"]
    good.delete(pod)
    assert good.seen == []


def test_errors_carry_details():
    with pytest.raises(MissingNamespaceError) as info:
        raise MissingNamespaceError("other-ns")
    assert info.value.namespace == "other-ns"
    assert "other-ns" in str(info.value)

    err = NotFoundError("test-pod")
    assert err.name == "test-pod"
    assert isinstance(err, LookupError)