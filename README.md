# kubesync

Building blocks for synchronizing resources between stores: an
in-memory resource store that emits change events, a de-duplicating
work queue with retries, a federator that writes resources into a
target store, equivalence checks for suppressing uninteresting updates,
and broker connection settings read from the environment.

Resources are plain dictionaries shaped like Kubernetes objects
(`metadata`, `spec`, `status`, ...).

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `kubesync.types` — `SyncDirection` (`NONE`, `LOCAL_TO_REMOTE`,
  `REMOTE_TO_LOCAL`; `str()` gives `none`, `localToRemote`,
  `remoteToLocal`), `Operation` (`CREATE`, `UPDATE`, `DELETE`), the
  `Federator` protocol (`distribute`, `delete`), `NotFoundError`,
  `MissingNamespaceError`, and the label helpers `get_labels`,
  `get_cluster_id_label` and `set_cluster_id_label` (an empty cluster ID
  removes the label).
- `kubesync.equivalence` — `default_resources_equivalent` (labels,
  annotations and spec all match), `are_specs_equivalent` (specs equal,
  treating missing and empty containers alike) and
  `resources_not_equivalent` (always `False`).
- `kubesync.operation_queue` — `CreateOperation`, `DeleteOperation` and
  `OperationQueueMap`, a thread-safe map from key to a FIFO of pending
  operations (`add`, `peek`, `remove`; `remove` drops the head only if it
  is the given operation and reports whether more remain).
- `kubesync.store` — `ResourceStore`, a thread-safe keyed store with
  `create`, `update`, `delete`, `get_by_key`, `list` and `list_keys`.
  Handlers registered with `add_handler` receive add, update and delete
  events (existing resources are replayed as adds); `remove_handler`
  unregisters them. Given a `namespace_store`, namespaced resources can
  only be created when their namespace exists there, otherwise
  `MissingNamespaceError` is raised. Also `meta_namespace_key`,
  `split_meta_namespace_key` and `matches_selector`.
- `kubesync.workqueue` — `WorkQueue`: `enqueue` takes a key or a
  resource, `run(stop_event, process)` starts a worker thread calling
  `process(key, name, namespace)`, and `shutdown` drains and joins it.
  A key already pending is not queued twice. If `process` returns `True`
  or raises, the key is retried after an exponentially growing delay;
  `num_requeues` counts the retries since the key last succeeded.
- `kubesync.federator` — `CreateOrUpdateFederator` and `new_federator`.
  `distribute` creates the resource in the target store or updates it
  when it differs, placing it in the target namespace and labelling it
  with the local cluster ID; server-managed metadata is stripped unless
  named as a field to keep. `delete` raises `NotFoundError` if the
  resource is absent.
- `kubesync.broker_config` — `BrokerSpecification`,
  `get_broker_specification`, `environment_variable` and `secret_path`.

## Example: feeding one store into another

```python
import threading

from kubesync.federator import new_federator
from kubesync.store import ResourceStore
from kubesync.workqueue import WorkQueue

source = ResourceStore()
target = ResourceStore()
federator = new_federator(target, "remote-ns", "east")
queue = WorkQueue("local -> remote")

source.add_handler(
    on_add=queue.enqueue,
    on_update=lambda old, new: queue.enqueue(new),
)


def process(key, name, namespace):
    resource = source.get_by_key(key)
    if resource is not None:
        federator.distribute(resource)
    return False  # True asks for a retry


stop = threading.Event()
queue.run(stop, process)

source.create({
    "kind": "Pod",
    "metadata": {"name": "test-pod", "namespace": "local-ns"},
    "spec": {"containers": [{"name": "httpd", "image": "nginx"}]},
})

queue.shutdown()
target.get_by_key("remote-ns/test-pod")
```

The copy in `target` is in `remote-ns` and carries the label
`submariner-io/clusterID: east`.

## Broker settings

```python
from kubesync.broker_config import environment_variable, get_broker_specification, secret_path

environment_variable("Insecure")   # "BROKER_K8S_INSECURE"
environment_variable("bogus")      # raises ValueError

spec = get_broker_specification({
    "BROKER_K8S_APISERVER": "broker-host",
    "BROKER_K8S_REMOTENAMESPACE": "remote-ns",
    "BROKER_K8S_INSECURE": "true",
})
spec.insecure                      # True

secret_path("broker-secret")       # "/run/secrets/submariner.io/broker-secret"
```

`get_broker_specification()` with no argument reads `os.environ`; an
unparsable boolean raises `ValueError`.

## What this package does not do

There is no ready-made syncer that watches a store and drives a
federator on its own, applying transforms, tracking missing namespaces
and reconciling stale copies, nor a two-way broker syncer built on one;
the pieces above have to be wired together as in the example. Stores
live in memory only: nothing here talks to an API server, and the broker
settings are parsed but not used to open a connection. There is no
command-line program.