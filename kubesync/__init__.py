"""Building blocks for synchronizing resources between in-memory stores."""

__version__ = "0.1.0"

__all__ = [
    "broker_config",
    "equivalence",
    "federator",
    "operation_queue",
    "store",
    "types",
    "workqueue",
]