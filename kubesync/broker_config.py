"""Broker connection settings read from the environment, for syncing with a central broker."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

BROKER_CONFIG_PREFIX = "broker_k8s"

# Setting names as known to the environment configuration (matched case-insensitively).
_SETTINGS = ("APIServer", "APIServerToken", "RemoteNamespace", "Insecure", "Ca", "Secret")

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


@dataclass
class BrokerSpecification:
    """How to reach and authenticate to the broker API server."""

    api_server: str = ""
    api_server_token: str = ""
    remote_namespace: str = ""
    insecure: bool = False
    ca: str = ""
    secret: str = ""


def _parse_bool(name: str, value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"error processing env configuration: {name}: invalid boolean {value!r}")


def get_broker_specification(environ: Mapping[str, str] | None = None) -> BrokerSpecification:
    """Build a BrokerSpecification from BROKER_K8S_* variables; raises ValueError on bad values."""
    env = os.environ if environ is None else environ

    def lookup(setting: str) -> str | None:
        return env.get(environment_variable(setting))

    insecure_name = environment_variable("Insecure")
    insecure_raw = env.get(insecure_name)
    insecure = _parse_bool(insecure_name, insecure_raw) if insecure_raw is not None else False

    return BrokerSpecification(
        api_server=lookup("APIServer") or "",
        api_server_token=lookup("APIServerToken") or "",
        remote_namespace=lookup("RemoteNamespace") or "",
        insecure=insecure,
        ca=lookup("Ca") or "",
        secret=lookup("Secret") or "",
    )


def environment_variable(setting: str) -> str:
    """Return the environment variable name for a known broker setting (case-insensitive)."""
    if any(name.lower() == setting.lower() for name in _SETTINGS):
        return f"{BROKER_CONFIG_PREFIX}_{setting}".upper()
    raise ValueError(f"unknown Broker setting {setting}")


def secret_path(secret_name: str) -> str:
    """Return the directory where the named secret is mounted."""
    return f"/run/secrets/submariner.io/{secret_name}"