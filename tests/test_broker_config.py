import pytest

from kubesync.broker_config import (
    BrokerSpecification,
    environment_variable,
    get_broker_specification,
    secret_path,
)


def test_environment_variable_valid_setting():
    assert environment_variable("Insecure") == "BROKER_K8S_INSECURE"


def test_environment_variable_invalid_setting():
    with pytest.raises(ValueError, match="unknown Broker setting"):
        environment_variable("impossible setting")


@pytest.mark.parametrize("setting", ["apiserver", "APISERVER", "ApiServer"])
def test_environment_variable_ignores_case(setting):
    assert environment_variable(setting) == "BROKER_K8S_APISERVER"


def test_secret_path():
    assert secret_path("secret") == "/run/secrets/submariner.io/secret"


def test_specification_from_environment():
    environ = {
        "BROKER_K8S_APISERVER": "broker-host",
        "BROKER_K8S_APISERVERTOKEN": "token",
        "BROKER_K8S_REMOTENAMESPACE": "remote-ns",
        "BROKER_K8S_INSECURE": "true",
    }
    spec = get_broker_specification(environ)
    assert spec == BrokerSpecification(
        api_server="broker-host",
        api_server_token="token",
        remote_namespace="remote-ns",
        insecure=True,
    )


def test_specification_with_secret():
    environ = {
        "BROKER_K8S_APISERVER": "broker-host",
        "BROKER_K8S_SECRET": "secret",
        "BROKER_K8S_CA": "ca-data",
    }
    spec = get_broker_specification(environ)
    assert spec.secret == "secret"
    assert spec.ca == "ca-data"
    assert spec.api_server_token == ""


def test_specification_defaults():
    spec = get_broker_specification({})
    assert spec == BrokerSpecification()
    assert spec.insecure is False


def test_invalid_insecure_value():
    with pytest.raises(ValueError, match="error processing env configuration"):
        get_broker_specification({"BROKER_K8S_INSECURE": "maybe"})


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("BROKER_K8S_REMOTENAMESPACE", "remote-ns")
    monkeypatch.setenv("BROKER_K8S_INSECURE", "false")
    spec = get_broker_specification()
    assert spec.remote_namespace == "remote-ns"
    assert spec.insecure is False