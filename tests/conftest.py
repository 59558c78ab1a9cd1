"""Shared fixtures for kafkactl tests."""

import pytest

from kafkactl.shared import debug

from helpers import RecordingExecutor

POD_ENV_KEYS = (
    "BROKERS",
    "TLS_ENABLED",
    "TLS_CA",
    "TLS_CERT",
    "TLS_CERTKEY",
    "TLS_INSECURE",
    "SASL_ENABLED",
    "SASL_USERNAME",
    "SASL_PASSWORD",
    "SASL_MECHANISM",
    "REQUESTTIMEOUT",
    "CLIENTID",
    "KAFKAVERSION",
    "AVRO_SCHEMAREGISTRY",
    "DEFAULTPARTITIONER",
    "KAFKA_CTL_CONFIG",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep the developer's environment out of context resolution."""
    for key in POD_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    yield
    debug.disable()


@pytest.fixture
def recording_executor():
    return RecordingExecutor()
