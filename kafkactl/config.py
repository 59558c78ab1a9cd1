"""Configuration file handling and context resolution."""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from kafkactl.k8s.context import (
    ClientContext,
    Duration,
    K8sConfig,
    KafkaVersion,
    SaslConfig,
    TLSConfig,
)
from kafkactl.k8s.errors import ContextResolutionError

CONFIG_FILE_ENV = "KAFKA_CTL_CONFIG"
CONFIG_FILE_NAME = "config.yml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "contexts": {"default": {"brokers": ["localhost:9092"]}},
    "current-context": "default",
}

# Environment variables a pod receives; they override the selected context.
_BOOL_OVERRIDES = (
    ("TLS_ENABLED", "tls", "enabled"),
    ("TLS_INSECURE", "tls", "insecure"),
    ("SASL_ENABLED", "sasl", "enabled"),
)
_STRING_OVERRIDES = (
    ("TLS_CA", "tls", "ca"),
    ("TLS_CERT", "tls", "cert"),
    ("TLS_CERTKEY", "tls", "cert_key"),
    ("SASL_USERNAME", "sasl", "username"),
    ("SASL_PASSWORD", "sasl", "password"),
    ("SASL_MECHANISM", "sasl", "mechanism"),
    ("CLIENTID", None, "client_id"),
    ("AVRO_SCHEMAREGISTRY", None, "avro_schema_registry"),
    ("DEFAULTPARTITIONER", None, "default_partitioner"),
)

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off", ""}


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = "" if value is None else str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ContextResolutionError(f"invalid boolean for {key}: {value!r}")


def _string(value: Any) -> str:
    return "" if value is None else str(value)


def _section(raw: Mapping[str, Any], key: str, where: str) -> Mapping[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, Mapping):
        raise ContextResolutionError(f"{where}.{key} must be a mapping")
    return value


def _brokers(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.replace(",", " ").split()
    if isinstance(value, list):
        return [str(broker) for broker in value]
    raise ContextResolutionError(f"brokers must be a list, got {value!r}")


def parse_context(name: str, raw: Mapping[str, Any]) -> ClientContext:
    """Build a ``ClientContext`` from one entry of the ``contexts`` mapping."""

    where = f"contexts.{name}"
    if not isinstance(raw, Mapping):
        raise ContextResolutionError(f"{where} must be a mapping")

    tls = _section(raw, "tls", where)
    sasl = _section(raw, "sasl", where)
    avro = _section(raw, "avro", where)
    producer = _section(raw, "producer", where)
    kubernetes = _section(raw, "kubernetes", where)

    request_timeout = raw.get("requestTimeout")
    kafka_version = raw.get("kafkaVersion")

    return ClientContext(
        name=name,
        brokers=_brokers(raw.get("brokers")),
        tls=TLSConfig(
            enabled=_parse_bool(f"{where}.tls.enabled", tls.get("enabled")),
            ca=_string(tls.get("ca")),
            cert=_string(tls.get("cert")),
            cert_key=_string(tls.get("certKey")),
            insecure=_parse_bool(f"{where}.tls.insecure", tls.get("insecure")),
        ),
        sasl=SaslConfig(
            enabled=_parse_bool(f"{where}.sasl.enabled", sasl.get("enabled")),
            username=_string(sasl.get("username")),
            password=_string(sasl.get("password")),
            mechanism=_string(sasl.get("mechanism")),
        ),
        request_timeout=Duration.parse(request_timeout)
        if request_timeout not in (None, "")
        else None,
        client_id=_string(raw.get("clientID")),
        kafka_version=KafkaVersion.parse(kafka_version)
        if kafka_version not in (None, "")
        else None,
        avro_schema_registry=_string(avro.get("schemaRegistry")),
        default_partitioner=_string(producer.get("partitioner")),
        kubernetes=K8sConfig(
            enabled=_parse_bool(f"{where}.kubernetes.enabled", kubernetes.get("enabled")),
            binary=_string(kubernetes.get("binary")) or "kubectl",
            kube_config=_string(kubernetes.get("kubeConfig")),
            kube_context=_string(kubernetes.get("kubeContext")),
            namespace=_string(kubernetes.get("namespace")),
            image=_string(kubernetes.get("image")),
        ),
    )


def apply_environment_overrides(
    context: ClientContext, environ: Mapping[str, str]
) -> ClientContext:
    """Override context values with the variables a dispatched pod receives."""

    if "BROKERS" in environ:
        context.brokers = environ["BROKERS"].split()
    for key, section, attr in _BOOL_OVERRIDES:
        if key in environ:
            setattr(getattr(context, section), attr, _parse_bool(key, environ[key]))
    for key, section, attr in _STRING_OVERRIDES:
        if key in environ:
            target = getattr(context, section) if section else context
            setattr(target, attr, environ[key])
    if environ.get("REQUESTTIMEOUT"):
        context.request_timeout = Duration.parse(environ["REQUESTTIMEOUT"])
    if environ.get("KAFKAVERSION"):
        context.kafka_version = KafkaVersion.parse(environ["KAFKAVERSION"])
    return context


class ConfigManager:
    """Reads and writes the kafkactl configuration file."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        self.config_file = Path(config_file) if config_file else self.default_path()

    @staticmethod
    def default_path() -> Path:
        override = os.environ.get(CONFIG_FILE_ENV)
        if override:
            return Path(override)
        base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
        return Path(base) / "kafkactl" / CONFIG_FILE_NAME

    @property
    def config_dir(self) -> Path:
        return self.config_file.parent

    def load_config(self) -> Dict[str, Any]:
        """Load the configuration, falling back to a single local context."""
        if not self.config_file.exists():
            return copy.deepcopy(DEFAULT_CONFIG)
        try:
            with open(self.config_file, "r") as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ContextResolutionError(
                f"unable to read config file {self.config_file}: {exc}"
            ) from exc
        if not isinstance(config, dict):
            raise ContextResolutionError(
                f"config file {self.config_file} must contain a mapping"
            )
        return config

    def save_config(self, config: Dict[str, Any]) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            yaml.safe_dump(config, f, sort_keys=False)

    def _contexts(self, config: Dict[str, Any]) -> Dict[str, Any]:
        contexts = config.get("contexts") or {}
        if not isinstance(contexts, dict):
            raise ContextResolutionError("contexts must be a mapping")
        return contexts

    def list_contexts(self) -> List[str]:
        return list(self._contexts(self.load_config()))

    def get_current_context(self) -> str:
        config = self.load_config()
        current = config.get("current-context")
        if not current:
            raise ContextResolutionError("no current context set")
        return str(current)

    def use_context(self, name: str) -> None:
        """Make ``name`` the current context and persist the choice."""
        config = self.load_config()
        if name not in self._contexts(config):
            raise ContextResolutionError(f"not a valid context: {name}")
        config["current-context"] = name
        self.save_config(config)

    def create_client_context(self, name: Optional[str] = None) -> ClientContext:
        """Resolve ``name`` (or the current context) into a ``ClientContext``."""
        config = self.load_config()
        contexts = self._contexts(config)
        if not name:
            name = config.get("current-context")
            if not name:
                raise ContextResolutionError("no current context set")
        name = str(name)
        if name not in contexts:
            raise ContextResolutionError(f"not a valid context: {name}")
        context = parse_context(name, contexts[name] or {})
        return apply_environment_overrides(context, os.environ)


def get_config_manager(config_file: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Return a config manager for ``config_file`` or the default location."""
    return ConfigManager(config_file)
