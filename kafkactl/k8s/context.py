"""Connection context shared by the configuration layer and the dispatcher."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from kafkactl.k8s.errors import ContextResolutionError

_NANOSECOND = 1
_MICROSECOND = 1_000 * _NANOSECOND
_MILLISECOND = 1_000 * _MICROSECOND
_SECOND = 1_000 * _MILLISECOND
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE

_DURATION_UNITS = {
    "ns": _NANOSECOND,
    "us": _MICROSECOND,
    "µs": _MICROSECOND,
    "μs": _MICROSECOND,
    "ms": _MILLISECOND,
    "s": _SECOND,
    "m": _MINUTE,
    "h": _HOUR,
}

_DURATION_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_DURATION_PATTERN = re.compile(
    r"[-+]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+"
)
_KAFKA_VERSION_PATTERN = re.compile(r"0\.\d+\.\d+\.\d+|[1-9]\d*\.\d+\.\d+")


def _format_fraction(value: int, unit: int) -> str:
    whole, fraction = divmod(value, unit)
    if not fraction:
        return str(whole)
    digits = str(fraction).rjust(len(str(unit)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


@dataclass(frozen=True)
class Duration:
    """A span of time with the Go-style rendering the remote client expects."""

    nanoseconds: int

    @classmethod
    def parse(cls, value: object) -> "Duration":
        """Parse ``10s``, ``1m30s``, ``250ms`` or a bare number of seconds."""

        if isinstance(value, bool):
            raise ContextResolutionError(f"invalid duration: {value!r}")
        text = str(value).strip()
        try:
            seconds: Optional[Decimal] = Decimal(text)
        except InvalidOperation:
            seconds = None
        if seconds is not None:
            if not seconds.is_finite():
                raise ContextResolutionError(f"invalid duration: {value!r}")
            return cls(int(seconds * _SECOND))

        if not _DURATION_PATTERN.fullmatch(text):
            raise ContextResolutionError(f"invalid duration: {value!r}")

        sign = -1 if text.startswith("-") else 1
        total = Decimal(0)
        for number, unit in _DURATION_COMPONENT.findall(text):
            total += Decimal(number) * _DURATION_UNITS[unit]
        return cls(sign * int(total))

    def __str__(self) -> str:
        ns = abs(self.nanoseconds)
        sign = "-" if self.nanoseconds < 0 else ""
        if ns == 0:
            return "0s"
        if ns < _SECOND:
            if ns < _MICROSECOND:
                return f"{sign}{ns}ns"
            if ns < _MILLISECOND:
                return f"{sign}{_format_fraction(ns, _MICROSECOND)}µs"
            return f"{sign}{_format_fraction(ns, _MILLISECOND)}ms"

        hours, rest = divmod(ns, _HOUR)
        minutes, rest = divmod(rest, _MINUTE)
        rendered = f"{_format_fraction(rest, _SECOND)}s"
        if hours or minutes:
            rendered = f"{minutes}m{rendered}"
        if hours:
            rendered = f"{hours}h{rendered}"
        return sign + rendered


@dataclass(frozen=True)
class KafkaVersion:
    """Broker protocol version such as ``2.5.0`` or ``0.10.2.1``."""

    text: str

    @classmethod
    def parse(cls, value: object) -> "KafkaVersion":
        text = str(value).strip()
        if text.startswith("v"):
            text = text[1:]
        if not _KAFKA_VERSION_PATTERN.fullmatch(text):
            raise ContextResolutionError(f"invalid kafka version: {value!r}")
        return cls(text)

    def __str__(self) -> str:
        return self.text


@dataclass
class K8sConfig:
    """Kubernetes settings of a context."""

    enabled: bool = False
    binary: str = "kubectl"
    kube_config: str = ""
    kube_context: str = ""
    namespace: str = ""
    image: str = ""


@dataclass
class TLSConfig:
    enabled: bool = False
    ca: str = ""
    cert: str = ""
    cert_key: str = ""
    insecure: bool = False


@dataclass
class SaslConfig:
    enabled: bool = False
    username: str = ""
    password: str = ""
    mechanism: str = ""


@dataclass
class ClientContext:
    """A named bundle of broker, connection and Kubernetes settings."""

    name: str
    brokers: List[str] = field(default_factory=list)
    tls: TLSConfig = field(default_factory=TLSConfig)
    sasl: SaslConfig = field(default_factory=SaslConfig)
    request_timeout: Optional[Duration] = None
    client_id: str = ""
    kafka_version: Optional[KafkaVersion] = None
    avro_schema_registry: str = ""
    default_partitioner: str = ""
    kubernetes: K8sConfig = field(default_factory=K8sConfig)
