"""Kubernetes-mediated execution of kafkactl commands."""

from .command_view import ClickCommandNode, CommandNode, FlagType, FlagView, positional_args
from .context import ClientContext, Duration, K8sConfig, KafkaVersion, SaslConfig, TLSConfig
from .errors import (
    CommandTreeError,
    ConfigurationError,
    ContextResolutionError,
    ExecutionError,
    FlagParseError,
    KafkactlError,
)
from .operation import Operation

__all__ = [
    "ClickCommandNode",
    "ClientContext",
    "CommandNode",
    "CommandTreeError",
    "ConfigurationError",
    "ContextResolutionError",
    "Duration",
    "ExecutionError",
    "FlagParseError",
    "FlagType",
    "FlagView",
    "K8sConfig",
    "KafkaVersion",
    "KafkactlError",
    "Operation",
    "SaslConfig",
    "TLSConfig",
    "positional_args",
]
