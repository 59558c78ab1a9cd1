"""Errors raised while resolving, translating and dispatching invocations."""

from __future__ import annotations

from typing import Optional


class KafkactlError(RuntimeError):
    """Base class for all kafkactl failures."""


class ContextResolutionError(KafkactlError):
    """Raised when the active configuration context cannot be resolved."""


class ConfigurationError(KafkactlError):
    """Raised when a context is not usable for Kubernetes dispatch."""

    def __init__(self, cause: str, context_name: str, field: str = "enabled"):
        if field == "enabled":
            location = context_name
        else:
            location = f"contexts.{context_name}.kubernetes.{field}"
        super().__init__(f"{cause}: {location}")
        self.cause = cause
        self.context_name = context_name
        self.field = field


class FlagParseError(KafkactlError):
    """Raised when a list-valued flag does not hold a valid JSON array."""

    def __init__(self, flag_name: str, value: str):
        super().__init__(
            f"unable to parse value of flag --{flag_name} as a list: {value!r}"
        )
        self.flag_name = flag_name
        self.value = value


class ExecutionError(KafkactlError):
    """Raised when the remote invocation could not be completed."""

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


class CommandTreeError(KafkactlError):
    """Raised when the command tree has a cyclic or unbounded parent chain."""
