"""Test doubles and builders shared across the kafkactl test modules."""

from dataclasses import dataclass, field
from typing import List, Optional

from kafkactl.k8s.command_view import FlagType, FlagView
from kafkactl.k8s.context import ClientContext, K8sConfig


@dataclass
class FakeNode:
    """Minimal command-tree node."""

    name: str
    parent: Optional["FakeNode"] = None
    flag_views: List[FlagView] = field(default_factory=list)

    def flags(self) -> List[FlagView]:
        return self.flag_views


def flag(name: str, value: str, changed: bool = True, value_type=FlagType.STRING) -> FlagView:
    return FlagView(name=name, value_type=value_type, changed=changed, value=value)


def command_tree(*names: str, flags: Optional[List[FlagView]] = None) -> FakeNode:
    """Build ``root -> names[0] -> ... -> names[-1]`` and return the leaf."""
    node = FakeNode("kafkactl")
    for name in names:
        node = FakeNode(name, parent=node)
    node.flag_views = list(flags or [])
    return node


class RecordingExecutor:
    """Executor that records calls instead of spawning pods."""

    def __init__(self, error: Optional[Exception] = None):
        self.calls = []
        self.contexts = []
        self.error = error

    def factory(self, context):
        self.contexts.append(context)
        return self

    def run(self, image_type, entry_point, args, env):
        self.calls.append((image_type, entry_point, list(args), list(env)))
        if self.error is not None:
            raise self.error


class RecordingRunner:
    """Runner that records commands and returns a fixed exit status."""

    def __init__(self, returncode: int = 0):
        self.returncode = returncode
        self.commands = []

    def run(self, cmd):
        self.commands.append(cmd)
        return self.returncode


def kubernetes_context(name: str = "remote", **kubernetes) -> ClientContext:
    settings = {"enabled": True, "kube_context": "dev-cluster", "namespace": "kafka"}
    settings.update(kubernetes)
    return ClientContext(name=name, brokers=["b1:9092"], kubernetes=K8sConfig(**settings))
