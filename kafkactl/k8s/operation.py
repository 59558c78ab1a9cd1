"""Dispatch of kafkactl invocations into a Kubernetes pod."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from kafkactl.k8s.command_view import CommandNode
from kafkactl.k8s.context import ClientContext
from kafkactl.k8s.errors import (
    ConfigurationError,
    ContextResolutionError,
    KafkactlError,
)
from kafkactl.k8s.executor import Executor, new_executor
from kafkactl.k8s.translate import (
    parse_complete_command,
    parse_flags,
    parse_pod_environment,
)
from kafkactl.shared import debug, output

logger = logging.getLogger("kafkactl.k8s")

ATTACH_IMAGE = "ubuntu"
ATTACH_ENTRY_POINT = "bash"
RUN_IMAGE = "scratch"
RUN_ENTRY_POINT = "/kafkactl"

ContextLoader = Callable[[], ClientContext]
ExecutorFactory = Callable[[ClientContext], Executor]


class Operation:
    """A single dispatch request.

    ``context_loader`` resolves the active context and raises
    ``ContextResolutionError`` when none can be resolved. ``executor_factory``
    builds the executor for a validated context.
    """

    def __init__(
        self,
        context_loader: ContextLoader,
        executor_factory: Optional[ExecutorFactory] = None,
    ):
        self.context_loader = context_loader
        self.executor_factory = executor_factory
        self.context: Optional[ClientContext] = None

    def initialize(self) -> None:
        """Check that the resolved context can be used for remote dispatch."""
        context = self.context
        if context is None:
            raise ContextResolutionError("no context resolved")
        if not context.kubernetes.enabled:
            raise ConfigurationError(
                "context is not a kubernetes context", context.name, "enabled"
            )
        if not context.kubernetes.kube_context:
            raise ConfigurationError(
                "context has no kubernetes context set", context.name, "kubeContext"
            )
        if not context.kubernetes.namespace:
            raise ConfigurationError(
                "context has no kubernetes namespace set", context.name, "namespace"
            )

    def _execute(
        self, image_type: str, entry_point: str, args: List[str], env: List[str]
    ) -> None:
        debug.log_dispatch(image_type, entry_point, args, env)
        factory = self.executor_factory or new_executor
        executor = factory(self.context)
        executor.run(image_type, entry_point, args, env)

    def attach(self) -> None:
        """Open an interactive shell in a pod next to the cluster."""
        self.context = self.context_loader()
        self.initialize()

        env = parse_pod_environment(self.context)
        self._execute(ATTACH_IMAGE, ATTACH_ENTRY_POINT, [], env)

    def try_run(self, node: CommandNode, args: Sequence[str]) -> bool:
        """Dispatch remotely if the active context asks for it.

        Returns False, without error, when no context can be resolved or the
        context is not a Kubernetes context, so the caller can run locally.
        A resolution failure is shown as a warning.
        Once dispatch applies, failures are reported and end the process.
        """
        try:
            self.context = self.context_loader()
        except ContextResolutionError as exc:
            logger.debug("remote dispatch not applicable: %s", exc)
            output.warn(f"unable to resolve context: {exc}")
            return False

        if not self.context.kubernetes.enabled:
            return False

        try:
            self.run(node, args)
        except (KafkactlError, OSError) as err:
            output.fail(err)
        return True

    def run(self, node: CommandNode, args: Sequence[str]) -> None:
        """Replay the invocation of ``node`` with ``args`` inside a pod."""
        self.initialize()

        command = parse_complete_command(node)
        flags = parse_flags(node)
        env = parse_pod_environment(self.context)

        command.extend(args)
        command.extend(flags)

        self._execute(RUN_IMAGE, RUN_ENTRY_POINT, command, env)
