"""Run a command inside a short-lived pod through ``kubectl run``."""

from __future__ import annotations

import random
import string
import sys
from typing import List, Optional, Protocol, Sequence

from kafkactl import __version__
from kafkactl.k8s.context import ClientContext, K8sConfig
from kafkactl.k8s.errors import ExecutionError
from kafkactl.shared import debug
from kafkactl.shared.utils import run_interactive

DEFAULT_IMAGE = "deviceinsight/kafkactl"
POD_NAME_PREFIX = "kafkactl-"
POD_RUNNING_TIMEOUT = "1m"


class Runner(Protocol):
    """Runs a local command with the terminal attached and returns its status."""

    def run(self, cmd: List[str]) -> int:
        """Execute ``cmd`` and return its exit status."""


class Executor(Protocol):
    """Runs an entry point inside a pod and waits for it to terminate."""

    def run(
        self,
        image_type: str,
        entry_point: str,
        args: Sequence[str],
        env: Sequence[str],
    ) -> None:
        """Raise ``ExecutionError`` unless the remote process exits cleanly."""


class ShellRunner:
    """Runner backed by a real child process."""

    def run(self, cmd: List[str]) -> int:
        debug.log_exec(cmd)
        try:
            return run_interactive(cmd)
        except OSError as exc:
            # Shell conventions: 127 for a missing command, 126 when it cannot run.
            returncode = 127 if isinstance(exc, FileNotFoundError) else 126
            raise ExecutionError(
                f"unable to execute {cmd[0]!r}: {exc.strerror or exc}",
                returncode=returncode,
            ) from exc


def _random_suffix(length: int = 10) -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


def _image_tag(version: str) -> str:
    if not version or "dev" in version:
        return "latest"
    if version[0].isdigit():
        return f"v{version}"
    return version


class KubectlExecutor:
    """Executor that spawns a throw-away pod with ``kubectl run --rm``."""

    def __init__(
        self,
        config: K8sConfig,
        runner: Runner,
        version: str = __version__,
        tty: Optional[bool] = None,
    ):
        self.config = config
        self.runner = runner
        self.version = version
        self.tty = tty

    def image(self, image_type: str) -> str:
        """Return the container image for an image variant (``scratch``, ``ubuntu``)."""
        image = self.config.image or DEFAULT_IMAGE
        last_segment = image.rsplit("/", 1)[-1]
        if ":" in last_segment or "@" in last_segment:
            return image
        return f"{image}:{_image_tag(self.version)}-{image_type}"

    def _use_tty(self) -> bool:
        if self.tty is not None:
            return self.tty
        return bool(sys.stdin and sys.stdin.isatty())

    def build_command(
        self,
        image_type: str,
        entry_point: str,
        args: Sequence[str],
        env: Sequence[str],
        pod_name: Optional[str] = None,
    ) -> List[str]:
        """Assemble the full ``kubectl`` command line for one remote invocation."""

        cmd = [self.config.binary or "kubectl"]
        if self.config.kube_config:
            cmd += ["--kubeconfig", self.config.kube_config]
        cmd += [
            "--context",
            self.config.kube_context,
            "--namespace",
            self.config.namespace,
            "run",
            "--rm",
            "-i",
        ]
        if self._use_tty():
            cmd.append("--tty")
        cmd += [
            "--restart=Never",
            pod_name or POD_NAME_PREFIX + _random_suffix(),
            "--image",
            self.image(image_type),
            f"--pod-running-timeout={POD_RUNNING_TIMEOUT}",
        ]
        for entry in env:
            cmd += ["--env", entry]
        cmd += ["--command", "--", entry_point]
        cmd.extend(args)
        return cmd

    def run(
        self,
        image_type: str,
        entry_point: str,
        args: Sequence[str],
        env: Sequence[str],
    ) -> None:
        cmd = self.build_command(image_type, entry_point, args, env)
        returncode = self.runner.run(cmd)
        if returncode != 0:
            raise ExecutionError(
                f"remote command {entry_point!r} failed with exit status {returncode}",
                returncode=returncode,
            )


def new_executor(context: ClientContext) -> Executor:
    """Return the production executor for a validated context."""

    return KubectlExecutor(context.kubernetes, ShellRunner())
