"""Runtime-configurable debug logging utilities."""

from __future__ import annotations

import logging
import shlex
import threading
from contextlib import contextmanager
from typing import Iterator, Sequence

_logger = logging.getLogger("kafkactl")
_state_lock = threading.Lock()
_enabled = False

_SECRET_KEYS = ("SASL_PASSWORD",)


def configure_root(level: int = logging.INFO) -> None:
    """Ensure standard logging configuration is present."""

    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format="%(name)s: %(message)s")


def is_enabled() -> bool:
    """Return whether verbose debug logging is active."""

    with _state_lock:
        return _enabled


def enable() -> None:
    """Enable verbose logging globally."""

    global _enabled
    with _state_lock:
        _enabled = True
    _logger.setLevel(logging.DEBUG)
    _logger.debug("Verbose debug mode enabled")


def disable() -> None:
    """Disable verbose logging globally."""

    global _enabled
    with _state_lock:
        _enabled = False
    _logger.setLevel(logging.INFO)
    _logger.debug("Verbose debug mode disabled")


@contextmanager
def temporary_enable() -> Iterator[None]:
    """Temporarily enable verbose logging within a block."""

    was_enabled = is_enabled()
    if not was_enabled:
        enable()
    try:
        yield
    finally:
        if not was_enabled:
            disable()


def mask_secrets(entry: str) -> str:
    """Hide the value of secret ``KEY=VALUE`` environment entries."""

    key, sep, _ = entry.partition("=")
    if sep and key in _SECRET_KEYS:
        return f"{key}=***"
    return entry


def log_dispatch(
    image_type: str, entry_point: str, args: Sequence[str], env: Sequence[str]
) -> None:
    """Emit structured debug log for a remote dispatch."""

    if not is_enabled():
        return
    logging.getLogger("kafkactl.dispatch").debug(
        "image=%s entrypoint=%s args=%s env=%s",
        image_type,
        entry_point,
        list(args),
        [entry.partition("=")[0] for entry in env],
    )


def log_exec(cmd: Sequence[str]) -> None:
    """Emit the command line handed to the local shell."""

    if not is_enabled():
        return
    logging.getLogger("kafkactl.exec").debug(
        "exec: %s", shlex.join(mask_secrets(part) for part in cmd)
    )
