"""User-facing error and warning output."""

from __future__ import annotations

import sys
from typing import NoReturn, Optional

from rich.console import Console
from rich.markup import escape

_console: Optional[Console] = None


def get_console() -> Console:
    """Return the stderr console, created lazily so tests can capture it."""

    global _console
    if _console is None:
        _console = Console(stderr=True, highlight=False, soft_wrap=True)
    return _console


def warn(message: str) -> None:
    get_console().print(f"[yellow]Warning:[/yellow] {escape(message)}")


def fail(err: BaseException) -> NoReturn:
    """Report a terminal failure and exit with status 1."""

    get_console().print(f"[bold red]Error:[/bold red] {escape(str(err))}")
    sys.exit(1)
