"""Utility functions for subprocess management and cancellation."""

import asyncio
from typing import List


async def run_subprocess_with_cancellation(
    cmd: List[str], stdin_attached: bool = True
) -> int:
    """
    Run a subprocess connected to the invoking terminal.

    The child inherits stdout and stderr, and stdin unless ``stdin_attached``
    is false. When the task is cancelled (e.g., by Ctrl+C), the subprocess
    will be terminated.

    Args:
        cmd: Command to execute as a list of strings
        stdin_attached: Whether the child reads from our stdin

    Returns:
        The exit status of the subprocess

    Raises:
        asyncio.CancelledError: If the task is cancelled
        OSError: If the executable is missing or cannot be started
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdin=None if stdin_attached else asyncio.subprocess.DEVNULL,
    )

    try:
        return await process.wait()
    except asyncio.CancelledError:
        try:
            process.terminate()
            try:
                await asyncio.wait_for(process.wait(), timeout=2.0)
            except asyncio.TimeoutError:
                process.kill()
                await process.wait()
        except (ProcessLookupError, OSError):
            # Process might have already finished
            pass
        raise


def run_interactive(cmd: List[str], stdin_attached: bool = True) -> int:
    """Blocking wrapper around ``run_subprocess_with_cancellation``."""

    return asyncio.run(run_subprocess_with_cancellation(cmd, stdin_attached))
