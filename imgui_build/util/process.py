# SPDX-License-Identifier: MIT
"""Subprocess helpers shared by the prober, binding generator and toolchains.

External tools run synchronously to completion, one at a time. There is
no timeout: the tools are non-interactive and expected to terminate.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


def format_command(cmd: Sequence[str]) -> str:
    """Render a command for log messages."""
    return shlex.join(str(c) for c in cmd)


def run_command(
    cmd: Sequence[str | Path],
    *,
    cwd: Path | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command and capture its output.

    Args:
        cmd: Command and arguments.
        cwd: Working directory.

    Returns:
        The completed process. A non-zero return code is not an error
        here; callers decide what a failure means for their stage.

    Raises:
        OSError: If the executable cannot be started.
    """
    args = [str(c) for c in cmd]
    logger.debug("Running: %s", format_command(args))
    return subprocess.run(
        args,
        cwd=cwd,
        capture_output=True,
        text=True,
    )


def failure_output(result: subprocess.CompletedProcess[str]) -> str:
    """The most useful part of a failed process's output."""
    output = (result.stderr or "").strip() or (result.stdout or "").strip()
    if not output:
        return f"exit status {result.returncode}"
    return output
