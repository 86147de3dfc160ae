"""Subprocess invocation of external JDK tools."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence

import structlog

log = structlog.get_logger("jrekit.process")

CommandRunner = Callable[[Sequence[str]], subprocess.CompletedProcess]


def run_command(cmd: Sequence[str]) -> subprocess.CompletedProcess[str]:
    """Run *cmd* to completion, capturing text output. Never raises on exit status."""
    log.debug("process.run", cmd=list(cmd))
    return subprocess.run(
        list(cmd),
        capture_output=True,
        text=True,
        check=False,
    )
