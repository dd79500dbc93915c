from __future__ import annotations

import errno
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    cmd: list[str]
    returncode: int
    output: str = ""
    # only filled when stderr was captured separately
    errors: str = ""


# (cmd, cwd, env) -> CommandResult
Executor = Callable[..., CommandResult]


def shell_status(returncode: int) -> int:
    """Map a killed-by-signal returncode (-N) onto the shell's 128+N."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def run_command(
    cmd: list[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    merge_stderr: bool = True,
) -> CommandResult:
    """
    Run cmd to completion and capture stdout+stderr as one stream by default.

    With merge_stderr=False, `output` holds stdout alone and stderr goes to
    `errors`, for tools whose stdout is data rather than a report.

    Never raises for a failing tool: a binary that cannot be launched is
    reported with the shell's 127 (not found) or 126 (not executable).
    """
    full_env = None
    if env:
        full_env = {**os.environ, **env}

    logger.debug("exec %s (cwd=%s)", " ".join(cmd), cwd)
    try:
        cp = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=full_env,
            text=True,
            errors="replace",
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
            check=False,
        )
    except OSError as e:
        code = 126 if e.errno in (errno.EACCES, errno.ENOEXEC) else 127
        logger.warning("could not launch %s: %s", cmd[0], e)
        return CommandResult(cmd, code, f"{cmd[0]}: {e}\n")

    return CommandResult(
        cmd, shell_status(cp.returncode), cp.stdout or "", cp.stderr or ""
    )
