from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    timeout: float | None = None,
    log_output: bool = True,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr.
    - Raises CommandError on a non-zero exit when check is set, and on
      timeout regardless of check.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    try:
        p = subprocess.run(
            argv_list,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise CommandError(argv_list, -1, f"timed out after {e.timeout}s") from e

    if p.stdout and log_output:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise CommandError(argv_list, p.returncode, p.stderr)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def stream_cmd(
    argv: Sequence[str],
    *,
    on_line: Optional[Callable[[str], None]] = None,
    cwd: str | None = None,
) -> int:
    """Run a command, feeding merged stdout/stderr to on_line as it arrives.

    Returns the exit code; never raises on failure.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    with subprocess.Popen(
        argv_list,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
        cwd=cwd,
    ) as p:
        for line in p.stdout or []:
            if on_line is not None:
                on_line(line.rstrip("\n"))

    if p.returncode != 0:
        logger.debug("Exit %s: %s", p.returncode, _fmt_argv(argv_list))
    return p.returncode
