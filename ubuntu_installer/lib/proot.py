from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from ..errors import ExtractionError
from ..logging_utils import SUCCESS
from .command import stream_cmd

logger = logging.getLogger(__name__)

# Harmless under proot without real symlink support.
NOISE_MARKERS = ("Cannot create symlink",)

FATAL_MARKERS = (
    "Error is not recoverable",
    "invalid compressed data",
    "Unexpected EOF",
)

CRITICAL_PATHS = (
    "bin/bash",
    "bin/sh",
    "usr/bin/env",
    "etc/passwd",
    "lib",
    "usr",
)


def extract_argv(archive: Path) -> List[str]:
    return ["proot", "--link2symlink", "tar", "-xzf", str(archive), "--exclude=dev"]


def extract_rootfs(archive: Path, rootfs: Path, log_path: Path) -> int:
    """Unpack archive into rootfs under proot, writing filtered output to log_path.

    The exit code is returned rather than raised: tar under proot exits
    non-zero on link errors that do not affect the result. Use
    scan_extract_log() and verify_rootfs() to decide success.
    """

    logger.info("Creating directory: %s", rootfs)
    rootfs.mkdir(parents=True, exist_ok=True)

    logger.warning("This will take 5-15 minutes!")
    logger.warning("Symlink warnings are NORMAL - ignore them")
    logger.info("Starting extraction...")

    with log_path.open("w", encoding="utf-8") as log:

        def on_line(line: str) -> None:
            if any(m in line for m in NOISE_MARKERS):
                return
            log.write(line + "\n")
            logger.debug("tar: %s", line)

        rc = stream_cmd(extract_argv(archive.resolve()), on_line=on_line, cwd=str(rootfs))

    if rc != 0:
        logger.warning("proot/tar exited with %s; checking results", rc)
    logger.log(SUCCESS, "Extraction phase complete!")
    return rc


def scan_extract_log(log_path: Path, *, tail: int = 20) -> None:
    if not log_path.exists():
        return
    lines = log_path.read_text(encoding="utf-8", errors="replace").splitlines()
    if any(m in ln for ln in lines for m in FATAL_MARKERS):
        for ln in lines[-tail:]:
            logger.error("  %s", ln)
        raise ExtractionError("Critical errors found during extraction!")


def verify_rootfs(rootfs: Path, critical: Sequence[str] = CRITICAL_PATHS) -> None:
    logger.info("Verifying installation...")

    # lexists: bin/sh and friends may be dangling until resolved inside proot
    missing = [rootfs / rel for rel in critical if not _lexists(rootfs / rel)]
    if missing:
        raise ExtractionError(
            "Installation incomplete! Missing: " + ", ".join(str(p) for p in missing)
        )
    logger.log(SUCCESS, "All critical files verified!")


def _lexists(p: Path) -> bool:
    return p.exists() or p.is_symlink()


def launcher_argv(rootfs_name: str, binds: Sequence[str], *, path: str, lang: str) -> List[str]:
    """proot command line used by the launcher script (shell words, unquoted)."""

    argv = ["proot", "--link2symlink", "-0", "-r", rootfs_name]
    for b in binds:
        argv += ["-b", b]
    argv += [
        "-w",
        "/root",
        "/usr/bin/env",
        "-i",
        "HOME=/root",
        f"PATH={path}",
        'TERM="${TERM:-xterm-256color}"',
        f"LANG={lang}",
        "/bin/bash",
        "--login",
        '"$@"',
    ]
    return argv
