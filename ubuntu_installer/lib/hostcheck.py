from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from ..errors import PreflightError
from ..logging_utils import SUCCESS
from .command import run_cmd

logger = logging.getLogger(__name__)

TERMUX_HOME = "/data/data/com.termux/files/home"

_MOVE_HOME_HINTS = [
    "Run these commands:",
    "  cd ~",
    "  ubuntu-installer",
]


@dataclass(frozen=True)
class FilesystemInfo:
    fs_type: str
    free_kb: int

    @property
    def free_mb(self) -> int:
        return self.free_kb // 1024


def check_platform() -> None:
    r = run_cmd(["uname", "-o"], check=False)
    if r.stdout.strip() != "Android":
        raise PreflightError("This script is for Termux only.")


def check_write_permission(base: Path) -> None:
    logger.info("Checking write permissions...")

    probe = base / f".write_test_{os.getpid()}"
    try:
        probe.touch()
    except OSError as e:
        raise PreflightError(
            f"Cannot write to current directory! ({base})",
            hints=["Solution: Move to Termux home directory", *_MOVE_HOME_HINTS],
        ) from e
    probe.unlink()

    logger.log(SUCCESS, "Write permission OK")


def _parse_df(stdout: str) -> FilesystemInfo:
    # df -PTk: Filesystem Type 1024-blocks Used Available Capacity Mounted-on
    lines = [ln for ln in stdout.splitlines() if ln.strip()]
    if len(lines) < 2:
        raise ValueError("unexpected df output")
    cols = lines[-1].split()
    return FilesystemInfo(fs_type=cols[1], free_kb=int(cols[4]))


def probe_filesystem(base: Path) -> FilesystemInfo:
    try:
        r = run_cmd(["df", "-PTk", str(base)], check=False)
    except OSError as e:
        logger.warning("Could not run df (%s); falling back", e)
    else:
        if r.returncode == 0:
            try:
                return _parse_df(r.stdout)
            except (ValueError, IndexError):
                logger.warning("Could not parse df output; falling back")

    free_kb = shutil.disk_usage(base).free // 1024
    return FilesystemInfo(fs_type="unknown", free_kb=free_kb)


def check_storage(base: Path, *, disallowed_fs: Sequence[str], min_free_kb: int) -> FilesystemInfo:
    logger.info("Installation directory: %s", base)

    info = probe_filesystem(base)
    logger.info("Filesystem: %s", info.fs_type)

    if any(bad in info.fs_type for bad in disallowed_fs):
        raise PreflightError(
            f"CRITICAL: You are on SD card/external storage! (filesystem: {info.fs_type})",
            hints=[
                "This WILL fail due to permission issues, symlink restrictions and filesystem limitations.",
                "You MUST install in Termux home:",
                "  cd ~",
                f"  pwd    # Should show: {TERMUX_HOME}",
                "  ubuntu-installer",
            ],
        )

    logger.info("Free space: %sMB", info.free_mb)
    if info.free_kb < min_free_kb:
        raise PreflightError(
            f"Insufficient space! Need {min_free_kb // 1000}MB, have {info.free_mb}MB"
        )
    return info


def missing_commands(commands: Sequence[str]) -> List[str]:
    return [c for c in commands if shutil.which(c) is None]


def check_dependencies(commands: Sequence[str]) -> None:
    missing = missing_commands(commands)
    if missing:
        raise PreflightError(
            f"Missing packages: {' '.join(missing)}",
            hints=[f"Install with: pkg install {' '.join(missing)}"],
        )
    logger.log(SUCCESS, "All dependencies installed!")
