from __future__ import annotations

import logging
from pathlib import Path

from ..errors import ArchiveError, CommandError
from ..logging_utils import SUCCESS
from .command import run_cmd

logger = logging.getLogger(__name__)


def archive_size_mb(path: Path) -> int:
    return path.stat().st_size // 1024 // 1024


def verify_archive(path: Path, *, min_size_mb: int, timeout_s: float | None = None) -> None:
    """Check a downloaded rootfs tarball, cheapest test first.

    Raises ArchiveError on the first failing check:
    - missing or empty file
    - smaller than min_size_mb (before any external tool runs)
    - `gzip -t` stream test
    - `tar -tzf` listing

    A check running longer than timeout_s counts as a failed check.
    """

    logger.info("Verifying archive...")

    if not path.is_file() or path.stat().st_size == 0:
        raise ArchiveError("Archive missing or empty!")

    size_mb = archive_size_mb(path)
    logger.info("Archive size: %sMB", size_mb)
    if size_mb < min_size_mb:
        raise ArchiveError(f"Archive too small ({size_mb}MB)! Expected >{min_size_mb}MB")

    logger.info("Testing gzip integrity...")
    try:
        run_cmd(["gzip", "-t", str(path)], timeout=timeout_s)
    except CommandError as e:
        raise ArchiveError("Archive corrupted (gzip test failed)!") from e

    logger.info("Testing tar contents...")
    try:
        listing = run_cmd(["tar", "-tzf", str(path)], timeout=timeout_s, log_output=False)
    except CommandError as e:
        raise ArchiveError("Archive corrupted (tar test failed)!") from e
    if not listing.stdout.strip():
        raise ArchiveError("Archive corrupted (tar listing is empty)!")

    logger.log(SUCCESS, "Archive verification passed!")


def archive_is_valid(path: Path, *, min_size_mb: int, timeout_s: float | None = None) -> bool:
    try:
        verify_archive(path, min_size_mb=min_size_mb, timeout_s=timeout_s)
    except ArchiveError as e:
        logger.warning("%s", e)
        return False
    return True
