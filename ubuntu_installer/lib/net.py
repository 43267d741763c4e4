from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, List

from ..config import InstallerConfig
from ..errors import ArchiveError, DownloadError
from ..logging_utils import SUCCESS
from .archive import verify_archive
from .cleanup import remove_path
from .command import stream_cmd

logger = logging.getLogger(__name__)

DOWNLOAD_HINTS = [
    "Troubleshooting:",
    "1. Check internet connection",
    "2. Try again later (server may be busy)",
    "3. Check storage space: df -h ~",
    "4. Try from Termux home: cd ~",
]


def rootfs_url(template: str, *, version: str, arch: str) -> str:
    return template.format(version=version, arch=arch)


def wget_argv(url: str, dest: Path, config: InstallerConfig) -> List[str]:
    argv = [
        "wget",
        url,
        "-O",
        str(dest),
        f"--timeout={config.download_timeout_s}",
        f"--waitretry={config.download_waitretry_s}",
        f"--tries={config.download_tries}",
        "--progress=dot:giga",
    ]
    if not config.check_certificate:
        argv.append("--no-check-certificate")
    return argv


def _remove(*paths: Path) -> None:
    for p in paths:
        remove_path(p)


def download_rootfs(
    url: str,
    *,
    archive: Path,
    partial: Path,
    config: InstallerConfig,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Download the rootfs tarball, retrying transfer and verification failures alike."""

    max_retries = config.max_download_retries

    for attempt in range(max_retries):
        if attempt > 0:
            logger.warning("Retry %s/%s...", attempt + 1, max_retries)
            sleep(config.retry_delay_s)

        _remove(archive, partial)

        logger.info("Starting download...")
        rc = stream_cmd(wget_argv(url, archive, config), on_line=lambda ln: logger.info("%s", ln))
        if rc != 0:
            logger.warning("Download failed! (wget exit code %s)", rc)
            continue

        logger.info("Download completed, verifying...")
        try:
            verify_archive(
                archive, min_size_mb=config.min_archive_mb, timeout_s=config.verify_timeout_s
            )
        except ArchiveError as e:
            logger.warning("Verification failed! %s", e)
            continue

        logger.log(SUCCESS, "Download successful!")
        return

    _remove(archive, partial)
    raise DownloadError(f"Download failed after {max_retries} attempts!", hints=DOWNLOAD_HINTS)
