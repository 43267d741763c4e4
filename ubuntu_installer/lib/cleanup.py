from __future__ import annotations

import logging
import os
import shutil
import stat
import sys
from pathlib import Path
from typing import Iterable, List

from ..logging_utils import SUCCESS
from .env import InstallPaths

logger = logging.getLogger(__name__)


def _on_rm_error(func, path, _exc) -> None:
    # proot-extracted trees contain read-only dirs; retry once writable.
    try:
        os.chmod(os.path.dirname(path), stat.S_IRWXU)
        os.chmod(path, stat.S_IRWXU)
        func(path)
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)


def remove_path(p: Path) -> None:
    """Remove a file, symlink or tree. Errors are logged, not raised."""

    if p.is_symlink() or p.is_file():
        try:
            p.unlink()
        except OSError as e:
            logger.warning("Could not remove %s: %s", p, e)
    elif p.is_dir():
        if sys.version_info >= (3, 12):
            shutil.rmtree(p, onexc=_on_rm_error)
        else:
            shutil.rmtree(p, onerror=_on_rm_error)


def remove_paths(paths: Iterable[Path], *, announce: bool = False) -> List[Path]:
    removed: List[Path] = []
    for p in paths:
        if not (p.exists() or p.is_symlink()):
            continue
        if announce:
            logger.info("Removing: %s", p.name)
        remove_path(p)
        removed.append(p)
    return removed


def cleanup_all(paths: InstallPaths) -> List[Path]:
    logger.info("Performing complete cleanup...")
    removed = remove_paths(paths.clean_targets, announce=True)
    logger.log(SUCCESS, "Cleanup complete!")
    return removed


def cleanup_failed(paths: InstallPaths) -> List[Path]:
    logger.warning("Cleaning up failed installation...")
    return remove_paths(paths.failed_targets)


def cleanup_temp(paths: InstallPaths) -> List[Path]:
    logger.info("Cleaning temporary files...")
    return remove_paths([paths.archive, paths.extract_log])
