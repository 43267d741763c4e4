from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.archive import archive_is_valid
from ..lib.cleanup import remove_path
from ..lib.net import download_rootfs, rootfs_url
from ..logging_utils import SUCCESS
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class DownloadRootFSStep:
    step_id = "30_download_rootfs"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        paths = ctx.paths

        arch = (state.get("hardware") or {}).get("arch")
        if not arch:
            raise RuntimeError("hardware.arch missing; run arch detection first")

        decisions = state.setdefault("execution", {}).setdefault("decisions", {})

        if paths.archive.exists():
            logger.warning("Found existing archive")
            if archive_is_valid(
                paths.archive, min_size_mb=cfg.min_archive_mb, timeout_s=cfg.verify_timeout_s
            ):
                logger.log(SUCCESS, "Archive is valid, using it")
                decisions["archive_source"] = "existing"
                return state
            logger.warning("Archive corrupted, re-downloading")
            remove_path(paths.archive)

        url = rootfs_url(cfg.url_template, version=cfg.ubuntu_version, arch=arch)
        logger.info("Downloading Ubuntu %s (%s)", cfg.ubuntu_version, arch)
        logger.info("Source: %s", url)
        logger.info("Expected size: ~130-180MB, time estimate: 3-10 minutes")

        download_rootfs(url, archive=paths.archive, partial=paths.archive_partial, config=cfg)

        decisions["archive_source"] = url
        return state
