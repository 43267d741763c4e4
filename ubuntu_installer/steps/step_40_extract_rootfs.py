from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.proot import extract_rootfs, scan_extract_log, verify_rootfs
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class ExtractRootFSStep:
    step_id = "40_extract_rootfs"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        paths = ctx.paths

        logger.info("Extracting Ubuntu rootfs")
        rc = extract_rootfs(paths.archive, paths.rootfs, paths.extract_log)
        state.setdefault("execution", {}).setdefault("decisions", {})["extract_returncode"] = rc

        scan_extract_log(paths.extract_log)
        verify_rootfs(paths.rootfs)
        return state
