from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.hostcheck import check_dependencies, check_storage, check_write_permission
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class PreflightStep:
    step_id = "10_preflight"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        base = ctx.paths.base

        logger.info("Running pre-flight checks...")
        check_write_permission(base)
        fs = check_storage(base, disallowed_fs=cfg.disallowed_fs, min_free_kb=cfg.min_free_kb)
        check_dependencies(cfg.required_commands)

        state.setdefault("hardware", {})["filesystem"] = {"type": fs.fs_type, "free_kb": fs.free_kb}
        return state
