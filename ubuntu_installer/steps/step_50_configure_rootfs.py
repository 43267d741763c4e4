from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.rootfs_config import stub_groups, write_resolv_conf
from ..logging_utils import SUCCESS
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class ConfigureRootFSStep:
    step_id = "50_configure_rootfs"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Configuring Ubuntu...")

        write_resolv_conf(ctx.paths.rootfs, ctx.config.nameservers)
        stubbed = stub_groups(ctx.paths.rootfs)
        state.setdefault("execution", {}).setdefault("decisions", {})["groups_stubbed"] = stubbed

        logger.log(SUCCESS, "Configuration complete!")
        return state
