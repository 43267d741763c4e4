from __future__ import annotations

from typing import Any, Dict

from ..lib.launcher import write_start_script
from ..pipeline import InstallCtx


class CreateLauncherStep:
    step_id = "60_create_launcher"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        write_start_script(ctx.paths.start_script, binds_dir=ctx.paths.binds_dir, config=ctx.config)
        return state
