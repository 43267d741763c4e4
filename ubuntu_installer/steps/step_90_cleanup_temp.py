from __future__ import annotations

from typing import Any, Dict

from ..lib.cleanup import cleanup_temp
from ..pipeline import InstallCtx


class CleanupTempStep:
    step_id = "90_cleanup_temp"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cleanup_temp(ctx.paths)
        return state
