from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.arch import detect_architecture
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class DetectArchStep:
    step_id = "20_detect_arch"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        arch = detect_architecture()
        state.setdefault("hardware", {})["arch"] = arch
        logger.info("Architecture: %s", arch)
        return state
