from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Sequence

from .config import InstallerConfig
from .lib.env import InstallPaths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallCtx:
    config: InstallerConfig
    paths: InstallPaths


class Step(Protocol):
    """A single installation step."""

    step_id: str

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]


def new_state() -> Dict[str, Any]:
    return {
        "hardware": {},
        "execution": {"current_step": None, "decisions": {}},
    }


def run_pipeline(
    *,
    ctx: InstallCtx,
    state: Dict[str, Any],
    steps: Sequence[Step],
) -> PipelineResult:
    """Run steps in order; the first exception aborts the run and propagates.

    execution.current_step is left pointing at the failing step so the
    caller can report it.
    """

    ran: List[str] = []

    for step in steps:
        state.setdefault("execution", {})["current_step"] = step.step_id
        logger.debug("Running step %s", step.step_id)
        state = step.run(ctx, state)
        ran.append(step.step_id)

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran)
