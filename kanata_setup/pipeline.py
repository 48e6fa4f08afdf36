from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .lib.command import Runner, run_cmd
from .setup_config import SetupConfig

logger = logging.getLogger(__name__)


class FailureKind(str, Enum):
    PRIVILEGED_COMMAND = "privileged_command"
    FILE_WRITE = "file_write"
    DEVICE_MANAGER = "device_manager"
    MODULE_LOAD = "module_load"
    SERVICE_MANAGER = "service_manager"
    OPERATOR_ABORT = "operator_abort"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class StepResult:
    step_id: str
    ok: bool
    failure: Optional[FailureKind] = None
    message: str = ""
    changed: bool = False

    @classmethod
    def done(cls, step_id: str, *, changed: bool = False, message: str = "") -> "StepResult":
        return cls(step_id=step_id, ok=True, changed=changed, message=message)

    @classmethod
    def failed(cls, step_id: str, failure: FailureKind, message: str) -> "StepResult":
        return cls(step_id=step_id, ok=False, failure=failure, message=message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_id": self.step_id,
            "ok": self.ok,
            "failure": self.failure.value if self.failure else None,
            "message": self.message,
            "changed": self.changed,
        }


@dataclass(frozen=True)
class SetupCtx:
    """Everything a step may touch: config, command runner, PATH lookup, operator prompt."""

    cfg: SetupConfig
    run: Runner = run_cmd
    which: Callable[[str], Optional[str]] = shutil.which
    confirm: Callable[[str], bool] = lambda prompt: True
    dry_run: bool = False


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, ctx: SetupCtx) -> StepResult:
        ...


@dataclass(frozen=True)
class PipelineResult:
    results: List[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)

    @property
    def ran_steps(self) -> List[str]:
        return [r.step_id for r in self.results]

    @property
    def failed(self) -> Optional[StepResult]:
        for r in self.results:
            if not r.ok:
                return r
        return None

    def to_dict(self) -> Dict[str, Any]:
        failed = self.failed
        return {
            "ok": self.ok,
            "ran_steps": self.ran_steps,
            "failed_step": failed.step_id if failed else None,
            "results": [r.to_dict() for r in self.results],
        }


def run_pipeline(*, ctx: SetupCtx, steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order; stop at the first failed step."""

    results: List[StepResult] = []

    for step in steps:
        logger.debug("Running step %s", step.step_id)
        try:
            result = step.run(ctx)
        except Exception as e:
            logger.exception("Step %s failed", step.step_id)
            result = StepResult.failed(
                step.step_id, FailureKind.UNEXPECTED, f"Unexpected error in {step.step_id}: {e}"
            )
        results.append(result)
        if not result.ok:
            logger.error("%s", result.message)
            logger.debug("Aborted at %s (%s)", step.step_id, result.failure)
            break

    return PipelineResult(results=results)
