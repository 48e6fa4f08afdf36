from __future__ import annotations

import logging

from ..pipeline import FailureKind, SetupCtx, StepResult

logger = logging.getLogger(__name__)


class CheckExecutableStep:
    step_id = "10_check_executable"

    def run(self, ctx: SetupCtx) -> StepResult:
        name = ctx.cfg.remapper
        logger.info("Checking for %s executable...", name)

        found = ctx.which(name)
        if found:
            logger.info("%s executable found at: %s", name, found)
            return StepResult.done(self.step_id)

        # Advisory only: the unit resolves the binary again at start time.
        logger.warning(
            "%s executable not found in your PATH. Please ensure it's installed "
            "(e.g., via 'cargo install %s') and that ~/.cargo/bin is in your PATH.",
            name,
            name,
        )
        logger.warning(
            "The setup will proceed, but the service might fail to start if '%s' isn't found.",
            name,
        )
        if not ctx.confirm("Press Enter to continue or Ctrl+C to exit."):
            return StepResult.failed(
                self.step_id,
                FailureKind.OPERATOR_ABORT,
                "Setup aborted by operator.",
            )
        return StepResult.done(self.step_id)
