from __future__ import annotations

import logging
from pathlib import Path

from ..lib.unit import remapper_unit, render_unit
from ..pipeline import FailureKind, SetupCtx, StepResult

logger = logging.getLogger(__name__)


class ServiceUnitStep:
    step_id = "60_service_unit"

    def run(self, ctx: SetupCtx) -> StepResult:
        cfg = ctx.cfg
        service_file = Path(cfg.service_file)
        logger.info("Creating systemd user service file: '%s'...", service_file)

        contents = render_unit(remapper_unit(cfg.remapper, cfg.config_file))

        if ctx.dry_run:
            logger.info("Would write %s", str(service_file))
            return StepResult.done(self.step_id, changed=True)

        try:
            Path(cfg.service_dir).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.debug("%s", e)
            return StepResult.failed(
                self.step_id, FailureKind.FILE_WRITE, f"Failed to create '{cfg.service_dir}'."
            )

        try:
            service_file.write_text(contents, encoding="utf-8")
        except OSError as e:
            logger.debug("%s", e)
            return StepResult.failed(
                self.step_id, FailureKind.FILE_WRITE, "Failed to create systemd service file."
            )

        logger.info("Systemd service file created successfully.")
        return StepResult.done(self.step_id, changed=True)
