from __future__ import annotations

import logging

from ..lib.command import CommandError
from ..logging_utils import log_success
from ..pipeline import FailureKind, SetupCtx, StepResult

logger = logging.getLogger(__name__)


def systemctl_user(*args: str) -> list[str]:
    return ["systemctl", "--user", *args]


class ServiceActivationStep:
    step_id = "70_service_activation"

    def run(self, ctx: SetupCtx) -> StepResult:
        name = ctx.cfg.service_name
        title = ctx.cfg.remapper.capitalize()

        for argv, before, failure in (
            (systemctl_user("daemon-reload"), "Reloading systemd daemon...", "Failed to reload systemd daemon."),
            (
                systemctl_user("enable", name),
                f"Enabling {title} service to start at login...",
                f"Failed to enable {title} service.",
            ),
            (systemctl_user("start", name), f"Starting {title} service now...", f"Failed to start {title} service."),
        ):
            logger.info("%s", before)
            try:
                ctx.run(argv, dry_run=ctx.dry_run)
            except CommandError as e:
                logger.debug("%s", e)
                return StepResult.failed(self.step_id, FailureKind.SERVICE_MANAGER, failure)

        logger.info("Checking %s service status:", title)
        status = ctx.run(systemctl_user("status", name, "--no-pager"), check=False, dry_run=ctx.dry_run)
        for text in (status.stdout, status.stderr):
            if text.strip():
                logger.info("%s", text.rstrip())

        log_success(logger, "%s service setup complete!", title)
        return StepResult.done(self.step_id, changed=True)
