from __future__ import annotations

import logging

from ..lib.command import CommandError, sudo, sudo_write
from ..pipeline import FailureKind, SetupCtx, StepResult

logger = logging.getLogger(__name__)


def uinput_rule(group: str) -> str:
    return f'KERNEL=="uinput", MODE="0660", GROUP="{group}", OPTIONS+="static_node=uinput"\n'


class UdevRuleStep:
    step_id = "30_udev_rule"

    def run(self, ctx: SetupCtx) -> StepResult:
        cfg = ctx.cfg
        logger.info("Creating/updating udev rule for uinput permissions...")

        # Overwritten on every run, never merged.
        try:
            sudo_write(ctx.run, cfg.udev_rule_file, uinput_rule(cfg.uinput_group), dry_run=ctx.dry_run)
        except CommandError as e:
            logger.debug("%s", e)
            return StepResult.failed(self.step_id, FailureKind.FILE_WRITE, "Failed to create udev rule.")

        logger.info("Reloading udev rules and triggering changes...")
        for argv, what in (
            (["udevadm", "control", "--reload-rules"], "reload udev rules"),
            (["udevadm", "trigger"], "trigger udev changes"),
        ):
            try:
                ctx.run(sudo(argv), dry_run=ctx.dry_run)
            except CommandError as e:
                logger.debug("%s", e)
                return StepResult.failed(self.step_id, FailureKind.DEVICE_MANAGER, f"Failed to {what}.")

        logger.info("Verifying %s permissions:", cfg.uinput_device)
        r = ctx.run(["ls", "-l", cfg.uinput_device], check=False)
        if r.ok:
            logger.info("%s", r.stdout.strip())
        else:
            logger.warning(
                "Could not list %s. Verify udev rule application manually.", cfg.uinput_device
            )

        return StepResult.done(self.step_id, changed=True)
