from __future__ import annotations

import logging
from typing import Optional

from ..lib.command import CommandError, sudo, sudo_write
from ..lib.textfile import has_exact_line, line_to_append, read_text
from ..pipeline import FailureKind, SetupCtx, StepResult

logger = logging.getLogger(__name__)


def read_modules_file(ctx: SetupCtx, path: str) -> Optional[str]:
    """Current contents ("" when missing), or None when it cannot be read even with sudo."""

    try:
        return read_text(path) or ""
    except PermissionError:
        logger.debug("%s is not readable, retrying with sudo", path)

    r = ctx.run(sudo(["cat", path]), check=False)
    return r.stdout if r.ok else None


class UinputModuleStep:
    step_id = "40_uinput_module"

    def run(self, ctx: SetupCtx) -> StepResult:
        cfg = ctx.cfg
        module = cfg.module
        logger.info("Ensuring '%s' kernel module is loaded and persistent...", module)

        try:
            ctx.run(sudo(["modprobe", module]), dry_run=ctx.dry_run)
        except CommandError as e:
            logger.debug("%s", e)
            return StepResult.failed(
                self.step_id, FailureKind.MODULE_LOAD, f"Failed to load '{module}' module."
            )

        # Never append without knowing the current contents.
        existing = read_modules_file(ctx, cfg.modules_load_file)
        if existing is None:
            return StepResult.failed(
                self.step_id,
                FailureKind.FILE_WRITE,
                f"Could not read '{cfg.modules_load_file}'; refusing to append to it.",
            )

        if has_exact_line(existing, module):
            logger.info("'%s' module already configured for persistence.", module)
            return StepResult.done(self.step_id)

        try:
            sudo_write(
                ctx.run,
                cfg.modules_load_file,
                line_to_append(existing, module),
                append=True,
                dry_run=ctx.dry_run,
            )
        except CommandError as e:
            logger.debug("%s", e)
            return StepResult.failed(
                self.step_id,
                FailureKind.FILE_WRITE,
                f"Failed to make '{module}' module persistent.",
            )

        logger.info(
            "'%s' module added to '%s' for persistence across reboots.", module, cfg.modules_load_file
        )
        return StepResult.done(self.step_id, changed=True)
