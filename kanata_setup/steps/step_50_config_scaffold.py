from __future__ import annotations

import logging
from pathlib import Path

from ..pipeline import FailureKind, SetupCtx, StepResult

logger = logging.getLogger(__name__)


def placeholder_config(remapper: str) -> str:
    title = remapper.capitalize()
    return "\n".join(
        [
            f"; This is a placeholder for your {title} configuration.",
            f"; Replace this content with your actual {title} configuration.",
            "; Example: (defsrc esc a b c) (deflayer default (q w e r))",
            "",
        ]
    )


class ConfigScaffoldStep:
    step_id = "50_config_scaffold"

    def run(self, ctx: SetupCtx) -> StepResult:
        cfg = ctx.cfg
        config_dir = Path(cfg.config_dir)
        config_file = Path(cfg.config_file)
        logger.info("Creating %s configuration directory: '%s'...", cfg.remapper, config_dir)

        if ctx.dry_run:
            logger.info("Would create %s", str(config_dir))
        else:
            try:
                config_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.debug("%s", e)
                return StepResult.failed(
                    self.step_id, FailureKind.FILE_WRITE, f"Failed to create '{config_dir}'."
                )

        # Never overwrite: this is the user's file once it exists.
        if config_file.exists():
            logger.info("%s configuration file already exists at '%s'.", cfg.remapper, config_file)
            return StepResult.done(self.step_id)

        logger.warning("No %s configuration file found at '%s'.", cfg.remapper, config_file)
        logger.warning("Please create or copy your '%s' file into this directory.", config_file.name)

        if ctx.dry_run:
            logger.info("Would write %s", str(config_file))
            return StepResult.done(self.step_id, changed=True)

        try:
            with config_file.open("x", encoding="utf-8") as f:
                f.write(placeholder_config(cfg.remapper))
        except FileExistsError:
            logger.info("%s configuration file appeared at '%s'; leaving it.", cfg.remapper, config_file)
            return StepResult.done(self.step_id)
        except OSError as e:
            logger.debug("%s", e)
            return StepResult.failed(
                self.step_id, FailureKind.FILE_WRITE, f"Failed to write '{config_file}'."
            )

        logger.info("A placeholder '%s' has been created.", config_file)
        return StepResult.done(self.step_id, changed=True)
