from __future__ import annotations

import argparse
import dataclasses
import logging
from typing import Callable, Optional

from . import __version__
from .lib.command import Runner, run_cmd
from .logging_utils import DEFAULT_LOG_PATH, configure_logging, log_success
from .pipeline import PipelineResult, SetupCtx, run_pipeline
from .setup_config import ConfigError, SetupConfig, load_setup_config
from .state_store import save_summary
from .steps import (
    CheckExecutableStep,
    ConfigScaffoldStep,
    GroupsStep,
    ServiceActivationStep,
    ServiceUnitStep,
    UdevRuleStep,
    UinputModuleStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        CheckExecutableStep(),
        GroupsStep(),
        UdevRuleStep(),
        UinputModuleStep(),
        ConfigScaffoldStep(),
        ServiceUnitStep(),
        ServiceActivationStep(),
    ]


def console_confirm(prompt: str) -> bool:
    """Wait for Enter. Ctrl+C declines; a closed stdin counts as consent."""

    try:
        input(prompt)
    except EOFError:
        logger.info("No interactive input available, continuing.")
        return True
    except KeyboardInterrupt:
        print()
        return False
    return True


def run(
    *,
    cfg: SetupConfig,
    runner: Runner = run_cmd,
    which: Optional[Callable[[str], Optional[str]]] = None,
    confirm: Callable[[str], bool] = console_confirm,
    dry_run: bool = False,
    summary_path: Optional[str] = None,
) -> PipelineResult:
    """Run the provisioning sequence and report the outcome."""

    ctx = SetupCtx(cfg=cfg, run=runner, confirm=confirm, dry_run=dry_run)
    if which is not None:
        ctx = dataclasses.replace(ctx, which=which)

    logger.info("Starting %s setup for '%s'.", cfg.remapper.capitalize(), cfg.user)

    result = run_pipeline(ctx=ctx, steps=build_steps())

    if summary_path:
        summary = result.to_dict()
        summary["config"] = dataclasses.asdict(cfg)
        summary["dry_run"] = dry_run
        save_summary(summary_path, summary)

    if result.ok:
        logger.warning(
            "IMPORTANT: For group changes to take full effect, you MUST log out and log back in."
        )
        logger.warning(
            "Ensure your %s configuration is correctly placed in '%s'.",
            cfg.remapper.capitalize(),
            cfg.config_file,
        )
        log_success(logger, "%s should now start automatically after you log in.", cfg.remapper.capitalize())
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="kanata-setup",
        description="Provision this desktop to run kanata as a systemd user service.",
    )
    p.add_argument("--config", default=None, help="YAML file overriding paths and names")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to setup log")
    p.add_argument("--summary", default=None, help="Write a run summary (json|yaml)")
    p.add_argument("--dry-run", action="store_true", help="Log commands and writes without executing them")
    p.add_argument("--yes", action="store_true", help="Never pause for confirmation")
    p.add_argument("-v", "--verbose", action="store_true", help="Show captured command output")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = p.parse_args(argv)

    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        cfg = load_setup_config(args.config)
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    result = run(
        cfg=cfg,
        confirm=(lambda prompt: True) if args.yes else console_confirm,
        dry_run=bool(args.dry_run),
        summary_path=args.summary,
    )
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
