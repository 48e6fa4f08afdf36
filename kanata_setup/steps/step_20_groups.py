from __future__ import annotations

import logging

from ..lib.command import CommandError, sudo
from ..pipeline import FailureKind, SetupCtx, StepResult

logger = logging.getLogger(__name__)


def group_exists(ctx: SetupCtx, group: str) -> bool:
    return ctx.run(["getent", "group", group], check=False).ok


def user_groups(ctx: SetupCtx, user: str) -> set[str]:
    """Groups of `user` as reported by `groups` ("user : a b c" or "a b c")."""

    r = ctx.run(["groups", user], check=False)
    if not r.ok:
        return set()
    out = r.stdout.strip()
    if ":" in out:
        out = out.split(":", 1)[1]
    return set(out.split())


class GroupsStep:
    step_id = "20_groups"

    def run(self, ctx: SetupCtx) -> StepResult:
        cfg = ctx.cfg
        user = cfg.user
        changed = False
        logger.info("Adding user '%s' to %s groups...", user, " and ".join(f"'{g}'" for g in cfg.groups))

        if not group_exists(ctx, cfg.uinput_group):
            try:
                ctx.run(sudo(["groupadd", cfg.uinput_group]), dry_run=ctx.dry_run)
            except CommandError as e:
                logger.debug("%s", e)
                return StepResult.failed(
                    self.step_id,
                    FailureKind.PRIVILEGED_COMMAND,
                    f"Failed to create '{cfg.uinput_group}' group.",
                )
            logger.info("Created '%s' group.", cfg.uinput_group)
            changed = True
        else:
            logger.info("'%s' group already exists.", cfg.uinput_group)

        current = user_groups(ctx, user)
        for group in cfg.groups:
            if group in current:
                logger.info("'%s' is already in '%s' group.", user, group)
                continue
            try:
                ctx.run(sudo(["usermod", "-aG", group, user]), dry_run=ctx.dry_run)
            except CommandError as e:
                logger.debug("%s", e)
                return StepResult.failed(
                    self.step_id,
                    FailureKind.PRIVILEGED_COMMAND,
                    f"Failed to add '{user}' to '{group}' group.",
                )
            logger.info("Added '%s' to '%s' group.", user, group)
            changed = True

        logger.warning("You will need to log out and log back in for group changes to take effect!")
        return StepResult.done(self.step_id, changed=changed)
