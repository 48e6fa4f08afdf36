from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

import pytest

from kanata_setup.lib.command import CmdResult, CommandError
from kanata_setup.logging_utils import reset_logging
from kanata_setup.pipeline import SetupCtx
from kanata_setup.setup_config import SetupConfig


class FakeHost:
    """Stands in for run_cmd: emulates the handful of admin tools the steps call."""

    def __init__(self, user: str = "alice") -> None:
        self.user = user
        self.calls: List[List[str]] = []
        self.group_db: Dict[str, Set[str]] = {"input": set(), "wheel": {user}}
        self.modules: Set[str] = set()
        self.device_present = True
        self.fail_on: Set[str] = set()

    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        input_text: Optional[str] = None,
        dry_run: bool = False,
        **_: object,
    ) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        if dry_run:
            return CmdResult(argv=argv, returncode=0, stdout="", stderr="")

        cmd = argv[1:] if argv[0] == "sudo" else argv
        joined = " ".join(cmd)
        if any(joined.startswith(prefix) for prefix in self.fail_on):
            rc, out, err = 1, "", f"{cmd[0]}: simulated failure"
        else:
            rc, out, err = self._dispatch(cmd, input_text)

        if check and rc != 0:
            raise CommandError(argv, rc, err)
        return CmdResult(argv=argv, returncode=rc, stdout=out, stderr=err)

    def _dispatch(self, cmd: List[str], input_text: Optional[str]):
        name = cmd[0]
        if name == "getent":
            return (0, f"{cmd[2]}:x:1000:\n", "") if cmd[2] in self.group_db else (2, "", "")
        if name == "groups":
            mine = sorted(g for g, members in self.group_db.items() if cmd[1] in members)
            return 0, f"{cmd[1]} : {' '.join(mine)}\n", ""
        if name == "groupadd":
            if cmd[1] in self.group_db:
                return 9, "", f"groupadd: group '{cmd[1]}' already exists"
            self.group_db[cmd[1]] = set()
            return 0, "", ""
        if name == "usermod":
            group, user = cmd[2], cmd[3]
            if group not in self.group_db:
                return 6, "", f"usermod: group '{group}' does not exist"
            self.group_db[group].add(user)
            return 0, "", ""
        if name == "tee":
            append = cmd[1] == "-a"
            path = Path(cmd[-1])
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a" if append else "w", encoding="utf-8") as f:
                f.write(input_text or "")
            return 0, input_text or "", ""
        if name == "cat":
            path = Path(cmd[1])
            if not path.exists():
                return 1, "", f"cat: {cmd[1]}: No such file or directory"
            return 0, path.read_bytes().decode("utf-8", errors="replace"), ""
        if name == "udevadm":
            return 0, "", ""
        if name == "ls":
            if self.device_present:
                return 0, f"crw-rw---- 1 root uinput 10, 223 Oct 18 10:00 {cmd[-1]}\n", ""
            return 2, "", f"ls: cannot access '{cmd[-1]}': No such file or directory"
        if name == "modprobe":
            self.modules.add(cmd[1])
            return 0, "", ""
        if name == "systemctl":
            if cmd[2] == "status":
                return 3, "○ kanata.service - Kanata keyboard remapper\n", ""
            return 0, "", ""
        return 127, "", f"{name}: command not found"

    def ran(self, *prefix: str) -> List[List[str]]:
        """Calls whose argv (sudo stripped) starts with prefix."""

        out = []
        for argv in self.calls:
            cmd = argv[1:] if argv[0] == "sudo" else argv
            if cmd[: len(prefix)] == list(prefix):
                out.append(argv)
        return out


@pytest.fixture(autouse=True)
def _clean_logging(caplog):
    caplog.set_level(logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def cfg(tmp_path: Path) -> SetupConfig:
    return SetupConfig.from_environment(
        user="alice",
        home=str(tmp_path / "home" / "alice"),
        overrides={
            "udev_rule_file": str(tmp_path / "etc/udev/rules.d/99-input.rules"),
            "modules_load_file": str(tmp_path / "etc/modules-load.d/uinput.conf"),
            "uinput_device": str(tmp_path / "dev/uinput"),
        },
    )


@pytest.fixture
def ctx(cfg: SetupConfig, host: FakeHost) -> SetupCtx:
    return SetupCtx(
        cfg=cfg,
        run=host,
        which=lambda name: f"/home/alice/.cargo/bin/{name}",
        confirm=lambda prompt: True,
    )
