from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import List, Sequence, Tuple

# PATH for the unit; the cargo bin directory is where `cargo install kanata` puts the binary.
SERVICE_PATH = "/usr/local/bin:/usr/local/sbin:/usr/bin:/bin:/usr/sbin:/sbin:/home/%u/.cargo/bin"

Section = Tuple[str, Sequence[Tuple[str, str]]]


@dataclass(frozen=True)
class ServiceUnit:
    description: str
    documentation: str
    exec_start: str
    after: Sequence[str] = ("graphical-session.target", "network-online.target")
    wants: Sequence[str] = ("graphical-session.target",)
    path: str = SERVICE_PATH
    restart: str = "no"
    wanted_by: str = "default.target"

    def sections(self) -> List[Section]:
        return [
            (
                "Unit",
                [
                    ("Description", self.description),
                    ("Documentation", self.documentation),
                    ("After", " ".join(self.after)),
                    ("Wants", " ".join(self.wants)),
                ],
            ),
            (
                "Service",
                [
                    ("Environment", f'"PATH={self.path}"'),
                    ("Type", "simple"),
                    ("ExecStart", self.exec_start),
                    ("Restart", self.restart),
                ],
            ),
            ("Install", [("WantedBy", self.wanted_by)]),
        ]


def render_unit(unit: ServiceUnit) -> str:
    blocks = []
    for name, items in unit.sections():
        lines = [f"[{name}]"] + [f"{k}={v}" for k, v in items]
        blocks.append("\n".join(lines) + "\n")
    return "\n".join(blocks)


def exec_arg(value: str) -> str:
    """Quote `value` for sh, then escape it for systemd's single-quoted ExecStart word.

    systemd applies C unescaping, `%` specifiers and `$VAR` expansion before sh sees it.
    """

    quoted = shlex.quote(value)
    return quoted.replace("\\", "\\\\").replace("'", "\\'").replace("%", "%%").replace("$", "$$")


def remapper_unit(remapper: str, config_file: str) -> ServiceUnit:
    """Unit that resolves the remapper on PATH at start time instead of hard-coding it."""

    return ServiceUnit(
        description=f"{remapper.capitalize()} keyboard remapper",
        documentation="https://github.com/jtroo/kanata",
        exec_start=f"/usr/bin/sh -c 'exec $(which {remapper}) --cfg {exec_arg(config_file)}'",
    )
