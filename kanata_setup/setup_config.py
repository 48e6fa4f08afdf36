from __future__ import annotations

import dataclasses
import getpass
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

DEFAULT_REMAPPER = "kanata"
DEFAULT_UDEV_RULE_FILE = "/etc/udev/rules.d/99-input.rules"
DEFAULT_MODULES_LOAD_FILE = "/etc/modules-load.d/uinput.conf"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class SetupConfig:
    """Paths and names shared read-only by every step."""

    user: str
    home: str
    remapper: str
    config_dir: str
    config_file: str
    udev_rule_file: str
    modules_load_file: str
    service_dir: str
    service_file: str
    module: str = "uinput"
    uinput_group: str = "uinput"
    input_group: str = "input"
    uinput_device: str = "/dev/uinput"

    @property
    def service_name(self) -> str:
        return Path(self.service_file).name

    @property
    def groups(self) -> tuple[str, str]:
        return (self.input_group, self.uinput_group)

    @classmethod
    def from_environment(
        cls,
        *,
        user: Optional[str] = None,
        home: Optional[str] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> "SetupConfig":
        user = user or os.environ.get("USER") or getpass.getuser()
        home = home or os.environ.get("HOME") or str(Path.home())
        raw: Dict[str, Any] = dict(overrides or {})

        unknown = sorted(set(raw) - _FIELD_NAMES)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        for key, value in raw.items():
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"Config key {key!r} must be a non-empty string")

        user = raw.pop("user", user)
        home = _expand(raw.pop("home", home), home)
        remapper = raw.pop("remapper", DEFAULT_REMAPPER)

        # Dependent paths follow their parents unless given explicitly.
        config_dir = _expand(raw.pop("config_dir", f"{home}/.config/{remapper}"), home)
        config_file = _expand(raw.pop("config_file", f"{config_dir}/{remapper}.kbd"), home)
        service_dir = _expand(raw.pop("service_dir", f"{home}/.config/systemd/user"), home)
        service_file = _expand(raw.pop("service_file", f"{service_dir}/{remapper}.service"), home)

        return cls(
            user=user,
            home=home,
            remapper=remapper,
            config_dir=config_dir,
            config_file=config_file,
            udev_rule_file=raw.pop("udev_rule_file", DEFAULT_UDEV_RULE_FILE),
            modules_load_file=raw.pop("modules_load_file", DEFAULT_MODULES_LOAD_FILE),
            service_dir=service_dir,
            service_file=service_file,
            **raw,
        )


_FIELD_NAMES = {f.name for f in dataclasses.fields(SetupConfig)}


def _expand(path: str, home: str) -> str:
    if path == "~" or path.startswith("~/"):
        return home + path[1:]
    return path


def load_setup_config(
    path: Optional[str] = None,
    *,
    user: Optional[str] = None,
    home: Optional[str] = None,
) -> SetupConfig:
    """Build the config from the environment plus an optional YAML file."""

    if path is None:
        return SetupConfig.from_environment(user=user, home=home)

    p = Path(path).expanduser()
    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("setup config must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {p}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{p} must contain a mapping/object")

    return SetupConfig.from_environment(user=user, home=home, overrides=raw)
