from __future__ import annotations

import dataclasses

import pytest

from kanata_setup.setup_config import ConfigError, SetupConfig, load_setup_config


def test_defaults_follow_home_and_remapper():
    cfg = SetupConfig.from_environment(user="alice", home="/home/alice")

    assert cfg.config_dir == "/home/alice/.config/kanata"
    assert cfg.config_file == "/home/alice/.config/kanata/kanata.kbd"
    assert cfg.udev_rule_file == "/etc/udev/rules.d/99-input.rules"
    assert cfg.modules_load_file == "/etc/modules-load.d/uinput.conf"
    assert cfg.service_dir == "/home/alice/.config/systemd/user"
    assert cfg.service_file == "/home/alice/.config/systemd/user/kanata.service"
    assert cfg.service_name == "kanata.service"
    assert cfg.groups == ("input", "uinput")


def test_user_and_home_come_from_environment(monkeypatch):
    monkeypatch.setenv("USER", "bob")
    monkeypatch.setenv("HOME", "/srv/bob")

    cfg = SetupConfig.from_environment()

    assert cfg.user == "bob"
    assert cfg.config_file == "/srv/bob/.config/kanata/kanata.kbd"


def test_config_is_immutable():
    cfg = SetupConfig.from_environment(user="alice", home="/home/alice")
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.config_file = "/tmp/x"  # type: ignore[misc]


def test_yaml_overrides_rederive_dependent_paths(tmp_path):
    path = tmp_path / "setup.yaml"
    path.write_text("config_dir: ~/dotfiles/kanata\nservice_dir: ~/units\n", encoding="utf-8")

    cfg = load_setup_config(str(path), user="alice", home="/home/alice")

    assert cfg.config_dir == "/home/alice/dotfiles/kanata"
    assert cfg.config_file == "/home/alice/dotfiles/kanata/kanata.kbd"
    assert cfg.service_file == "/home/alice/units/kanata.service"


def test_explicit_config_file_wins(tmp_path):
    path = tmp_path / "setup.yml"
    path.write_text("config_file: /etc/kanata/main.kbd\n", encoding="utf-8")

    cfg = load_setup_config(str(path), user="alice", home="/home/alice")

    assert cfg.config_file == "/etc/kanata/main.kbd"
    assert cfg.config_dir == "/home/alice/.config/kanata"


def test_no_path_means_defaults():
    assert load_setup_config(None, user="a", home="/h") == SetupConfig.from_environment(user="a", home="/h")


@pytest.mark.parametrize(
    "body, message",
    [
        ("- a\n- b\n", "mapping"),
        ("colour: blue\n", "Unknown config keys: colour"),
        ("module: 3\n", "non-empty string"),
        ("config_dir: [unclosed\n", "Invalid YAML"),
    ],
)
def test_bad_config_files(tmp_path, body, message):
    path = tmp_path / "setup.yaml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_setup_config(str(path), user="alice", home="/home/alice")


def test_missing_or_non_yaml_config(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_setup_config(str(tmp_path / "nope.yaml"))

    path = tmp_path / "setup.json"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(ConfigError, match="must be YAML"):
        load_setup_config(str(path))
