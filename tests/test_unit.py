from __future__ import annotations

from kanata_setup.lib.unit import exec_arg, remapper_unit, render_unit

EXPECTED = """\
[Unit]
Description=Kanata keyboard remapper
Documentation=https://github.com/jtroo/kanata
After=graphical-session.target network-online.target
Wants=graphical-session.target

[Service]
Environment="PATH=/usr/local/bin:/usr/local/sbin:/usr/bin:/bin:/usr/sbin:/sbin:/home/%u/.cargo/bin"
Type=simple
ExecStart=/usr/bin/sh -c 'exec $(which kanata) --cfg /home/alice/.config/kanata/kanata.kbd'
Restart=no

[Install]
WantedBy=default.target
"""


def test_render_kanata_unit():
    unit = remapper_unit("kanata", "/home/alice/.config/kanata/kanata.kbd")
    assert render_unit(unit) == EXPECTED


def test_exec_start_resolves_binary_at_start_time():
    unit = remapper_unit("kanata", "/cfg.kbd")
    assert "$(which kanata)" in unit.exec_start
    assert not unit.exec_start.startswith("/usr/bin/kanata")


def test_exec_arg_leaves_plain_paths_alone():
    assert exec_arg("/home/alice/.config/kanata/kanata.kbd") == "/home/alice/.config/kanata/kanata.kbd"


def test_exec_arg_quotes_spaces_for_sh_inside_systemd_quotes():
    unit = remapper_unit("kanata", "/home/al ice/kanata.kbd")
    assert unit.exec_start == (
        "/usr/bin/sh -c 'exec $(which kanata) --cfg \\'/home/al ice/kanata.kbd\\''"
    )


def test_exec_arg_escapes_systemd_specials():
    assert exec_arg("/home/a/100%.kbd") == "/home/a/100%%.kbd"
    assert exec_arg("/home/$USER/k.kbd") == "\\'/home/$$USER/k.kbd\\'"
    assert exec_arg("/home/o'neil/k.kbd") == "\\'/home/o\\'\"\\'\"\\'neil/k.kbd\\'"
