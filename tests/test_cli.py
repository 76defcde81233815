import sys

import pytest

import cli


def _run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["cpindexer", *args])
    cli.main()


def test_cli_reports_whether_the_index_changed(make_package, mods_root, tmp_path, monkeypatch, capsys):
    make_package("MagicMod", changes=[{"Action": "EditData", "Target": "Data/Objects", "Entries": {"MyItem": {}}}])
    args = (
        "--config-path", str(tmp_path / "config.toml"),
        "--mods-root", str(mods_root),
        "--output", str(tmp_path / "out" / "index.json"),
    )

    _run_cli(monkeypatch, *args)
    first = capsys.readouterr().out
    _run_cli(monkeypatch, *args)
    second = capsys.readouterr().out

    assert "Total items indexed: 1 from 1 mods (index updated)" in first
    assert "Total items indexed: 1 from 1 mods (index unchanged)" in second


def test_cli_manual_run_without_mods_root_exits_non_zero(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["cpindexer", "--config-path", str(tmp_path / "config.toml")])
    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code == 1
