import types

import pytest

from infitrivia import cli


@pytest.fixture(autouse=True)
def reset_metadata(monkeypatch):
    """Ensure metadata.version is controllable during tests."""

    def fake_version(name: str) -> str:
        assert name == "infitrivia"
        return "0.0-test"

    monkeypatch.setattr(cli.metadata, "version", fake_version)
    yield


def test_version_command_reports_installed_version(capsys):
    code = cli.main(["--version"])
    assert code == 0
    assert capsys.readouterr().out.strip() == "0.0-test"


def test_version_command_handles_missing_package(monkeypatch, capsys):
    monkeypatch.setattr(
        cli.metadata,
        "version",
        lambda name: (_ for _ in ()).throw(cli.metadata.PackageNotFoundError()),
    )
    code = cli.main(["version"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "unknown"


def test_no_args_prints_usage_and_returns_error(capsys):
    code = cli.main([])
    captured = capsys.readouterr()
    assert code == 2
    assert "Usage: infitrivia" in captured.out
    assert "Available commands:" in captured.out


def test_help_flag_shows_usage(capsys):
    code = cli.main(["-h"])
    assert code == 0
    assert "Usage: infitrivia" in capsys.readouterr().out


def test_list_outputs_command_table(capsys):
    code = cli.main(["list"])
    out = capsys.readouterr().out
    assert code == 0
    for name in ("play", "validate", "generate", "config"):
        assert name in out
    assert "(interactive)" in out


def test_help_known_command(capsys):
    code = cli.main(["help", "generate"])
    out = capsys.readouterr().out
    assert code == 0
    assert "Run `infitrivia generate --help`" in out


def test_help_unknown_command(capsys):
    code = cli.main(["help", "bogus"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command 'bogus'." in captured.err


def test_unknown_command_returns_error(capsys):
    code = cli.main(["dance"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command 'dance'." in captured.err
    assert "Available commands:" in captured.err


def test_command_dispatches_to_trivia_cli(monkeypatch):
    calls = []

    def fake_main(argv):
        calls.append(argv)
        return 3

    monkeypatch.setattr(
        cli, "import_module", lambda name: types.SimpleNamespace(main=fake_main)
    )
    assert cli.main(["validate", "Volcanoes", "--verbose"]) == 3
    assert calls == [["validate", "Volcanoes", "--verbose"]]


@pytest.mark.parametrize(
    "code, expected",
    [(None, 0), (0, 0), (2, 2), ("boom", 1)],
)
def test_system_exit_is_normalized(monkeypatch, capsys, code, expected):
    def fake_main(argv):
        raise SystemExit(code)

    monkeypatch.setattr(
        cli, "import_module", lambda name: types.SimpleNamespace(main=fake_main)
    )
    assert cli.main(["play", "Planets"]) == expected


def test_subcommand_help_exits_cleanly(capsys):
    assert cli.main(["play", "--help"]) == 0
    assert "--questions" in capsys.readouterr().out
