"""Tests for the root rangeconf CLI."""

from pathlib import Path

from click.testing import CliRunner

from rangeconf import __version__
from rangeconf.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "rangeconf" in result.output
    for command in ("validate", "diff", "defaults"):
        assert command in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


def test_json_flag_accepted(cli_runner: CliRunner) -> None:
    assert cli_runner.invoke(cli, ["--json", "--version"]).exit_code == 0


def test_quiet_flag_accepted(cli_runner: CliRunner) -> None:
    assert cli_runner.invoke(cli, ["-q", "--version"]).exit_code == 0


def test_verbose_flag_accepted(cli_runner: CliRunner) -> None:
    assert cli_runner.invoke(cli, ["-v", "--version"]).exit_code == 0


def test_schema_option_accepted(cli_runner: CliRunner) -> None:
    assert cli_runner.invoke(cli, ["-s", "pkg.mod:S", "--version"]).exit_code == 0


def test_missing_schema_is_usage_error(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["defaults"])
    assert result.exit_code == 2
    assert "No schema given" in result.output


def test_bad_schema_reference(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-s", "no_such_module_xyz:S", "defaults"])
    assert result.exit_code == 1
    assert "cannot import" in result.output


def test_invalid_settings_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    (tmp_path / "rangeconf.toml").write_text("schema = \n")
    result = cli_runner.invoke(cli, ["defaults"])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.output
