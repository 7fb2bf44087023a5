"""CLI smoke tests."""

from click.testing import CliRunner
from simple_jmeter_runner.cli import cli


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "generate-config" in result.output
    assert "run" in result.output


def test_run_help_lists_ignore_flags() -> None:
    result = CliRunner().invoke(cli, ["run", "--help"])

    assert result.exit_code == 0
    assert "--ignore-errors" in result.output
    assert "--ignore-failures" in result.output
    assert "--log-level" in result.output
