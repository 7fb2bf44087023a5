"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from simple_jmeter_runner.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from simple_jmeter_runner.run_execution import (
    RunExecutionError,
    RunRequest,
    TestResultsFailure,
    execute_performance_test_run,
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="simple-jmeter-runner")
def cli() -> None:
    """Run JMeter performance tests as a pass/fail build gate."""


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML run configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML run configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="run")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML run configuration file",
)
@click.option(
    "--ignore-errors",
    is_flag=True,
    default=False,
    help="Do not fail the build on result errors (they are still counted).",
)
@click.option(
    "--ignore-failures",
    is_flag=True,
    default=False,
    help="Do not fail the build on result failures (they are still counted).",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Verbosity of run progress output.",
)
def run_tests(
    config_path: str, ignore_errors: bool, ignore_failures: bool, log_level: str
) -> None:
    """Run every matching test file and fail when results contain errors or failures."""
    _configure_logging(log_level)
    try:
        outcome = execute_performance_test_run(
            RunRequest(
                config_path=config_path,
                ignore_errors=True if ignore_errors else None,
                ignore_failures=True if ignore_failures else None,
            )
        )
    except (RunExecutionError, TestResultsFailure) as exc:
        raise CliError(str(exc)) from exc
    for result_path in outcome.result_paths:
        click.echo(str(result_path))
    if outcome.summary_path is not None:
        click.echo(str(outcome.summary_path))


def _configure_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
