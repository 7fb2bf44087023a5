"""Engine run manager: dispatches every run target and collects result files."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import IO

from simple_jmeter_runner.argument_building import EngineArguments
from simple_jmeter_runner.configuration.runtime_settings import RemoteSettings

from .engine_process import EngineRun, ProcessLauncher, TestRunError, launch_engine_process
from .file_discovery import discover_test_files
from .run_targets import RunTarget, build_run_targets

logger = logging.getLogger(__name__)

EXIT_CHECK_PAUSE_PROPERTY = "jmeter.exit.check.pause"
DEFAULT_EXIT_CHECK_PAUSE_MS = 2500
EXIT_CHECK_PAUSE_MARGIN_MS = 500

CommandBuilder = Callable[[EngineArguments], Sequence[str]]


def resolve_exit_check_pause(engine_properties: Mapping[str, str]) -> int:
    """Milliseconds to wait after an engine exits before its run counts as finished.

    The engine's own exit-check pause plus a margin for its cleanup threads. A missing or
    unparsable value falls back to the default with a warning.
    """
    raw_value = engine_properties.get(EXIT_CHECK_PAUSE_PROPERTY)
    try:
        configured = int(str(raw_value).strip())
        if configured < 0:
            raise ValueError(raw_value)
    except (TypeError, ValueError):
        logger.warning(
            "Unable to parse the '%s' entry in jmeter.properties! "
            "Falling back to a default value of '%d'.",
            EXIT_CHECK_PAUSE_PROPERTY,
            DEFAULT_EXIT_CHECK_PAUSE_MS,
        )
        return DEFAULT_EXIT_CHECK_PAUSE_MS
    return configured + EXIT_CHECK_PAUSE_MARGIN_MS


class EngineRunManager:  # pylint: disable=too-many-instance-attributes
    """Runs the engine once per target, strictly one after another."""

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        template: EngineArguments,
        *,
        logs_dir: Path,
        test_files_dir: Path,
        includes: Sequence[str],
        excludes: Sequence[str],
        suppress_output: bool,
        working_dir: Path,
        command_builder: CommandBuilder,
        exit_check_pause_ms: int = DEFAULT_EXIT_CHECK_PAUSE_MS,
        remote_settings: RemoteSettings | None = None,
        launcher: ProcessLauncher | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._template = template
        self._logs_dir = logs_dir
        self._test_files_dir = test_files_dir
        self._includes = tuple(includes)
        self._excludes = tuple(excludes)
        self._suppress_output = suppress_output
        self._working_dir = working_dir
        self._command_builder = command_builder
        self._exit_check_pause_ms = exit_check_pause_ms
        self._remote_settings = remote_settings
        self._launcher = launcher or launch_engine_process
        self._sleep = sleep or time.sleep
        self._runs: list[EngineRun] = []

    # pylint: enable=too-many-arguments

    @property
    def runs(self) -> tuple[EngineRun, ...]:
        return tuple(self._runs)

    def resolve_targets(self) -> tuple[RunTarget, ...]:
        test_files = discover_test_files(self._test_files_dir, self._includes, self._excludes)
        return build_run_targets(test_files, self._remote_settings, self._test_files_dir)

    def execute(self) -> list[Path]:
        """Run every target and return result files in dispatch order.

        Raises:
          TestRunError: When two targets would write the same result file, or on the first
            run that fails to start, exits non-zero or leaves no result file. Later targets
            are not run.
        """
        targets = self.resolve_targets()
        if not targets:
            logger.warning(
                "No test files matching %s found in %s", list(self._includes), self._test_files_dir
            )
            return []
        self._check_distinct_results(targets)
        results: list[Path] = []
        for target in targets:
            run = self._execute_target(target)
            results.append(run.result_path)
        return results

    def _execute_target(self, target: RunTarget) -> EngineRun:
        arguments = target.specialize(self._template, self._logs_dir)
        run = EngineRun(target_name=target.name, arguments=arguments)
        self._runs.append(run)
        command = self._command_builder(arguments)
        logger.info("Executing test: %s", target.name)
        _remove_stale_result(run)

        console_log = self._open_console_log(run) if self._suppress_output else None
        try:
            try:
                process = self._launcher(command, self._working_dir, console_log)
            except OSError as exc:
                raise TestRunError(f"Unable to start the engine for {target.name}: {exc}") from exc
            run.mark_running()
            exit_code = process.wait()
        finally:
            if console_log is not None:
                console_log.close()
        run.mark_exited(exit_code)
        if exit_code != 0:
            raise TestRunError(
                f"Engine exited with code {exit_code} while running {target.name}. "
                f"See {arguments.log_file} for details."
            )

        self._sleep(self._exit_check_pause_ms / 1000)
        run.mark_grace_period_elapsed()

        if not run.result_path.is_file():
            raise TestRunError(
                f"Engine produced no result file for {target.name}: {run.result_path}"
            )
        run.mark_collected()
        logger.info("Completed test: %s", target.name)
        return run

    def _check_distinct_results(self, targets: Sequence[RunTarget]) -> None:
        claimed: dict[Path, Path | None] = {}
        for target in targets:
            arguments = target.specialize(self._template, self._logs_dir)
            if arguments.result_file in claimed:
                raise TestRunError(
                    f"{claimed[arguments.result_file]} and {arguments.test_file} would both "
                    f"write {arguments.result_file}"
                )
            claimed[arguments.result_file] = arguments.test_file

    def _open_console_log(self, run: EngineRun) -> IO[bytes]:
        console_path = self._logs_dir / f"{run.arguments.run_name}-console.log"
        try:
            return console_path.open("wb")
        except OSError as exc:
            raise TestRunError(f"Unable to open console log {console_path}: {exc}") from exc


def _remove_stale_result(run: EngineRun) -> None:
    # the engine appends to an existing result file
    try:
        run.result_path.unlink(missing_ok=True)
    except OSError as exc:
        raise TestRunError(f"Unable to remove stale result file {run.result_path}: {exc}") from exc
