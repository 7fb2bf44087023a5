"""Run execution use-case service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from functools import partial
from pathlib import Path

from simple_jmeter_runner.argument_building import build_engine_arguments, build_engine_command
from simple_jmeter_runner.configuration import Configuration, ConfigurationError, load_configuration
from simple_jmeter_runner.environment_staging import (
    CONFIG_ARTIFACT_ID,
    ClasspathError,
    LibraryArtifact,
    StagingError,
    WorkingTree,
    assemble_classpath,
    discover_library_artifacts,
    find_artifact,
    prepare_working_tree,
)
from simple_jmeter_runner.property_merging import (
    ConfigArtifactPropertySource,
    MergedPropertySet,
    PropertyCategory,
    PropertyMergeError,
    configure_property_files,
)
from simple_jmeter_runner.result_scanning import ErrorScanner, ResultScanError, ScanSummary
from simple_jmeter_runner.results_writing import RunMetadata, write_summary_workbook
from simple_jmeter_runner.test_running import (
    EngineRunManager,
    ProcessLauncher,
    TestRunError,
    resolve_exit_check_pause,
)

from .run_contracts import RunOutcome, RunRequest

logger = logging.getLogger(__name__)

_EXECUTION_ERRORS = (
    StagingError,
    PropertyMergeError,
    ClasspathError,
    TestRunError,
    ResultScanError,
)


class RunExecutionError(Exception):
    """Raised when the run cannot be completed because of configuration or environment."""


class TestResultsFailure(Exception):
    """Raised when the engine ran but its results contain errors or failures."""

    __test__ = False

    def __init__(self, message: str, summary: ScanSummary, summary_path: Path | None) -> None:
        super().__init__(message)
        self.summary = summary
        self.summary_path = summary_path


def describe_failure(
    summary: ScanSummary, *, ignore_errors: bool = False, ignore_failures: bool = False
) -> str:
    """Operator-facing verdict for a failed run, naming only what was not ignored."""
    errors = 0 if ignore_errors else summary.total_errors
    failures = 0 if ignore_failures else summary.total_failures
    if errors == 0:
        return "There were test failures.  See the jmeter logs for details."
    if failures == 0:
        return "There were test errors.  See the jmeter logs for details."
    return "There were test errors and failures.  See the jmeter logs for details."


def execute_performance_test_run(
    request: RunRequest,
    *,
    launcher: ProcessLauncher | None = None,
    sleep: Callable[[float], None] | None = None,
) -> RunOutcome:
    """Stage, run and scan every performance test, then decide the build verdict.

    Raises:
      RunExecutionError: For configuration or environment problems. Nothing is retried.
      TestResultsFailure: When any result file fails the scan.
    """
    try:
        configuration = load_configuration(request.config_path)
    except (ConfigurationError, OSError) as exc:
        raise RunExecutionError(str(exc)) from exc
    ignore_errors = _resolve_flag(request.ignore_errors, configuration.results.ignore_errors)
    ignore_failures = _resolve_flag(request.ignore_failures, configuration.results.ignore_failures)
    run_start = datetime.now(UTC)

    _log_banner()
    try:
        tree = prepare_working_tree(configuration.work_dir)
        result_paths = _run_engine(
            configuration, tree, run_start=run_start, launcher=launcher, sleep=sleep
        )
        summary = ErrorScanner(ignore_errors, ignore_failures).scan_all(result_paths)
        summary_path = (
            write_summary_workbook(
                tree.report_dir / configuration.report.file_name,
                summary,
                RunMetadata(
                    run_start=run_start,
                    config_path=Path(request.config_path).resolve(),
                    work_dir=tree.root,
                    ignore_errors=ignore_errors,
                    ignore_failures=ignore_failures,
                ),
            )
            if configuration.report.enabled
            else None
        )
    except _EXECUTION_ERRORS as exc:
        raise RunExecutionError(str(exc)) from exc
    except OSError as exc:
        raise RunExecutionError(f"I/O failure during run: {exc}") from exc

    _log_summary(summary)
    if summary.any_failed:
        raise TestResultsFailure(
            describe_failure(
                summary, ignore_errors=ignore_errors, ignore_failures=ignore_failures
            ),
            summary,
            summary_path,
        )
    return RunOutcome(
        result_paths=tuple(result_paths), summary=summary, summary_path=summary_path
    )


def _run_engine(
    configuration: Configuration,
    tree: WorkingTree,
    *,
    run_start: datetime,
    launcher: ProcessLauncher | None,
    sleep: Callable[[float], None] | None,
) -> list[Path]:
    artifacts = discover_library_artifacts(configuration.engine.libraries)
    property_sets = _configure_properties(configuration, artifacts, tree)
    classpath = assemble_classpath(artifacts, tree.lib_ext_dir)

    global_properties = property_sets.get(PropertyCategory.GLOBAL)
    template = build_engine_arguments(
        output_dir=tree.report_dir,
        proxy=configuration.proxy,
        engine_home=tree.root,
        timestamp_results=configuration.results.timestamp,
        global_properties_file=global_properties.path if global_properties else None,
        started_at=run_start,
    )
    exit_check_pause_ms = resolve_exit_check_pause(
        property_sets[PropertyCategory.JMETER].properties
    )
    logger.info(" ")
    logger.info(template.proxy_details())

    manager = EngineRunManager(
        template,
        logs_dir=tree.logs_dir,
        test_files_dir=configuration.test_files.directory,
        includes=configuration.test_files.include,
        excludes=configuration.test_files.exclude,
        suppress_output=configuration.engine.suppress_output,
        working_dir=tree.bin_dir,
        command_builder=partial(
            build_engine_command,
            java_executable=configuration.engine.java_executable,
            jvm_args=configuration.engine.jvm_args,
            classpath=classpath.classpath,
            working_dir=tree.bin_dir,
        ),
        exit_check_pause_ms=exit_check_pause_ms,
        remote_settings=configuration.remote,
        launcher=launcher,
        sleep=sleep,
    )
    return manager.execute()


def _configure_properties(
    configuration: Configuration,
    artifacts: tuple[LibraryArtifact, ...],
    tree: WorkingTree,
) -> Mapping[PropertyCategory, MergedPropertySet]:
    config_artifact = find_artifact(artifacts, CONFIG_ARTIFACT_ID)
    return configure_property_files(
        ConfigArtifactPropertySource(config_artifact.path),
        configuration.properties.overrides,
        mode=configuration.properties.mode,
        output_dir=tree.bin_dir,
        custom_files_dir=configuration.test_files.directory,
    )


def _resolve_flag(requested: bool | None, configured: bool) -> bool:
    return configured if requested is None else requested


def _log_banner() -> None:
    logger.info(" ")
    logger.info("-------------------------------------------------------")
    logger.info(" P E R F O R M A N C E    T E S T S")
    logger.info("-------------------------------------------------------")
    logger.info(" ")


def _log_summary(summary: ScanSummary) -> None:
    logger.info(" ")
    logger.info("Test Results:")
    logger.info(" ")
    logger.info(
        "Tests Run: %d, Failures: %d, Errors: %d",
        summary.tests_run,
        summary.total_failures,
        summary.total_errors,
    )
    logger.info(" ")
