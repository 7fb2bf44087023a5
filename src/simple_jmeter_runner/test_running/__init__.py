"""Test running domain exports."""

from .engine_process import (
    EngineProcess,
    EngineRun,
    ProcessLauncher,
    RunState,
    TestRunError,
    launch_engine_process,
)
from .engine_run_manager import (
    DEFAULT_EXIT_CHECK_PAUSE_MS,
    EXIT_CHECK_PAUSE_MARGIN_MS,
    EXIT_CHECK_PAUSE_PROPERTY,
    EngineRunManager,
    resolve_exit_check_pause,
)
from .file_discovery import discover_test_files
from .run_targets import LocalTestTarget, RemoteAgentTarget, RunTarget, build_run_targets

__all__ = [
    "DEFAULT_EXIT_CHECK_PAUSE_MS",
    "EXIT_CHECK_PAUSE_MARGIN_MS",
    "EXIT_CHECK_PAUSE_PROPERTY",
    "EngineProcess",
    "EngineRun",
    "EngineRunManager",
    "LocalTestTarget",
    "ProcessLauncher",
    "RemoteAgentTarget",
    "RunState",
    "RunTarget",
    "TestRunError",
    "build_run_targets",
    "discover_test_files",
    "launch_engine_process",
    "resolve_exit_check_pause",
]
