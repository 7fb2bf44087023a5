"""Run execution domain exports."""

from .performance_run_use_case import (
    RunExecutionError,
    TestResultsFailure,
    describe_failure,
    execute_performance_test_run,
)
from .run_contracts import RunOutcome, RunRequest

__all__ = [
    "RunRequest",
    "RunOutcome",
    "RunExecutionError",
    "TestResultsFailure",
    "describe_failure",
    "execute_performance_test_run",
]
