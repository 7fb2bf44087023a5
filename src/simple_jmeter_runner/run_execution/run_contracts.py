"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from simple_jmeter_runner.result_scanning import ScanSummary


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one run.

    `ignore_errors`/`ignore_failures` override the configuration file when set.
    """

    config_path: str
    ignore_errors: bool | None = None
    ignore_failures: bool | None = None


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed, passing run."""

    result_paths: tuple[Path, ...]
    summary: ScanSummary
    summary_path: Path | None
