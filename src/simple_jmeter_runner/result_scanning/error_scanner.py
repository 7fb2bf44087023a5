"""Result file scanning for error and failure markers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

# Markers in the engine's XML result format.
ERROR_MARKERS = ("<error>true</error>",)
FAILURE_MARKERS = ("<failure>true</failure>", 's="false"')


class ResultScanError(Exception):
    """Raised when a result file cannot be read."""


@dataclass(frozen=True)
class ScanResult:
    """Outcome of scanning one result file."""

    path: Path
    error_count: int
    failure_count: int
    passed: bool


@dataclass(frozen=True)
class ScanSummary:
    """Aggregate over every scanned result file."""

    results: tuple[ScanResult, ...]
    total_errors: int
    total_failures: int

    @property
    def any_failed(self) -> bool:
        return any(not result.passed for result in self.results)

    @property
    def tests_run(self) -> int:
        return len(self.results)


class ErrorScanner:
    """Counts error and failure lines per result file and decides pass/fail.

    The ignore flags only affect the verdict. Counts are always reported in full.
    """

    def __init__(self, ignore_errors: bool = False, ignore_failures: bool = False) -> None:
        self._ignore_errors = ignore_errors
        self._ignore_failures = ignore_failures

    def scan_file(self, path: Path) -> ScanResult:
        error_count = 0
        failure_count = 0
        try:
            with path.open("r", encoding="utf-8", errors="replace") as handle:
                for line in handle:
                    if any(marker in line for marker in ERROR_MARKERS):
                        error_count += 1
                    if any(marker in line for marker in FAILURE_MARKERS):
                        failure_count += 1
        except OSError as exc:
            raise ResultScanError(f"Can't read log file {path}: {exc}") from exc
        passed = (error_count == 0 or self._ignore_errors) and (
            failure_count == 0 or self._ignore_failures
        )
        return ScanResult(
            path=path, error_count=error_count, failure_count=failure_count, passed=passed
        )

    def scan_all(self, paths: Iterable[Path]) -> ScanSummary:
        results = tuple(self.scan_file(Path(path)) for path in paths)
        return ScanSummary(
            results=results,
            total_errors=sum(result.error_count for result in results),
            total_failures=sum(result.failure_count for result in results),
        )
