"""Run summary workbook writer tests."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from openpyxl import load_workbook
from simple_jmeter_runner.result_scanning import ScanResult, ScanSummary
from simple_jmeter_runner.results_writing import (
    RESULTS_SHEET_NAME,
    RUN_INFO_SHEET_NAME,
    RunMetadata,
    write_summary_workbook,
)


def _summary(tmp_path: Path) -> ScanSummary:
    return ScanSummary(
        results=(
            ScanResult(tmp_path / "a.jtl", error_count=1, failure_count=0, passed=False),
            ScanResult(tmp_path / "b.jtl", error_count=0, failure_count=0, passed=True),
        ),
        total_errors=1,
        total_failures=0,
    )


def _metadata(tmp_path: Path) -> RunMetadata:
    return RunMetadata(
        run_start=datetime(2026, 10, 19, 8, 0, tzinfo=UTC),
        config_path=tmp_path / "jmeter-runner.yaml",
        work_dir=tmp_path / "target" / "jmeter",
        ignore_errors=False,
        ignore_failures=False,
    )


def test_summary_workbook_lists_every_result_file(tmp_path: Path) -> None:
    output = write_summary_workbook(
        tmp_path / "report" / "summary.xlsx", _summary(tmp_path), _metadata(tmp_path)
    )

    workbook = load_workbook(output)
    assert workbook.sheetnames == [RESULTS_SHEET_NAME, RUN_INFO_SHEET_NAME]
    rows = list(workbook[RESULTS_SHEET_NAME].iter_rows(values_only=True))
    assert rows[0] == ("ResultFile", "Errors", "Failures", "Status")
    assert rows[1] == (str(tmp_path / "a.jtl"), 1, 0, "FAILED")
    assert rows[2] == (str(tmp_path / "b.jtl"), 0, 0, "PASSED")


def test_run_info_sheet_contains_totals_and_verdict(tmp_path: Path) -> None:
    output = write_summary_workbook(
        tmp_path / "summary.xlsx", _summary(tmp_path), _metadata(tmp_path)
    )

    info = dict(load_workbook(output)[RUN_INFO_SHEET_NAME].iter_rows(values_only=True))
    assert info["Tests run"] == 2
    assert info["Errors"] == 1
    assert info["Failures"] == 0
    assert info["Verdict"] == "FAILED"
    assert info["Run start"] == "2026-10-19T08:00:00+00:00"
