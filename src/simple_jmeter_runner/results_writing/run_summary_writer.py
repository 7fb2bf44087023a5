"""Run summary workbook writer service."""

from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from simple_jmeter_runner.result_scanning import ScanSummary

from .report_models import ResultStatus, RunMetadata

RESULTS_SHEET_NAME = "Results"
RUN_INFO_SHEET_NAME = "RunInfo"
RESULTS_COLUMNS = ("ResultFile", "Errors", "Failures", "Status")


def write_summary_workbook(
    output_path: Path | str, summary: ScanSummary, run_metadata: RunMetadata
) -> Path:
    """Write per-result counts and run totals to an xlsx workbook."""
    workbook = Workbook()
    results_sheet = workbook.active
    results_sheet.title = RESULTS_SHEET_NAME
    _write_results_sheet(results_sheet, summary)
    _write_run_info_sheet(workbook.create_sheet(RUN_INFO_SHEET_NAME), summary, run_metadata)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return output.resolve()


def _write_results_sheet(sheet: Worksheet, summary: ScanSummary) -> None:
    sheet.append(list(RESULTS_COLUMNS))
    for result in summary.results:
        status = ResultStatus.PASSED if result.passed else ResultStatus.FAILED
        sheet.append(
            [str(result.path), result.error_count, result.failure_count, status.value]
        )
    sheet.freeze_panes = "A2"
    widths = [len(column) for column in RESULTS_COLUMNS]
    for result in summary.results:
        widths[0] = max(widths[0], len(str(result.path)))
    for index, width in enumerate(widths, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = min(width + 2, 120)


def _write_run_info_sheet(
    sheet: Worksheet, summary: ScanSummary, run_metadata: RunMetadata
) -> None:
    verdict = ResultStatus.FAILED if summary.any_failed else ResultStatus.PASSED
    rows = (
        ("Run start", run_metadata.run_start.isoformat()),
        ("Configuration", str(run_metadata.config_path)),
        ("Working directory", str(run_metadata.work_dir)),
        ("Tests run", summary.tests_run),
        ("Errors", summary.total_errors),
        ("Failures", summary.total_failures),
        ("Ignore errors", run_metadata.ignore_errors),
        ("Ignore failures", run_metadata.ignore_failures),
        ("Verdict", verdict.value),
    )
    for label, value in rows:
        sheet.append([label, value])
    sheet.column_dimensions["A"].width = 20
    sheet.column_dimensions["B"].width = 60
