"""Results writing domain exports."""

from .report_models import ResultStatus, RunMetadata
from .run_summary_writer import RESULTS_SHEET_NAME, RUN_INFO_SHEET_NAME, write_summary_workbook

__all__ = [
    "RESULTS_SHEET_NAME",
    "RUN_INFO_SHEET_NAME",
    "ResultStatus",
    "RunMetadata",
    "write_summary_workbook",
]
