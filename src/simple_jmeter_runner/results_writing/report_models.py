"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class ResultStatus(str, Enum):
    """Rendered status in the summary workbook."""

    PASSED = "PASSED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class RunMetadata:
    """Metadata rendered into the RunInfo sheet."""

    run_start: datetime
    config_path: Path
    work_dir: Path
    ignore_errors: bool
    ignore_failures: bool
