"""Working directory tree the engine expects under its home directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class StagingError(Exception):
    """Raised when the working tree or staged files cannot be prepared."""


@dataclass(frozen=True)
class WorkingTree:
    """Directories created once per run and left in place afterwards."""

    root: Path
    logs_dir: Path
    bin_dir: Path
    lib_ext_dir: Path
    lib_junit_dir: Path
    report_dir: Path

    def directories(self) -> tuple[Path, ...]:
        return (
            self.root,
            self.logs_dir,
            self.bin_dir,
            self.lib_ext_dir,
            self.lib_junit_dir,
            self.report_dir,
        )


def prepare_working_tree(root: Path | str) -> WorkingTree:
    """Create the engine home layout below `root`; existing directories are kept.

    `bin/` is the directory the engine resolves as its base directory. It is returned as
    `WorkingTree.bin_dir` for the launcher rather than set as process-wide state.
    """
    resolved_root = Path(root).resolve()
    tree = WorkingTree(
        root=resolved_root,
        logs_dir=resolved_root / "logs",
        bin_dir=resolved_root / "bin",
        lib_ext_dir=resolved_root / "lib" / "ext",
        # unused, but the engine refuses to start without it
        lib_junit_dir=resolved_root / "lib" / "junit",
        report_dir=resolved_root / "report",
    )
    for directory in tree.directories():
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StagingError(f"Unable to create directory {directory}: {exc}") from exc
    return tree
