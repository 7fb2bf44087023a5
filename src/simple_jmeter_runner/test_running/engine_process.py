"""Engine process launch and per-run lifecycle."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, Protocol

from simple_jmeter_runner.argument_building import EngineArguments


class TestRunError(Exception):
    """Raised when an engine run cannot start, exits abnormally or leaves no result file."""

    __test__ = False


class EngineProcess(Protocol):  # pylint: disable=too-few-public-methods
    """The part of `subprocess.Popen` the run manager relies on."""

    def wait(self) -> int: ...


ProcessLauncher = Callable[[Sequence[str], Path, IO[bytes] | None], EngineProcess]


def launch_engine_process(
    command: Sequence[str], working_dir: Path, output: IO[bytes] | None
) -> EngineProcess:
    """Start the engine; `output=None` lets it write straight to this process's console."""
    return subprocess.Popen(  # pylint: disable=consider-using-with
        list(command),
        cwd=working_dir,
        stdout=output,
        stderr=subprocess.STDOUT if output is not None else None,
    )


class RunState(str, Enum):
    """Lifecycle of one engine run."""

    DISPATCHED = "dispatched"
    RUNNING = "running"
    EXITED_RAW = "exited_raw"
    GRACE_PERIOD_ELAPSED = "grace_period_elapsed"
    COLLECTED = "collected"


_TRANSITIONS = {
    RunState.DISPATCHED: RunState.RUNNING,
    RunState.RUNNING: RunState.EXITED_RAW,
    RunState.EXITED_RAW: RunState.GRACE_PERIOD_ELAPSED,
    RunState.GRACE_PERIOD_ELAPSED: RunState.COLLECTED,
}


@dataclass
class EngineRun:
    """One engine invocation against one run target."""

    target_name: str
    arguments: EngineArguments
    state: RunState = RunState.DISPATCHED
    exit_code: int | None = None
    history: list[RunState] = field(default_factory=lambda: [RunState.DISPATCHED])

    @property
    def result_path(self) -> Path:
        return self.arguments.result_file

    def mark_running(self) -> None:
        self._advance(RunState.RUNNING)

    def mark_exited(self, exit_code: int) -> None:
        self.exit_code = exit_code
        self._advance(RunState.EXITED_RAW)

    def mark_grace_period_elapsed(self) -> None:
        self._advance(RunState.GRACE_PERIOD_ELAPSED)

    def mark_collected(self) -> None:
        self._advance(RunState.COLLECTED)

    def _advance(self, next_state: RunState) -> None:
        if _TRANSITIONS.get(self.state) is not next_state:
            raise RuntimeError(
                f"Invalid run state transition for {self.target_name}: "
                f"{self.state.value} -> {next_state.value}"
            )
        self.state = next_state
        self.history.append(next_state)
