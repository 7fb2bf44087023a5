"""Run targets: local test files and remote engine servers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from simple_jmeter_runner.argument_building import EngineArguments
from simple_jmeter_runner.configuration.runtime_settings import RemoteSettings


class RunTarget(Protocol):
    """Anything that turns the argument template into one engine invocation."""

    @property
    def name(self) -> str: ...

    def specialize(self, template: EngineArguments, log_dir: Path) -> EngineArguments: ...


@dataclass(frozen=True)
class LocalTestTarget:
    """Run one test file on the local engine."""

    test_file: Path
    run_stem: str | None = None

    @property
    def name(self) -> str:
        return self.test_file.name

    def specialize(self, template: EngineArguments, log_dir: Path) -> EngineArguments:
        return template.for_target(self.test_file, log_dir=log_dir, run_stem=self.run_stem)


@dataclass(frozen=True)
class RemoteAgentTarget:
    """Run one test file on a remote engine server, or on all configured servers."""

    test_file: Path
    host: str | None
    stop_after_test: bool
    run_stem: str | None = None

    @property
    def name(self) -> str:
        return f"{self.test_file.name} @ {self.host or 'all remote servers'}"

    def specialize(self, template: EngineArguments, log_dir: Path) -> EngineArguments:
        if self.host is None:
            return template.for_target(
                self.test_file,
                log_dir=log_dir,
                run_stem=self.run_stem,
                name_suffix="remote-all",
                start_all_remote=True,
                stop_remote_after_test=self.stop_after_test,
            )
        return template.for_target(
            self.test_file,
            log_dir=log_dir,
            run_stem=self.run_stem,
            name_suffix=f"remote-{self.host}",
            remote_hosts=(self.host,),
            stop_remote_after_test=self.stop_after_test,
        )


def result_stem(test_file: Path, test_files_dir: Path | None) -> str:
    """Name results after the file's path below the test directory, e.g. `checkout_load`."""
    if test_files_dir is None or not test_file.is_relative_to(test_files_dir):
        return test_file.stem
    relative = test_file.relative_to(test_files_dir).with_suffix("")
    return "_".join(relative.parts)


def build_run_targets(
    test_files: Sequence[Path],
    remote: RemoteSettings | None,
    test_files_dir: Path | None = None,
) -> tuple[RunTarget, ...]:
    """Local targets in file order, then remote targets grouped by server."""
    stems = {test_file: result_stem(test_file, test_files_dir) for test_file in test_files}
    targets: list[RunTarget] = [
        LocalTestTarget(test_file, stems[test_file]) for test_file in test_files
    ]
    if remote is None or not remote.enabled:
        return tuple(targets)
    if remote.hosts:
        targets.extend(
            RemoteAgentTarget(test_file, host, remote.stop_after_test, stems[test_file])
            for host in remote.hosts
            for test_file in test_files
        )
    else:
        targets.extend(
            RemoteAgentTarget(test_file, None, remote.stop_after_test, stems[test_file])
            for test_file in test_files
        )
    return tuple(targets)
