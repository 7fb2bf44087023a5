"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from simple_jmeter_runner.property_merging.property_categories import MergeMode, PropertyCategory


@dataclass(frozen=True)
class TestFilesSettings:
    """Where test-definition files live and which of them to run."""

    __test__ = False

    directory: Path
    include: tuple[str, ...]
    exclude: tuple[str, ...]


@dataclass(frozen=True)
class ResultsSettings:
    """Result naming and verdict options."""

    timestamp: bool
    ignore_errors: bool
    ignore_failures: bool


@dataclass(frozen=True)
class PropertiesSettings:
    """User property overrides per category."""

    mode: MergeMode
    overrides: Mapping[PropertyCategory, Mapping[str, str]]


@dataclass(frozen=True)
class EngineSettings:
    """How the engine process is launched."""

    libraries: tuple[Path, ...]
    java_executable: str
    jvm_args: tuple[str, ...]
    suppress_output: bool


@dataclass(frozen=True)
class ProxySettings:
    """HTTP proxy passed to the engine."""

    host: str
    port: int
    username: str | None
    password: str | None
    non_proxy_hosts: str | None


@dataclass(frozen=True)
class RemoteSettings:
    """Remote engine servers that run tests on the orchestrator's behalf."""

    hosts: tuple[str, ...]
    start_all: bool
    stop_after_test: bool

    @property
    def enabled(self) -> bool:
        return bool(self.hosts) or self.start_all


@dataclass(frozen=True)
class ReportSettings:
    """Run summary workbook options."""

    enabled: bool
    file_name: str


@dataclass(frozen=True)
class Configuration:  # pylint: disable=too-many-instance-attributes
    """Top-level configuration aggregate."""

    path: Path
    base_dir: Path
    test_files: TestFilesSettings
    results: ResultsSettings
    properties: PropertiesSettings
    engine: EngineSettings
    proxy: ProxySettings | None
    remote: RemoteSettings
    report: ReportSettings

    @property
    def work_dir(self) -> Path:
        return self.base_dir / "target" / "jmeter"
