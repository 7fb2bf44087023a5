"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from simple_jmeter_runner.property_merging.property_categories import MergeMode, PropertyCategory

from .runtime_settings import (
    Configuration,
    EngineSettings,
    PropertiesSettings,
    ProxySettings,
    RemoteSettings,
    ReportSettings,
    ResultsSettings,
    TestFilesSettings,
)

DEFAULT_TEST_FILES_DIRECTORY = "src/test/jmeter"
DEFAULT_INCLUDE_PATTERNS = ("**/*.jmx",)
DEFAULT_REPORT_FILE_NAME = "run-summary.xlsx"


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f"Configuration file is not valid UTF-8: {path}") from exc
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    config_dir = path.resolve().parent
    project = _optional_mapping(parsed.get("project"), "project")
    base_dir = _resolve_path(
        config_dir, _optional_string(project.get("base_dir"), "project.base_dir") or "."
    )

    return Configuration(
        path=path,
        base_dir=base_dir,
        test_files=_parse_test_files_section(parsed.get("test_files"), base_dir),
        results=_parse_results_section(parsed.get("results")),
        properties=_parse_properties_section(parsed.get("properties")),
        engine=_parse_engine_section(parsed.get("engine"), config_dir),
        proxy=_parse_proxy_section(parsed.get("proxy")),
        remote=_parse_remote_section(parsed.get("remote")),
        report=_parse_report_section(parsed.get("report")),
    )


def _parse_test_files_section(value: Any, base_dir: Path) -> TestFilesSettings:
    section = _optional_mapping(value, "test_files")
    directory = (
        _optional_string(section.get("directory"), "test_files.directory")
        or DEFAULT_TEST_FILES_DIRECTORY
    )
    include = _normalize_string_sequence(section.get("include"), "test_files.include")
    exclude = _normalize_string_sequence(section.get("exclude"), "test_files.exclude")
    return TestFilesSettings(
        directory=_resolve_path(base_dir, directory),
        include=include or DEFAULT_INCLUDE_PATTERNS,
        exclude=exclude,
    )


def _parse_results_section(value: Any) -> ResultsSettings:
    section = _optional_mapping(value, "results")
    return ResultsSettings(
        timestamp=_optional_bool(section.get("timestamp"), "results.timestamp", default=True),
        ignore_errors=_optional_bool(
            section.get("ignore_errors"), "results.ignore_errors", default=False
        ),
        ignore_failures=_optional_bool(
            section.get("ignore_failures"), "results.ignore_failures", default=False
        ),
    )


def _parse_properties_section(value: Any) -> PropertiesSettings:
    section = _optional_mapping(value, "properties")
    mode_raw = _optional_string(section.get("mode"), "properties.mode") or MergeMode.MERGE.value
    try:
        mode = MergeMode(mode_raw.lower())
    except ValueError as exc:
        raise ConfigurationError("properties.mode must be 'merge' or 'replace'.") from exc

    overrides: dict[PropertyCategory, dict[str, str]] = {}
    for key, raw_overrides in section.items():
        if key == "mode":
            continue
        try:
            category = PropertyCategory.from_config_key(str(key))
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        category_overrides = _require_string_map(raw_overrides, f"properties.{key}")
        if category_overrides:
            overrides[category] = category_overrides
    return PropertiesSettings(mode=mode, overrides=overrides)


def _parse_engine_section(value: Any, config_dir: Path) -> EngineSettings:
    section = _require_mapping(value, "engine")
    libraries = _normalize_string_sequence(section.get("libraries"), "engine.libraries")
    if not libraries:
        raise ConfigurationError("engine.libraries must list at least one jar or directory.")
    java_executable = (
        _optional_string(section.get("java_executable"), "engine.java_executable") or "java"
    )
    return EngineSettings(
        libraries=tuple(_resolve_path(config_dir, library) for library in libraries),
        java_executable=java_executable,
        jvm_args=_normalize_string_sequence(section.get("jvm_args"), "engine.jvm_args"),
        suppress_output=_optional_bool(
            section.get("suppress_output"), "engine.suppress_output", default=True
        ),
    )


def _parse_proxy_section(value: Any) -> ProxySettings | None:
    if value is None:
        return None
    section = _require_mapping(value, "proxy")
    return ProxySettings(
        host=_require_non_empty_string(section.get("host"), "proxy.host"),
        port=_require_positive_int(section.get("port", 80), "proxy.port"),
        username=_optional_string(section.get("username"), "proxy.username"),
        password=_optional_string(section.get("password"), "proxy.password"),
        non_proxy_hosts=_optional_string(section.get("non_proxy_hosts"), "proxy.non_proxy_hosts"),
    )


def _parse_remote_section(value: Any) -> RemoteSettings:
    section = _optional_mapping(value, "remote")
    return RemoteSettings(
        hosts=_normalize_string_sequence(section.get("hosts"), "remote.hosts"),
        start_all=_optional_bool(section.get("start_all"), "remote.start_all", default=False),
        stop_after_test=_optional_bool(
            section.get("stop_after_test"), "remote.stop_after_test", default=False
        ),
    )


def _parse_report_section(value: Any) -> ReportSettings:
    section = _optional_mapping(value, "report")
    file_name = (
        _optional_string(section.get("file_name"), "report.file_name") or DEFAULT_REPORT_FILE_NAME
    )
    if Path(file_name).name != file_name:
        raise ConfigurationError("report.file_name must be a file name, not a path.")
    return ReportSettings(
        enabled=_optional_bool(section.get("enabled"), "report.enabled", default=True),
        file_name=file_name,
    )


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _require_string_map(value: Any, section_name: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"{section_name} must be a mapping of property names to values.")
    properties: dict[str, str] = {}
    for key, item in value.items():
        if not isinstance(key, str) or not isinstance(item, str):
            raise ConfigurationError(
                f"{section_name} keys and values must be strings (quote '{key}' in YAML)."
            )
        properties[key] = item
    return properties


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _optional_bool(value: Any, field_name: str, *, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be true or false.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
