"""Boundary tests between the run stages."""

from __future__ import annotations

from pathlib import Path


def _package_dir() -> Path:
    return Path(__file__).resolve().parents[3] / "src" / "simple_jmeter_runner"


def _imports_of(package: str) -> str:
    return "\n".join(
        path.read_text(encoding="utf-8") for path in sorted((_package_dir() / package).glob("*.py"))
    )


def test_result_scanning_does_not_depend_on_engine_execution() -> None:
    text = _imports_of("result_scanning")

    assert "simple_jmeter_runner.test_running" not in text
    assert "simple_jmeter_runner.argument_building" not in text


def test_property_merging_is_independent_of_other_stages() -> None:
    text = _imports_of("property_merging")

    for stage in ("configuration", "environment_staging", "test_running", "run_execution"):
        assert f"simple_jmeter_runner.{stage}" not in text, stage


def test_only_the_cli_configures_logging_output() -> None:
    for path in _package_dir().rglob("*.py"):
        if path.name == "cli.py":
            continue
        assert "logging.basicConfig" not in path.read_text(encoding="utf-8"), path
