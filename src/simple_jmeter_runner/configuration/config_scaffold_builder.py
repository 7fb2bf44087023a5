"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "jmeter-runner.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Run configuration template for simple-jmeter-runner.
# Replace every <REQUIRED> placeholder before running.
# Remove or fill <OPTIONAL> placeholders; omitted keys fall back to the documented defaults.

project:
  # Working files are created under <base_dir>/target/jmeter. Relative to this file.
  base_dir: "."

test_files:
  # Relative to project.base_dir.
  directory: "src/test/jmeter"
  # Ant-style patterns relative to the directory; exclude wins over include.
  include:
    - "**/*.jmx"
  exclude: []

results:
  timestamp: true
  ignore_errors: false
  ignore_failures: false

properties:
  # merge: user values override same-named defaults.
  # replace: user values replace the whole default file of that category.
  mode: "merge"
  # Categories: jmeter, save_service, upgrade, user, system, global.
  # Keys and values must be quoted strings. Global values win over every other category.
  jmeter:
    jmeter.exit.check.pause: "2000"
  user: {}
  global: {}

engine:
  # Engine jars or directories of jars. Must include the ApacheJMeter_config artifact.
  libraries:
    - "<REQUIRED>"
  java_executable: "java"
  jvm_args: []
  # true: engine console output goes to per-test files under target/jmeter/logs.
  suppress_output: true

# proxy:
#   host: "<OPTIONAL>"
#   port: 8080
#   username: "<OPTIONAL>"
#   password: "<OPTIONAL>"
#   non_proxy_hosts: "<OPTIONAL>"

remote:
  hosts: []
  start_all: false
  stop_after_test: false

report:
  enabled: true
  file_name: "run-summary.xlsx"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML run configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder run configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Run configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
