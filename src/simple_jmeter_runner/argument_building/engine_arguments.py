"""Engine command-line argument model."""

from __future__ import annotations

import os
import re
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from pathlib import Path

from simple_jmeter_runner.configuration.runtime_settings import ProxySettings

ENGINE_MAIN_CLASS = "org.apache.jmeter.NewDriver"
RESULT_FILE_SUFFIX = ".jtl"
XML_RESULTS_PROPERTY = "jmeter.save.saveservice.output_format=xml"

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


@dataclass(frozen=True)
class EngineArguments:  # pylint: disable=too-many-instance-attributes
    """Options for one engine invocation.

    Built once as a template without a test file, then specialized per run target with
    `for_target`. Instances are immutable, so each run owns an independent copy.
    """

    output_dir: Path
    engine_home: Path
    timestamp_results: bool
    timestamp: str
    proxy: ProxySettings | None = None
    global_properties_file: Path | None = None
    test_file: Path | None = None
    log_file: Path | None = None
    name_suffix: str | None = None
    run_stem: str | None = None
    remote_hosts: tuple[str, ...] = ()
    start_all_remote: bool = False
    stop_remote_after_test: bool = False

    def for_target(
        self,
        test_file: Path,
        *,
        log_dir: Path,
        run_stem: str | None = None,
        name_suffix: str | None = None,
        remote_hosts: Sequence[str] = (),
        start_all_remote: bool = False,
        stop_remote_after_test: bool = False,
    ) -> EngineArguments:
        """Return a copy of this template bound to one test file."""
        specialized = replace(
            self,
            test_file=test_file,
            run_stem=run_stem,
            name_suffix=name_suffix,
            remote_hosts=tuple(remote_hosts),
            start_all_remote=start_all_remote,
            stop_remote_after_test=stop_remote_after_test,
        )
        return replace(specialized, log_file=log_dir / f"{specialized.run_name}.log")

    @property
    def run_name(self) -> str:
        if self.test_file is None:
            raise ValueError("Engine arguments are not bound to a test file.")
        parts = [self.run_stem or self.test_file.stem]
        if self.name_suffix:
            parts.append(_UNSAFE_NAME_CHARS.sub("_", self.name_suffix))
        if self.timestamp_results:
            parts.append(self.timestamp)
        return "-".join(parts)

    @property
    def result_file(self) -> Path:
        return self.output_dir / f"{self.run_name}{RESULT_FILE_SUFFIX}"

    def to_command_line(self) -> tuple[str, ...]:
        """Render the engine's non-GUI command-line flags."""
        if self.test_file is None:
            raise ValueError("Engine arguments are not bound to a test file.")
        arguments = [
            "-n",
            "-t",
            str(self.test_file),
            "-l",
            str(self.result_file),
            "-d",
            str(self.engine_home),
        ]
        if self.log_file is not None:
            arguments.extend(["-j", str(self.log_file)])
        arguments.append(f"-J{XML_RESULTS_PROPERTY}")
        arguments.extend(_proxy_arguments(self.proxy))
        if self.global_properties_file is not None:
            arguments.extend(["-G", str(self.global_properties_file)])
        if self.remote_hosts:
            arguments.extend(["-R", ",".join(self.remote_hosts)])
        elif self.start_all_remote:
            arguments.append("-r")
        if self.stop_remote_after_test and (self.remote_hosts or self.start_all_remote):
            arguments.append("-X")
        return tuple(arguments)

    def proxy_details(self) -> str:
        """Describe the proxy configuration for the run log."""
        if self.proxy is None:
            return "Proxy server is not being used."
        details = [f"Proxy server: {self.proxy.host}:{self.proxy.port}"]
        if self.proxy.username:
            details.append(f"Username: {self.proxy.username}")
        if self.proxy.password:
            details.append("Password: *****")
        if self.proxy.non_proxy_hosts:
            details.append(f"Non-proxy hosts: {self.proxy.non_proxy_hosts}")
        return ", ".join(details)


def build_engine_arguments(
    *,
    output_dir: Path,
    proxy: ProxySettings | None,
    engine_home: Path,
    timestamp_results: bool,
    global_properties_file: Path | None = None,
    started_at: datetime | None = None,
) -> EngineArguments:
    """Build the argument template shared by every run."""
    moment = started_at or datetime.now(UTC)
    return EngineArguments(
        output_dir=output_dir,
        engine_home=engine_home,
        timestamp_results=timestamp_results,
        timestamp=moment.strftime("%Y%m%d-%H%M%S"),
        proxy=proxy,
        global_properties_file=global_properties_file,
    )


# pylint: disable=too-many-arguments
def build_engine_command(
    arguments: EngineArguments,
    *,
    java_executable: str,
    jvm_args: Sequence[str],
    classpath: Sequence[Path],
    working_dir: Path,
    main_class: str = ENGINE_MAIN_CLASS,
) -> tuple[str, ...]:
    """Prefix the engine arguments with the JVM launch line.

    The engine takes its base directory from the `user.dir` system property, so the working
    directory is handed over here instead of through the orchestrator's own process state.
    """
    return (
        java_executable,
        *jvm_args,
        f"-Duser.dir={working_dir}",
        "-classpath",
        os.pathsep.join(str(entry) for entry in classpath),
        main_class,
        *arguments.to_command_line(),
    )


# pylint: enable=too-many-arguments


def _proxy_arguments(proxy: ProxySettings | None) -> list[str]:
    if proxy is None:
        return []
    arguments = ["-H", proxy.host, "-P", str(proxy.port)]
    if proxy.username:
        arguments.extend(["-u", proxy.username])
    if proxy.password:
        arguments.extend(["-a", proxy.password])
    if proxy.non_proxy_hosts:
        arguments.extend(["-N", proxy.non_proxy_hosts])
    return arguments
