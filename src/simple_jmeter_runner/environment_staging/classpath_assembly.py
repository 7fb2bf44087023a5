"""Library artifact discovery, plugin staging and classpath assembly."""

from __future__ import annotations

import logging
import re
import shutil
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

PLUGIN_ARTIFACT_PREFIX = "ApacheJMeter_"
CONFIG_ARTIFACT_ID = "ApacheJMeter_config"

_VERSION_SUFFIX = re.compile(r"^(?P<artifact_id>.+?)-\d[\w.\-]*$")


class ClasspathError(Exception):
    """Raised when library artifacts cannot be located, copied or resolved."""


@dataclass(frozen=True)
class LibraryArtifact:
    """One library available to the engine."""

    artifact_id: str
    path: Path

    @property
    def is_plugin(self) -> bool:
        return self.artifact_id.startswith(PLUGIN_ARTIFACT_PREFIX)

    @staticmethod
    def from_path(path: Path) -> LibraryArtifact:
        """Derive the artifact id from a jar name, dropping any `-<version>` suffix."""
        stem = path.stem if path.suffix in {".jar", ".zip"} else path.name
        match = _VERSION_SUFFIX.match(stem)
        artifact_id = match.group("artifact_id") if match else stem
        return LibraryArtifact(artifact_id=artifact_id, path=path)


@dataclass(frozen=True)
class ClasspathAssembly:
    """Result of staging plugins and building the execution classpath."""

    classpath: tuple[Path, ...]
    plugins_copied: int

    def as_argument(self, separator: str) -> str:
        return separator.join(str(entry) for entry in self.classpath)


def discover_library_artifacts(sources: Iterable[Path]) -> tuple[LibraryArtifact, ...]:
    """Expand configured files and directories into artifacts, keeping configured order."""
    artifacts: list[LibraryArtifact] = []
    for source in sources:
        if source.is_dir():
            artifacts.extend(
                LibraryArtifact.from_path(jar) for jar in sorted(source.glob("*.jar"))
            )
        elif source.exists():
            artifacts.append(LibraryArtifact.from_path(source))
        else:
            raise ClasspathError(f"Library path not found: {source}")
    return tuple(artifacts)


def find_artifact(artifacts: Sequence[LibraryArtifact], artifact_id: str) -> LibraryArtifact:
    for artifact in artifacts:
        if artifact.artifact_id == artifact_id:
            return artifact
    raise ClasspathError(f"Unable to find artifact '{artifact_id}'!")


def assemble_classpath(
    artifacts: Sequence[LibraryArtifact], lib_ext_dir: Path
) -> ClasspathAssembly:
    """Copy plugin artifacts into `lib_ext_dir` and list every artifact on the classpath.

    The classpath keeps input order and includes plugins and non-plugins alike.

    Raises:
      ClasspathError: If a plugin cannot be copied or a path cannot be made canonical.
    """
    classpath: list[Path] = []
    plugins_copied = 0
    for artifact in artifacts:
        if artifact.is_plugin:
            _copy_plugin(artifact, lib_ext_dir)
            plugins_copied += 1
        try:
            classpath.append(artifact.path.resolve(strict=True))
        except OSError as exc:
            raise ClasspathError(f"Unable to get the canonical path for {artifact.path}") from exc
    logger.debug("Staged %d plugin artifact(s) into %s", plugins_copied, lib_ext_dir)
    return ClasspathAssembly(classpath=tuple(classpath), plugins_copied=plugins_copied)


def _copy_plugin(artifact: LibraryArtifact, lib_ext_dir: Path) -> None:
    destination = lib_ext_dir / artifact.path.name
    try:
        if artifact.path.is_dir():
            shutil.copytree(artifact.path, destination, dirs_exist_ok=True)
        else:
            shutil.copyfile(artifact.path, destination)
    except OSError as exc:
        raise ClasspathError(
            f"Unable to copy {artifact.artifact_id} into {lib_ext_dir}: {exc}"
        ) from exc
