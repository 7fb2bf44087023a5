"""Access to the default property files shipped in the engine's config artifact."""

from __future__ import annotations

import zipfile
from pathlib import Path

from .property_categories import PropertyCategory
from .properties_format import PROPERTIES_ENCODING


class PropertyMergeError(Exception):
    """Raised when property files cannot be resolved or written."""


class ConfigArtifactPropertySource:
    """Default property files read from a config jar/zip or an exploded directory."""

    def __init__(self, artifact_path: Path) -> None:
        self._artifact_path = artifact_path

    @property
    def artifact_path(self) -> Path:
        return self._artifact_path

    def read_bytes(self, category: PropertyCategory) -> bytes:
        """Return the raw default file for `category`."""
        if not self._artifact_path.exists():
            raise PropertyMergeError(f"Config artifact not found: {self._artifact_path}")
        if self._artifact_path.is_dir():
            return self._read_from_directory(category)
        return self._read_from_archive(category)

    def read_text(self, category: PropertyCategory) -> str:
        return self.read_bytes(category).decode(PROPERTIES_ENCODING)

    def _read_from_directory(self, category: PropertyCategory) -> bytes:
        for candidate in (
            self._artifact_path / "bin" / category.file_name,
            self._artifact_path / category.file_name,
        ):
            if candidate.is_file():
                return candidate.read_bytes()
        raise PropertyMergeError(
            f"Unable to find default '{category.file_name}' in {self._artifact_path}"
        )

    def _read_from_archive(self, category: PropertyCategory) -> bytes:
        member = f"bin/{category.file_name}"
        try:
            with zipfile.ZipFile(self._artifact_path) as archive:
                return archive.read(member)
        except KeyError as exc:
            raise PropertyMergeError(
                f"Unable to find default '{member}' in {self._artifact_path}"
            ) from exc
        except (zipfile.BadZipFile, OSError) as exc:
            raise PropertyMergeError(
                f"Unable to read config artifact {self._artifact_path}: {exc}"
            ) from exc
