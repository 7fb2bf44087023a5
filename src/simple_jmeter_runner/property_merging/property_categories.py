"""Property domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class PropertyCategory(str, Enum):
    """Property files read by the engine at startup."""

    JMETER = "jmeter"
    SAVE_SERVICE = "save_service"
    UPGRADE = "upgrade"
    USER = "user"
    SYSTEM = "system"
    GLOBAL = "global"

    @property
    def file_name(self) -> str:
        return _FILE_NAMES[self]

    @property
    def has_default(self) -> bool:
        """Whether the engine's config artifact ships a default file for this category."""
        return self is not PropertyCategory.GLOBAL

    @classmethod
    def from_config_key(cls, key: str) -> PropertyCategory:
        try:
            return cls(key)
        except ValueError as exc:
            known = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unknown property category '{key}' (expected one of: {known})."
            ) from exc


_FILE_NAMES = {
    PropertyCategory.JMETER: "jmeter.properties",
    PropertyCategory.SAVE_SERVICE: "saveservice.properties",
    PropertyCategory.UPGRADE: "upgrade.properties",
    PropertyCategory.USER: "user.properties",
    PropertyCategory.SYSTEM: "system.properties",
    PropertyCategory.GLOBAL: "global.properties",
}


class MergeMode(str, Enum):
    """How user-supplied properties combine with a category's defaults."""

    REPLACE = "replace"
    MERGE = "merge"


@dataclass(frozen=True)
class MergedPropertySet:
    """Resolved properties for one category, as written to the staging location."""

    category: PropertyCategory
    properties: Mapping[str, str]
    path: Path
