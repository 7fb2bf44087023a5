"""Property merge service producing the property files the engine reads at startup."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from .default_sources import PropertyMergeError
from .properties_format import (
    PROPERTIES_ENCODING,
    parse_properties,
    read_properties_file,
    write_properties_file,
)
from .property_categories import MergedPropertySet, MergeMode, PropertyCategory

logger = logging.getLogger(__name__)

_GENERATED_HEADER = "Generated by simple-jmeter-runner"


class DefaultPropertySource(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for anything that can supply a category's default file."""

    def read_bytes(self, category: PropertyCategory) -> bytes: ...


def resolve_category(
    defaults: Mapping[str, str], user_properties: Mapping[str, str], mode: MergeMode
) -> dict[str, str]:
    """Combine one category's defaults with user-supplied properties."""
    if mode is MergeMode.REPLACE:
        return dict(user_properties)
    merged = dict(defaults)
    merged.update(user_properties)
    return merged


def apply_global_properties(
    resolved: Mapping[PropertyCategory, Mapping[str, str]], global_properties: Mapping[str, str]
) -> tuple[dict[PropertyCategory, dict[str, str]], set[PropertyCategory]]:
    """Let global values win over same-named keys in every other category.

    Returns the updated mappings and the categories that actually changed.
    """
    updated: dict[PropertyCategory, dict[str, str]] = {}
    changed: set[PropertyCategory] = set()
    for category, properties in resolved.items():
        merged = dict(properties)
        for key in merged.keys() & global_properties.keys():
            if merged[key] != global_properties[key]:
                merged[key] = global_properties[key]
                changed.add(category)
        updated[category] = merged
    return updated, changed


def configure_property_files(
    source: DefaultPropertySource,
    overrides: Mapping[PropertyCategory, Mapping[str, str]],
    *,
    mode: MergeMode,
    output_dir: Path,
    custom_files_dir: Path | None = None,
) -> dict[PropertyCategory, MergedPropertySet]:
    """Resolve and write one property file per category into `output_dir`.

    Categories without user-supplied properties are copied from their default unchanged,
    unless a global property rewrites one of their keys.

    Raises:
      PropertyMergeError: If a default file is missing or a file cannot be written.
    """
    _validate_overrides(overrides)
    resolved: dict[PropertyCategory, dict[str, str]] = {}
    verbatim: dict[PropertyCategory, bytes] = {}
    for category in PropertyCategory:
        if not category.has_default:
            continue
        default_bytes = source.read_bytes(category)
        try:
            defaults = parse_properties(default_bytes.decode(PROPERTIES_ENCODING))
        except ValueError as exc:
            raise PropertyMergeError(f"Malformed default {category.file_name}: {exc}") from exc
        user_properties = _collect_user_properties(category, overrides, custom_files_dir)
        if user_properties is None:
            verbatim[category] = default_bytes
            resolved[category] = defaults
            continue
        logger.debug("Resolving %s in %s mode", category.file_name, mode.value)
        resolved[category] = resolve_category(defaults, user_properties, mode)

    global_properties = _collect_user_properties(
        PropertyCategory.GLOBAL, overrides, custom_files_dir
    )
    if global_properties:
        resolved, changed = apply_global_properties(resolved, global_properties)
        for category in changed:
            verbatim.pop(category, None)
        resolved[PropertyCategory.GLOBAL] = dict(global_properties)

    return _write_property_sets(resolved, verbatim, output_dir)


def _collect_user_properties(
    category: PropertyCategory,
    overrides: Mapping[PropertyCategory, Mapping[str, str]],
    custom_files_dir: Path | None,
) -> dict[str, str] | None:
    """Custom file from the test directory first, configured overrides on top."""
    collected: dict[str, str] | None = None
    if custom_files_dir is not None:
        custom_file = custom_files_dir / category.file_name
        if custom_file.is_file():
            logger.info("Using custom %s from %s", category.file_name, custom_files_dir)
            try:
                collected = read_properties_file(custom_file)
            except (OSError, ValueError) as exc:
                raise PropertyMergeError(f"Unable to read {custom_file}: {exc}") from exc
    override = overrides.get(category)
    if override:
        collected = {**(collected or {}), **override}
    return collected


def _write_property_sets(
    resolved: Mapping[PropertyCategory, Mapping[str, str]],
    verbatim: Mapping[PropertyCategory, bytes],
    output_dir: Path,
) -> dict[PropertyCategory, MergedPropertySet]:
    property_sets: dict[PropertyCategory, MergedPropertySet] = {}
    for category, properties in resolved.items():
        path = output_dir / category.file_name
        try:
            if category in verbatim:
                path.write_bytes(verbatim[category])
            else:
                write_properties_file(path, properties, header=_GENERATED_HEADER)
        except OSError as exc:
            raise PropertyMergeError(f"Unable to write {path}: {exc}") from exc
        property_sets[category] = MergedPropertySet(
            category=category, properties=dict(properties), path=path
        )
    return property_sets


def _validate_overrides(overrides: Mapping[PropertyCategory, Mapping[str, str]]) -> None:
    for category, properties in overrides.items():
        if not isinstance(category, PropertyCategory):
            raise PropertyMergeError(f"Unknown property category: {category!r}")
        for key, value in properties.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise PropertyMergeError(
                    f"{category.file_name} overrides must map strings to strings "
                    f"(got {key!r}: {value!r})."
                )
