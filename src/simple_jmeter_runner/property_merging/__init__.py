"""Property merging domain exports."""

from .default_sources import ConfigArtifactPropertySource, PropertyMergeError
from .properties_format import (
    parse_properties,
    read_properties_file,
    render_properties,
    write_properties_file,
)
from .property_categories import MergedPropertySet, MergeMode, PropertyCategory
from .property_merge import (
    DefaultPropertySource,
    apply_global_properties,
    configure_property_files,
    resolve_category,
)

__all__ = [
    "ConfigArtifactPropertySource",
    "DefaultPropertySource",
    "MergedPropertySet",
    "MergeMode",
    "PropertyCategory",
    "PropertyMergeError",
    "apply_global_properties",
    "configure_property_files",
    "parse_properties",
    "read_properties_file",
    "render_properties",
    "resolve_category",
    "write_properties_file",
]
