"""Environment staging domain exports."""

from .classpath_assembly import (
    CONFIG_ARTIFACT_ID,
    PLUGIN_ARTIFACT_PREFIX,
    ClasspathAssembly,
    ClasspathError,
    LibraryArtifact,
    assemble_classpath,
    discover_library_artifacts,
    find_artifact,
)
from .working_tree import StagingError, WorkingTree, prepare_working_tree

__all__ = [
    "CONFIG_ARTIFACT_ID",
    "PLUGIN_ARTIFACT_PREFIX",
    "ClasspathAssembly",
    "ClasspathError",
    "LibraryArtifact",
    "StagingError",
    "WorkingTree",
    "assemble_classpath",
    "discover_library_artifacts",
    "find_artifact",
    "prepare_working_tree",
]
