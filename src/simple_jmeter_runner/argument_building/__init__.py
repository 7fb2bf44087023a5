"""Argument building domain exports."""

from .engine_arguments import (
    ENGINE_MAIN_CLASS,
    EngineArguments,
    build_engine_arguments,
    build_engine_command,
)

__all__ = [
    "ENGINE_MAIN_CLASS",
    "EngineArguments",
    "build_engine_arguments",
    "build_engine_command",
]
