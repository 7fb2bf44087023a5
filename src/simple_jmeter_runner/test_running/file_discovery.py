"""Test-definition file discovery with Ant-style include/exclude patterns."""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path


def discover_test_files(
    directory: Path, includes: Sequence[str], excludes: Sequence[str] = ()
) -> tuple[Path, ...]:
    """Return files under `directory` matching any include and no exclude, sorted by path.

    Patterns are matched against POSIX paths relative to `directory`. `**` spans directories,
    `*` and `?` stay within one path segment.
    """
    if not directory.is_dir():
        return ()
    matches = []
    for candidate in directory.rglob("*"):
        if not candidate.is_file():
            continue
        relative = candidate.relative_to(directory).as_posix()
        if not any(_matches(relative, pattern) for pattern in includes):
            continue
        if any(_matches(relative, pattern) for pattern in excludes):
            continue
        matches.append((relative, candidate))
    return tuple(path for _, path in sorted(matches))


def _matches(relative_path: str, pattern: str) -> bool:
    return _compile(pattern).fullmatch(relative_path) is not None


@lru_cache(maxsize=64)
def _compile(pattern: str) -> re.Pattern[str]:
    normalized = pattern.replace("\\", "/").lstrip("/")
    if normalized.endswith("/"):
        normalized += "**"
    expression = []
    index = 0
    while index < len(normalized):
        if normalized.startswith("**/", index):
            expression.append("(?:.*/)?")
            index += 3
        elif normalized.startswith("**", index):
            expression.append(".*")
            index += 2
        elif normalized[index] == "*":
            expression.append("[^/]*")
            index += 1
        elif normalized[index] == "?":
            expression.append("[^/]")
            index += 1
        else:
            expression.append(re.escape(normalized[index]))
            index += 1
    return re.compile("".join(expression))
