"""Reader and writer for Java `.properties` files.

The engine loads its property files with `java.util.Properties`, so files are read as
ISO-8859-1 and written as plain ASCII with `\\uXXXX` escapes for anything else. Reading a file
produced by `render_properties` returns exactly the mapping that was rendered.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path

PROPERTIES_ENCODING = "iso-8859-1"

_COMMENT_PREFIXES = ("#", "!")
_SEPARATORS = ("=", ":")
_WHITESPACE = " \t\f"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_RENDER_ESCAPES = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties text into an insertion-ordered mapping; later keys win."""
    properties: dict[str, str] = {}
    for logical_line in _logical_lines(text):
        key, value = _split_key_value(logical_line)
        properties[key] = value
    return properties


def read_properties_file(path: Path) -> dict[str, str]:
    return parse_properties(path.read_bytes().decode(PROPERTIES_ENCODING))


def render_properties(properties: Mapping[str, str], *, header: str | None = None) -> str:
    lines = []
    if header:
        lines.extend(f"# {line}" for line in header.splitlines())
    for key, value in properties.items():
        lines.append(f"{_escape(key, is_key=True)}={_escape(value, is_key=False)}")
    return "\n".join(lines) + "\n"


def write_properties_file(
    path: Path, properties: Mapping[str, str], *, header: str | None = None
) -> None:
    path.write_bytes(render_properties(properties, header=header).encode("ascii"))


def _logical_lines(text: str) -> Iterator[str]:
    pending: list[str] = []
    for raw_line in text.splitlines():
        line = raw_line.lstrip(_WHITESPACE)
        if not pending and (not line or line.startswith(_COMMENT_PREFIXES)):
            continue
        if _ends_with_continuation(line):
            pending.append(line[:-1])
            continue
        pending.append(line)
        yield "".join(pending)
        pending = []
    if pending:
        yield "".join(pending)


def _ends_with_continuation(line: str) -> bool:
    trailing_backslashes = len(line) - len(line.rstrip("\\"))
    return trailing_backslashes % 2 == 1


def _split_key_value(line: str) -> tuple[str, str]:
    index = 0
    length = len(line)
    while index < length:
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        index += 1
    key = line[:index]
    rest = line[index:].lstrip(_WHITESPACE)
    if rest[:1] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return _unescape(key), _unescape(rest)


def _unescape(value: str) -> str:
    chars: list[str] = []
    index = 0
    length = len(value)
    while index < length:
        char = value[index]
        if char != "\\" or index + 1 >= length:
            chars.append(char)
            index += 1
            continue
        escaped = value[index + 1]
        if escaped == "u":
            digits = value[index + 2 : index + 6]
            if len(digits) != 4 or not all(digit in _HEX_DIGITS for digit in digits):
                raise ValueError(f"Malformed \\uXXXX encoding in: {value}")
            chars.append(chr(int(digits, 16)))
            index += 6
            continue
        chars.append(_ESCAPES.get(escaped, escaped))
        index += 2
    # \uXXXX pairs may encode one astral character as two surrogates
    return "".join(chars).encode("utf-16-le", "surrogatepass").decode("utf-16-le")


def _escape(value: str, *, is_key: bool) -> str:
    chars: list[str] = []
    for position, char in enumerate(value):
        if char in _RENDER_ESCAPES:
            chars.append(_RENDER_ESCAPES[char])
        elif char == " " and (is_key or position == 0):
            chars.append("\\ ")
        elif char in "=:#!" and (is_key or position == 0):
            chars.append("\\" + char)
        elif ord(char) < 0x20 or ord(char) > 0x7E:
            chars.extend(f"\\u{unit:04x}" for unit in _utf16_units(char))
        else:
            chars.append(char)
    return "".join(chars)


def _utf16_units(char: str) -> tuple[int, ...]:
    encoded = char.encode("utf-16-be")
    return tuple(int.from_bytes(encoded[i : i + 2], "big") for i in range(0, len(encoded), 2))
