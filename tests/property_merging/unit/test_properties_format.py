"""Properties file codec tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from simple_jmeter_runner.property_merging import (
    parse_properties,
    read_properties_file,
    render_properties,
    write_properties_file,
)


def test_parse_skips_comments_and_blank_lines_and_accepts_all_separators() -> None:
    text = """
# a comment
! another comment
first=1
second : 2
third 3
   indented=yes
empty=
"""

    properties = parse_properties(text)

    assert properties == {
        "first": "1",
        "second": "2",
        "third": "3",
        "indented": "yes",
        "empty": "",
    }


def test_parse_joins_continuation_lines_and_strips_their_leading_whitespace() -> None:
    text = "search_paths=a.jar,\\\n    b.jar,\\\n    c.jar\nnext=value\n"

    properties = parse_properties(text)

    assert properties["search_paths"] == "a.jar,b.jar,c.jar"
    assert properties["next"] == "value"


def test_parse_decodes_escapes_in_keys_and_values() -> None:
    text = "key\\ with\\=sep=tab\\there\\u00e9\nbackslash=C:\\\\temp\n"

    properties = parse_properties(text)

    assert properties == {"key with=sep": "tab\there\u00e9", "backslash": "C:\\temp"}


@pytest.mark.parametrize("text", ["short=\\u12\n", "end=\\u\n", "bad=\\u00zz\n"])
def test_parse_rejects_malformed_unicode_escapes(text: str) -> None:
    with pytest.raises(ValueError, match="Malformed"):
        parse_properties(text)


def test_later_duplicate_keys_win() -> None:
    assert parse_properties("a=1\na=2\n") == {"a": "2"}


def test_render_escapes_separators_leading_space_and_non_ascii() -> None:
    rendered = render_properties({"a key": " value=x", "unicode": "caf\u00e9"}, header="hello")

    lines = rendered.splitlines()
    assert lines[0] == "# hello"
    assert lines[1] == "a\\ key=\\ value=x"
    assert lines[2] == "unicode=caf\\u00e9"


def test_written_file_reads_back_to_the_same_mapping(tmp_path: Path) -> None:
    properties = {
        "jmeter.exit.check.pause": "2000",
        "path": "C:\\tools\\jmeter",
        "spaced key": "  leading and trailing  ",
        "multi": "line one\nline two",
        "symbols": "#!=:",
        "emoji": "\U0001f680",
        "": "empty key",
    }
    target = tmp_path / "out.properties"

    write_properties_file(target, properties, header="generated")

    assert read_properties_file(target) == properties
    assert list(read_properties_file(target)) == list(properties)
