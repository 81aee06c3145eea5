"""Tests for quill.template.escaping."""

from __future__ import annotations

import pytest

from quill.template import escape, parse

SAMPLES = [
    "",
    "plain",
    "$name",
    "$[name]",
    "#$items",
    "?[$x]{a}{b}",
    "@[$i:$items]{$i}",
    'say "hi"',
    "back\\slash",
    "trailing backslash\\",
    "}}{{",
    "multi\nline $x\n",
    "\\$\\?\\@",
]


class TestEscape:
    """Tests for escape()."""

    def test_escapes_special_characters(self) -> None:
        assert escape("a$b") == "a\\$b"
        assert escape('?@#}"\\') == '\\?\\@\\#\\}\\"\\\\'

    def test_leaves_other_characters(self) -> None:
        assert escape("{plain text} 100%") == "{plain text\\} 100%"

    def test_empty_and_none(self) -> None:
        assert escape("") == ""
        assert escape(None) is None

    @pytest.mark.parametrize("text", SAMPLES)
    def test_round_trip_top_level(self, text: str) -> None:
        assert parse(escape(text)).render({}) == text

    @pytest.mark.parametrize("text", SAMPLES)
    def test_round_trip_in_body(self, text: str) -> None:
        assert parse("?[1]{" + escape(text) + "}").render({}) == text

    @pytest.mark.parametrize("text", SAMPLES)
    def test_round_trip_in_interpolated_string(self, text: str) -> None:
        template = '?["' + escape(text) + '" == $s]{y}{n}'
        assert parse(template).render({"s": text}) == "y"


@pytest.mark.parametrize(
    "text", ["", "hello", "a{b", "50% off", "x = y < z", "line1\nline2", "émoji ✓"]
)
def test_text_without_special_characters_renders_unchanged(text: str) -> None:
    assert parse(text).render({}) == text
