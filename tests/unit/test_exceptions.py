"""Tests for the quill.exceptions package."""

from __future__ import annotations

from pathlib import Path

import pytest

from quill.exceptions import (
    ConfigError,
    ParseError,
    ParseErrorInfo,
    QuillError,
    TemplateLoadError,
)


class TestQuillError:
    def test_message_attribute(self) -> None:
        error = QuillError("boom")
        assert error.message == "boom"
        assert str(error) == "boom"

    @pytest.mark.parametrize("cls", [ConfigError, ParseError, TemplateLoadError])
    def test_hierarchy(self, cls: type[Exception]) -> None:
        assert issubclass(cls, QuillError)


class TestParseError:
    def test_attributes(self) -> None:
        error = ParseError("?[$x]{a", 7, "Expected '}'")
        assert error.input == "?[$x]{a"
        assert error.offset == 7
        assert error.expectation == "Expected '}'"

    def test_message(self) -> None:
        error = ParseError("?[1]{x", 6, "Expected '}'")
        assert error.message == (
            "Error parsing EOF on line 1\n\n?[1]{x\n      ^\nExpected '}'\n"
        )

    def test_blank_expectation_is_omitted(self) -> None:
        error = ParseError("?[1]{x", 6, "  ")
        assert error.message == "Error parsing EOF on line 1\n\n?[1]{x\n      ^"

    def test_missing_expectation(self) -> None:
        assert ParseError("x", 0).expectation == ""

    def test_context_size(self) -> None:
        error = ParseError("abcdefghij$[x", 13, "Expected ']'", context_size=2)
        assert "[x\n  ^\n" in error.message
        assert "fghij" not in error.message

    def test_to_info(self) -> None:
        error = ParseError("a\nb$[", 5, "Expected identifier")
        assert error.to_info() == ParseErrorInfo(
            input="a\nb$[",
            offset=5,
            message="Expected identifier",
            line=2,
        )


class TestConfigError:
    def test_field_and_value(self) -> None:
        error = ConfigError("Invalid", field="diagnostics.context_size", value=0)
        assert error.message == "Invalid"
        assert error.field == "diagnostics.context_size"
        assert error.value == 0

    def test_defaults(self) -> None:
        error = ConfigError("Invalid")
        assert error.field is None
        assert error.value is None


class TestTemplateLoadError:
    def test_path(self) -> None:
        error = TemplateLoadError("Cannot read", path=Path("t.qt"))
        assert error.path == Path("t.qt")
        assert str(error) == "Cannot read"
