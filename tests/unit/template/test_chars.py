"""Tests for quill.template.chars."""

from __future__ import annotations

import pytest

from quill.template.chars import (
    ALL_SPECIAL,
    DEFAULT_SPECIAL,
    INTERPOLATED_SPECIAL,
    NESTED_SPECIAL,
    is_digit,
    is_identifier_part,
    is_identifier_start,
    is_start_of_conditional,
    is_start_of_count,
    is_start_of_loop,
    is_start_of_variable,
    is_whitespace,
)


class TestCharacterSets:
    def test_default(self) -> None:
        assert DEFAULT_SPECIAL == {"$", "?", "@", "#", "\\"}

    def test_nested_adds_close_brace(self) -> None:
        assert NESTED_SPECIAL == DEFAULT_SPECIAL | {"}"}

    def test_interpolated(self) -> None:
        assert INTERPOLATED_SPECIAL == {"\\", '"', "$"}

    def test_all(self) -> None:
        assert ALL_SPECIAL == {"$", "?", "@", "#", "\\", "}", '"'}


class TestPredicates:
    @pytest.mark.parametrize(
        ("c", "expected"), [("a", True), ("Z", True), ("_", True), ("é", True),
                            ("1", False), ("-", False), (None, False)]
    )
    def test_identifier_start(self, c: str | None, expected: bool) -> None:
        assert is_identifier_start(c) is expected

    def test_identifier_part_allows_digits(self) -> None:
        assert is_identifier_part("7") is True
        assert is_identifier_part("-") is False
        assert is_identifier_part(None) is False

    def test_digit_and_whitespace(self) -> None:
        assert is_digit("0") is True
        assert is_digit("a") is False
        assert is_whitespace("\t") is True
        assert is_whitespace("x") is False
        assert is_whitespace(None) is False

    def test_start_of_variable(self) -> None:
        assert is_start_of_variable("$", "a") is True
        assert is_start_of_variable("$", "[") is True
        assert is_start_of_variable("$", "1") is False
        assert is_start_of_variable("$", None) is False

    def test_start_of_conditional_and_loop(self) -> None:
        assert is_start_of_conditional("?", "[") is True
        assert is_start_of_conditional("?", "x") is False
        assert is_start_of_loop("@", "[") is True
        assert is_start_of_loop("@", None) is False

    def test_start_of_count(self) -> None:
        assert is_start_of_count("#", "$", "a") is True
        assert is_start_of_count("#", "$", " ") is False
        assert is_start_of_count("#", "x", "a") is False
