"""Character classes used by the template parser.

Missing characters (lookahead past the end of the input) are passed around as
``None``; every predicate accepts ``None`` and returns False for it.
"""

from __future__ import annotations

__all__ = [
    "OPEN",
    "CLOSE",
    "ESCAPE",
    "QUOTE",
    "DEFAULT_SPECIAL",
    "NESTED_SPECIAL",
    "INTERPOLATED_SPECIAL",
    "ALL_SPECIAL",
    "is_identifier_start",
    "is_identifier_part",
    "is_digit",
    "is_whitespace",
    "is_start_of_variable",
    "is_start_of_conditional",
    "is_start_of_loop",
    "is_start_of_count",
]

OPEN = "{"
CLOSE = "}"
ESCAPE = "\\"
QUOTE = '"'

#: Characters that may stop a literal run at the top level of a template.
DEFAULT_SPECIAL = frozenset({"$", "?", "@", "#", ESCAPE})

#: Inside a ``{...}`` body the closing brace also ends a literal run.
NESTED_SPECIAL = DEFAULT_SPECIAL | {CLOSE}

#: Inside ``"..."`` only interpolation, escapes and the closing quote matter.
INTERPOLATED_SPECIAL = frozenset({ESCAPE, QUOTE, "$"})

#: Every character that has a meaning in some context; used for escaping.
ALL_SPECIAL = DEFAULT_SPECIAL | NESTED_SPECIAL | INTERPOLATED_SPECIAL


def is_identifier_start(c: str | None) -> bool:
    return c is not None and (c == "_" or c.isalpha())


def is_identifier_part(c: str | None) -> bool:
    return c is not None and (c == "_" or c.isalpha() or c.isdecimal())


def is_digit(c: str | None) -> bool:
    return c is not None and c.isdecimal()


def is_whitespace(c: str | None) -> bool:
    return c is not None and c.isspace()


def is_start_of_variable(c: str | None, next_char: str | None) -> bool:
    """``$name`` or ``$[name]``."""
    return c == "$" and (next_char == "[" or is_identifier_start(next_char))


def is_start_of_conditional(c: str | None, next_char: str | None) -> bool:
    return c == "?" and next_char == "["


def is_start_of_loop(c: str | None, next_char: str | None) -> bool:
    return c == "@" and next_char == "["


def is_start_of_count(
    c: str | None, next_char: str | None, next_next_char: str | None
) -> bool:
    """``#`` immediately followed by a variable."""
    return c == "#" and is_start_of_variable(next_char, next_next_char)
