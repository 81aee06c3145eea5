"""Human-readable diagnostics for template parse failures.

Given the template text and the offset at which parsing failed, this module
produces a line number and a short caret-annotated snippet of the surrounding
text:

    Error parsing EOF on line 1

    ?[$x]{a
           ^

The functions here are pure and never raise for offsets within
``0..len(text)``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_CONTEXT_SIZE",
    "line_number",
    "context_snippet",
    "describe_position",
]

#: Characters of context shown on each side of the failing character.
DEFAULT_CONTEXT_SIZE = 8


def line_number(text: str, offset: int) -> int:
    """Return the 1-based line number containing ``offset``.

    Args:
        text: Template text.
        offset: Character offset into ``text``.

    Returns:
        One plus the number of newlines strictly before ``offset``.

    Example:
        >>> line_number("a\\nb\\nc", 4)
        3
    """
    return text.count("\n", 0, max(0, offset)) + 1


def context_snippet(text: str, offset: int, size: int = DEFAULT_CONTEXT_SIZE) -> str:
    """Return the text surrounding ``offset`` with a caret line beneath it.

    The window spans ``size`` characters before and after the offset,
    clamped to the text. The caret is indented relative to the start of the
    last line inside the window, so it lines up even when the window
    contains newlines.

    Args:
        text: Template text.
        offset: Character offset of the failure.
        size: Characters of context on each side.

    Returns:
        Window text, a newline, and the caret line.
    """
    start = max(0, offset - size)
    end = min(len(text) - 1, offset + size)
    window = text[start : end + 1]

    caret_index = offset if offset < size else size
    search_from = len(window) - 1 if caret_index >= len(window) else caret_index
    last_newline = window.rfind("\n", 0, search_from + 1) if search_from >= 0 else -1
    line_start = last_newline + 1

    padding = " " * max(0, caret_index - line_start)
    return f"{window}\n{padding}^"


def describe_position(text: str, offset: int, size: int = DEFAULT_CONTEXT_SIZE) -> str:
    """Describe a parse failure position for display.

    Args:
        text: Template text.
        offset: Character offset of the failure.
        size: Characters of context on each side.

    Returns:
        Header naming the failing character (or ``EOF``) and its line,
        followed by a blank line and the context snippet.

    Example:
        >>> print(describe_position("?[1]{x", 6))
        Error parsing EOF on line 1
        <BLANKLINE>
        ?[1]{x
              ^
    """
    character = f"'{text[offset]}'" if 0 <= offset < len(text) else "EOF"
    header = f"Error parsing {character} on line {line_number(text, offset)}"
    return f"{header}\n\n{context_snippet(text, offset, size)}"
