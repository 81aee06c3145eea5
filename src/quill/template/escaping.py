"""Escaping of literal text for embedding in templates."""

from __future__ import annotations

import re

from quill.template.chars import ALL_SPECIAL

__all__ = ["escape"]

_SPECIAL_PATTERN = re.compile("[" + "".join(re.escape(c) for c in sorted(ALL_SPECIAL)) + "]")


def escape(text: str | None) -> str | None:
    """Escape every character that has a meaning in some template context.

    The result parses back to a single literal equal to ``text``, whether it
    is placed at the top level, inside a ``{...}`` body or inside ``"..."``.

    Args:
        text: Literal text. Empty strings and None are returned unchanged.

    Returns:
        The text with each special character prefixed by a backslash.

    Example:
        >>> escape("Price: $5 {approx}")
        'Price: \\\\$5 {approx\\\\}'
    """
    if not text:
        return text
    return _SPECIAL_PATTERN.sub(r"\\\g<0>", text)
