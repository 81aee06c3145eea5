"""Output formatting utilities for the Quill CLI."""

from __future__ import annotations

import json
from typing import Any

from quill.exceptions import ParseError

__all__ = [
    "format_error",
    "format_warning",
    "format_json",
    "format_parse_error",
]


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Args:
        message: Primary error message.
        details: Optional list of detail lines to include.
        suggestion: Optional suggestion for resolving the error.

    Returns:
        Formatted error string with details and suggestion if provided.

    Example:
        >>> print(format_error(
        ...     "Cannot read template",
        ...     details=["No such file"],
        ...     suggestion="Check the path",
        ... ))
        Error: Cannot read template
          No such file
        Suggestion: Check the path
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_warning(message: str) -> str:
    """Format a warning message.

    Example:
        >>> format_warning("Variable $name is not defined")
        'Warning: Variable $name is not defined'
    """
    return f"Warning: {message}"


def format_json(data: Any) -> str:
    """Format data as indented JSON.

    Raises:
        TypeError: If data is not JSON-serializable.
    """
    return json.dumps(data, indent=2)


def format_parse_error(error: ParseError, context_size: int) -> str:
    """Re-render a parse error with the configured amount of context.

    Args:
        error: The parse failure.
        context_size: Characters of context on each side of the failure.

    Returns:
        Diagnostic text with line number and caret snippet.
    """
    resized = ParseError(
        error.input,
        error.offset,
        error.expectation,
        context_size=context_size,
    )
    return resized.message.rstrip("\n")
