"""Template-specific error types.

Parsing is the only fallible stage of the template pipeline: a template that
parses can always be rendered. Parse failures carry the full input, the
offset of the failing character, and a short expectation message; the
human-readable rendition with line number and caret snippet is produced by
``quill.diagnostics``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from quill.diagnostics import DEFAULT_CONTEXT_SIZE, describe_position, line_number
from quill.exceptions.base import QuillError

__all__ = [
    "ParseError",
    "ParseErrorInfo",
    "TemplateLoadError",
]


@dataclass(frozen=True, slots=True)
class ParseErrorInfo:
    """Snapshot of a parse failure for reporting.

    Attributes:
        input: The template text that failed to parse.
        offset: Character offset of the failure.
        message: Expectation message (e.g. "Expected '}'").
        line: 1-based line number of the offset.
    """

    input: str
    offset: int
    message: str
    line: int


class ParseError(QuillError):
    """Exception raised when template text cannot be parsed.

    Attributes:
        input: The template text that failed to parse.
        offset: Character offset where parsing failed. May equal
            ``len(input)`` when the input ended prematurely.
        expectation: Short description of what the parser expected.
        message: Full diagnostic message including line number and a
            caret-annotated context snippet.
    """

    def __init__(
        self,
        input: str,
        offset: int,
        expectation: str | None = None,
        context_size: int | None = None,
    ) -> None:
        """Initialize the ParseError.

        Args:
            input: The template text that failed to parse.
            offset: Character offset where parsing failed.
            expectation: What the parser expected at ``offset``.
            context_size: Characters of context shown on each side of the
                failing character. Defaults to the diagnostics default.
        """
        self.input = input
        self.offset = offset
        self.expectation = expectation or ""
        size = DEFAULT_CONTEXT_SIZE if context_size is None else context_size
        full_message = describe_position(input, offset, size)
        if self.expectation.strip():
            full_message += f"\n{self.expectation}\n"
        super().__init__(full_message)

    def to_info(self) -> ParseErrorInfo:
        """Return an immutable snapshot of this error."""
        return ParseErrorInfo(
            input=self.input,
            offset=self.offset,
            message=self.expectation,
            line=line_number(self.input, self.offset),
        )


class TemplateLoadError(QuillError):
    """Raised when a template or variables file cannot be read.

    Attributes:
        path: The file that failed to load.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)
