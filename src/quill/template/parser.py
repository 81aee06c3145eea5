"""Recursive descent parser for templates.

Template syntax:
- ``plain text`` - literal output
- ``\\c`` - the character ``c``, taken literally
- ``$name`` or ``$[name]`` - variable interpolation
- ``$name.a.b`` - property path
- ``#$items`` - number of elements in ``$items``
- ``?[condition]{then}{else}`` - conditional, ``{else}`` optional
- ``@[$item:$items]{body}`` - loop binding ``$item`` to each element;
  the identifier may be wrapped (``$[item]``) but takes no property path
- ``"text with $var"`` - interpolated string (inside conditions only)

Conditions use a small boolean grammar. Precedence, lowest first:

    or         -> and ("||" and)*
    and        -> equality ("&&" equality)*
    equality   -> comparison (("==" | "!=") comparison)*
    comparison -> primary (("<" | ">" | "<=" | ">=") primary)*
    primary    -> "!" primary | "(" or ")" | variable | conditional
                | count | interpolated-string | number
    number     -> "-"? "."? digits ("." digits)?

The parser keeps a single cursor into the text. Optional tokens are read
speculatively: the cursor is saved, the read attempted, and the cursor
restored when the token is not there.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from decimal import Decimal
from enum import IntFlag

from quill.exceptions import ParseError
from quill.logging import debug_enabled, get_logger
from quill.template.chars import (
    CLOSE,
    DEFAULT_SPECIAL,
    ESCAPE,
    INTERPOLATED_SPECIAL,
    NESTED_SPECIAL,
    OPEN,
    QUOTE,
    is_digit,
    is_identifier_part,
    is_identifier_start,
    is_start_of_conditional,
    is_start_of_count,
    is_start_of_loop,
    is_start_of_variable,
    is_whitespace,
)
from quill.template.nodes import (
    BinaryNode,
    BinaryOperator,
    CompositeNode,
    ConditionalNode,
    CountNode,
    LiteralNode,
    LoopNode,
    Node,
    NotNode,
    NumericNode,
    VariableNode,
)

__all__ = [
    "TemplateParser",
    "Whitespace",
    "parse",
    "try_parse",
]

logger = get_logger(__name__)


def _stop_pattern(chars: Iterable[str]) -> re.Pattern[str]:
    return re.compile("[" + "".join(re.escape(c) for c in sorted(chars)) + "]")


_DEFAULT_STOP = _stop_pattern(DEFAULT_SPECIAL)
_NESTED_STOP = _stop_pattern(NESTED_SPECIAL)
_INTERPOLATED_STOP = _stop_pattern(INTERPOLATED_SPECIAL)

_OPERATOR_CHARS = frozenset("&|=!<>")

# Operators spelled with two characters, keyed by their first character
_TWO_CHAR_OPERATORS = {
    "&": BinaryOperator.AND,
    "|": BinaryOperator.OR,
    "=": BinaryOperator.EQUAL,
    "!": BinaryOperator.NOT_EQUAL,
    "<": BinaryOperator.LESS_THAN_OR_EQUAL,
    ">": BinaryOperator.GREATER_THAN_OR_EQUAL,
}

_OR_LEVEL = frozenset({BinaryOperator.OR})
_AND_LEVEL = frozenset({BinaryOperator.AND})
_EQUALITY_LEVEL = frozenset({BinaryOperator.EQUAL, BinaryOperator.NOT_EQUAL})
_COMPARISON_LEVEL = frozenset(
    {
        BinaryOperator.LESS_THAN,
        BinaryOperator.GREATER_THAN,
        BinaryOperator.LESS_THAN_OR_EQUAL,
        BinaryOperator.GREATER_THAN_OR_EQUAL,
    }
)


class Whitespace(IntFlag):
    """Where whitespace is skipped around a single-character token."""

    NONE = 0
    BEFORE = 1
    AFTER = 2
    AROUND = BEFORE | AFTER


def _unwrap(nodes: list[Node]) -> Node:
    """Embed a lone node directly instead of wrapping it in a composite."""
    if len(nodes) == 1:
        return nodes[0]
    return CompositeNode(tuple(nodes))


class TemplateParser:
    """Single-use parser for one template text.

    Example:
        ```python
        tree = TemplateParser("Hello $name").parse()
        tree.render({"name": "Ada"})  # "Hello Ada"
        ```
    """

    def __init__(self, text: str) -> None:
        self._input = text
        self._length = len(text)
        self._index = 0

    def parse(self) -> Node:
        """Parse the whole text.

        Returns:
            Root node of the expression tree.

        Raises:
            ParseError: If the text is not a valid template.
        """
        tree = self._parse_template()
        if debug_enabled(logger):
            logger.debug(
                "template_parsed", length=self._length, root=type(tree).__name__
            )
        return tree

    # Templates and literal text

    def _parse_template(self, nested: bool = False) -> Node:
        """Parse a sequence of constructs and literal text.

        At the top level this runs to the end of the input. A nested
        template (a ``{...}`` body) stops in front of the closing brace,
        which the caller consumes.
        """
        terminator = CLOSE if nested else None
        stop = _NESTED_STOP if nested else _DEFAULT_STOP
        nodes: list[Node] = []

        while self._index < self._length:
            c = self._input[self._index]
            if c == terminator:
                break

            next_char = self._char_at(self._index + 1)
            if is_start_of_variable(c, next_char):
                nodes.append(self._parse_variable())
            elif is_start_of_conditional(c, next_char):
                nodes.append(self._parse_conditional())
            elif is_start_of_loop(c, next_char):
                nodes.append(self._parse_loop())
            elif is_start_of_count(c, next_char, self._char_at(self._index + 2)):
                nodes.append(self._parse_count())
            else:
                nodes.append(self._parse_literal(terminator, stop))

        return _unwrap(nodes)

    def _parse_literal(self, terminator: str | None, stop: re.Pattern[str]) -> LiteralNode:
        """Scan literal text up to the next construct, terminator or end.

        A backslash makes the following character literal. Special characters
        that do not begin a construct are kept as ordinary text.
        """
        parts: list[str] = []
        start = self._index

        while True:
            match = stop.search(self._input, self._index)
            if match is None:
                parts.append(self._input[start:])
                self._index = self._length
                break

            idx = match.start()
            c = self._input[idx]
            next_char = self._char_at(idx + 1)

            if c == ESCAPE:
                if next_char is None:
                    raise self._error("Expected escaped character", offset=idx + 1)
                parts.append(self._input[start:idx])
                parts.append(next_char)
                self._index = idx + 2
                start = self._index
                continue

            if (
                c == terminator
                or is_start_of_conditional(c, next_char)
                or is_start_of_loop(c, next_char)
                or is_start_of_variable(c, next_char)
                or is_start_of_count(c, next_char, self._char_at(idx + 2))
            ):
                parts.append(self._input[start:idx])
                self._index = idx
                break

            self._index = idx + 1

        return LiteralNode("".join(parts))

    def _parse_interpolated_string(self) -> Node:
        """Parse ``"..."``; only variables are interpolated inside."""
        self._read(QUOTE)
        nodes: list[Node] = []

        while self._index < self._length:
            c = self._input[self._index]
            if c == QUOTE:
                break

            if is_start_of_variable(c, self._char_at(self._index + 1)):
                nodes.append(self._parse_variable())
            else:
                nodes.append(self._parse_literal(QUOTE, _INTERPOLATED_STOP))

        self._read(QUOTE)
        return _unwrap(nodes)

    # Constructs

    def _parse_variable(self, allow_properties: bool = True) -> VariableNode:
        self._read("$")
        wrapped = self._skip_char("[")
        name = self._parse_identifier()

        path: list[str] = []
        while allow_properties and self._try_read("."):
            if not is_identifier_start(self._char_at(self._index)):
                # A dot that does not start a property belongs to the text.
                self._index -= 1
                break
            path.append(self._parse_identifier())

        if wrapped:
            self._read("]")

        return VariableNode(name, tuple(path))

    def _parse_count(self) -> CountNode:
        self._read("#")
        return CountNode(self._parse_variable())

    def _parse_loop(self) -> LoopNode:
        self._read("@")
        self._read("[", Whitespace.AFTER)
        identifier = self._parse_variable(allow_properties=False).name
        self._read(":", Whitespace.AROUND)
        collection = self._parse_variable()
        self._read("]", Whitespace.AROUND)
        self._read(OPEN)
        body = self._parse_template(nested=True)
        self._read(CLOSE)
        return LoopNode(identifier, collection, body)

    def _parse_conditional(self) -> ConditionalNode:
        self._read("?")
        self._read("[", Whitespace.AFTER)
        condition = self._parse_boolean()
        self._read("]", Whitespace.AROUND)

        self._read(OPEN)
        then_branch = self._parse_template(nested=True)
        self._read(CLOSE)

        else_branch: Node | None = None
        if self._try_read(OPEN, Whitespace.BEFORE):
            else_branch = self._parse_template(nested=True)
            self._read(CLOSE)

        return ConditionalNode(condition, then_branch, else_branch)

    # Boolean expressions

    def _parse_boolean(self) -> Node:
        if self._index >= self._length:
            raise self._error("Expected boolean expression")
        return self._parse_or()

    def _parse_or(self) -> Node:
        return self._parse_binary(self._parse_and, _OR_LEVEL)

    def _parse_and(self) -> Node:
        return self._parse_binary(self._parse_equality, _AND_LEVEL)

    def _parse_equality(self) -> Node:
        return self._parse_binary(self._parse_comparison, _EQUALITY_LEVEL)

    def _parse_comparison(self) -> Node:
        return self._parse_binary(self._parse_primary, _COMPARISON_LEVEL)

    def _parse_binary(
        self,
        parse_operand: Callable[[], Node],
        operators: frozenset[BinaryOperator],
    ) -> Node:
        """Fold ``operand (op operand)*`` into left-leaning binary nodes."""
        left = parse_operand()
        while True:
            operator = self._try_read_operator(operators)
            if operator is None:
                return left
            right = parse_operand()
            left = BinaryNode(operator, left, right)

    def _parse_not(self) -> Node:
        if not self._try_read("!", Whitespace.AFTER):
            return self._parse_primary()

        operand = self._parse_not()
        if isinstance(operand, NotNode):
            return operand.operand
        return NotNode(operand)

    def _parse_primary(self) -> Node:
        c = self._char_at(self._index)
        if c is None:
            raise self._error("Expected boolean expression")

        if c == "!":
            return self._parse_not()
        if c == "(":
            return self._parse_group()
        if c == "$":
            return self._parse_variable()
        if c == "?":
            return self._parse_conditional()
        if c == "#":
            return self._parse_count()
        if c == QUOTE:
            return self._parse_interpolated_string()
        if is_digit(c) or c == "-" or c == ".":
            return self._parse_numeric()

        raise self._error("Expected '!', '(', '$', '?', '#', '\"', '-' or a digit")

    def _parse_group(self) -> Node:
        # Parentheses only group; no node is kept for them.
        self._read("(", Whitespace.AFTER)
        expression = self._parse_boolean()
        self._read(")", Whitespace.BEFORE)
        return expression

    def _parse_numeric(self) -> NumericNode:
        start = self._index
        self._try_read("-")
        is_fraction = self._try_read(".")
        self._read_digits()

        if not is_fraction and self._try_read("."):
            self._read_digits()

        return NumericNode(Decimal(self._input[start : self._index]))

    def _try_read_operator(
        self, allowed: frozenset[BinaryOperator]
    ) -> BinaryOperator | None:
        """Read a binary operator if one from ``allowed`` comes next.

        Whitespace around the operator is consumed on success. When there is
        no operator, or it belongs to another precedence level, the cursor is
        restored and None returned.

        Raises:
            ParseError: For a malformed operator such as a single ``&``.
        """
        if self._index >= self._length:
            return None

        checkpoint = self._index
        self._skip_whitespace()

        c = self._char_at(self._index)
        if c is None or c not in _OPERATOR_CHARS:
            self._index = checkpoint
            return None

        self._index += 1
        next_char = self._char_at(self._index)

        if c in "<>" and next_char != "=":
            operator = BinaryOperator.LESS_THAN if c == "<" else BinaryOperator.GREATER_THAN
        else:
            expected = "=" if c in "!<>" else c
            if next_char != expected:
                raise self._error(f"Expected '{expected}'")
            operator = _TWO_CHAR_OPERATORS[c]
            self._index += 1

        if operator not in allowed:
            self._index = checkpoint
            return None

        self._skip_whitespace()
        return operator

    # Cursor helpers

    def _char_at(self, index: int) -> str | None:
        return self._input[index] if index < self._length else None

    def _identifier_end(self, start: int) -> int:
        index = start
        while index < self._length:
            c = self._input[index]
            valid = is_identifier_start(c) if index == start else is_identifier_part(c)
            if not valid:
                break
            index += 1
        return index

    def _parse_identifier(self) -> str:
        start = self._index
        self._index = self._identifier_end(start)
        if self._index == start:
            raise self._error("Expected identifier")
        return self._input[start : self._index]

    def _read_digits(self) -> None:
        start = self._index
        while self._index < self._length and is_digit(self._input[self._index]):
            self._index += 1
        if self._index == start:
            raise self._error("Expected a digit")

    def _skip_whitespace(self) -> None:
        while self._index < self._length and is_whitespace(self._input[self._index]):
            self._index += 1

    def _skip_char(self, target: str) -> bool:
        if self._char_at(self._index) != target:
            return False
        self._index += 1
        return True

    def _read(self, target: str, whitespace: Whitespace = Whitespace.NONE) -> None:
        """Consume ``target`` or fail."""
        if whitespace & Whitespace.BEFORE:
            self._skip_whitespace()

        c = self._char_at(self._index)
        if c is None:
            raise self._error(f"Expected '{target}'")
        if c != target:
            raise self._error(f"Unexpected character '{c}', expected '{target}'")
        self._index += 1

        if whitespace & Whitespace.AFTER:
            self._skip_whitespace()

    def _try_read(self, target: str, whitespace: Whitespace = Whitespace.NONE) -> bool:
        """Consume ``target`` if it comes next, otherwise leave the cursor."""
        checkpoint = self._index

        if whitespace & Whitespace.BEFORE:
            self._skip_whitespace()

        if self._char_at(self._index) == target:
            self._index += 1
            if whitespace & Whitespace.AFTER:
                self._skip_whitespace()
            return True

        self._index = checkpoint
        return False

    def _error(self, expectation: str, offset: int | None = None) -> ParseError:
        return ParseError(
            self._input,
            self._index if offset is None else offset,
            expectation,
        )


def parse(text: str) -> Node:
    """Parse template text into an expression tree.

    The tree is immutable and can be rendered any number of times. Parsing
    does no caching; callers that render the same text repeatedly should
    keep the tree.

    Args:
        text: Template text.

    Returns:
        Root node of the expression tree.

    Raises:
        ParseError: If the text is not a valid template.

    Examples:
        >>> parse("Hi $name").render({"name": "Ada"})
        'Hi Ada'
        >>> parse("?[#$items > 1]{many}{few}").render({"items": [1, 2, 3]})
        'many'
    """
    return TemplateParser(text).parse()


def try_parse(text: str) -> tuple[Node | None, bool]:
    """Parse template text without raising.

    Returns:
        ``(tree, True)`` on success, ``(None, False)`` if the text is not a
        valid template.
    """
    try:
        return parse(text), True
    except ParseError:
        return None, False
