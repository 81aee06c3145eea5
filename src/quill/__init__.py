"""Quill - a small text template engine.

Templates are parsed once into an immutable expression tree which can then be
rendered any number of times against different variables:

    >>> import quill
    >>> tree = quill.parse("Hello $name!?[#$items > 0]{ You have #$items items.}")
    >>> tree.render({"name": "Ada", "items": ["a", "b"]})
    'Hello Ada! You have 2 items.'
"""

from __future__ import annotations

from quill.exceptions import ParseError, QuillError
from quill.template import (
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
    TemplateEvaluator,
    VariableNode,
    Variables,
    escape,
    parse,
    try_parse,
)

__version__ = "0.4.0"

__all__ = [
    "__version__",
    "parse",
    "try_parse",
    "escape",
    "render",
    "ParseError",
    "QuillError",
    "TemplateEvaluator",
    "Variables",
    "Node",
    "BinaryOperator",
    "LiteralNode",
    "NumericNode",
    "VariableNode",
    "CountNode",
    "NotNode",
    "BinaryNode",
    "ConditionalNode",
    "LoopNode",
    "CompositeNode",
]


def render(node: Node, variables: Variables | None = None) -> str:
    """Render a parsed template against ``variables``.

    Args:
        node: Expression tree returned by ``parse``.
        variables: Name to value mapping. Missing names render as empty text.

    Returns:
        Rendered text.
    """
    return TemplateEvaluator(variables).render(node)
