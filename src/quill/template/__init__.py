"""Template language: parsing, expression trees and evaluation.

Example:
    ```python
    from quill.template import parse

    tree = parse("@[$p:$planets]{$p.name?[#$p.moons > 0]{ (#$p.moons moons)}, }")
    print(tree.render({"planets": planets}))
    ```
"""

from __future__ import annotations

from quill.template.escaping import escape
from quill.template.evaluator import TemplateEvaluator
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
from quill.template.parser import TemplateParser, Whitespace, parse, try_parse
from quill.template.values import Variables

__all__ = [
    # Parsing
    "parse",
    "try_parse",
    "escape",
    "TemplateParser",
    "Whitespace",
    # Evaluation
    "TemplateEvaluator",
    "Variables",
    # Nodes
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
