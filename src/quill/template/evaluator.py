"""Template evaluator.

This module provides the TemplateEvaluator class which renders parsed
expression trees against a variable environment.

Evaluation semantics:
- Literal text renders as itself; truthy when non-empty.
- Numeric literals render in fixed-point form; truthy when non-zero.
- Variables render ``str(value)`` (empty when unresolved); truthiness follows
  ``quill.template.values.truthiness``.
- ``!x``, ``a && b`` etc. render as ``True``/``False``.
- ``==``/``!=`` compare rendered text, so ``1 == "1"`` holds.
- ``<``, ``>``, ``<=``, ``>=`` compare numbers and are false when either side
  has no numeric interpretation.
- Conditionals render the selected branch (empty when the else branch is
  missing).
- Loops render their body once per element with the element bound to the
  loop identifier in a copy of the variables; non-enumerable sources render
  nothing.
- ``#$items`` renders the element count, or nothing for non-enumerables.
- A one-shot iterator (e.g. a generator) is read once per render; testing,
  counting and looping over it all see the same elements.

Rendering never raises for missing or mistyped values.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from quill.logging import debug_enabled, get_logger
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
from quill.template.values import (
    Variables,
    count_elements,
    format_decimal,
    is_enumerable,
    is_one_shot,
    resolve_path,
    to_decimal,
    to_text,
    truthiness,
)

__all__ = ["TemplateEvaluator"]

logger = get_logger(__name__)

_EMPTY: Mapping[str, Any] = {}


class TemplateEvaluator:
    """Evaluates expression trees against one variable environment.

    The evaluator never mutates the variables it is given. Loops render
    their bodies with a separate evaluator over a copy of the variables
    that additionally binds the loop identifier.

    Attributes:
        variables: The variable environment (read-only).

    Example:
        ```python
        tree = parse("Hello $name!")
        TemplateEvaluator({"name": "Ada"}).render(tree)  # "Hello Ada!"
        ```
    """

    __slots__ = ("variables", "_snapshots")

    def __init__(self, variables: Variables | None = None) -> None:
        self.variables: Variables = variables if variables is not None else _EMPTY
        # One-shot iterators seen so far, keyed by id; shared with loop bodies.
        self._snapshots: dict[int, tuple[Any, tuple[Any, ...]]] = {}

    def render(self, node: Node) -> str:
        """Render a node to text.

        Args:
            node: Any node of an expression tree.

        Returns:
            Rendered text.
        """
        if isinstance(node, LiteralNode):
            return node.value
        if isinstance(node, CompositeNode):
            return "".join(self.render(child) for child in node.children)
        if isinstance(node, VariableNode):
            return to_text(self.resolve(node))
        if isinstance(node, ConditionalNode):
            return self._render_conditional(node)
        if isinstance(node, LoopNode):
            return self._render_loop(node)
        if isinstance(node, CountNode):
            count = self._count(node)
            return "" if count is None else str(count)
        if isinstance(node, NumericNode):
            return format_decimal(node.value)
        if isinstance(node, (NotNode, BinaryNode)):
            return str(self.as_bool(node))
        raise TypeError(f"Unknown node type: {type(node).__name__}")

    def as_bool(self, node: Node) -> bool:
        """Evaluate a node's truthiness.

        Args:
            node: Any node of an expression tree.

        Returns:
            True or False.
        """
        if isinstance(node, LiteralNode):
            return len(node.value) > 0
        if isinstance(node, NumericNode):
            return node.value != 0
        if isinstance(node, VariableNode):
            return truthiness(self._resolve_collection(node))
        if isinstance(node, NotNode):
            return not self.as_bool(node.operand)
        if isinstance(node, BinaryNode):
            return self._evaluate_binary(node)
        if isinstance(node, ConditionalNode):
            if self.as_bool(node.condition):
                return self.as_bool(node.then_branch)
            if node.else_branch is None:
                return False
            return self.as_bool(node.else_branch)
        if isinstance(node, LoopNode):
            return len(self._render_loop(node)) > 0
        if isinstance(node, CompositeNode):
            if not node.children:
                return False
            if len(node.children) == 1:
                return self.as_bool(node.children[0])
            return len(self.render(node)) > 0
        if isinstance(node, CountNode):
            count = self._count(node)
            return count is not None and count != 0
        raise TypeError(f"Unknown node type: {type(node).__name__}")

    def as_number(self, node: Node) -> Decimal | None:
        """Numeric value of a node.

        Only numeric literals, variables and counts are numeric; every other
        node, and any variable whose value is not a number, yields None.
        """
        if isinstance(node, NumericNode):
            return node.value
        if isinstance(node, VariableNode):
            return to_decimal(self.resolve(node))
        if isinstance(node, CountNode):
            count = self._count(node)
            return None if count is None else Decimal(count)
        return None

    def resolve(self, node: VariableNode) -> Any:
        """Resolve a variable node to its host value (None if unresolved)."""
        return resolve_path(self.variables, node.name, node.path)

    def _evaluate_binary(self, node: BinaryNode) -> bool:
        """Evaluate a binary operation.

        ``&&`` and ``||`` short-circuit: the right operand is only evaluated
        when it can change the result.
        """
        operator = node.operator
        if operator is BinaryOperator.AND:
            return self.as_bool(node.left) and self.as_bool(node.right)
        if operator is BinaryOperator.OR:
            return self.as_bool(node.left) or self.as_bool(node.right)
        if operator is BinaryOperator.EQUAL:
            return self.render(node.left) == self.render(node.right)
        if operator is BinaryOperator.NOT_EQUAL:
            return self.render(node.left) != self.render(node.right)

        lhs = self.as_number(node.left)
        rhs = self.as_number(node.right)
        if lhs is None or rhs is None:
            # A comparison with a non-numeric operand is false, never an error.
            return False

        if operator is BinaryOperator.LESS_THAN:
            return lhs < rhs
        if operator is BinaryOperator.GREATER_THAN:
            return lhs > rhs
        if operator is BinaryOperator.LESS_THAN_OR_EQUAL:
            return lhs <= rhs
        if operator is BinaryOperator.GREATER_THAN_OR_EQUAL:
            return lhs >= rhs
        raise ValueError(f"Unsupported binary operator: {operator}")

    def _render_conditional(self, node: ConditionalNode) -> str:
        if self.as_bool(node.condition):
            return self.render(node.then_branch)
        if node.else_branch is None:
            return ""
        return self.render(node.else_branch)

    def _resolve_collection(self, node: VariableNode) -> Any:
        """Resolve a variable that may be tested, counted or looped over.

        A one-shot iterator is drained into a tuple the first time it is seen
        and that tuple is reused for the rest of the render, so testing or
        counting it does not lose elements for a later loop.
        """
        value = self.resolve(node)
        if not is_one_shot(value):
            return value
        snapshot = self._snapshots.get(id(value))
        if snapshot is None:
            snapshot = (value, tuple(value))
            self._snapshots[id(value)] = snapshot
        return snapshot[1]

    def _render_loop(self, node: LoopNode) -> str:
        collection = self._resolve_collection(node.collection)
        if not is_enumerable(collection):
            if debug_enabled(logger):
                logger.debug(
                    "loop_source_not_enumerable",
                    collection=str(node.collection),
                    value_type=type(collection).__name__,
                )
            return ""

        overlay = dict(self.variables)
        body_evaluator = TemplateEvaluator(overlay)
        body_evaluator._snapshots = self._snapshots
        parts: list[str] = []
        for element in collection:
            overlay[node.identifier] = element
            parts.append(body_evaluator.render(node.body))
        return "".join(parts)

    def _count(self, node: CountNode) -> int | None:
        collection = self._resolve_collection(node.collection)
        if not is_enumerable(collection):
            if debug_enabled(logger):
                logger.debug(
                    "count_source_not_enumerable",
                    collection=str(node.collection),
                    value_type=type(collection).__name__,
                )
            return None
        return count_elements(collection)
