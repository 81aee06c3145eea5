"""Expression tree produced by the template parser.

A parsed template is an immutable tree of frozen dataclasses. Each node
variant supports the same evaluation interface:

- ``render(variables) -> str``
- ``as_bool(variables) -> bool``
- ``as_number(variables) -> Decimal | None`` (only numeric literals,
  variables and counts have a numeric interpretation)

Evaluation is implemented in one place, ``TemplateEvaluator``, which
dispatches on the node variant; the methods here are conveniences that
create an evaluator for the supplied variables.

Trees hold no references to the variables they are rendered against, so a
single tree can be rendered repeatedly, and from several threads at once,
as long as each call gets its own variables mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quill.template.values import Variables

__all__ = [
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
    "Node",
]


class BinaryOperator(str, Enum):
    """Boolean operators, valued by their source token."""

    OR = "||"
    AND = "&&"
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    GREATER_THAN = ">"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN_OR_EQUAL = ">="

    @property
    def is_relational(self) -> bool:
        return self in _RELATIONAL


_RELATIONAL = frozenset(
    {
        BinaryOperator.LESS_THAN,
        BinaryOperator.GREATER_THAN,
        BinaryOperator.LESS_THAN_OR_EQUAL,
        BinaryOperator.GREATER_THAN_OR_EQUAL,
    }
)


class _Evaluable:
    """Evaluation conveniences shared by every node variant."""

    __slots__ = ()

    def render(self, variables: Variables | None = None) -> str:
        """Render this node against ``variables``. Never raises."""
        from quill.template.evaluator import TemplateEvaluator

        return TemplateEvaluator(variables).render(self)  # type: ignore[arg-type]

    def as_bool(self, variables: Variables | None = None) -> bool:
        """Truthiness of this node against ``variables``. Never raises."""
        from quill.template.evaluator import TemplateEvaluator

        return TemplateEvaluator(variables).as_bool(self)  # type: ignore[arg-type]

    def as_number(self, variables: Variables | None = None) -> Decimal | None:
        """Numeric value of this node, or None if it has none."""
        from quill.template.evaluator import TemplateEvaluator

        return TemplateEvaluator(variables).as_number(self)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class LiteralNode(_Evaluable):
    """Literal text with escapes already applied."""

    value: str

    def __str__(self) -> str:
        return self.value.replace('"', '\\"').replace("\r", "").replace("\n", "\\n")


@dataclass(frozen=True, slots=True)
class NumericNode(_Evaluable):
    """Numeric literal inside a boolean expression, e.g. ``-1.5``."""

    value: Decimal

    def __str__(self) -> str:
        return format(self.value, "f")


@dataclass(frozen=True, slots=True)
class VariableNode(_Evaluable):
    """Variable reference with an optional property path.

    Attributes:
        name: Root variable name (``user`` in ``$user.address.city``).
        path: Property segments, in order (``("address", "city")``).
    """

    name: str
    path: tuple[str, ...] = ()

    def __str__(self) -> str:
        return "$" + ".".join((self.name, *self.path))


@dataclass(frozen=True, slots=True)
class CountNode(_Evaluable):
    """Element count of a collection: ``#$items``."""

    collection: VariableNode

    def __str__(self) -> str:
        return f"#{self.collection}"


@dataclass(frozen=True, slots=True)
class NotNode(_Evaluable):
    """Boolean negation. The parser collapses ``!!x`` to ``x``."""

    operand: Node

    def __str__(self) -> str:
        return f"!{self.operand}"


@dataclass(frozen=True, slots=True)
class BinaryNode(_Evaluable):
    """Binary boolean operation.

    ``&&``/``||`` combine operand truthiness, ``==``/``!=`` compare the
    rendered text of both sides, and relational operators compare numeric
    values (false when either side has none).
    """

    operator: BinaryOperator
    left: Node
    right: Node

    def __str__(self) -> str:
        return f"({self.left} {self.operator.value} {self.right})"


@dataclass(frozen=True, slots=True)
class ConditionalNode(_Evaluable):
    """``?[condition]{then}{else}``; the else branch is optional."""

    condition: Node
    then_branch: Node
    else_branch: Node | None = None

    def __str__(self) -> str:
        text = f"?[{self.condition}]{{{self.then_branch}}}"
        if self.else_branch is not None:
            text += f"{{{self.else_branch}}}"
        return text


@dataclass(frozen=True, slots=True)
class LoopNode(_Evaluable):
    """``@[$identifier:$collection]{body}``.

    Attributes:
        identifier: Name bound to each element while rendering the body.
        collection: Variable resolving to the collection.
        body: Template rendered once per element.
    """

    identifier: str
    collection: VariableNode
    body: Node

    def __str__(self) -> str:
        return f"@[${self.identifier}:{self.collection}]{{{self.body}}}"


@dataclass(frozen=True, slots=True)
class CompositeNode(_Evaluable):
    """Ordered concatenation of sibling nodes.

    The parser never produces a composite with exactly one child; it embeds
    the child directly instead.
    """

    children: tuple[Node, ...] = ()

    def __str__(self) -> str:
        if not self.children:
            return ""
        if len(self.children) == 1:
            return str(self.children[0])
        return "[" + ", ".join(str(child) for child in self.children) + "]"


# Type alias for any node of the expression tree
Node = (
    LiteralNode
    | NumericNode
    | VariableNode
    | CountNode
    | NotNode
    | BinaryNode
    | ConditionalNode
    | LoopNode
    | CompositeNode
)
