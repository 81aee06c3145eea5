"""Helper functions for CLI command implementations.

Reading templates and variables files, ``--set`` assignments, and the
strict-mode scan for variables a template uses but nobody supplied.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
import yaml

from quill.exceptions import TemplateLoadError
from quill.template import (
    BinaryNode,
    CompositeNode,
    ConditionalNode,
    CountNode,
    LoopNode,
    Node,
    NotNode,
    VariableNode,
)

__all__ = [
    "Assignment",
    "read_template",
    "load_variables",
    "parse_assignments",
    "apply_assignments",
    "find_unbound_variables",
]

# (property path, value) pair produced by a --set option
Assignment = tuple[tuple[str, ...], Any]


def read_template(source: str) -> str:
    """Read template text from a file, or from stdin when ``source`` is ``-``.

    Raises:
        TemplateLoadError: If the file cannot be read or decoded.
    """
    if source == "-":
        return click.get_text_stream("stdin").read()

    path = Path(source)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise TemplateLoadError(f"Template file not found: {path}", path=path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateLoadError(f"Cannot read template {path}: {e}", path=path) from e


def load_variables(path: Path | None) -> dict[str, Any]:
    """Load the variables mapping from a YAML (or JSON) file.

    JSON is a subset of YAML, so both formats go through ``yaml.safe_load``.

    Args:
        path: Variables file, or None for no file.

    Returns:
        A new, mutable variables dict (empty when ``path`` is None or the
        file is empty).

    Raises:
        TemplateLoadError: If the file cannot be read, is not valid YAML, or
            does not contain a mapping at the top level.
    """
    if path is None:
        return {}

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise TemplateLoadError(f"Variables file not found: {path}", path=path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateLoadError(f"Cannot read variables {path}: {e}", path=path) from e

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TemplateLoadError(f"Invalid variables file {path}: {e}", path=path) from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise TemplateLoadError(
            f"Variables file {path} must contain a mapping, got {type(loaded).__name__}",
            path=path,
        )
    return loaded


def parse_assignments(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> list[Assignment]:
    """Click callback turning ``name.path=value`` options into assignments.

    Values are parsed as YAML scalars or flow collections, so ``3`` is an
    integer, ``true`` a boolean and ``[a, b]`` a list.
    """
    assignments: list[Assignment] = []
    for raw in values:
        name, sep, text = raw.partition("=")
        path = tuple(name.split("."))
        if not sep or not all(path):
            raise click.BadParameter(f"expected NAME=VALUE, got {raw!r}", ctx, param)
        try:
            value = yaml.safe_load(text) if text else ""
        except yaml.YAMLError as e:
            raise click.BadParameter(f"invalid value for {name}: {e}", ctx, param) from e
        assignments.append((path, value))
    return assignments


def apply_assignments(variables: dict[str, Any], assignments: list[Assignment]) -> None:
    """Apply assignments in order, creating nested mappings along dotted paths.

    A path segment that currently holds a non-mapping value is replaced by a
    new mapping.
    """
    for path, value in assignments:
        target = variables
        for segment in path[:-1]:
            child = target.get(segment)
            if not isinstance(child, dict):
                child = {}
                target[segment] = child
            target = child
        target[path[-1]] = value


def find_unbound_variables(node: Node, variables: dict[str, Any]) -> list[str]:
    """List root variable names used by a template but absent from ``variables``.

    Loop identifiers count as bound inside their loop body. Names are
    returned in order of first use.

    Example:
        >>> from quill.template import parse
        >>> find_unbound_variables(parse("@[$p:$ps]{$p $q}"), {"ps": []})
        ['q']
    """
    found: dict[str, None] = {}
    _collect_roots(node, frozenset(), found)
    return [name for name in found if name not in variables]


def _collect_roots(node: Node, bound: frozenset[str], found: dict[str, None]) -> None:
    if isinstance(node, VariableNode):
        if node.name not in bound:
            found.setdefault(node.name, None)
    elif isinstance(node, CountNode):
        _collect_roots(node.collection, bound, found)
    elif isinstance(node, NotNode):
        _collect_roots(node.operand, bound, found)
    elif isinstance(node, BinaryNode):
        _collect_roots(node.left, bound, found)
        _collect_roots(node.right, bound, found)
    elif isinstance(node, ConditionalNode):
        _collect_roots(node.condition, bound, found)
        _collect_roots(node.then_branch, bound, found)
        if node.else_branch is not None:
            _collect_roots(node.else_branch, bound, found)
    elif isinstance(node, LoopNode):
        _collect_roots(node.collection, bound, found)
        _collect_roots(node.body, bound | {node.identifier}, found)
    elif isinstance(node, CompositeNode):
        for child in node.children:
            _collect_roots(child, bound, found)
