#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/ast/utils.py
"""Predicates and small helpers for inspecting template nodes."""

from __future__ import annotations

from erbkit.ast.nodes import (
    ERB_CONTROL_FLOW_TYPES,
    ERBNode,
    HTMLAttributeNode,
    HTMLTextNode,
    LiteralNode,
    Node,
    WhitespaceNode,
)


def is_erb_control_flow(node: Node) -> bool:
    """Return True for ERB nodes that open a control structure."""
    return isinstance(node, ERB_CONTROL_FLOW_TYPES)


def erb_opening(node: ERBNode) -> str:
    """Return the opening delimiter of an ERB tag (``<%``, ``<%=``...)."""
    return node.tag_opening.value if node.tag_opening is not None else ""


def is_erb_comment(node: Node) -> bool:
    """Return True for ``<%#`` comment tags."""
    return isinstance(node, ERBNode) and erb_opening(node) == "<%#"


def is_whitespace_only(node: Node) -> bool:
    """Return True for whitespace nodes and whitespace-only text."""
    if isinstance(node, WhitespaceNode):
        return True
    return isinstance(node, HTMLTextNode) and not node.content.strip()


def significant_children(children: list[Node]) -> list[Node]:
    """Drop whitespace-only children."""
    return [child for child in children if not is_whitespace_only(child)]


def literal_text(children: list[Node]) -> str | None:
    """Join the content of literal children.

    Returns
    -------
    str or None
        The joined text, or None when any child is not a literal
        (typically an ERB tag)

    """
    parts = []
    for child in children:
        if not isinstance(child, LiteralNode):
            return None
        parts.append(child.content)
    return "".join(parts)


def attribute_name(attribute: HTMLAttributeNode) -> str | None:
    """Return the static attribute name, or None when it contains ERB."""
    if attribute.name is None:
        return None
    return literal_text(attribute.name.children)
