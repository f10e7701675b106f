#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/ast/replacement.py
"""Node replacement primitives for editing immutable template trees.

Nodes are never modified in place. An edit constructs a new node and splices
it into the ordered sequence (``children``, ``body``, ``statements``...) that
owns the old one. Parent lookup matches by reference identity only, so a
reference to a node that an earlier edit evicted is detected as stale rather
than relocated by shape or position.

Functions
---------
- find_parent: Locate the direct parent of a node by identity
- array_for: Return the parent sequence holding a node
- replace: Overwrite a node's slot in its owning sequence
- remove: Delete a node's slot from its owning sequence
- rebuild: Bottom-up reconstruction for edits to scalar fields
- copy_node, copy_token: Construction helpers for fix procedures
- build_*: Fresh tokens and nodes for inserted syntax

"""

from __future__ import annotations

import logging
from dataclasses import replace as dataclass_replace
from typing import Any, TypeVar

from erbkit.ast.nodes import (
    EMPTY_LOCATION,
    EMPTY_RANGE,
    HTMLCloseTagNode,
    HTMLElementNode,
    LiteralNode,
    Location,
    Node,
    ParseResult,
    Token,
)
from erbkit.ast.visitors import ParentTrackingVisitor

logger = logging.getLogger(__name__)

NodeT = TypeVar("NodeT", bound=Node)


class NodeLocator(ParentTrackingVisitor):
    """Visitor that finds the parent of a target node by identity.

    Parameters
    ----------
    target : Node
        The node whose parent is sought

    """

    def __init__(self, target: Node) -> None:
        super().__init__()
        self.target = target
        self.found: Node | None = None
        self.done = False

    def visit_child_nodes(self, node: Node) -> None:
        """Stop at the target; otherwise keep descending."""
        if self.done:
            return
        if node is self.target:
            self.found = self.parent
            self.done = True
            return
        super().visit_child_nodes(node)


def _root_of(root: Node | ParseResult) -> Node:
    return root.value if isinstance(root, ParseResult) else root


def _index_of(sequence: list[Node], target: Node) -> int | None:
    for index, item in enumerate(sequence):
        if item is target:
            return index
    return None


def find_parent(root: Node | ParseResult, target: Node) -> Node | None:
    """Find the direct parent of ``target`` under ``root``.

    Parameters
    ----------
    root : Node or ParseResult
        Tree to search
    target : Node
        Node to locate, matched by identity

    Returns
    -------
    Node or None
        The parent node, or None when ``target`` is the root or is no longer
        reachable (a stale reference)

    """
    locator = NodeLocator(target)
    locator.visit(_root_of(root))
    return locator.found


def array_for(parent: Node, target: Node) -> list[Node] | None:
    """Return the sequence of ``parent`` that holds ``target`` by identity.

    Parameters
    ----------
    parent : Node
        Candidate owner
    target : Node
        Node to look for

    Returns
    -------
    list of Node or None
        The owning sequence, or None when ``target`` is held in a scalar
        field or not held at all

    """
    for sequence in parent.sequences():
        if _index_of(sequence, target) is not None:
            return sequence
    return None


def _field_holding(parent: Node, target: Node) -> str | None:
    for name in parent.node_fields():
        if getattr(parent, name) is target:
            return name
    return None


def replace(root: Node | ParseResult, old: Node, new: Node) -> bool:
    """Overwrite ``old``'s slot in its owning sequence with ``new``.

    Parameters
    ----------
    root : Node or ParseResult
        Tree containing ``old``
    old : Node
        Node to evict
    new : Node
        Replacement node

    Returns
    -------
    bool
        True when the slot was overwritten; False when ``old`` is stale or is
        not held in a sequence

    """
    parent = find_parent(root, old)
    if parent is None:
        logger.debug(f"replace: {old!r} is not reachable from the root")
        return False

    sequence = array_for(parent, old)
    if sequence is None:
        logger.debug(f"replace: {old!r} is held in a scalar field of {parent!r}")
        return False

    index = _index_of(sequence, old)
    if index is None:
        return False
    sequence[index] = new
    return True


def remove(root: Node | ParseResult, node: Node) -> bool:
    """Delete ``node``'s slot from its owning sequence.

    Returns
    -------
    bool
        True when the node was removed

    """
    parent = find_parent(root, node)
    if parent is None:
        return False

    sequence = array_for(parent, node)
    if sequence is None:
        return False

    index = _index_of(sequence, node)
    if index is None:
        return False
    del sequence[index]
    return True


def rebuild(root: Node | ParseResult, old: Node, new: Node) -> bool:
    """Swap ``old`` for ``new`` by reconstructing ancestors bottom-up.

    Starting at ``old``, each ancestor that holds the current node in a
    scalar field is copied with that field swapped. The walk stops at the
    first ancestor holding the current node in an ordered sequence, where a
    single :func:`replace` happens. Every other field is copied unchanged.

    Parameters
    ----------
    root : Node or ParseResult
        Tree containing ``old``
    old : Node
        Node to evict
    new : Node
        Replacement node

    Returns
    -------
    bool
        True when the new subtree was spliced in; False when ``old`` is stale

    """
    current_old, current_new = old, new

    while True:
        parent = find_parent(root, current_old)
        if parent is None:
            logger.debug(f"rebuild: {current_old!r} is not reachable from the root")
            return False

        sequence = array_for(parent, current_old)
        if sequence is not None:
            index = _index_of(sequence, current_old)
            if index is None:
                return False
            sequence[index] = current_new
            return True

        field_name = _field_holding(parent, current_old)
        if field_name is None:
            return False

        changes: dict[str, Any] = {field_name: current_new}
        if isinstance(parent, HTMLElementNode) and field_name == "open_tag":
            # element.tag_name mirrors open_tag.tag_name
            changes["tag_name"] = getattr(current_new, "tag_name", parent.tag_name)
        current_old, current_new = parent, copy_node(parent, **changes)


def copy_node(node: NodeT, **changes: Any) -> NodeT:
    """Return a copy of ``node`` with ``changes`` applied.

    Sequences not named in ``changes`` are copied shallowly so the new node
    does not share list objects with the one it supersedes.

    Parameters
    ----------
    node : Node
        Node to copy
    **changes : Any
        Field values to override

    Returns
    -------
    Node
        A new node of the same kind

    """
    for name in node.sequence_fields:
        if name not in changes:
            changes[name] = list(getattr(node, name))
    changes.setdefault("errors", list(node.errors))
    return dataclass_replace(node, **changes)


def copy_token(token: Token, **changes: Any) -> Token:
    """Return a copy of ``token`` with ``changes`` applied."""
    return dataclass_replace(token, **changes)


def build_token(value: str, type: str = "text", location: Location = EMPTY_LOCATION) -> Token:
    """Build a token for inserted syntax; it has no source range."""
    return Token(value=value, range=EMPTY_RANGE, location=location, type=type)


def build_quote_token(location: Location = EMPTY_LOCATION, quote: str = '"') -> Token:
    """Build a quote token."""
    return build_token(quote, type="quote", location=location)


def build_literal_node(content: str) -> LiteralNode:
    """Build a literal node holding ``content``."""
    return LiteralNode(content=content)


def build_close_tag(tag_name: str) -> HTMLCloseTagNode:
    """Build a ``</tag_name>`` close tag."""
    return HTMLCloseTagNode(
        tag_opening=build_token("</", type="tag_start_close"),
        tag_name=build_token(tag_name, type="tag_name"),
        tag_closing=build_token(">", type="tag_end"),
    )
