#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/ast/visitors.py
"""Visitor pattern implementation for template AST traversal.

This module provides the traversal core shared by the printers, the
formatter, rewriters and lint rules. Each node kind dispatches to its own
``visit_*`` hook; every hook defaults to recursing into the node's children
in source order.

Continuation is explicit: a subclass that overrides a hook and wants the
walk to continue below that node must call ``super().visit_<kind>(node)``
(or ``self.visit_child_nodes(node)``). Not calling it prunes the subtree,
which lets a hook skip, reorder or short-circuit descent.

Examples
--------
Count elements by tag name:

    >>> class TagCounter(Visitor):
    ...     def __init__(self):
    ...         self.counts = {}
    ...     def visit_html_element_node(self, node):
    ...         self.counts[node.name] = self.counts.get(node.name, 0) + 1
    ...         super().visit_html_element_node(node)

"""

from __future__ import annotations

from typing import Any, Iterable

from erbkit.ast.nodes import (
    CDATANode,
    DocumentNode,
    ERBBlockNode,
    ERBCaseNode,
    ERBContentNode,
    ERBElseNode,
    ERBEndNode,
    ERBForNode,
    ERBIfNode,
    ERBUnlessNode,
    ERBUntilNode,
    ERBWhenNode,
    ERBWhileNode,
    ERBYieldNode,
    HTMLAttributeNameNode,
    HTMLAttributeNode,
    HTMLAttributeValueNode,
    HTMLCloseTagNode,
    HTMLCommentNode,
    HTMLDoctypeNode,
    HTMLElementNode,
    HTMLOpenTagNode,
    HTMLTextNode,
    LiteralNode,
    Node,
    WhitespaceNode,
)


class Visitor:
    """Depth-first walker with one overridable hook per node kind.

    Every ``visit_*`` method defaults to :meth:`visit_child_nodes`. Return
    values of hooks are passed through :meth:`visit` so specialized visitors
    may use them, but the default recursion ignores them.

    """

    def visit(self, node: Node | None) -> Any:
        """Dispatch ``node`` to its kind-specific hook.

        Parameters
        ----------
        node : Node or None
            Node to visit; None is ignored

        Returns
        -------
        Any
            Whatever the hook returns

        """
        if node is None:
            return None
        return node.accept(self)

    def visit_all(self, nodes: Iterable[Node | None]) -> None:
        """Visit each node of ``nodes`` in order."""
        for node in nodes:
            self.visit(node)

    def visit_child_nodes(self, node: Node) -> None:
        """Visit the direct children of ``node`` in source order.

        This is the default behavior of every hook.
        """
        for child in node.child_nodes():
            child.accept(self)

    # Markup nodes

    def visit_document_node(self, node: DocumentNode) -> Any:
        """Visit a document root."""
        self.visit_child_nodes(node)

    def visit_literal_node(self, node: LiteralNode) -> Any:
        """Visit a literal."""
        self.visit_child_nodes(node)

    def visit_whitespace_node(self, node: WhitespaceNode) -> Any:
        """Visit a whitespace node."""
        self.visit_child_nodes(node)

    def visit_html_text_node(self, node: HTMLTextNode) -> Any:
        """Visit a text node."""
        self.visit_child_nodes(node)

    def visit_html_element_node(self, node: HTMLElementNode) -> Any:
        """Visit an element (open tag, body, close tag)."""
        self.visit_child_nodes(node)

    def visit_html_open_tag_node(self, node: HTMLOpenTagNode) -> Any:
        """Visit an open tag."""
        self.visit_child_nodes(node)

    def visit_html_close_tag_node(self, node: HTMLCloseTagNode) -> Any:
        """Visit a close tag."""
        self.visit_child_nodes(node)

    def visit_html_attribute_node(self, node: HTMLAttributeNode) -> Any:
        """Visit an attribute."""
        self.visit_child_nodes(node)

    def visit_html_attribute_name_node(self, node: HTMLAttributeNameNode) -> Any:
        """Visit an attribute name."""
        self.visit_child_nodes(node)

    def visit_html_attribute_value_node(self, node: HTMLAttributeValueNode) -> Any:
        """Visit an attribute value."""
        self.visit_child_nodes(node)

    def visit_html_comment_node(self, node: HTMLCommentNode) -> Any:
        """Visit an HTML comment."""
        self.visit_child_nodes(node)

    def visit_html_doctype_node(self, node: HTMLDoctypeNode) -> Any:
        """Visit a doctype declaration."""
        self.visit_child_nodes(node)

    def visit_cdata_node(self, node: CDATANode) -> Any:
        """Visit a CDATA section."""
        self.visit_child_nodes(node)

    # Embedded script nodes

    def visit_erb_content_node(self, node: ERBContentNode) -> Any:
        """Visit an ERB output or statement tag."""
        self.visit_child_nodes(node)

    def visit_erb_yield_node(self, node: ERBYieldNode) -> Any:
        """Visit an ERB yield tag."""
        self.visit_child_nodes(node)

    def visit_erb_end_node(self, node: ERBEndNode) -> Any:
        """Visit an ERB end marker."""
        self.visit_child_nodes(node)

    def visit_erb_else_node(self, node: ERBElseNode) -> Any:
        """Visit an else branch."""
        self.visit_child_nodes(node)

    def visit_erb_if_node(self, node: ERBIfNode) -> Any:
        """Visit an if/elsif branch."""
        self.visit_child_nodes(node)

    def visit_erb_unless_node(self, node: ERBUnlessNode) -> Any:
        """Visit an unless conditional."""
        self.visit_child_nodes(node)

    def visit_erb_case_node(self, node: ERBCaseNode) -> Any:
        """Visit a case statement."""
        self.visit_child_nodes(node)

    def visit_erb_when_node(self, node: ERBWhenNode) -> Any:
        """Visit a when branch."""
        self.visit_child_nodes(node)

    def visit_erb_for_node(self, node: ERBForNode) -> Any:
        """Visit a for loop."""
        self.visit_child_nodes(node)

    def visit_erb_while_node(self, node: ERBWhileNode) -> Any:
        """Visit a while loop."""
        self.visit_child_nodes(node)

    def visit_erb_until_node(self, node: ERBUntilNode) -> Any:
        """Visit an until loop."""
        self.visit_child_nodes(node)

    def visit_erb_block_node(self, node: ERBBlockNode) -> Any:
        """Visit a block."""
        self.visit_child_nodes(node)


class ParentTrackingVisitor(Visitor):
    """Visitor that keeps the stack of ancestors of the node being visited.

    While a hook for node X runs, ``self.ancestors`` holds the chain from the
    root down to X's parent (X itself is not on the stack until its children
    are visited).

    """

    def __init__(self) -> None:
        self.ancestors: list[Node] = []

    @property
    def parent(self) -> Node | None:
        """Return the parent of the node currently being visited."""
        return self.ancestors[-1] if self.ancestors else None

    def visit_child_nodes(self, node: Node) -> None:
        """Visit children with ``node`` pushed on the ancestor stack."""
        self.ancestors.append(node)
        try:
            super().visit_child_nodes(node)
        finally:
            self.ancestors.pop()


class NodeCollector(Visitor):
    """Collect every node that matches a predicate, in document order.

    Parameters
    ----------
    predicate : callable, optional
        Function returning True for nodes to collect; collects all nodes if
        omitted

    Examples
    --------
        >>> collector = NodeCollector(lambda n: isinstance(n, HTMLElementNode))
        >>> collector.visit(document)
        >>> elements = collector.collected

    """

    def __init__(self, predicate: Any = None) -> None:
        self.predicate = predicate or (lambda node: True)
        self.collected: list[Node] = []

    def visit(self, node: Node | None) -> Any:
        """Record ``node`` if it matches, then continue the walk below it."""
        if node is None:
            return None
        if self.predicate(node):
            self.collected.append(node)
        return node.accept(self)

    def visit_child_nodes(self, node: Node) -> None:
        """Route children through :meth:`visit` so each one is tested."""
        for child in node.child_nodes():
            self.visit(child)
