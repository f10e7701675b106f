#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/format/ignore.py
"""Detection of the ``<%# erbkit:formatter ignore %>`` directive."""

from __future__ import annotations

from erbkit.ast.nodes import ERBContentNode, Node, ParseResult
from erbkit.ast.visitors import Visitor
from erbkit.constants import FORMATTER_IGNORE_DIRECTIVE


def is_ignore_comment(node: Node) -> bool:
    """Return True for an ERB comment whose content is exactly the directive."""
    if not isinstance(node, ERBContentNode):
        return False
    if node.tag_opening is None or node.tag_opening.value != "<%#":
        return False
    if node.content is None:
        return False
    return node.content.value.strip() == FORMATTER_IGNORE_DIRECTIVE


class FormatIgnoreDetector(Visitor):
    """Visitor that stops walking once the ignore directive is found."""

    def __init__(self) -> None:
        self.found = False

    def visit_child_nodes(self, node: Node) -> None:
        if self.found:
            return
        super().visit_child_nodes(node)

    def visit_erb_content_node(self, node: ERBContentNode) -> None:
        if self.found:
            return
        if is_ignore_comment(node):
            self.found = True
            return
        super().visit_erb_content_node(node)


def has_format_ignore_directive(document: Node | ParseResult) -> bool:
    """Return True when the tree contains the formatter ignore directive.

    Parameters
    ----------
    document : Node or ParseResult
        Tree to search

    Returns
    -------
    bool
        True if an ERB comment ``<%# erbkit:formatter ignore %>`` is present

    """
    detector = FormatIgnoreDetector()
    root = document.value if isinstance(document, ParseResult) else document
    detector.visit(root)
    return detector.found
