#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/printers/identity.py
"""Lossless reprinter.

Every hook re-emits the exact token text it finds, without normalization.
For a tree parsed with whitespace tracking, printing the unmodified root
reproduces the source byte-for-byte; after fixes have spliced new nodes in,
untouched subtrees still print their original bytes.
"""

from __future__ import annotations

from erbkit.ast.nodes import (
    CDATANode,
    ERBBlockNode,
    ERBCaseNode,
    ERBContentNode,
    ERBElseNode,
    ERBEndNode,
    ERBForNode,
    ERBIfNode,
    ERBNode,
    ERBUnlessNode,
    ERBUntilNode,
    ERBWhenNode,
    ERBWhileNode,
    ERBYieldNode,
    HTMLAttributeNode,
    HTMLAttributeValueNode,
    HTMLCloseTagNode,
    HTMLCommentNode,
    HTMLDoctypeNode,
    HTMLOpenTagNode,
    HTMLTextNode,
    LiteralNode,
    Node,
    Token,
    WhitespaceNode,
)
from erbkit.printers.base import Printer


class IdentityPrinter(Printer):
    """Printer that reproduces the source text of a tree exactly."""

    @classmethod
    def print_node(cls, node: Node) -> str:
        """Print ``node`` losslessly, ignoring parse errors."""
        return cls.print(node, ignore_errors=True)

    def _token(self, token: Token | None) -> None:
        if token is not None:
            self.write(token.value)

    def visit_literal_node(self, node: LiteralNode) -> None:
        self.write(node.content)

    def visit_html_text_node(self, node: HTMLTextNode) -> None:
        self.write(node.content)

    def visit_whitespace_node(self, node: WhitespaceNode) -> None:
        self._token(node.value)

    def visit_html_open_tag_node(self, node: HTMLOpenTagNode) -> None:
        self._token(node.tag_opening)
        self._token(node.tag_name)
        self.visit_all(node.children)
        self._token(node.tag_closing)

    def visit_html_close_tag_node(self, node: HTMLCloseTagNode) -> None:
        self._token(node.tag_opening)
        self._token(node.tag_name)
        self.visit_all(node.children)
        self._token(node.tag_closing)

    def visit_html_attribute_node(self, node: HTMLAttributeNode) -> None:
        self.visit(node.name)
        self._token(node.equals)
        self.visit(node.value)

    def visit_html_attribute_value_node(self, node: HTMLAttributeValueNode) -> None:
        self._token(node.open_quote)
        self.visit_all(node.children)
        self._token(node.close_quote)

    def visit_html_comment_node(self, node: HTMLCommentNode) -> None:
        self._token(node.comment_start)
        self.visit_all(node.children)
        self._token(node.comment_end)

    def visit_html_doctype_node(self, node: HTMLDoctypeNode) -> None:
        self._token(node.tag_opening)
        self.visit_all(node.children)
        self._token(node.tag_closing)

    def visit_cdata_node(self, node: CDATANode) -> None:
        self._token(node.tag_opening)
        self.visit_all(node.children)
        self._token(node.tag_closing)

    # Embedded script nodes

    def _erb_tag(self, node: ERBNode) -> None:
        self._token(node.tag_opening)
        self._token(node.content)
        self._token(node.tag_closing)

    def visit_erb_content_node(self, node: ERBContentNode) -> None:
        self._erb_tag(node)

    def visit_erb_yield_node(self, node: ERBYieldNode) -> None:
        self._erb_tag(node)

    def visit_erb_end_node(self, node: ERBEndNode) -> None:
        self._erb_tag(node)

    def visit_erb_else_node(self, node: ERBElseNode) -> None:
        self._erb_tag(node)
        self.visit_all(node.statements)

    def visit_erb_when_node(self, node: ERBWhenNode) -> None:
        self._erb_tag(node)
        self.visit_all(node.statements)

    def visit_erb_if_node(self, node: ERBIfNode) -> None:
        self._erb_tag(node)
        self.visit_child_nodes(node)

    def visit_erb_unless_node(self, node: ERBUnlessNode) -> None:
        self._erb_tag(node)
        self.visit_child_nodes(node)

    def visit_erb_case_node(self, node: ERBCaseNode) -> None:
        self._erb_tag(node)
        self.visit_child_nodes(node)

    def visit_erb_for_node(self, node: ERBForNode) -> None:
        self._erb_tag(node)
        self.visit_child_nodes(node)

    def visit_erb_while_node(self, node: ERBWhileNode) -> None:
        self._erb_tag(node)
        self.visit_child_nodes(node)

    def visit_erb_until_node(self, node: ERBUntilNode) -> None:
        self._erb_tag(node)
        self.visit_child_nodes(node)

    def visit_erb_block_node(self, node: ERBBlockNode) -> None:
        self._erb_tag(node)
        self.visit_child_nodes(node)
