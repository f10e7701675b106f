#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/ast/__init__.py
"""Abstract Syntax Tree module for HTML+ERB templates.

The module consists of several components:

- nodes: AST node classes, tokens, locations and the ParseResult
- visitors: Traversal core with per-kind hooks and explicit continuation
- replacement: Identity-based parent lookup and splice-based editing
- utils: Predicates for inspecting nodes

Examples
--------
Basic usage:

    >>> from erbkit.parsers import parse
    >>> from erbkit.printers import IdentityPrinter
    >>>
    >>> result = parse("<div><%= title %></div>")
    >>> IdentityPrinter.print(result) == result.source
    True

"""

from __future__ import annotations

from erbkit.ast.nodes import (
    ERB_CONTROL_FLOW_TYPES,
    CDATANode,
    DocumentNode,
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
    Location,
    Node,
    ParseError,
    ParseResult,
    Position,
    Range,
    Token,
    WhitespaceNode,
)
from erbkit.ast.replacement import (
    array_for,
    copy_node,
    copy_token,
    find_parent,
    rebuild,
    remove,
    replace,
)
from erbkit.ast.visitors import NodeCollector, ParentTrackingVisitor, Visitor

__all__ = [
    "ERB_CONTROL_FLOW_TYPES",
    "CDATANode",
    "DocumentNode",
    "ERBBlockNode",
    "ERBCaseNode",
    "ERBContentNode",
    "ERBElseNode",
    "ERBEndNode",
    "ERBForNode",
    "ERBIfNode",
    "ERBNode",
    "ERBUnlessNode",
    "ERBUntilNode",
    "ERBWhenNode",
    "ERBWhileNode",
    "ERBYieldNode",
    "HTMLAttributeNameNode",
    "HTMLAttributeNode",
    "HTMLAttributeValueNode",
    "HTMLCloseTagNode",
    "HTMLCommentNode",
    "HTMLDoctypeNode",
    "HTMLElementNode",
    "HTMLOpenTagNode",
    "HTMLTextNode",
    "LiteralNode",
    "Location",
    "Node",
    "NodeCollector",
    "ParentTrackingVisitor",
    "ParseError",
    "ParseResult",
    "Position",
    "Range",
    "Token",
    "Visitor",
    "WhitespaceNode",
    "array_for",
    "copy_node",
    "copy_token",
    "find_parent",
    "rebuild",
    "remove",
    "replace",
]
