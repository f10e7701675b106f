#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/ast/nodes.py
"""AST node classes for HTML+ERB templates.

This module defines the node hierarchy produced by the template parser and
consumed by the printers, the formatter and the lint/autofix layer.

The node hierarchy is designed to:
- Reproduce the source text exactly when every token is re-emitted
- Identify nodes by reference, never by structural equality
- Keep scalar fields immutable while exposing ordered child sequences
  as the only places where structural edits happen

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.

Markup nodes:
    - DocumentNode, HTMLElementNode, HTMLOpenTagNode, HTMLCloseTagNode
    - HTMLAttributeNode, HTMLAttributeNameNode, HTMLAttributeValueNode
    - HTMLTextNode, HTMLCommentNode, HTMLDoctypeNode, CDATANode
    - LiteralNode, WhitespaceNode

Embedded script nodes:
    - ERBContentNode, ERBYieldNode, ERBEndNode
    - ERBIfNode, ERBElseNode, ERBUnlessNode
    - ERBCaseNode, ERBWhenNode
    - ERBForNode, ERBWhileNode, ERBUntilNode, ERBBlockNode

Notes
-----
Nodes are frozen dataclasses with ``eq=False``: two structurally identical
nodes are still distinct, and hashing is by identity. Sequence fields are
plain lists owned by the node; replacing a child means overwriting a slot in
one of those lists (see :mod:`erbkit.ast.replacement`).

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional


@dataclass(frozen=True)
class Position:
    """A line/column position in the source.

    Parameters
    ----------
    line : int
        1-based line number
    column : int
        0-based column number

    """

    line: int
    column: int


@dataclass(frozen=True)
class Location:
    """A start/end pair of positions."""

    start: Position
    end: Position


@dataclass(frozen=True)
class Range:
    """A half-open ``[start, end)`` offset range into the source text."""

    start: int
    end: int

    @property
    def length(self) -> int:
        """Return the number of characters covered by the range."""
        return self.end - self.start


EMPTY_POSITION = Position(1, 0)
EMPTY_LOCATION = Location(EMPTY_POSITION, EMPTY_POSITION)
EMPTY_RANGE = Range(0, 0)


@dataclass(frozen=True)
class Token:
    """A leaf terminal of the template.

    Parameters
    ----------
    value : str
        Exact source text of the token
    range : Range
        Offsets of the token in the source
    location : Location
        Line/column span of the token
    type : str
        Token type tag (e.g. ``"tag_name"``, ``"erb_start"``)

    """

    value: str
    range: Range = EMPTY_RANGE
    location: Location = EMPTY_LOCATION
    type: str = "text"


@dataclass(frozen=True)
class ParseError:
    """A problem found while parsing.

    Parameters
    ----------
    message : str
        Human-readable description
    location : Location
        Where the problem was detected
    error_type : str, default = "parse-error"
        Machine-readable error category

    """

    message: str
    location: Location = EMPTY_LOCATION
    error_type: str = "parse-error"


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class Node(ABC):
    """Base class for all template AST nodes.

    Parameters
    ----------
    location : Location
        Line/column span of the node
    range : Range
        Source offsets of the node
    errors : list of ParseError
        Parse-time errors attached to this node

    """

    type_name: ClassVar[str] = "node"
    # Child-bearing fields in source order; sequence fields are lists
    child_fields: ClassVar[tuple[str, ...]] = ()
    sequence_fields: ClassVar[tuple[str, ...]] = ()

    location: Location = EMPTY_LOCATION
    range: Range = EMPTY_RANGE
    errors: list[ParseError] = field(default_factory=list)

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's method for this node kind

        """

    @classmethod
    def node_fields(cls) -> tuple[str, ...]:
        """Return the names of scalar fields that hold a child node."""
        return tuple(name for name in cls.child_fields if name not in cls.sequence_fields)

    def child_nodes(self) -> list[Node]:
        """Return the direct child nodes in source order."""
        children: list[Node] = []
        for name in self.child_fields:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, list):
                children.extend(value)
            else:
                children.append(value)
        return children

    def sequences(self) -> list[list[Node]]:
        """Return the mutable ordered sequences owned by this node."""
        return [getattr(self, name) for name in self.sequence_fields]

    def recursive_errors(self) -> list[ParseError]:
        """Return this node's errors followed by those of every descendant."""
        errors = list(self.errors)
        for child in self.child_nodes():
            errors.extend(child.recursive_errors())
        return errors

    def __repr__(self) -> str:
        return f"{type(self).__name__}@{self.location.start.line}:{self.location.start.column}"


# ============================================================================
# Markup nodes
# ============================================================================


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class DocumentNode(Node):
    """Root node of a parsed template."""

    type_name: ClassVar[str] = "document"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)
    sequence_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class LiteralNode(Node):
    """Literal text inside a tag: attribute name or value parts, comment bodies."""

    type_name: ClassVar[str] = "literal"

    content: str = ""

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this literal."""
        return visitor.visit_literal_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class WhitespaceNode(Node):
    """Whitespace between the parts of a tag.

    Only materialized when the parser tracks whitespace; without these nodes
    a tag cannot be reprinted byte-for-byte.
    """

    type_name: ClassVar[str] = "whitespace"

    value: Optional[Token] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this whitespace."""
        return visitor.visit_whitespace_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class HTMLTextNode(Node):
    """Character data between tags, including whitespace-only runs."""

    type_name: ClassVar[str] = "html-text"

    content: str = ""

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text."""
        return visitor.visit_html_text_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class HTMLOpenTagNode(Node):
    """An opening tag such as ``<div class="a">``.

    Parameters
    ----------
    tag_opening : Token
        The ``<`` token
    tag_name : Token
        The element name as written
    tag_closing : Token or None
        ``>`` or ``/>``; None when the tag is unterminated
    children : list of Node
        Attributes, whitespace and ERB nodes between the name and the closing
    is_void : bool
        Whether the tag opens an element with no body

    """

    type_name: ClassVar[str] = "html-open-tag"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)
    sequence_fields: ClassVar[tuple[str, ...]] = ("children",)

    tag_opening: Optional[Token] = None
    tag_name: Optional[Token] = None
    tag_closing: Optional[Token] = None
    children: list[Node] = field(default_factory=list)
    is_void: bool = False

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this open tag."""
        return visitor.visit_html_open_tag_node(self)

    @property
    def attributes(self) -> list[HTMLAttributeNode]:
        """Return the attribute children, skipping whitespace and ERB."""
        return [child for child in self.children if isinstance(child, HTMLAttributeNode)]

    @property
    def self_closing(self) -> bool:
        """Return True when the tag is written with ``/>``."""
        return self.tag_closing is not None and self.tag_closing.value.endswith("/>")


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class HTMLCloseTagNode(Node):
    """A closing tag such as ``</div>``."""

    type_name: ClassVar[str] = "html-close-tag"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)
    sequence_fields: ClassVar[tuple[str, ...]] = ("children",)

    tag_opening: Optional[Token] = None
    tag_name: Optional[Token] = None
    children: list[Node] = field(default_factory=list)
    tag_closing: Optional[Token] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this close tag."""
        return visitor.visit_html_close_tag_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class HTMLElementNode(Node):
    """An element: open tag, body and (unless void) close tag.

    Parameters
    ----------
    open_tag : HTMLOpenTagNode
        The opening tag
    tag_name : Token
        Same token as ``open_tag.tag_name``
    body : list of Node
        Child content between the tags
    close_tag : HTMLCloseTagNode or None
        The closing tag; None for void, self-closed or unclosed elements
    is_void : bool
        Whether the element has no body and no close tag

    """

    type_name: ClassVar[str] = "html-element"
    child_fields: ClassVar[tuple[str, ...]] = ("open_tag", "body", "close_tag")
    sequence_fields: ClassVar[tuple[str, ...]] = ("body",)

    open_tag: Optional[HTMLOpenTagNode] = None
    tag_name: Optional[Token] = None
    body: list[Node] = field(default_factory=list)
    close_tag: Optional[HTMLCloseTagNode] = None
    is_void: bool = False

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this element."""
        return visitor.visit_html_element_node(self)

    @property
    def name(self) -> str:
        """Return the tag name in lowercase, or an empty string."""
        return self.tag_name.value.lower() if self.tag_name is not None else ""


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class HTMLAttributeNameNode(Node):
    """The name part of an attribute; may mix literals and ERB."""

    type_name: ClassVar[str] = "html-attribute-name"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)
    sequence_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this attribute name."""
        return visitor.visit_html_attribute_name_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class HTMLAttributeValueNode(Node):
    """The value part of an attribute.

    ``open_quote`` and ``close_quote`` are None for unquoted values.
    """

    type_name: ClassVar[str] = "html-attribute-value"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)
    sequence_fields: ClassVar[tuple[str, ...]] = ("children",)

    open_quote: Optional[Token] = None
    children: list[Node] = field(default_factory=list)
    close_quote: Optional[Token] = None
    quoted: bool = False

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this attribute value."""
        return visitor.visit_html_attribute_value_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class HTMLAttributeNode(Node):
    """An attribute: name, optional ``=`` token and optional value.

    The ``equals`` token carries any whitespace written around ``=``.
    """

    type_name: ClassVar[str] = "html-attribute"
    child_fields: ClassVar[tuple[str, ...]] = ("name", "value")

    name: Optional[HTMLAttributeNameNode] = None
    equals: Optional[Token] = None
    value: Optional[HTMLAttributeValueNode] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this attribute."""
        return visitor.visit_html_attribute_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class HTMLCommentNode(Node):
    """An HTML comment ``<!-- ... -->``."""

    type_name: ClassVar[str] = "html-comment"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)
    sequence_fields: ClassVar[tuple[str, ...]] = ("children",)

    comment_start: Optional[Token] = None
    children: list[Node] = field(default_factory=list)
    comment_end: Optional[Token] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this comment."""
        return visitor.visit_html_comment_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class HTMLDoctypeNode(Node):
    """A doctype declaration."""

    type_name: ClassVar[str] = "html-doctype"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)
    sequence_fields: ClassVar[tuple[str, ...]] = ("children",)

    tag_opening: Optional[Token] = None
    children: list[Node] = field(default_factory=list)
    tag_closing: Optional[Token] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this doctype."""
        return visitor.visit_html_doctype_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class CDATANode(Node):
    """A raw-data section ``<![CDATA[ ... ]]>``."""

    type_name: ClassVar[str] = "cdata"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)
    sequence_fields: ClassVar[tuple[str, ...]] = ("children",)

    tag_opening: Optional[Token] = None
    children: list[Node] = field(default_factory=list)
    tag_closing: Optional[Token] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this CDATA section."""
        return visitor.visit_cdata_node(self)


# ============================================================================
# Embedded script nodes
# ============================================================================


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBNode(Node, ABC):
    """Common fields of every ERB tag node.

    Parameters
    ----------
    tag_opening : Token
        ``<%``, ``<%=``, ``<%-``, ``<%==`` or ``<%#``
    content : Token
        Everything between the delimiters, untrimmed
    tag_closing : Token or None
        ``%>`` or ``-%>``; None when the tag is unterminated

    """

    tag_opening: Optional[Token] = None
    content: Optional[Token] = None
    tag_closing: Optional[Token] = None

    @property
    def code(self) -> str:
        """Return the tag content with surrounding whitespace removed."""
        return self.content.value.strip() if self.content is not None else ""


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBContentNode(ERBNode):
    """An output or statement tag that opens no control structure."""

    type_name: ClassVar[str] = "erb-content"

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this ERB tag."""
        return visitor.visit_erb_content_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBYieldNode(ERBNode):
    """A ``<%= yield %>`` tag."""

    type_name: ClassVar[str] = "erb-yield"

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this yield tag."""
        return visitor.visit_erb_yield_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBEndNode(ERBNode):
    """The ``<% end %>`` marker closing a control structure."""

    type_name: ClassVar[str] = "erb-end"

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this end marker."""
        return visitor.visit_erb_end_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBElseNode(ERBNode):
    """An ``else`` branch."""

    type_name: ClassVar[str] = "erb-else"
    child_fields: ClassVar[tuple[str, ...]] = ("statements",)
    sequence_fields: ClassVar[tuple[str, ...]] = ("statements",)

    statements: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this else branch."""
        return visitor.visit_erb_else_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBIfNode(ERBNode):
    """An ``if`` (or ``elsif``) branch.

    ``subsequent`` chains to the next ``elsif`` (another ERBIfNode) or the
    ``else`` branch. Only the outermost ``if`` carries ``end_node``.
    """

    type_name: ClassVar[str] = "erb-if"
    child_fields: ClassVar[tuple[str, ...]] = ("statements", "subsequent", "end_node")
    sequence_fields: ClassVar[tuple[str, ...]] = ("statements",)

    statements: list[Node] = field(default_factory=list)
    subsequent: Optional[Node] = None
    end_node: Optional[ERBEndNode] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this conditional."""
        return visitor.visit_erb_if_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBUnlessNode(ERBNode):
    """An ``unless`` conditional with an optional ``else`` branch."""

    type_name: ClassVar[str] = "erb-unless"
    child_fields: ClassVar[tuple[str, ...]] = ("statements", "else_clause", "end_node")
    sequence_fields: ClassVar[tuple[str, ...]] = ("statements",)

    statements: list[Node] = field(default_factory=list)
    else_clause: Optional[ERBElseNode] = None
    end_node: Optional[ERBEndNode] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this conditional."""
        return visitor.visit_erb_unless_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBWhenNode(ERBNode):
    """A ``when`` branch of a case statement."""

    type_name: ClassVar[str] = "erb-when"
    child_fields: ClassVar[tuple[str, ...]] = ("statements",)
    sequence_fields: ClassVar[tuple[str, ...]] = ("statements",)

    statements: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this when branch."""
        return visitor.visit_erb_when_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBCaseNode(ERBNode):
    """A ``case`` statement.

    ``children`` holds whatever sits between ``case`` and the first ``when``
    (usually whitespace).
    """

    type_name: ClassVar[str] = "erb-case"
    child_fields: ClassVar[tuple[str, ...]] = ("children", "conditions", "else_clause", "end_node")
    sequence_fields: ClassVar[tuple[str, ...]] = ("children", "conditions")

    children: list[Node] = field(default_factory=list)
    conditions: list[Node] = field(default_factory=list)
    else_clause: Optional[ERBElseNode] = None
    end_node: Optional[ERBEndNode] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this case statement."""
        return visitor.visit_erb_case_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBForNode(ERBNode):
    """A ``for`` loop."""

    type_name: ClassVar[str] = "erb-for"
    child_fields: ClassVar[tuple[str, ...]] = ("statements", "end_node")
    sequence_fields: ClassVar[tuple[str, ...]] = ("statements",)

    statements: list[Node] = field(default_factory=list)
    end_node: Optional[ERBEndNode] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this loop."""
        return visitor.visit_erb_for_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBWhileNode(ERBNode):
    """A ``while`` loop."""

    type_name: ClassVar[str] = "erb-while"
    child_fields: ClassVar[tuple[str, ...]] = ("statements", "end_node")
    sequence_fields: ClassVar[tuple[str, ...]] = ("statements",)

    statements: list[Node] = field(default_factory=list)
    end_node: Optional[ERBEndNode] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this loop."""
        return visitor.visit_erb_while_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBUntilNode(ERBNode):
    """An ``until`` loop."""

    type_name: ClassVar[str] = "erb-until"
    child_fields: ClassVar[tuple[str, ...]] = ("statements", "end_node")
    sequence_fields: ClassVar[tuple[str, ...]] = ("statements",)

    statements: list[Node] = field(default_factory=list)
    end_node: Optional[ERBEndNode] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this loop."""
        return visitor.visit_erb_until_node(self)


@dataclass(frozen=True, eq=False, kw_only=True, repr=False)
class ERBBlockNode(ERBNode):
    """A tag opening a Ruby block (``do ... end`` or ``{ ... }``)."""

    type_name: ClassVar[str] = "erb-block"
    child_fields: ClassVar[tuple[str, ...]] = ("body", "end_node")
    sequence_fields: ClassVar[tuple[str, ...]] = ("body",)

    body: list[Node] = field(default_factory=list)
    end_node: Optional[ERBEndNode] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block."""
        return visitor.visit_erb_block_node(self)


ERB_CONTROL_FLOW_TYPES: tuple[type[Node], ...] = (
    ERBIfNode,
    ERBUnlessNode,
    ERBCaseNode,
    ERBForNode,
    ERBWhileNode,
    ERBUntilNode,
    ERBBlockNode,
)


# ============================================================================
# Parse result
# ============================================================================


@dataclass
class ParseResult:
    """The result of parsing one template.

    A ParseResult is produced once per input and reused unchanged across
    analysis and fixing, which keeps node references held by diagnostics
    valid without re-parsing.

    Parameters
    ----------
    value : DocumentNode
        Root of the tree
    source : str
        The original template text
    errors : list of ParseError
        Every parse error found in the tree

    """

    value: DocumentNode
    source: str
    errors: list[ParseError] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """Return True when parsing produced errors."""
        return bool(self.errors)

    @property
    def success(self) -> bool:
        """Return True when parsing produced no errors."""
        return not self.errors

    def visit(self, visitor: Any) -> Any:
        """Walk the tree with ``visitor`` starting at the root."""
        return self.value.accept(visitor)
