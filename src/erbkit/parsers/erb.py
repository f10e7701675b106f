#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/parsers/erb.py
"""HTML+ERB template parser.

This module converts template text into the erbkit AST. The parser is a
hand-written recursive descent over the source string:

- Markup content is split into elements, text, comments, doctypes and CDATA
- ERB tags are recognized in content, inside open tags, in attribute names
  and in attribute values
- ERB control flow (if/elsif/else, unless, case/when, loops and blocks) is
  nested into structure nodes closed by ``<% end %>``
- ``script``, ``style``, ``textarea`` and ``title`` bodies are raw text

Every byte of the input lands in some token or text/literal node, so the
tree reprints to the exact source even when the template is malformed.
Problems are recorded as ParseError entries on the nearest node rather than
raised (unless strict mode is requested).

"""

from __future__ import annotations

import bisect
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

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
    Location,
    Node,
    ParseError,
    ParseResult,
    Position,
    Range,
    Token,
    WhitespaceNode,
)
from erbkit.constants import RAW_TEXT_ELEMENTS
from erbkit.exceptions import ParsingError
from erbkit.options.parser import ParserOptions
from erbkit.parsers.base import BaseParser, TemplateInput

logger = logging.getLogger(__name__)

_ERB_OPENINGS = ("<%==", "<%=", "<%-", "<%#", "<%")
_KEYWORD_PATTERN = re.compile(r"(if|elsif|else|end|unless|case|when|for|while|until|yield)\b")
_BLOCK_PATTERN = re.compile(r"(\bdo|\{)\s*(\|[^|]*\|)?\s*\Z")
_TRAILING_END_PATTERN = re.compile(r"\bend\s*\Z")
_TAG_NAME_PATTERN = re.compile(r"[^\s/>\"'<=]+")
_CLOSE_TAG_PATTERN = re.compile(r"</([^\s/>\"'<=]+)")

_OPENERS = frozenset({"if", "unless", "case", "for", "while", "until"})
_IF_STOPS = frozenset({"elsif", "else", "end"})
_UNLESS_STOPS = frozenset({"else", "end"})
_CASE_STOPS = frozenset({"when", "else", "end"})
_END_STOPS = frozenset({"end"})
_NO_STOPS: frozenset[str] = frozenset()
_BRANCH_KINDS = frozenset({"elsif", "else", "when", "end"})

# Returned by a step function for input it consumed but did not materialize
_SKIP = object()

StepFunction = Callable[[], object]


def classify_erb(opening: str, code: str) -> str | None:
    """Classify an ERB tag by the control-flow role of its code.

    Parameters
    ----------
    opening : str
        The opening delimiter (``<%``, ``<%=``...)
    code : str
        The stripped tag content

    Returns
    -------
    str or None
        One of ``if``, ``elsif``, ``else``, ``end``, ``unless``, ``case``,
        ``when``, ``for``, ``while``, ``until``, ``block``, ``yield``, or None
        for a plain output/statement tag

    """
    if opening == "<%#":
        return None

    match = _KEYWORD_PATTERN.match(code)
    if match:
        keyword = match.group(1)
        # One-liners such as `if x then y end` open nothing
        if keyword in _OPENERS and _TRAILING_END_PATTERN.search(code):
            return None
        return keyword

    if code.startswith("}"):
        return "end"
    if _BLOCK_PATTERN.search(code):
        return "block"
    return None


@dataclass
class _ERBTag:
    opening: Token
    content: Token
    closing: Optional[Token]
    start: int
    end: int
    kind: Optional[str]
    errors: list[ParseError] = field(default_factory=list)


class ERBParser(BaseParser):
    """Parser for HTML templates with embedded Ruby (ERB).

    Parameters
    ----------
    options : ParserOptions or None, default = None
        Parsing options. ``track_whitespace`` must stay enabled when the
        result will be reprinted, formatted or autofixed.

    Examples
    --------
        >>> result = ERBParser().parse('<div class="a"><%= name %></div>')
        >>> result.success
        True

    """

    def __init__(self, options: ParserOptions | None = None):
        """Initialize the parser."""
        super().__init__(options)
        self.source = ""
        self.pos = 0
        self.length = 0
        self._line_starts: list[int] = [0]
        self._open_elements: list[str] = []

    def parse(self, input_data: TemplateInput) -> ParseResult:
        """Parse a template into a ParseResult.

        Parameters
        ----------
        input_data : str, bytes or Path
            Template text, UTF-8 bytes, or a path to a template file

        Returns
        -------
        ParseResult
            Root node, parse errors and the original source

        Raises
        ------
        ParsingError
            If ``strict`` is enabled and the template has errors

        """
        self.source = self._load_text_content(input_data)
        self.pos = 0
        self.length = len(self.source)
        self._line_starts = [0] + [i + 1 for i, ch in enumerate(self.source) if ch == "\n"]
        self._open_elements = []

        children = self._parse_items(self._content_step, _NO_STOPS)
        document = DocumentNode(
            children=children,
            location=self._location(0, self.length),
            range=Range(0, self.length),
        )
        errors = document.recursive_errors()
        logger.debug(f"Parsed {self.length} characters into {len(children)} top-level nodes, {len(errors)} errors")

        if errors and self.options.strict:
            raise ParsingError(f"Template has {len(errors)} parse error(s): {errors[0].message}", errors=errors)

        return ParseResult(value=document, source=self.source, errors=errors)

    # ------------------------------------------------------------------
    # Positions and tokens
    # ------------------------------------------------------------------

    def _position(self, offset: int) -> Position:
        line_index = bisect.bisect_right(self._line_starts, offset) - 1
        return Position(line_index + 1, offset - self._line_starts[line_index])

    def _location(self, start: int, end: int) -> Location:
        return Location(self._position(start), self._position(end))

    def _token(self, start: int, end: int, token_type: str) -> Token:
        return Token(
            value=self.source[start:end],
            range=Range(start, end),
            location=self._location(start, end),
            type=token_type,
        )

    def _span(self, start: int) -> dict:
        return {"location": self._location(start, self.pos), "range": Range(start, self.pos)}

    def _error(self, message: str, start: int, end: int | None = None, error_type: str = "parse-error") -> ParseError:
        return ParseError(message=message, location=self._location(start, self.pos if end is None else end),
                          error_type=error_type)

    # ------------------------------------------------------------------
    # Lookahead
    # ------------------------------------------------------------------

    def _startswith(self, text: str) -> bool:
        return self.source.startswith(text, self.pos)

    def _at_erb(self) -> bool:
        return self._startswith("<%") and not self._startswith("<%%")

    def _at_close_tag(self) -> bool:
        return self._startswith("</") and self.pos + 2 < self.length and self.source[self.pos + 2].isalpha()

    def _at_open_tag(self) -> bool:
        return self._startswith("<") and self.pos + 1 < self.length and self.source[self.pos + 1].isalpha()

    def _at_doctype(self) -> bool:
        return self.source[self.pos:self.pos + 9].lower() == "<!doctype"

    def _at_markup_construct(self) -> bool:
        return (
            self._at_erb()
            or self._at_close_tag()
            or self._at_open_tag()
            or self._startswith("<!--")
            or self._startswith("<![CDATA[")
            or self._at_doctype()
        )

    def _peek_close_tag_name(self) -> str | None:
        match = _CLOSE_TAG_PATTERN.match(self.source, self.pos)
        return match.group(1).lower() if match else None

    def _at_raw_close(self, name: str) -> bool:
        end = self.pos + 2 + len(name)
        if self.source[self.pos:end].lower() != f"</{name}":
            return False
        return end >= self.length or self.source[end].isspace() or self.source[end] in ">/"

    def _peek_erb_kind(self) -> str | None:
        if not self._at_erb():
            return None
        saved = self.pos
        tag = self._scan_erb_tag()
        self.pos = saved
        return tag.kind

    # ------------------------------------------------------------------
    # Generic item loop
    # ------------------------------------------------------------------

    def _parse_items(self, step: StepFunction, stops: frozenset[str]) -> list[Node]:
        """Parse nodes until ``step`` signals the end or an ERB stop keyword appears.

        ERB tags are handled here for every context so control flow can nest
        inside content, open tags and attribute values alike.
        """
        items: list[Node] = []
        while self.pos < self.length:
            if self._at_erb():
                kind = self._peek_erb_kind()
                if kind is not None and kind in stops:
                    break
                items.append(self._parse_erb(step))
                continue

            node = step()
            if node is None:
                break
            if node is not _SKIP:
                items.append(node)  # type: ignore[arg-type]
        return items

    # ------------------------------------------------------------------
    # Content context
    # ------------------------------------------------------------------

    def _content_step(self) -> object:
        if self.pos >= self.length:
            return None
        if self._at_close_tag():
            if self._peek_close_tag_name() in self._open_elements:
                return None
            return self._parse_stray_close_tag()
        if self._startswith("<!--"):
            return self._parse_comment()
        if self._startswith("<![CDATA["):
            return self._parse_cdata()
        if self._at_doctype():
            return self._parse_doctype()
        if self._at_open_tag():
            return self._parse_element()
        return self._parse_text(self._at_markup_construct)

    def _parse_text(self, at_boundary: Callable[[], bool]) -> HTMLTextNode:
        start = self.pos
        self.pos += 1
        while self.pos < self.length:
            next_lt = self.source.find("<", self.pos)
            if next_lt == -1:
                self.pos = self.length
                break
            self.pos = next_lt
            if at_boundary():
                break
            self.pos += 1
        return HTMLTextNode(content=self.source[start:self.pos], **self._span(start))

    def _parse_stray_close_tag(self) -> HTMLCloseTagNode:
        start = self.pos
        close_tag = self._parse_close_tag()
        close_tag.errors.append(
            self._error(f"Unexpected close tag </{close_tag.tag_name.value}>", start, error_type="stray-close-tag")
        )
        return close_tag

    def _parse_comment(self) -> HTMLCommentNode:
        start = self.pos
        comment_start = self._token(self.pos, self.pos + 4, "comment_start")
        self.pos += 4
        children = self._parse_items(lambda: self._literal_step("-->"), _NO_STOPS)
        errors = []
        comment_end = None
        if self._startswith("-->"):
            comment_end = self._token(self.pos, self.pos + 3, "comment_end")
            self.pos += 3
        else:
            errors.append(self._error("Unclosed HTML comment", start, error_type="unclosed-comment"))
        return HTMLCommentNode(
            comment_start=comment_start, children=children, comment_end=comment_end, errors=errors, **self._span(start)
        )

    def _parse_doctype(self) -> HTMLDoctypeNode:
        start = self.pos
        tag_opening = self._token(self.pos, self.pos + 9, "doctype_start")
        self.pos += 9
        children = self._parse_items(lambda: self._literal_step(">"), _NO_STOPS)
        errors = []
        tag_closing = None
        if self._startswith(">"):
            tag_closing = self._token(self.pos, self.pos + 1, "tag_end")
            self.pos += 1
        else:
            errors.append(self._error("Unclosed doctype", start))
        return HTMLDoctypeNode(
            tag_opening=tag_opening, children=children, tag_closing=tag_closing, errors=errors, **self._span(start)
        )

    def _parse_cdata(self) -> CDATANode:
        start = self.pos
        tag_opening = self._token(self.pos, self.pos + 9, "cdata_start")
        self.pos += 9
        end = self.source.find("]]>", self.pos)
        content_end = self.length if end == -1 else end
        children: list[Node] = []
        if content_end > self.pos:
            content_start = self.pos
            self.pos = content_end
            children.append(LiteralNode(content=self.source[content_start:content_end], **self._span(content_start)))
        errors = []
        tag_closing = None
        if end != -1:
            tag_closing = self._token(self.pos, self.pos + 3, "cdata_end")
            self.pos += 3
        else:
            errors.append(self._error("Unclosed CDATA section", start))
        return CDATANode(
            tag_opening=tag_opening, children=children, tag_closing=tag_closing, errors=errors, **self._span(start)
        )

    def _literal_step(self, terminator: str) -> object:
        """Consume literal text up to ``terminator`` or the next ERB tag."""
        if self.pos >= self.length or self._startswith(terminator):
            return None
        start = self.pos
        self.pos += 1
        while self.pos < self.length and not self._startswith(terminator) and not self._at_erb():
            self.pos += 1
        return LiteralNode(content=self.source[start:self.pos], **self._span(start))

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def _parse_element(self) -> HTMLElementNode:
        start = self.pos
        open_tag = self._parse_open_tag()
        name = open_tag.tag_name.value.lower()
        errors: list[ParseError] = []

        if open_tag.tag_closing is None or open_tag.is_void:
            return HTMLElementNode(
                open_tag=open_tag,
                tag_name=open_tag.tag_name,
                body=[],
                close_tag=None,
                is_void=open_tag.is_void,
                errors=errors,
                **self._span(start),
            )

        if name in RAW_TEXT_ELEMENTS:
            body = self._parse_items(lambda: self._raw_text_step(name), _NO_STOPS)
        else:
            self._open_elements.append(name)
            try:
                body = self._parse_items(self._content_step, _NO_STOPS)
            finally:
                self._open_elements.pop()

        close_tag = None
        if self._at_close_tag() and self._peek_close_tag_name() == name:
            close_tag = self._parse_close_tag()
        else:
            errors.append(
                self._error(f"Missing close tag for <{open_tag.tag_name.value}>", start, error_type="missing-close-tag")
            )

        return HTMLElementNode(
            open_tag=open_tag,
            tag_name=open_tag.tag_name,
            body=body,
            close_tag=close_tag,
            is_void=False,
            errors=errors,
            **self._span(start),
        )

    def _raw_text_step(self, name: str) -> object:
        if self.pos >= self.length or self._at_raw_close(name):
            return None
        return self._parse_text(lambda: self._at_erb() or self._at_raw_close(name))

    def _parse_open_tag(self) -> HTMLOpenTagNode:
        start = self.pos
        tag_opening = self._token(self.pos, self.pos + 1, "tag_start")
        self.pos += 1
        match = _TAG_NAME_PATTERN.match(self.source, self.pos)
        name_end = match.end() if match else self.pos
        tag_name = self._token(self.pos, name_end, "tag_name")
        self.pos = name_end

        children = self._parse_items(self._open_tag_step, _NO_STOPS)

        errors = []
        tag_closing = None
        if self._startswith("/>"):
            tag_closing = self._token(self.pos, self.pos + 2, "tag_self_close")
            self.pos += 2
        elif self._startswith(">"):
            tag_closing = self._token(self.pos, self.pos + 1, "tag_end")
            self.pos += 1
        else:
            errors.append(self._error(f"Unclosed open tag <{tag_name.value}", start, error_type="unclosed-tag"))

        is_void = tag_name.value.lower() in self.options.void_elements or (
            tag_closing is not None and tag_closing.value == "/>"
        )
        return HTMLOpenTagNode(
            tag_opening=tag_opening,
            tag_name=tag_name,
            tag_closing=tag_closing,
            children=children,
            is_void=is_void,
            errors=errors,
            **self._span(start),
        )

    def _parse_close_tag(self) -> HTMLCloseTagNode:
        start = self.pos
        tag_opening = self._token(self.pos, self.pos + 2, "tag_start_close")
        self.pos += 2
        match = _TAG_NAME_PATTERN.match(self.source, self.pos)
        name_end = match.end() if match else self.pos
        tag_name = self._token(self.pos, name_end, "tag_name")
        self.pos = name_end

        children: list[Node] = []
        while self.pos < self.length and not self._startswith(">"):
            if self.source[self.pos].isspace():
                node = self._parse_whitespace()
                if node is not _SKIP:
                    children.append(node)  # type: ignore[arg-type]
                continue
            if self._at_markup_construct():
                break
            junk_start = self.pos
            while (
                self.pos < self.length
                and not self._startswith(">")
                and not self.source[self.pos].isspace()
                and not self._at_markup_construct()
            ):
                self.pos += 1
            children.append(LiteralNode(content=self.source[junk_start:self.pos], **self._span(junk_start)))

        errors = []
        tag_closing = None
        if self._startswith(">"):
            tag_closing = self._token(self.pos, self.pos + 1, "tag_end")
            self.pos += 1
        else:
            errors.append(self._error(f"Unclosed close tag </{tag_name.value}", start, error_type="unclosed-tag"))

        return HTMLCloseTagNode(
            tag_opening=tag_opening,
            tag_name=tag_name,
            children=children,
            tag_closing=tag_closing,
            errors=errors,
            **self._span(start),
        )

    def _parse_whitespace(self) -> object:
        start = self.pos
        while self.pos < self.length and self.source[self.pos].isspace():
            self.pos += 1
        if not self.options.track_whitespace:
            return _SKIP
        return WhitespaceNode(value=self._token(start, self.pos, "whitespace"), **self._span(start))

    # ------------------------------------------------------------------
    # Open tag contents
    # ------------------------------------------------------------------

    def _open_tag_step(self) -> object:
        if self.pos >= self.length or self._startswith(">") or self._startswith("/>"):
            return None
        if self.source[self.pos].isspace():
            return self._parse_whitespace()
        if self._at_open_tag() or self._at_close_tag():
            # A new tag starts before this one was closed
            return None
        return self._parse_attribute()

    def _at_attribute_name_end(self) -> bool:
        if self.pos >= self.length:
            return True
        ch = self.source[self.pos]
        return ch.isspace() or ch in "=>" or self._startswith("/>") or self._at_erb()

    def _parse_attribute_erb(self, depth: int) -> tuple[Node | None, int]:
        """Consume an ERB tag embedded in an attribute name or unquoted value.

        Control flow opened inside the attribute is kept flat and tracked by
        ``depth``. A branch or ``end`` tag at depth zero belongs to control
        flow around the attribute; it is left unconsumed and ``None`` is
        returned.
        """
        kind = self._peek_erb_kind()
        if kind in _BRANCH_KINDS and depth == 0:
            return None, depth
        if kind in _OPENERS or kind == "block":
            depth += 1
        elif kind == "end":
            depth -= 1
        return self._parse_flat_erb(), depth

    def _parse_attribute(self) -> HTMLAttributeNode:
        start = self.pos
        name_children: list[Node] = []
        errors: list[ParseError] = []

        depth = 0
        while True:
            if self._at_erb():
                node, depth = self._parse_attribute_erb(depth)
                if node is None:
                    break
                name_children.append(node)
                continue
            if self._at_attribute_name_end():
                break
            literal_start = self.pos
            self.pos += 1
            while not self._at_attribute_name_end():
                self.pos += 1
            name_children.append(LiteralNode(content=self.source[literal_start:self.pos], **self._span(literal_start)))

        if not name_children:
            # Stray `=` or similar; keep it as a literal name so no byte is lost
            literal_start = self.pos
            self.pos += 1
            name_children.append(LiteralNode(content=self.source[literal_start:self.pos], **self._span(literal_start)))
            errors.append(self._error("Unexpected character in tag", literal_start, error_type="unexpected-character"))

        name = HTMLAttributeNameNode(children=name_children, **self._span(start))

        equals = None
        value = None
        lookahead = self.pos
        while lookahead < self.length and self.source[lookahead].isspace():
            lookahead += 1
        if lookahead < self.length and self.source[lookahead] == "=":
            equals_start = self.pos
            self.pos = lookahead + 1
            while self.pos < self.length and self.source[self.pos].isspace():
                self.pos += 1
            equals = self._token(equals_start, self.pos, "equals")
            value = self._parse_attribute_value()
            if value is None:
                errors.append(self._error("Missing attribute value", start, error_type="missing-attribute-value"))

        return HTMLAttributeNode(name=name, equals=equals, value=value, errors=errors, **self._span(start))

    def _parse_attribute_value(self) -> HTMLAttributeValueNode | None:
        start = self.pos
        if self.pos >= self.length:
            return None

        quote = self.source[self.pos]
        if quote in "\"'":
            open_quote = self._token(self.pos, self.pos + 1, "quote")
            self.pos += 1
            children = self._parse_items(lambda: self._literal_step(quote), _NO_STOPS)
            errors = []
            close_quote = None
            if self._startswith(quote):
                close_quote = self._token(self.pos, self.pos + 1, "quote")
                self.pos += 1
            else:
                errors.append(self._error("Unclosed attribute value", start, error_type="unclosed-attribute-value"))
            return HTMLAttributeValueNode(
                open_quote=open_quote,
                children=children,
                close_quote=close_quote,
                quoted=True,
                errors=errors,
                **self._span(start),
            )

        children: list[Node] = []
        depth = 0
        while self.pos < self.length:
            if self._at_erb():
                node, depth = self._parse_attribute_erb(depth)
                if node is None:
                    break
                children.append(node)
                continue
            ch = self.source[self.pos]
            if ch.isspace() or ch == ">" or self._startswith("/>"):
                break
            literal_start = self.pos
            while (
                self.pos < self.length
                and not self.source[self.pos].isspace()
                and self.source[self.pos] != ">"
                and not self._startswith("/>")
                and not self._at_erb()
            ):
                self.pos += 1
            children.append(LiteralNode(content=self.source[literal_start:self.pos], **self._span(literal_start)))

        if not children:
            return None
        return HTMLAttributeValueNode(children=children, quoted=False, **self._span(start))

    # ------------------------------------------------------------------
    # ERB
    # ------------------------------------------------------------------

    def _scan_erb_tag(self) -> _ERBTag:
        start = self.pos
        opening_text = next(text for text in _ERB_OPENINGS if self._startswith(text))
        opening = self._token(start, start + len(opening_text), "erb_start")
        content_start = start + len(opening_text)

        errors = []
        close_at = self.source.find("%>", content_start)
        if close_at == -1:
            content = self._token(content_start, self.length, "erb_content")
            closing = None
            self.pos = self.length
            errors.append(self._error("Unclosed ERB tag", start, self.length, error_type="unclosed-erb-tag"))
        else:
            closing_start = close_at
            if close_at > content_start and self.source[close_at - 1] == "-" and opening_text != "<%#":
                closing_start = close_at - 1
            content = self._token(content_start, closing_start, "erb_content")
            closing = self._token(closing_start, close_at + 2, "erb_end")
            self.pos = close_at + 2

        kind = classify_erb(opening_text, content.value.strip())
        return _ERBTag(opening, content, closing, start, self.pos, kind, errors)

    def _erb_fields(self, tag: _ERBTag) -> dict:
        return {"tag_opening": tag.opening, "content": tag.content, "tag_closing": tag.closing}

    def _parse_flat_erb(self) -> Node:
        """Parse one ERB tag without building control-flow structure."""
        tag = self._scan_erb_tag()
        node_class = ERBYieldNode if tag.kind == "yield" else ERBContentNode
        return node_class(errors=tag.errors, **self._erb_fields(tag), **self._span(tag.start))

    def _parse_erb(self, step: StepFunction) -> Node:
        tag = self._scan_erb_tag()
        kind = tag.kind

        if kind == "if":
            return self._parse_if_branch(tag, step, outermost=True)
        if kind == "unless":
            return self._parse_unless(tag, step)
        if kind == "case":
            return self._parse_case(tag, step)
        if kind in ("for", "while", "until"):
            return self._parse_loop(tag, step)
        if kind == "block":
            return self._parse_block(tag, step)
        if kind == "yield":
            return ERBYieldNode(errors=tag.errors, **self._erb_fields(tag), **self._span(tag.start))
        if kind in ("elsif", "else", "when", "end"):
            tag.errors.append(
                self._error(f"Unexpected `{tag.content.value.strip()}`", tag.start, error_type="unexpected-erb-keyword")
            )
            node_class = ERBEndNode if kind == "end" else ERBContentNode
            return node_class(errors=tag.errors, **self._erb_fields(tag), **self._span(tag.start))
        return ERBContentNode(errors=tag.errors, **self._erb_fields(tag), **self._span(tag.start))

    def _parse_end(self, tag: _ERBTag) -> ERBEndNode | None:
        if self._peek_erb_kind() == "end":
            end_tag = self._scan_erb_tag()
            return ERBEndNode(errors=end_tag.errors, **self._erb_fields(end_tag), **self._span(end_tag.start))
        tag.errors.append(
            self._error(f"Missing `end` for `{tag.content.value.strip()}`", tag.start, tag.end, error_type="missing-end")
        )
        return None

    def _parse_else(self, step: StepFunction) -> ERBElseNode:
        tag = self._scan_erb_tag()
        statements = self._parse_items(step, _END_STOPS)
        return ERBElseNode(statements=statements, errors=tag.errors, **self._erb_fields(tag), **self._span(tag.start))

    def _parse_if_branch(self, tag: _ERBTag, step: StepFunction, outermost: bool) -> ERBIfNode:
        statements = self._parse_items(step, _IF_STOPS)

        subsequent: Node | None = None
        next_kind = self._peek_erb_kind()
        if next_kind == "elsif":
            elsif_tag = self._scan_erb_tag()
            subsequent = self._parse_if_branch(elsif_tag, step, outermost=False)
        elif next_kind == "else":
            subsequent = self._parse_else(step)

        end_node = self._parse_end(tag) if outermost else None
        return ERBIfNode(
            statements=statements,
            subsequent=subsequent,
            end_node=end_node,
            errors=tag.errors,
            **self._erb_fields(tag),
            **self._span(tag.start),
        )

    def _parse_unless(self, tag: _ERBTag, step: StepFunction) -> ERBUnlessNode:
        statements = self._parse_items(step, _UNLESS_STOPS)
        else_clause = self._parse_else(step) if self._peek_erb_kind() == "else" else None
        end_node = self._parse_end(tag)
        return ERBUnlessNode(
            statements=statements,
            else_clause=else_clause,
            end_node=end_node,
            errors=tag.errors,
            **self._erb_fields(tag),
            **self._span(tag.start),
        )

    def _parse_case(self, tag: _ERBTag, step: StepFunction) -> ERBCaseNode:
        children = self._parse_items(step, _CASE_STOPS)
        conditions: list[Node] = []
        while self._peek_erb_kind() == "when":
            when_tag = self._scan_erb_tag()
            statements = self._parse_items(step, _CASE_STOPS)
            conditions.append(
                ERBWhenNode(
                    statements=statements,
                    errors=when_tag.errors,
                    **self._erb_fields(when_tag),
                    **self._span(when_tag.start),
                )
            )
        else_clause = self._parse_else(step) if self._peek_erb_kind() == "else" else None
        end_node = self._parse_end(tag)
        return ERBCaseNode(
            children=children,
            conditions=conditions,
            else_clause=else_clause,
            end_node=end_node,
            errors=tag.errors,
            **self._erb_fields(tag),
            **self._span(tag.start),
        )

    def _parse_loop(self, tag: _ERBTag, step: StepFunction) -> Node:
        node_class = {"for": ERBForNode, "while": ERBWhileNode, "until": ERBUntilNode}[tag.kind or "for"]
        statements = self._parse_items(step, _END_STOPS)
        end_node = self._parse_end(tag)
        return node_class(
            statements=statements,
            end_node=end_node,
            errors=tag.errors,
            **self._erb_fields(tag),
            **self._span(tag.start),
        )

    def _parse_block(self, tag: _ERBTag, step: StepFunction) -> ERBBlockNode:
        body = self._parse_items(step, _END_STOPS)
        end_node = self._parse_end(tag)
        return ERBBlockNode(
            body=body,
            end_node=end_node,
            errors=tag.errors,
            **self._erb_fields(tag),
            **self._span(tag.start),
        )


def parse(source: TemplateInput, options: ParserOptions | None = None, **kwargs: object) -> ParseResult:
    """Parse a template with :class:`ERBParser`.

    Parameters
    ----------
    source : str, bytes or Path
        Template text, UTF-8 bytes, or a path to a template file
    options : ParserOptions or None, default = None
        Parsing options
    **kwargs
        Individual option overrides (e.g. ``track_whitespace=False``)

    Returns
    -------
    ParseResult
        The parsed template

    """
    options = options or ParserOptions()
    if kwargs:
        options = options.create_updated(**kwargs)
    return ERBParser(options).parse(source)
