#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/format/printer.py
"""Printer that lays out a template tree for the formatter.

The printer walks the tree in two modes. In block mode every structural item
starts its own line at the current indent; in inline mode items are written
onto the current line. Element layout is decided by
:class:`~erbkit.format.analysis.ElementAnalyzer`, which asks this printer to
render speculative single-line versions of tags and elements.

Block bodies are printed as flows: runs of text, inline elements and ERB
output tags are joined into words and wrapped to the line budget, while
block-level items get lines of their own.
"""

from __future__ import annotations

import logging
import textwrap
from typing import Any, Callable

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
    ERBNode,
    ERBUnlessNode,
    ERBUntilNode,
    ERBWhenNode,
    ERBWhileNode,
    ERBYieldNode,
    HTMLAttributeNode,
    HTMLCloseTagNode,
    HTMLCommentNode,
    HTMLDoctypeNode,
    HTMLElementNode,
    HTMLOpenTagNode,
    HTMLTextNode,
    LiteralNode,
    Node,
    ParseResult,
    WhitespaceNode,
)
from erbkit.ast.utils import is_erb_control_flow, significant_children
from erbkit.constants import RAW_TEXT_ELEMENTS, TOKEN_LIST_ATTRIBUTES
from erbkit.format.analysis import ElementAnalysis, ElementAnalyzer
from erbkit.format.helpers import (
    collapse_whitespace,
    format_erb_tag,
    normalize_newlines,
    split_paragraphs,
)
from erbkit.options.formatter import FormatterOptions
from erbkit.printers.base import Printer
from erbkit.printers.context import PrintContext
from erbkit.printers.identity import IdentityPrinter

logger = logging.getLogger(__name__)

# Markers used while grouping flow children
_BREAK = object()


class FormatPrinter(Printer):
    """Layout printer used by :class:`~erbkit.format.formatter.Formatter`.

    Parameters
    ----------
    options : FormatterOptions or None
        Layout options; defaults are used when omitted
    context : PrintContext or None
        Output state; created from ``options.indent_width`` when omitted

    Examples
    --------
        >>> result = parse("<div><p>Hi</p></div>")
        >>> FormatPrinter.print(result)
        '<div>\\n  <p>Hi</p>\\n</div>\\n'

    """

    def __init__(self, options: FormatterOptions | None = None, context: PrintContext | None = None) -> None:
        self.options = options or FormatterOptions()
        super().__init__(context or PrintContext(self.options.indent_width))
        self.analyzer = ElementAnalyzer(self, self.options)

    def render(self, input: Node | ParseResult, ignore_errors: bool = False) -> str:
        """Lay out ``input`` and return the formatted text.

        Raises
        ------
        PrintError
            If the tree has parse errors and ``ignore_errors`` is False

        """
        node = input.value if isinstance(input, ParseResult) else input
        if not ignore_errors:
            self._validate_no_errors(node)

        self.context.reset()
        self.analyzer.clear()
        self.visit(node)
        return self._finish()

    def _finish(self) -> str:
        lines = [line.rstrip() for line in self.context.lines]
        while lines and not lines[0]:
            lines.pop(0)
        while lines and not lines[-1]:
            lines.pop()
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------
    # Measurement, used by the analyzer
    # ------------------------------------------------------------------

    def _render_inline(self, node: Node) -> str:
        def render() -> None:
            self.context.inline_mode = True
            self.visit(node)

        return "".join(self.context.capture(render))

    def measure_open_tag(self, element: HTMLElementNode) -> str:
        """Return the single-line rendering of ``element``'s open tag."""
        return self._open_tag_text(element)

    def measure_element(self, element: HTMLElementNode) -> str:
        """Return the single-line rendering of the whole element."""
        return self._render_inline(element)

    # ------------------------------------------------------------------
    # Flow layout
    # ------------------------------------------------------------------

    def _is_flow_item(self, node: Node) -> bool:
        if isinstance(node, (HTMLTextNode, WhitespaceNode)):
            return True
        if isinstance(node, ERBNode):
            return not is_erb_control_flow(node) and "\n" not in format_erb_tag(node)
        if isinstance(node, HTMLElementNode):
            return self.analyzer.is_inline_element(node) and self.analyzer.analyze(node).fully_inline
        return False

    def _group_flow(self, children: list[Node]) -> list[Any]:
        """Split children into inline runs, blank-line breaks and block items."""
        groups: list[Any] = []
        run: list[Node | str] = []

        def close_run() -> None:
            nonlocal run
            if run:
                groups.append(run)
                run = []

        for child in children:
            if isinstance(child, HTMLTextNode):
                for index, part in enumerate(split_paragraphs(child.content)):
                    if index > 0:
                        close_run()
                        groups.append(_BREAK)
                    if part:
                        run.append(part)
            elif self._is_flow_item(child):
                run.append(child)
            else:
                close_run()
                groups.append(child)
        close_run()
        return groups

    def _run_words(self, run: list[Node | str]) -> list[str]:
        """Turn a run into words, gluing pieces not separated by whitespace."""
        words: list[str] = []
        glue = False

        for item in run:
            if isinstance(item, str):
                if not item.strip():
                    glue = False
                    continue
                parts = item.split()
                for index, part in enumerate(parts):
                    if index == 0 and glue and words and not item[0].isspace():
                        words[-1] += part
                    else:
                        words.append(part)
                glue = not item[-1].isspace()
                continue
            if isinstance(item, WhitespaceNode):
                glue = False
                continue

            rendered = self._render_inline(item)
            if glue and words:
                words[-1] += rendered
            else:
                words.append(rendered)
            glue = True

        return words

    def _print_words(self, words: list[str]) -> None:
        width = max(1, self.options.max_line_length - len(self.context.indent))
        line = ""
        for word in words:
            if not line:
                line = word
            elif len(line) + 1 + len(word) <= width:
                line = f"{line} {word}"
            else:
                self.context.push_line(line)
                line = word
        if line:
            self.context.push_line(line)

    def _print_flow(self, children: list[Node]) -> None:
        """Print block content: wrapped inline runs and block items."""
        if self._inside_raw_text():
            self._print_raw_text(children)
            return

        emitted = False
        pending_blank = False

        for group in self._group_flow(children):
            if group is _BREAK:
                pending_blank = emitted
                continue

            if isinstance(group, list):
                words = self._run_words(group)
                if not words:
                    continue
                if pending_blank:
                    self.context.blank_line()
                self._print_words(words)
            else:
                if pending_blank:
                    self.context.blank_line()
                self.visit(group)

            emitted = True
            pending_blank = False

    def _inside_raw_text(self) -> bool:
        return any(self.context.inside_tag(name) for name in RAW_TEXT_ELEMENTS)

    def _print_raw_text(self, children: list[Node]) -> None:
        """Re-indent a raw-text body line by line without reflowing it."""
        text = normalize_newlines("".join(IdentityPrinter.print_node(child) for child in children))
        for line in textwrap.dedent(text).strip("\n").split("\n"):
            self.context.push_line(line)

    def _print_inline_children(self, children: list[Node]) -> None:
        with self.context.inline():
            for child in children:
                self.visit(child)

    # ------------------------------------------------------------------
    # Document and text
    # ------------------------------------------------------------------

    def visit_document_node(self, node: DocumentNode) -> None:
        self._print_flow(node.children)

    def visit_html_text_node(self, node: HTMLTextNode) -> None:
        if self.context.inline_mode:
            # Raw text keeps its newlines, so a multi-line body never measures as inline
            text = normalize_newlines(node.content) if self._inside_raw_text() else collapse_whitespace(node.content)
            self.write(text)
        else:
            self._print_flow([node])

    def visit_whitespace_node(self, node: WhitespaceNode) -> None:
        if self.context.inline_mode:
            self.write(" ")

    def visit_literal_node(self, node: LiteralNode) -> None:
        self.context.write_or_push(node.content)

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def _tag_name(self, element: HTMLElementNode) -> str:
        return element.tag_name.value if element.tag_name is not None else ""

    def _tag_closing(self, element: HTMLElementNode) -> str:
        if element.name in self.options.void_elements:
            return ">"
        open_tag = element.open_tag
        if open_tag is not None and open_tag.self_closing:
            return " />"
        return ">"

    def _open_tag_parts(self, open_tag: HTMLOpenTagNode | None) -> list[str]:
        if open_tag is None:
            return []
        parts = []
        for child in significant_children(open_tag.children):
            if isinstance(child, HTMLAttributeNode):
                parts.append(self._attribute_text(child))
            elif isinstance(child, LiteralNode):
                parts.append(child.content.strip())
            else:
                parts.append(self._render_inline(child))
        return parts

    def _open_tag_text(self, element: HTMLElementNode) -> str:
        parts = [f"<{self._tag_name(element)}", *self._open_tag_parts(element.open_tag)]
        return " ".join(parts) + self._tag_closing(element)

    def _close_tag_text(self, element: HTMLElementNode) -> str | None:
        if element.close_tag is None:
            return None
        name = element.close_tag.tag_name.value if element.close_tag.tag_name is not None else self._tag_name(element)
        return f"</{name}>"

    def _print_open_tag_items(self, children: list[Node]) -> None:
        for child in significant_children(children):
            if is_erb_control_flow(child):
                self._print_control_flow(child, self._print_open_tag_items)
            elif isinstance(child, HTMLAttributeNode):
                self.context.push_line(self._attribute_text(child))
            elif isinstance(child, LiteralNode):
                self.context.push_line(child.content.strip())
            else:
                self.context.push_line(self._render_inline(child))

    def _print_multiline_open_tag(self, element: HTMLElementNode) -> None:
        self.context.push_line(f"<{self._tag_name(element)}")
        with self.context.indented():
            if element.open_tag is not None:
                self._print_open_tag_items(element.open_tag.children)
        self.context.push_line(self._tag_closing(element).strip())

    def _print_preserved(self, element: HTMLElementNode) -> None:
        open_tag = element.open_tag
        if open_tag is not None and any(is_erb_control_flow(child) for child in open_tag.children):
            opening = IdentityPrinter.print_node(open_tag)
        else:
            opening = self._open_tag_text(element)
        body = "".join(IdentityPrinter.print_node(child) for child in element.body)
        closing = self._close_tag_text(element) or ""
        self.context.write_or_push(opening + normalize_newlines(body) + closing)

    def _print_body_inline(self, element: HTMLElementNode) -> None:
        body = "".join(self.context.capture(lambda: self._print_inline_children(element.body)))
        if not self.analyzer.is_inline_element(element):
            body = body.strip()
        self.write(body)

    def visit_html_element_node(self, node: HTMLElementNode) -> None:
        self.context.enter_tag(node.name)
        try:
            if self.context.inline_mode:
                self._print_element_inline(node)
            else:
                self._print_element_block(node, self.analyzer.analyze(node))
        finally:
            self.context.exit_tag()

    def _print_element_inline(self, node: HTMLElementNode) -> None:
        if self.analyzer.is_content_preserving(node):
            self._print_preserved(node)
            return
        self.write(self._open_tag_text(node))
        if self.analyzer.is_void(node):
            return
        self._print_body_inline(node)
        closing = self._close_tag_text(node)
        if closing is not None:
            self.write(closing)

    def _print_element_block(self, node: HTMLElementNode, analysis: ElementAnalysis) -> None:
        if self.analyzer.is_content_preserving(node):
            self._print_preserved(node)
            return

        if analysis.open_tag_inline:
            self.context.push_line(self._open_tag_text(node))
        else:
            self._print_multiline_open_tag(node)

        if self.analyzer.is_void(node):
            return

        if analysis.content_inline:
            self._print_body_inline(node)
        else:
            with self.context.indented():
                self._print_flow(node.body)

        closing = self._close_tag_text(node)
        if closing is None:
            return
        if analysis.close_tag_inline:
            self.write(closing)
        else:
            self.context.push_line(closing)

    def visit_html_open_tag_node(self, node: HTMLOpenTagNode) -> None:
        self.context.write_or_push(IdentityPrinter.print_node(node))

    def visit_html_close_tag_node(self, node: HTMLCloseTagNode) -> None:
        self.context.write_or_push(IdentityPrinter.print_node(node))

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def _attribute_text(self, attribute: HTMLAttributeNode) -> str:
        name = "".join(self._attribute_part(child) for child in attribute.name.children) if attribute.name else ""
        if attribute.value is None:
            return name

        token_list = name.lower() in TOKEN_LIST_ATTRIBUTES
        literal = ""
        parts = []
        for child in attribute.value.children:
            if isinstance(child, LiteralNode):
                text = collapse_whitespace(child.content) if token_list else child.content
                literal += text
                parts.append(text)
            else:
                parts.append(self._attribute_part(child))

        value = "".join(parts)
        if token_list:
            value = value.strip()

        quote = '"'
        if '"' in literal:
            if "'" not in literal:
                quote = "'"
            elif attribute.value.open_quote is not None:
                quote = attribute.value.open_quote.value
        return f"{name}={quote}{value}{quote}"

    def _attribute_part(self, node: Node) -> str:
        if isinstance(node, LiteralNode):
            return node.content
        return self._render_inline(node)

    # ------------------------------------------------------------------
    # Comments, doctype, CDATA
    # ------------------------------------------------------------------

    def _print_verbatim(self, node: Node) -> None:
        # Kept as one chunk so measurement still sees the newlines
        lines = normalize_newlines(IdentityPrinter.print_node(node)).split("\n")
        text = "\n".join([line.rstrip() for line in lines[:-1]] + lines[-1:])
        self.context.write_or_push(text)

    def visit_html_comment_node(self, node: HTMLCommentNode) -> None:
        self._print_verbatim(node)

    def visit_html_doctype_node(self, node: HTMLDoctypeNode) -> None:
        self._print_verbatim(node)

    def visit_cdata_node(self, node: CDATANode) -> None:
        self._print_verbatim(node)

    # ------------------------------------------------------------------
    # Embedded script
    # ------------------------------------------------------------------

    def _print_erb_tag(self, node: ERBNode) -> None:
        self.context.write_or_push(format_erb_tag(node))

    def visit_erb_content_node(self, node: ERBContentNode) -> None:
        self._print_erb_tag(node)

    def visit_erb_yield_node(self, node: ERBYieldNode) -> None:
        self._print_erb_tag(node)

    def visit_erb_end_node(self, node: ERBEndNode) -> None:
        self._print_erb_tag(node)

    @staticmethod
    def _branches(node: ERBNode) -> tuple[list[tuple[ERBNode, list[Node]]], ERBEndNode | None]:
        """Return the (tag, statements) pairs of a control structure and its end tag."""
        branches: list[tuple[ERBNode, list[Node]]] = []

        if isinstance(node, ERBIfNode):
            current: Node | None = node
            while isinstance(current, (ERBIfNode, ERBElseNode)):
                branches.append((current, current.statements))
                current = current.subsequent if isinstance(current, ERBIfNode) else None
        elif isinstance(node, ERBUnlessNode):
            branches.append((node, node.statements))
            if node.else_clause is not None:
                branches.append((node.else_clause, node.else_clause.statements))
        elif isinstance(node, ERBCaseNode):
            branches.append((node, node.children))
            branches.extend((when, when.statements) for when in node.conditions if isinstance(when, ERBWhenNode))
            if node.else_clause is not None:
                branches.append((node.else_clause, node.else_clause.statements))
        elif isinstance(node, ERBBlockNode):
            branches.append((node, node.body))
        elif isinstance(node, (ERBForNode, ERBWhileNode, ERBUntilNode)):
            branches.append((node, node.statements))

        return branches, getattr(node, "end_node", None)

    def _print_control_flow(self, node: ERBNode, print_items: Callable[[list[Node]], None]) -> None:
        """Print a control structure, laying out each branch with ``print_items``."""
        branches, end_node = self._branches(node)

        if self.context.inline_mode:
            for tag, statements in branches:
                self.write(format_erb_tag(tag))
                for statement in statements:
                    self.visit(statement)
            if end_node is not None:
                self.write(format_erb_tag(end_node))
            return

        for tag, statements in branches:
            self.context.push_line(format_erb_tag(tag))
            with self.context.indented():
                print_items(statements)
        if end_node is not None:
            self.context.push_line(format_erb_tag(end_node))

    def _visit_control_flow(self, node: ERBNode) -> None:
        self._print_control_flow(node, self._print_flow)

    def visit_erb_if_node(self, node: ERBIfNode) -> None:
        self._visit_control_flow(node)

    def visit_erb_unless_node(self, node: ERBUnlessNode) -> None:
        self._visit_control_flow(node)

    def visit_erb_case_node(self, node: ERBCaseNode) -> None:
        self._visit_control_flow(node)

    def visit_erb_for_node(self, node: ERBForNode) -> None:
        self._visit_control_flow(node)

    def visit_erb_while_node(self, node: ERBWhileNode) -> None:
        self._visit_control_flow(node)

    def visit_erb_until_node(self, node: ERBUntilNode) -> None:
        self._visit_control_flow(node)

    def visit_erb_block_node(self, node: ERBBlockNode) -> None:
        self._visit_control_flow(node)

    def visit_erb_else_node(self, node: ERBElseNode) -> None:
        self._print_erb_tag(node)
        self._print_flow(node.statements)

    def visit_erb_when_node(self, node: ERBWhenNode) -> None:
        self._print_erb_tag(node)
        self._print_flow(node.statements)
