#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/format/analysis.py
"""Per-element layout analysis for the formatter.

Each element gets a three-way decision: whether its open tag, its content
and its close tag stay on the current line. Decisions are computed once per
element per formatting run and cached by node identity.

Decision rules
--------------
1. Content-preserving elements (``pre``, ``script``...) are never reflowed:
   (False, False, False).
2. Void elements keep their open tag on one line unless it would exceed the
   maximum line length; content and close tag are trivially inline.
3. Regular elements:

   - The open tag breaks onto multiple lines when it holds ERB control flow
     or when its single-line rendering overflows.
   - Content stays inline only when the open tag does, every body child is
     itself inline, no blank line separates children, and the whole
     element fits on one line.
   - The close tag follows the content.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from erbkit.ast.nodes import (
    ERBContentNode,
    ERBYieldNode,
    HTMLElementNode,
    HTMLTextNode,
    Node,
    WhitespaceNode,
)
from erbkit.ast.utils import is_erb_control_flow, is_whitespace_only, significant_children
from erbkit.format.helpers import has_blank_line_separator
from erbkit.options.formatter import FormatterOptions

if TYPE_CHECKING:
    from erbkit.format.printer import FormatPrinter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementAnalysis:
    """Layout decision for one element.

    Parameters
    ----------
    open_tag_inline : bool
        Open tag rendered on a single line
    content_inline : bool
        Body rendered on the open tag's line
    close_tag_inline : bool
        Close tag appended to the last content line

    """

    open_tag_inline: bool
    content_inline: bool
    close_tag_inline: bool

    @property
    def fully_inline(self) -> bool:
        """Return True when the whole element fits on one line."""
        return self.open_tag_inline and self.content_inline and self.close_tag_inline

    @property
    def block_content(self) -> bool:
        """Return True when the body is laid out on its own indented lines."""
        return not self.content_inline


PRESERVED_ANALYSIS = ElementAnalysis(False, False, False)


class ElementAnalyzer:
    """Compute and memoize :class:`ElementAnalysis` values.

    Parameters
    ----------
    printer : FormatPrinter
        Printer used to measure speculative single-line renderings
    options : FormatterOptions
        Line length and element sets

    """

    def __init__(self, printer: FormatPrinter, options: FormatterOptions) -> None:
        self.printer = printer
        self.options = options
        self._cache: dict[HTMLElementNode, ElementAnalysis | None] = {}

    def analyze(self, element: HTMLElementNode) -> ElementAnalysis:
        """Return the cached analysis for ``element``, computing it on first use."""
        if element in self._cache:
            cached = self._cache[element]
            # A None slot means the element is being analyzed further up the stack
            return cached if cached is not None else PRESERVED_ANALYSIS

        self._cache[element] = None
        analysis = self._compute(element)
        self._cache[element] = analysis
        logger.debug(f"Analyzed <{element.name}> at line {element.location.start.line}: {analysis}")
        return analysis

    def clear(self) -> None:
        """Drop all cached decisions."""
        self._cache.clear()

    def is_content_preserving(self, element: HTMLElementNode) -> bool:
        """Return True for elements whose body is never reformatted."""
        return element.name in self.options.content_preserving_elements

    def is_inline_element(self, element: HTMLElementNode) -> bool:
        """Return True for elements laid out within text flow."""
        return element.name in self.options.inline_elements

    def is_void(self, element: HTMLElementNode) -> bool:
        """Return True for configured void elements and tags written with ``/>``."""
        if element.name in self.options.void_elements:
            return True
        return element.open_tag is not None and element.open_tag.self_closing

    def _compute(self, element: HTMLElementNode) -> ElementAnalysis:
        if self.is_content_preserving(element):
            return PRESERVED_ANALYSIS

        open_tag_inline = self._open_tag_inline(element)
        if self.is_void(element):
            return ElementAnalysis(open_tag_inline, True, True)
        if not open_tag_inline:
            return ElementAnalysis(False, False, False)

        content_inline = self._content_inline(element)
        return ElementAnalysis(True, content_inline, content_inline)

    def _fits(self, text: str) -> bool:
        if "\n" in text:
            return False
        return len(self.printer.context.indent) + len(text) <= self.options.max_line_length

    def _open_tag_inline(self, element: HTMLElementNode) -> bool:
        open_tag = element.open_tag
        if open_tag is None:
            return True
        if any(is_erb_control_flow(child) for child in open_tag.children):
            return False
        if not significant_children(open_tag.children):
            return True
        return self._fits(self.printer.measure_open_tag(element))

    def _content_inline(self, element: HTMLElementNode) -> bool:
        if not significant_children(element.body):
            return True
        if has_blank_line_separator(element.body):
            return False

        # Children sit one level deeper if this element ends up as a block
        with self.printer.context.indented():
            if not all(self.is_inline_child(child) for child in element.body):
                return False

        return self._fits(self.printer.measure_element(element))

    def is_inline_child(self, child: Node) -> bool:
        """Return True when ``child`` can share a line with its siblings.

        Whitespace, text, non-control ERB tags and inline elements whose own
        analysis is fully inline qualify.
        """
        if isinstance(child, (WhitespaceNode, HTMLTextNode)):
            return True
        if isinstance(child, (ERBContentNode, ERBYieldNode)):
            return True
        if isinstance(child, HTMLElementNode):
            return self.is_inline_element(child) and self.analyze(child).fully_inline
        return is_whitespace_only(child)
