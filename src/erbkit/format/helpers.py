#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/format/helpers.py
"""Text helpers shared by the element analyzer and the format printer."""

from __future__ import annotations

import re

from erbkit.ast.nodes import ERBNode, HTMLTextNode, Node, WhitespaceNode

BLANK_LINE = re.compile(r"\n[ \t\r]*\n")
WHITESPACE_RUN = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Replace every whitespace run with a single space."""
    return WHITESPACE_RUN.sub(" ", text)


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_paragraphs(text: str) -> list[str]:
    """Split text at blank lines; the pieces between breaks are returned."""
    return BLANK_LINE.split(text)


def has_blank_line_separator(children: list[Node]) -> bool:
    """Return True when a blank line sits between two significant children.

    Blank lines before the first or after the last significant child do not
    count; they are layout noise, not an intentional break.
    """
    seen_significant = False
    pending_break = False

    for child in children:
        if isinstance(child, WhitespaceNode):
            continue
        if isinstance(child, HTMLTextNode):
            for index, part in enumerate(split_paragraphs(child.content)):
                if index > 0:
                    pending_break = True
                if part.strip():
                    if pending_break and seen_significant:
                        return True
                    seen_significant = True
                    pending_break = False
            continue
        if pending_break and seen_significant:
            return True
        seen_significant = True
        pending_break = False

    return False


def format_erb_tag(node: ERBNode) -> str:
    """Normalize an ERB tag to one space inside each delimiter.

    Comment tags are returned verbatim. Heredoc content keeps its closing
    newline before the delimiter.
    """
    opening = node.tag_opening.value if node.tag_opening is not None else "<%"
    closing = node.tag_closing.value if node.tag_closing is not None else ""
    raw = node.content.value if node.content is not None else ""

    if opening == "<%#":
        return f"{opening}{raw}{closing}"

    code = raw.strip()
    if not code:
        return f"{opening} {closing}"
    if code.startswith("<<"):
        return f"{opening} {code}\n{closing}"
    return f"{opening} {code} {closing}"
