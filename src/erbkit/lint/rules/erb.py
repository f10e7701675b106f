#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/lint/rules/erb.py
"""Lint rules for ERB tags and template whitespace."""

from __future__ import annotations

import re
from typing import ClassVar

from erbkit.ast.nodes import (
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
    ParseResult,
)
from erbkit.ast.replacement import copy_node, copy_token, rebuild, remove
from erbkit.ast.utils import is_erb_comment
from erbkit.lint.offense import FixSafety, Severity
from erbkit.lint.rules.base import SourceRule, VisitorRule

_WHITESPACE = (" ", "\t", "\n", "\r")


class ERBRequireWhitespaceInsideTags(VisitorRule):
    """ERB code must be separated from the ``<%`` and ``%>`` delimiters."""

    rule_name: ClassVar[str] = "erb-require-whitespace-inside-tags"
    description: ClassVar[str] = "Require whitespace inside ERB tag delimiters"
    default_severity: ClassVar[Severity] = Severity.ERROR
    fix_safety: ClassVar[FixSafety] = FixSafety.SAFE

    @staticmethod
    def _missing_whitespace(node: ERBNode) -> bool:
        if node.content is None or node.tag_closing is None or is_erb_comment(node):
            return False
        code = node.content.value
        if not code.strip():
            return False
        return not code.startswith(_WHITESPACE) or not code.endswith(_WHITESPACE)

    def _check(self, node: ERBNode) -> None:
        if self._missing_whitespace(node):
            self.add_diagnostic_with_fix("Add whitespace inside ERB tag delimiters", node)

    def visit_erb_content_node(self, node: ERBContentNode) -> None:
        self._check(node)
        super().visit_erb_content_node(node)

    def visit_erb_yield_node(self, node: ERBYieldNode) -> None:
        self._check(node)
        super().visit_erb_yield_node(node)

    def visit_erb_end_node(self, node: ERBEndNode) -> None:
        self._check(node)
        super().visit_erb_end_node(node)

    def visit_erb_else_node(self, node: ERBElseNode) -> None:
        self._check(node)
        super().visit_erb_else_node(node)

    def visit_erb_if_node(self, node: ERBIfNode) -> None:
        self._check(node)
        super().visit_erb_if_node(node)

    def visit_erb_unless_node(self, node: ERBUnlessNode) -> None:
        self._check(node)
        super().visit_erb_unless_node(node)

    def visit_erb_case_node(self, node: ERBCaseNode) -> None:
        self._check(node)
        super().visit_erb_case_node(node)

    def visit_erb_when_node(self, node: ERBWhenNode) -> None:
        self._check(node)
        super().visit_erb_when_node(node)

    def visit_erb_for_node(self, node: ERBForNode) -> None:
        self._check(node)
        super().visit_erb_for_node(node)

    def visit_erb_while_node(self, node: ERBWhileNode) -> None:
        self._check(node)
        super().visit_erb_while_node(node)

    def visit_erb_until_node(self, node: ERBUntilNode) -> None:
        self._check(node)
        super().visit_erb_until_node(node)

    def visit_erb_block_node(self, node: ERBBlockNode) -> None:
        self._check(node)
        super().visit_erb_block_node(node)

    def autofix(self, node: ERBNode, root: ParseResult) -> bool:  # type: ignore[override]
        if not isinstance(node, ERBNode) or not self._missing_whitespace(node):
            return False

        code = node.content.value
        if not code.startswith(_WHITESPACE):
            code = f" {code}"
        if not code.endswith(_WHITESPACE):
            code = f"{code} "

        # end_node, subsequent and else_clause are scalar slots
        return rebuild(root, node, copy_node(node, content=copy_token(node.content, value=code)))


class ERBNoEmptyTags(VisitorRule):
    """ERB tags must contain code."""

    rule_name: ClassVar[str] = "erb-no-empty-tags"
    description: ClassVar[str] = "Disallow empty ERB tags"
    default_severity: ClassVar[Severity] = Severity.ERROR
    fix_safety: ClassVar[FixSafety] = FixSafety.SAFE

    @staticmethod
    def _empty(node: ERBNode) -> bool:
        if node.content is None or node.tag_closing is None:
            return False
        return not node.content.value.strip()

    def visit_erb_content_node(self, node: ERBContentNode) -> None:
        if self._empty(node):
            self.add_diagnostic_with_fix("ERB tag should not be empty. Remove empty ERB tags or add content.", node)
        super().visit_erb_content_node(node)

    def autofix(self, node: ERBContentNode, root: ParseResult) -> bool:  # type: ignore[override]
        if not isinstance(node, ERBContentNode) or not self._empty(node):
            return False
        return remove(root, node)


class ERBNoExtraNewline(SourceRule):
    """At most two consecutive blank lines."""

    rule_name: ClassVar[str] = "erb-no-extra-newline"
    description: ClassVar[str] = "Disallow more than 2 consecutive blank lines"
    default_severity: ClassVar[Severity] = Severity.ERROR
    fix_safety: ClassVar[FixSafety] = FixSafety.SAFE

    pattern: ClassVar[re.Pattern[str]] = re.compile(r"\n{4,}")
    allowed: ClassVar[int] = 3

    def check_source(self, source: str) -> None:
        for match in self.pattern.finditer(source):
            start = match.start() + self.allowed
            end = match.end()
            excess = end - start
            self.add_diagnostic_with_source_fix(
                f"Extra blank line detected. Remove {excess} blank {'line' if excess == 1 else 'lines'} "
                "to keep at most 2 in a row",
                start,
                end,
            )

    def fix_matches(self, text: str, start: int, end: int) -> bool:
        if start < self.allowed or end <= start:
            return False
        return text[start - self.allowed : end] == "\n" * (end - start + self.allowed)

    def fix_replacement(self, text: str, start: int, end: int) -> str:
        return ""


class ERBNoTrailingWhitespace(SourceRule):
    """Lines must not end with spaces or tabs."""

    rule_name: ClassVar[str] = "erb-no-trailing-whitespace"
    description: ClassVar[str] = "Disallow trailing whitespace at the end of lines"
    default_severity: ClassVar[Severity] = Severity.WARNING
    fix_safety: ClassVar[FixSafety] = FixSafety.SAFE

    pattern: ClassVar[re.Pattern[str]] = re.compile(r"[ \t]+(?=\r?$)", re.MULTILINE)

    def check_source(self, source: str) -> None:
        for match in self.pattern.finditer(source):
            self.add_diagnostic_with_source_fix("Trailing whitespace detected", match.start(), match.end())

    def fix_matches(self, text: str, start: int, end: int) -> bool:
        if end <= start:
            return False
        span = text[start:end]
        if span.strip(" \t"):
            return False
        if start > 0 and text[start - 1] in " \t":
            return False
        rest = text[end:]
        return rest == "" or rest.startswith(("\n", "\r\n"))

    def fix_replacement(self, text: str, start: int, end: int) -> str:
        return ""


class ERBRequireTrailingNewline(SourceRule):
    """Non-empty templates end with exactly one newline."""

    rule_name: ClassVar[str] = "erb-require-trailing-newline"
    description: ClassVar[str] = "Require a trailing newline at the end of the file"
    default_severity: ClassVar[Severity] = Severity.ERROR
    fix_safety: ClassVar[FixSafety] = FixSafety.SAFE

    def check_source(self, source: str) -> None:
        if not source:
            return
        if not source.endswith("\n"):
            self.add_diagnostic_with_source_fix("File must end with a newline", len(source), len(source))
            return

        content_end = len(source.rstrip("\n"))
        if content_end and len(source) - content_end > 1:
            self.add_diagnostic_with_source_fix("File must end with exactly one newline", content_end + 1, len(source))

    def fix_matches(self, text: str, start: int, end: int) -> bool:
        if end != len(text) or not text:
            return False
        if start == end:
            return not text.endswith("\n")
        return start > 0 and text[start - 1] == "\n" and set(text[start:end]) == {"\n"}

    def fix_replacement(self, text: str, start: int, end: int) -> str:
        return "\n" if start == end else ""


ERB_RULES: tuple[type[VisitorRule] | type[SourceRule], ...] = (
    ERBRequireWhitespaceInsideTags,
    ERBNoEmptyTags,
    ERBNoExtraNewline,
    ERBNoTrailingWhitespace,
    ERBRequireTrailingNewline,
)
