#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/lint/directives.py
"""Lint suppression directives written as ERB comments.

Two directives are recognized:

- ``<%# erbkit:linter ignore %>`` anywhere in a template skips the whole file
- ``<%# erbkit:disable rule-a, rule-b %>`` suppresses the named rules on the
  line where the comment starts; ``all`` suppresses every rule there

Directives are collected from the parsed tree rather than by scanning text,
so the same words in an HTML comment or an output tag are not mistaken for
one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from erbkit.ast.nodes import ERBContentNode, Location, Node, ParseResult, Position
from erbkit.ast.visitors import Visitor
from erbkit.constants import DISABLE_DIRECTIVE_PREFIX, LINTER_IGNORE_DIRECTIVE, UNNECESSARY_DIRECTIVE_RULE
from erbkit.lint.offense import Diagnostic, Severity

_RULE_NAME_PATTERN = re.compile(r"[^,\s]+")

ALL_RULES = "all"


@dataclass(frozen=True)
class DisabledRuleName:
    """One rule name in a disable comment, with its location."""

    name: str
    location: Location


@dataclass(frozen=True)
class DisableComment:
    """A parsed ``erbkit:disable`` comment.

    Parameters
    ----------
    line : int
        1-based line the comment starts on; the line it applies to
    location : Location
        Location of the whole ERB comment
    rule_names : tuple of DisabledRuleName
        Rules listed after the prefix
    matched : bool, default True
        False when the prefix is not followed by a space
        (``erbkit:disablefoo``); such comments disable nothing

    """

    line: int
    location: Location
    rule_names: tuple[DisabledRuleName, ...] = ()
    matched: bool = True

    @property
    def names(self) -> list[str]:
        return [rule.name for rule in self.rule_names]

    @property
    def disables_all(self) -> bool:
        return ALL_RULES in self.names

    def disables_rule(self, rule_name: str) -> bool:
        """Return True when this comment suppresses ``rule_name``."""
        return self.matched and (self.disables_all or rule_name in self.names)


def parse_disable_comment(node: ERBContentNode) -> Optional[DisableComment]:
    """Parse an ERB comment node as a disable directive.

    Returns None when the comment is not a disable directive at all.
    """
    if node.content is None or node.location is None:
        return None
    content = node.content.value
    stripped = content.strip()
    if not stripped.startswith(DISABLE_DIRECTIVE_PREFIX):
        return None

    line = node.location.start.line
    rest = stripped[len(DISABLE_DIRECTIVE_PREFIX):]
    if rest and not rest.startswith(" "):
        return DisableComment(line=line, location=node.location, matched=False)

    # Rule-name columns are measured from the content token
    content_start = node.content.location.start
    rules_offset = content.index(stripped) + len(DISABLE_DIRECTIVE_PREFIX)
    rule_names = []
    for match in _RULE_NAME_PATTERN.finditer(rest):
        column = content_start.column + rules_offset + match.start()
        rule_names.append(
            DisabledRuleName(
                name=match.group(0),
                location=Location(
                    Position(content_start.line, column), Position(content_start.line, column + len(match.group(0)))
                ),
            )
        )
    return DisableComment(line=line, location=node.location, rule_names=tuple(rule_names))


@dataclass
class Directives:
    """Directives found in one template.

    Parameters
    ----------
    ignore_file : bool
        True when the linter ignore directive is present
    disable_comments : dict of int to DisableComment
        Disable comments by the line they apply to

    """

    ignore_file: bool = False
    disable_comments: dict[int, DisableComment] = field(default_factory=dict)

    def disabled_at(self, line: int, rule_name: str) -> bool:
        """Return True when ``rule_name`` is suppressed on ``line``."""
        comment = self.disable_comments.get(line)
        return comment is not None and comment.disables_rule(rule_name)

    def partition(self, diagnostics: Iterable[Diagnostic]) -> tuple[list[Diagnostic], list[Diagnostic]]:
        """Split diagnostics into ``(kept, suppressed)``, preserving order."""
        kept: list[Diagnostic] = []
        suppressed: list[Diagnostic] = []
        for diagnostic in diagnostics:
            if self.disabled_at(diagnostic.location.start.line, diagnostic.rule_name):
                suppressed.append(diagnostic)
            else:
                kept.append(diagnostic)
        return kept, suppressed


class DirectiveCollector(Visitor):
    """Visitor gathering ignore and disable directives from ERB comments."""

    def __init__(self) -> None:
        self.directives = Directives()

    def visit_erb_content_node(self, node: ERBContentNode) -> None:
        if node.tag_opening is not None and node.tag_opening.value == "<%#":
            self._process_comment(node)
        super().visit_erb_content_node(node)

    def _process_comment(self, node: ERBContentNode) -> None:
        if node.content is None:
            return
        if node.content.value.strip() == LINTER_IGNORE_DIRECTIVE:
            self.directives.ignore_file = True
            return
        comment = parse_disable_comment(node)
        if comment is not None:
            self.directives.disable_comments[comment.line] = comment


def collect_directives(document: Node | ParseResult) -> Directives:
    """Return the directives present in a parsed template.

    Parameters
    ----------
    document : Node or ParseResult
        Tree to search; malformed trees are searched as far as they parsed

    Returns
    -------
    Directives
        The ignore flag and the disable comments by line

    """
    collector = DirectiveCollector()
    root = document.value if isinstance(document, ParseResult) else document
    collector.visit(root)
    return collector.directives


def unnecessary_directive_diagnostics(
    directives: Directives,
    suppressed: Iterable[Diagnostic],
    checked_rules: Iterable[str],
    severity: Severity = Severity.WARNING,
) -> list[Diagnostic]:
    """Report disable comments that suppressed nothing.

    Only rule names in ``checked_rules`` are judged; a name for a rule that
    did not run cannot be shown to be unnecessary.

    Parameters
    ----------
    directives : Directives
        Directives of the template
    suppressed : iterable of Diagnostic
        Diagnostics the directives removed
    checked_rules : iterable of str
        Names of the rules that ran
    severity : Severity, default Severity.WARNING
        Severity of the reported diagnostics

    Returns
    -------
    list of Diagnostic
        One diagnostic per unnecessary ``all`` comment or rule name

    """
    suppressed_by_line: dict[int, set[str]] = {}
    for diagnostic in suppressed:
        suppressed_by_line.setdefault(diagnostic.location.start.line, set()).add(diagnostic.rule_name)
    checked = set(checked_rules)

    diagnostics = []
    for line, comment in directives.disable_comments.items():
        if not comment.matched or not comment.rule_names:
            continue
        found = suppressed_by_line.get(line, set())
        if comment.disables_all:
            if not found:
                diagnostics.append(
                    Diagnostic(
                        rule_name=UNNECESSARY_DIRECTIVE_RULE,
                        message=f"Unnecessary {DISABLE_DIRECTIVE_PREFIX} directive (no diagnostics were suppressed)",
                        severity=severity,
                        location=comment.location,
                    )
                )
            continue
        for rule in comment.rule_names:
            if rule.name in checked and rule.name not in found:
                diagnostics.append(
                    Diagnostic(
                        rule_name=UNNECESSARY_DIRECTIVE_RULE,
                        message=f"Unnecessary {DISABLE_DIRECTIVE_PREFIX} for rule '{rule.name}' (no matching diagnostic)",
                        severity=severity,
                        location=rule.location,
                    )
                )
    return diagnostics
