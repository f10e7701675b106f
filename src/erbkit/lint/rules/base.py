#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/lint/rules/base.py
"""Base classes for lint rules.

Two kinds of rule exist:

- :class:`VisitorRule` walks the tree and reports diagnostics that point at
  nodes. Its fix procedure, :meth:`VisitorRule.autofix`, receives the node
  and the parse result and edits the tree through
  :mod:`erbkit.ast.replacement`.
- :class:`SourceRule` scans the source text and reports diagnostics that
  point at offset spans. Its fix is a text substitution that is applied only
  when :meth:`SourceRule.fix_matches` confirms the span still holds what the
  rule expects.

Every rule declares a :class:`~erbkit.lint.offense.FixSafety` tier.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, Optional

from erbkit.ast.nodes import Location, Node, ParseResult, Position
from erbkit.ast.visitors import Visitor
from erbkit.lint.context import LintContext
from erbkit.lint.offense import Diagnostic, FixDescriptor, FixSafety, Severity

logger = logging.getLogger(__name__)


class Rule(ABC):
    """Shared interface of lint rules.

    Subclasses set ``rule_name``, ``description``, ``default_severity`` and
    ``fix_safety`` as class attributes.

    Parameters
    ----------
    severity : Severity or None
        Severity for reported diagnostics; ``default_severity`` when omitted

    """

    rule_name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    default_severity: ClassVar[Severity] = Severity.WARNING
    fix_safety: ClassVar[FixSafety] = FixSafety.NONE

    def __init__(self, severity: Optional[Severity] = None) -> None:
        self.severity = Severity(severity) if severity is not None else self.default_severity
        self.diagnostics: list[Diagnostic] = []
        self.context: Optional[LintContext] = None

    def on_new_investigation(self, context: LintContext) -> None:
        """Reset per-file state before checking a new template."""
        self.diagnostics = []
        self.context = context

    @abstractmethod
    def check(self, parse_result: ParseResult, context: LintContext) -> list[Diagnostic]:
        """Return the diagnostics found in one template."""

    def _add(self, message: str, location: Location, fix: Optional[FixDescriptor] = None) -> Diagnostic:
        diagnostic = Diagnostic(
            rule_name=self.rule_name,
            message=message,
            severity=self.severity,
            location=location,
            fix=fix,
        )
        self.diagnostics.append(diagnostic)
        return diagnostic


class VisitorRule(Rule, Visitor):
    """Rule implemented as a tree walk.

    Override ``visit_*`` hooks, report with :meth:`add_diagnostic` or
    :meth:`add_diagnostic_with_fix`, and call ``super()`` to keep walking.
    """

    def check(self, parse_result: ParseResult, context: LintContext) -> list[Diagnostic]:
        self.on_new_investigation(context)
        self.visit(parse_result.value)
        return list(self.diagnostics)

    def add_diagnostic(self, message: str, node: Node, location: Optional[Location] = None) -> Diagnostic:
        """Report a problem at ``node`` without a fix."""
        return self._add(message, location or node.location)

    def add_diagnostic_with_fix(self, message: str, node: Node, location: Optional[Location] = None) -> Diagnostic:
        """Report a problem whose fix targets ``node``."""
        fix = FixDescriptor(rule=self, node=node) if self.fix_safety is not FixSafety.NONE else None
        return self._add(message, location or node.location, fix)

    def autofix(self, node: Node, root: ParseResult) -> bool:
        """Fix the problem at ``node``.

        Implementations build replacement nodes and splice them in with the
        replacement primitives; they never assign node fields.

        Parameters
        ----------
        node : Node
            The node recorded in the diagnostic's fix descriptor
        root : ParseResult
            The tree being fixed

        Returns
        -------
        bool
            True when the tree was changed; False when the node is stale or
            the fix does not apply

        """
        return False


class SourceRule(Rule):
    """Rule implemented as a scan over the source text."""

    def check(self, parse_result: ParseResult, context: LintContext) -> list[Diagnostic]:
        self.on_new_investigation(context)
        self.check_source(context.source)
        return list(self.diagnostics)

    @abstractmethod
    def check_source(self, source: str) -> None:
        """Scan ``source`` and report diagnostics."""

    def position_from_offset(self, offset: int) -> Position:
        """Convert an offset in the current source into a position."""
        if self.context is None:
            raise RuntimeError(f"{type(self).__name__}.position_from_offset called outside a check")
        return self.context.position_from_offset(offset)

    def location_from_offsets(self, start: int, end: int) -> Location:
        """Convert an offset span into a location."""
        return Location(self.position_from_offset(start), self.position_from_offset(end))

    def add_diagnostic_with_source_fix(self, message: str, start: int, end: int) -> Diagnostic:
        """Report a problem at ``[start, end)`` whose fix rewrites that span."""
        fix = None
        if self.fix_safety is not FixSafety.NONE:
            fix = FixDescriptor(rule=self, start_offset=start, end_offset=end)
        return self._add(message, self.location_from_offsets(start, end), fix)

    def fix_matches(self, text: str, start: int, end: int) -> bool:
        """Return True when ``text[start:end]`` still holds what this rule fixes."""
        return False

    def fix_replacement(self, text: str, start: int, end: int) -> str:
        """Return the replacement for ``text[start:end]``."""
        raise NotImplementedError(f"{type(self).__name__} does not provide a source fix")

    def apply_fix(self, text: str, start: int, end: int) -> Optional[str]:
        """Return ``text`` with the span replaced, or None when it no longer matches."""
        if end > len(text) or not self.fix_matches(text, start, end):
            return None
        return text[:start] + self.fix_replacement(text, start, end) + text[end:]
