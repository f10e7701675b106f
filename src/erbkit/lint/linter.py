#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/lint/linter.py
"""Run lint rules over a parsed template."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from erbkit.ast.nodes import ParseResult
from erbkit.constants import UNNECESSARY_DIRECTIVE_RULE
from erbkit.exceptions import RuleError
from erbkit.lint.context import LintContext
from erbkit.lint.directives import collect_directives, unnecessary_directive_diagnostics
from erbkit.lint.offense import Diagnostic, Severity
from erbkit.lint.registry import RuleRegistry
from erbkit.lint.rules.base import Rule
from erbkit.options.linter import LinterOptions

logger = logging.getLogger(__name__)

PARSE_ERROR_RULE = "parse-error"


@dataclass
class LintResult:
    """Diagnostics for one template.

    Parameters
    ----------
    source : str
        The linted text
    diagnostics : list of Diagnostic
        Problems in document order
    file_path : str or None
        Path of the template, when known
    suppressed : list of Diagnostic
        Diagnostics removed by ``erbkit:disable`` comments; never fixed
    ignored : bool
        True when the template carries the linter ignore directive

    """

    source: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    file_path: Optional[str] = None
    suppressed: list[Diagnostic] = field(default_factory=list)
    ignored: bool = False

    def _count(self, severity: Severity) -> int:
        return sum(1 for diagnostic in self.diagnostics if diagnostic.severity is severity)

    @property
    def error_count(self) -> int:
        return self._count(Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(Severity.WARNING)

    def fixable(self, include_unsafe: bool = False) -> list[Diagnostic]:
        """Return diagnostics whose fix is permitted at the given tier."""
        return [diagnostic for diagnostic in self.diagnostics if diagnostic.fixable(include_unsafe)]


class Linter:
    """Apply a set of rules to parse results.

    Parameters
    ----------
    rules : sequence of Rule or None
        Rule instances; when omitted they are built from ``options`` and the
        built-in registry
    options : LinterOptions or None
        Rule selection and severities

    """

    def __init__(self, rules: Optional[Sequence[Rule]] = None, options: Optional[LinterOptions] = None) -> None:
        self.options = options or LinterOptions()
        self.rules: list[Rule] = (
            list(rules) if rules is not None else RuleRegistry.with_builtins().build_rules(self.options)
        )

    def lint(self, parse_result: ParseResult, context: Optional[LintContext] = None) -> LintResult:
        """Check one parsed template.

        A template with parse errors yields only ``parse-error`` diagnostics;
        rules run only on trees that parsed cleanly. A template carrying
        ``<%# erbkit:linter ignore %>`` yields nothing. Diagnostics on a line
        with a matching ``<%# erbkit:disable ... %>`` comment are moved to
        ``LintResult.suppressed``, and disable comments that suppressed
        nothing are reported as ``erbkit-disable-comment-unnecessary``.

        Parameters
        ----------
        parse_result : ParseResult
            Output of the parser, with whitespace tracking when fixes will
            follow
        context : LintContext or None
            Per-file context; built from the parse result when omitted

        Returns
        -------
        LintResult
            Diagnostics in document order

        Raises
        ------
        RuleError
            If a rule raises while checking

        """
        context = context or LintContext(source=parse_result.source, options=self.options)

        directives = collect_directives(parse_result)
        if directives.ignore_file:
            logger.debug(f"Linter ignore directive found in {context.file_path or '<template>'}")
            return LintResult(source=parse_result.source, file_path=context.file_path, ignored=True)

        if parse_result.failed:
            diagnostics = [
                Diagnostic(
                    rule_name=PARSE_ERROR_RULE,
                    message=error.message,
                    severity=Severity.ERROR,
                    location=error.location,
                )
                for error in parse_result.errors
            ]
            return LintResult(source=parse_result.source, diagnostics=diagnostics, file_path=context.file_path)

        diagnostics = []
        for rule in self.rules:
            try:
                found = rule.check(parse_result, context)
            except Exception as e:
                logger.error(f"Rule '{rule.rule_name}' failed while checking: {e}")
                raise RuleError(f"Rule '{rule.rule_name}' failed: {e}", rule_name=rule.rule_name, original_error=e) from e
            logger.debug(f"Rule '{rule.rule_name}' reported {len(found)} diagnostic(s)")
            diagnostics.extend(found)

        kept, suppressed = directives.partition(diagnostics)
        if suppressed:
            logger.debug(f"Disable comments suppressed {len(suppressed)} diagnostic(s)")
        if self.options.is_enabled(UNNECESSARY_DIRECTIVE_RULE):
            severity = Severity(self.options.severity_overrides.get(UNNECESSARY_DIRECTIVE_RULE, "warning"))
            kept.extend(
                unnecessary_directive_diagnostics(
                    directives, suppressed, [rule.rule_name for rule in self.rules], severity=severity
                )
            )

        kept.sort(key=lambda d: (d.location.start.line, d.location.start.column))
        return LintResult(
            source=parse_result.source, diagnostics=kept, file_path=context.file_path, suppressed=suppressed
        )
