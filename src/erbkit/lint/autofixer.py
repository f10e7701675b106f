#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/lint/autofixer.py
"""Two-phase application of lint fixes.

Phase one applies structural fixes to the tree, in discovery order, and
reprints the tree once with the lossless printer. Phase two applies textual
fixes to that text, again in discovery order; each recorded span is checked
against the current text first and skipped when an earlier edit moved it.
Nothing is recomputed and nothing is retried: fixes that cascade need a new
parse and a new run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from erbkit.ast.nodes import ParseResult
from erbkit.exceptions import RuleError
from erbkit.lint.context import LintContext
from erbkit.lint.linter import Linter
from erbkit.lint.offense import Diagnostic
from erbkit.lint.rules.base import Rule, SourceRule, VisitorRule
from erbkit.options.linter import LinterOptions
from erbkit.options.parser import ParserOptions
from erbkit.parsers.erb import ERBParser
from erbkit.printers.identity import IdentityPrinter

logger = logging.getLogger(__name__)


@dataclass
class AutofixResult:
    """Outcome of one autofix run.

    Parameters
    ----------
    source : str
        Text after all applied fixes
    fixed : list of Diagnostic
        Diagnostics whose fix was applied
    unfixed : list of Diagnostic
        Everything else, including fixes withheld by their safety tier

    """

    source: str
    fixed: list[Diagnostic] = field(default_factory=list)
    unfixed: list[Diagnostic] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.fixed)


class Autofixer:
    """Apply the fixes carried by diagnostics to one parse result.

    Parameters
    ----------
    parse_result : ParseResult
        The tree the diagnostics were computed on; it is edited in place
    diagnostics : sequence of Diagnostic
        Diagnostics in discovery order
    include_unsafe : bool, default False
        Also apply fixes from rules declared unsafe

    """

    def __init__(
        self, parse_result: ParseResult, diagnostics: Sequence[Diagnostic], include_unsafe: bool = False
    ) -> None:
        self.parse_result = parse_result
        self.diagnostics = list(diagnostics)
        self.include_unsafe = include_unsafe

    def apply(self) -> AutofixResult:
        """Run both phases and return the result.

        Raises
        ------
        RuleError
            If a fix procedure raises

        """
        if self.parse_result.failed:
            return AutofixResult(source=self.parse_result.source, unfixed=list(self.diagnostics))

        admitted = [d for d in self.diagnostics if d.fixable(self.include_unsafe)]
        withheld = [d for d in self.diagnostics if not d.fixable(self.include_unsafe)]
        structural = [d for d in admitted if d.fix is not None and d.fix.is_structural]
        textual = [d for d in admitted if d.fix is not None and d.fix.is_textual]

        source, ast_fixed, ast_unfixed = self._apply_ast_fixes(structural)
        source, text_fixed, text_unfixed = self._apply_offset_fixes(textual, source)

        logger.debug(
            f"Autofix applied {len(ast_fixed)} structural and {len(text_fixed)} textual fix(es); "
            f"{len(withheld) + len(ast_unfixed) + len(text_unfixed)} left unfixed"
        )
        return AutofixResult(
            source=source,
            fixed=ast_fixed + text_fixed,
            unfixed=withheld + ast_unfixed + text_unfixed,
        )

    def _apply_ast_fixes(self, diagnostics: list[Diagnostic]) -> tuple[str, list[Diagnostic], list[Diagnostic]]:
        fixed: list[Diagnostic] = []
        unfixed: list[Diagnostic] = []

        for diagnostic in diagnostics:
            fix = diagnostic.fix
            rule = fix.rule if fix is not None else None
            if not isinstance(rule, VisitorRule) or fix.node is None:
                unfixed.append(diagnostic)
                continue

            try:
                success = rule.autofix(fix.node, self.parse_result)
            except Exception as e:
                logger.error(f"Fix procedure of rule '{rule.rule_name}' raised: {e}")
                raise RuleError(
                    f"Fix procedure of rule '{rule.rule_name}' raised: {e}", rule_name=rule.rule_name, original_error=e
                ) from e

            if success:
                fixed.append(diagnostic)
            else:
                logger.debug(f"Structural fix not applied for '{diagnostic.rule_name}' at {diagnostic.location.start}")
                unfixed.append(diagnostic)

        # Nothing changed: keep the original bytes
        source = IdentityPrinter.print_node(self.parse_result.value) if fixed else self.parse_result.source
        return source, fixed, unfixed

    def _apply_offset_fixes(
        self, diagnostics: list[Diagnostic], source: str
    ) -> tuple[str, list[Diagnostic], list[Diagnostic]]:
        fixed: list[Diagnostic] = []
        unfixed: list[Diagnostic] = []
        current = source

        for diagnostic in diagnostics:
            fix = diagnostic.fix
            rule = fix.rule if fix is not None else None
            if not isinstance(rule, SourceRule) or fix.start_offset is None or fix.end_offset is None:
                unfixed.append(diagnostic)
                continue

            try:
                updated = rule.apply_fix(current, fix.start_offset, fix.end_offset)
            except Exception as e:
                logger.error(f"Source fix of rule '{rule.rule_name}' raised: {e}")
                raise RuleError(
                    f"Source fix of rule '{rule.rule_name}' raised: {e}", rule_name=rule.rule_name, original_error=e
                ) from e

            if updated is None:
                logger.debug(
                    f"Offset fix skipped for '{diagnostic.rule_name}': "
                    f"[{fix.start_offset}, {fix.end_offset}) no longer matches"
                )
                unfixed.append(diagnostic)
                continue

            current = updated
            fixed.append(diagnostic)

        return current, fixed, unfixed


def fix_source(
    source: str,
    rules: Optional[Sequence[Rule]] = None,
    include_unsafe: bool = False,
    file_path: Optional[str] = None,
    options: Optional[LinterOptions] = None,
) -> AutofixResult:
    """Parse, lint and fix ``source`` in one call.

    Diagnostics suppressed by ``erbkit:disable`` comments are never fixed.

    Offset fixes are applied in discovery order against offsets recorded on
    the original text, and are not recomputed after an earlier edit. When an
    earlier fix shifts a later span, that span no longer verifies and is
    reported unfixed: ``fix_source("a  \\nb  \\nc  \\n")`` fixes the first
    line and leaves two trailing-whitespace diagnostics in ``unfixed``.
    Calling ``fix_source`` again on the result picks them up.

    Parameters
    ----------
    source : str
        Template text
    rules : sequence of Rule or None
        Rules to run; built-ins selected by ``options`` when omitted
    include_unsafe : bool, default False
        Also apply unsafe fixes
    file_path : str or None
        Path used in diagnostics
    options : LinterOptions or None
        Rule selection; ``options.include_unsafe`` also enables unsafe fixes

    Returns
    -------
    AutofixResult
        The fixed text and the fixed/unfixed partition

    """
    options = options or LinterOptions()
    parse_result = ERBParser(ParserOptions(track_whitespace=True)).parse(source)
    linter = Linter(rules, options)
    result = linter.lint(parse_result, LintContext(source=source, file_path=file_path, options=options))
    return Autofixer(parse_result, result.diagnostics, include_unsafe=include_unsafe or options.include_unsafe).apply()
