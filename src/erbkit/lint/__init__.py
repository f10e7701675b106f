#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/lint/__init__.py
"""Lint rules, diagnostics and the two-phase autofixer.

Examples
--------
    >>> from erbkit.lint import fix_source
    >>> fix_source("<DIV>hello</DIV>\\n").source
    '<div>hello</div>\\n'

"""

from __future__ import annotations

from erbkit.lint.autofixer import AutofixResult, Autofixer, fix_source
from erbkit.lint.context import LintContext
from erbkit.lint.directives import DisableComment, Directives, collect_directives
from erbkit.lint.linter import PARSE_ERROR_RULE, Linter, LintResult
from erbkit.lint.offense import Diagnostic, FixDescriptor, FixSafety, Severity
from erbkit.lint.registry import RuleRegistry
from erbkit.lint.rules import BUILTIN_RULES, Rule, SourceRule, VisitorRule

__all__ = [
    "AutofixResult",
    "Autofixer",
    "fix_source",
    "LintContext",
    "DisableComment",
    "Directives",
    "collect_directives",
    "Linter",
    "LintResult",
    "PARSE_ERROR_RULE",
    "Diagnostic",
    "FixDescriptor",
    "FixSafety",
    "Severity",
    "RuleRegistry",
    "BUILTIN_RULES",
    "Rule",
    "SourceRule",
    "VisitorRule",
]
