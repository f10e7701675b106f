#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/lint/rules/__init__.py
"""Built-in lint rules."""

from __future__ import annotations

from erbkit.lint.rules.base import Rule, SourceRule, VisitorRule
from erbkit.lint.rules.erb import (
    ERB_RULES,
    ERBNoEmptyTags,
    ERBNoExtraNewline,
    ERBNoTrailingWhitespace,
    ERBRequireTrailingNewline,
    ERBRequireWhitespaceInsideTags,
)
from erbkit.lint.rules.html import (
    HTML_RULES,
    HTMLAttributeDoubleQuotes,
    HTMLAttributeValuesRequireQuotes,
    HTMLBooleanAttributesNoValue,
    HTMLNoSelfClosing,
    HTMLTagNameLowercase,
)

BUILTIN_RULES: tuple[type[Rule], ...] = (*HTML_RULES, *ERB_RULES)

__all__ = [
    "Rule",
    "VisitorRule",
    "SourceRule",
    "BUILTIN_RULES",
    "HTMLTagNameLowercase",
    "HTMLNoSelfClosing",
    "HTMLAttributeValuesRequireQuotes",
    "HTMLAttributeDoubleQuotes",
    "HTMLBooleanAttributesNoValue",
    "ERBRequireWhitespaceInsideTags",
    "ERBNoEmptyTags",
    "ERBNoExtraNewline",
    "ERBNoTrailingWhitespace",
    "ERBRequireTrailingNewline",
]
