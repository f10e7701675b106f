#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for erbkit.

This module centralizes element name sets, layout defaults and directive
strings used across the printer, formatter and linter.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Element Sets - HTML element classifications used by the formatter
3. Layout Defaults - Indentation and line length
4. Directives and Config Discovery
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

SeverityType = Literal["error", "warning", "info", "hint"]
FixSafetyType = Literal["safe", "unsafe", "none"]
RewriterPhase = Literal["pre", "post"]

# =============================================================================
# Element Sets
# =============================================================================

INLINE_ELEMENTS: frozenset[str] = frozenset(
    {
        "a",
        "abbr",
        "acronym",
        "b",
        "bdo",
        "big",
        "br",
        "cite",
        "code",
        "dfn",
        "em",
        "hr",
        "i",
        "img",
        "kbd",
        "label",
        "map",
        "object",
        "q",
        "samp",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "tt",
        "var",
        "del",
        "ins",
        "mark",
        "s",
        "u",
        "time",
        "wbr",
    }
)

VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

CONTENT_PRESERVING_ELEMENTS: frozenset[str] = frozenset({"script", "style", "pre", "textarea"})

# Elements whose bodies the parser reads as raw text (ERB tags are still recognized)
RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"script", "style", "textarea", "title"})

# Attributes holding whitespace-separated token lists
TOKEN_LIST_ATTRIBUTES: frozenset[str] = frozenset({"class", "data-controller", "data-action"})

BOOLEAN_ATTRIBUTES: frozenset[str] = frozenset(
    {
        "allowfullscreen",
        "async",
        "autofocus",
        "autoplay",
        "checked",
        "controls",
        "default",
        "defer",
        "disabled",
        "formnovalidate",
        "hidden",
        "inert",
        "itemscope",
        "loop",
        "multiple",
        "muted",
        "nomodule",
        "novalidate",
        "open",
        "playsinline",
        "readonly",
        "required",
        "reversed",
        "selected",
    }
)

# =============================================================================
# Layout Defaults
# =============================================================================

DEFAULT_INDENT_WIDTH = 2
DEFAULT_MAX_LINE_LENGTH = 80

# =============================================================================
# Directives and Config Discovery
# =============================================================================

FORMATTER_IGNORE_DIRECTIVE = "erbkit:formatter ignore"
LINTER_IGNORE_DIRECTIVE = "erbkit:linter ignore"
DISABLE_DIRECTIVE_PREFIX = "erbkit:disable"
UNNECESSARY_DIRECTIVE_RULE = "erbkit-disable-comment-unnecessary"

CONFIG_FILENAMES: tuple[str, ...] = (".erbkit.yml", ".erbkit.yaml", ".erbkit.toml", "pyproject.toml")

REWRITER_ENTRY_POINT_GROUP = "erbkit.rewriters"
