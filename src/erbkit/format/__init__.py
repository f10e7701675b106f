#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/format/__init__.py
"""Formatter for HTML+ERB templates.

- analysis: Per-element inline/block layout decisions
- printer: The layout printer
- ignore: Detection of the ``<%# erbkit:formatter ignore %>`` directive
- formatter: Parse, rewrite, print pipeline
"""

from __future__ import annotations

from erbkit.format.analysis import ElementAnalysis, ElementAnalyzer
from erbkit.format.context import FormatContext
from erbkit.format.formatter import Formatter, format_string
from erbkit.format.ignore import has_format_ignore_directive, is_ignore_comment
from erbkit.format.printer import FormatPrinter
from erbkit.format.result import FormatResult

__all__ = [
    "ElementAnalysis",
    "ElementAnalyzer",
    "FormatContext",
    "FormatPrinter",
    "FormatResult",
    "Formatter",
    "format_string",
    "has_format_ignore_directive",
    "is_ignore_comment",
]
