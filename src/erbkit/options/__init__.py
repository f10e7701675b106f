#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/options/__init__.py
"""Frozen option classes for the parser, formatter and linter."""

from erbkit.options.base import CloneFrozenMixin
from erbkit.options.formatter import FormatterOptions
from erbkit.options.linter import LinterOptions
from erbkit.options.parser import ParserOptions

__all__ = ["CloneFrozenMixin", "FormatterOptions", "LinterOptions", "ParserOptions"]
