#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/parsers/__init__.py
"""Template parsers producing :class:`~erbkit.ast.nodes.ParseResult` values."""

from erbkit.parsers.base import BaseParser
from erbkit.parsers.erb import ERBParser, classify_erb, parse

__all__ = ["BaseParser", "ERBParser", "classify_erb", "parse"]
