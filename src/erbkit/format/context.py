#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/format/context.py
"""Per-file information handed to rewriters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from erbkit.options.formatter import FormatterOptions


@dataclass(frozen=True)
class FormatContext:
    """Context for one formatting run.

    Parameters
    ----------
    source : str
        The original template text
    options : FormatterOptions
        Options in effect for this run
    file_path : str or None
        Path of the template, when formatting a file

    """

    source: str
    options: FormatterOptions = field(default_factory=FormatterOptions)
    file_path: Optional[str] = None
    source_lines: list[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "source_lines", self.source.splitlines(keepends=True))

    @property
    def indent_width(self) -> int:
        return self.options.indent_width

    @property
    def max_line_length(self) -> int:
        return self.options.max_line_length

    @property
    def line_count(self) -> int:
        return len(self.source_lines)

    def source_line(self, line: int) -> str:
        """Return 1-based source line ``line``, or an empty string when out of range."""
        if line < 1 or line > self.line_count:
            return ""
        return self.source_lines[line - 1]
