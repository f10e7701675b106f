#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/lint/context.py
"""Per-file information handed to lint rules."""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Optional

from erbkit.ast.nodes import Position
from erbkit.options.linter import LinterOptions


@dataclass(frozen=True)
class LintContext:
    """Context for one lint run.

    Parameters
    ----------
    source : str
        Template text being linted
    file_path : str or None
        Path of the template, when linting a file
    options : LinterOptions
        Options in effect

    """

    source: str
    file_path: Optional[str] = None
    options: LinterOptions = field(default_factory=LinterOptions)
    _line_starts: list[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        starts = [0]
        for index, char in enumerate(self.source):
            if char == "\n":
                starts.append(index + 1)
        object.__setattr__(self, "_line_starts", starts)

    def position_from_offset(self, offset: int) -> Position:
        """Convert a character offset into a 1-based line and 0-based column."""
        offset = max(0, min(offset, len(self.source)))
        line_index = bisect.bisect_right(self._line_starts, offset) - 1
        return Position(line_index + 1, offset - self._line_starts[line_index])
