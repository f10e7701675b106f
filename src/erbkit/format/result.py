#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/format/result.py
"""Formatting outcome for a single template."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class FormatResult:
    """Result of formatting one template.

    Parameters
    ----------
    original : str
        Input text
    formatted : str
        Output text; equal to ``original`` when ignored or on error
    file_path : str or None
        Path of the template, when known
    ignored : bool
        True when the formatter ignore directive was found
    error : Exception or None
        Error that stopped formatting

    """

    original: str
    formatted: str
    file_path: Optional[str] = None
    ignored: bool = False
    error: Optional[Exception] = None

    @property
    def changed(self) -> bool:
        """Return True when formatting altered the text."""
        return self.original != self.formatted

    @property
    def failed(self) -> bool:
        """Return True when an error stopped formatting."""
        return self.error is not None

    def diff(self, context_lines: int = 3) -> Optional[str]:
        """Return a unified diff of the change, or None when nothing changed.

        Parameters
        ----------
        context_lines : int, default 3
            Unchanged lines shown around each hunk

        Returns
        -------
        str or None
            Unified diff text

        """
        if not self.changed:
            return None
        name = self.file_path or "<template>"
        lines = difflib.unified_diff(
            self.original.splitlines(keepends=True),
            self.formatted.splitlines(keepends=True),
            fromfile=f"{name}\t(original)",
            tofile=f"{name}\t(formatted)",
            n=context_lines,
        )
        return "".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable summary."""
        return {
            "file_path": self.file_path,
            "changed": self.changed,
            "ignored": self.ignored,
            "error": str(self.error) if self.error is not None else None,
        }
