#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/lint/offense.py
"""Diagnostics and the fix descriptors they carry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from erbkit.ast.nodes import Location, Node

if TYPE_CHECKING:
    from erbkit.lint.rules.base import Rule


class Severity(str, Enum):
    """Severity levels for diagnostics."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"


class FixSafety(str, Enum):
    """Whether a rule's fix may be applied automatically.

    ``SAFE`` fixes are applied by default, ``UNSAFE`` fixes only on request
    and ``NONE`` never.
    """

    SAFE = "safe"
    UNSAFE = "unsafe"
    NONE = "none"


@dataclass(frozen=True, eq=False)
class FixDescriptor:
    """Where and how a diagnostic can be fixed.

    A descriptor carries exactly one payload: a node reference for fixes
    applied to the tree, or a ``[start_offset, end_offset)`` span for fixes
    applied to text.

    Parameters
    ----------
    rule : Rule
        The rule whose fix procedure applies
    node : Node or None
        Target node for a structural fix
    start_offset, end_offset : int or None
        Recorded span for a textual fix

    Raises
    ------
    ValueError
        If both or neither payload kinds are given, or the span is inverted

    """

    rule: Rule
    node: Optional[Node] = None
    start_offset: Optional[int] = None
    end_offset: Optional[int] = None

    def __post_init__(self) -> None:
        has_span = self.start_offset is not None or self.end_offset is not None
        if (self.node is None) == (not has_span):
            raise ValueError("FixDescriptor needs exactly one of a node or an offset span")
        if has_span:
            if self.start_offset is None or self.end_offset is None:
                raise ValueError("FixDescriptor offset span needs both start_offset and end_offset")
            if self.start_offset < 0 or self.end_offset < self.start_offset:
                raise ValueError(f"Invalid offset span [{self.start_offset}, {self.end_offset})")

    @property
    def is_structural(self) -> bool:
        """Return True for node-reference fixes."""
        return self.node is not None

    @property
    def is_textual(self) -> bool:
        """Return True for offset-span fixes."""
        return self.node is None

    @property
    def safety(self) -> FixSafety:
        return self.rule.fix_safety

    def admitted(self, include_unsafe: bool = False) -> bool:
        """Return True when the fix tier is permitted."""
        if self.safety is FixSafety.SAFE:
            return True
        return include_unsafe and self.safety is FixSafety.UNSAFE


@dataclass(frozen=True, eq=False)
class Diagnostic:
    """A problem reported by a rule or by the parser.

    Parameters
    ----------
    rule_name : str
        Name of the reporting rule (``parse-error`` for parse errors)
    message : str
        Human-readable description
    severity : Severity
        How serious the problem is
    location : Location
        Where the problem is
    fix : FixDescriptor or None
        How to fix it, when the rule can

    """

    rule_name: str
    message: str
    severity: Severity
    location: Location
    fix: Optional[FixDescriptor] = None

    def fixable(self, include_unsafe: bool = False) -> bool:
        """Return True when a fix exists and its tier is permitted."""
        return self.fix is not None and self.fix.admitted(include_unsafe)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "rule": self.rule_name,
            "message": self.message,
            "severity": self.severity.value,
            "location": {
                "start": {"line": self.location.start.line, "column": self.location.start.column},
                "end": {"line": self.location.end.line, "column": self.location.end.column},
            },
            "fixable": self.fix is not None and self.fix.safety is not FixSafety.NONE,
            "safety": self.fix.safety.value if self.fix is not None else None,
        }
