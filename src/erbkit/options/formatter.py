#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/options/formatter.py
"""Options for the template formatter."""

from __future__ import annotations

from dataclasses import dataclass, field

from erbkit.constants import (
    CONTENT_PRESERVING_ELEMENTS,
    DEFAULT_INDENT_WIDTH,
    DEFAULT_MAX_LINE_LENGTH,
    INLINE_ELEMENTS,
    VOID_ELEMENTS,
)
from erbkit.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class FormatterOptions(CloneFrozenMixin):
    """Configuration for the formatting decision engine.

    Parameters
    ----------
    indent_width : int, default 2
        Spaces per nesting level
    max_line_length : int, default 80
        Column budget used for the inline/block layout decisions
    inline_elements : frozenset of str
        Tags laid out inline within text flow
    void_elements : frozenset of str
        Tags that never have a body or close tag
    content_preserving_elements : frozenset of str
        Tags whose body is reprinted verbatim
    pre_rewriters : tuple of str
        Names of AST rewriters run before printing
    post_rewriters : tuple of str
        Names of string rewriters run after printing

    """

    indent_width: int = field(
        default=DEFAULT_INDENT_WIDTH,
        metadata={"help": "Number of spaces per indentation level", "type": int, "importance": "core"},
    )
    max_line_length: int = field(
        default=DEFAULT_MAX_LINE_LENGTH,
        metadata={"help": "Maximum line length before content wraps", "type": int, "importance": "core"},
    )
    inline_elements: frozenset[str] = field(
        default=INLINE_ELEMENTS,
        metadata={"help": "Elements kept inline within text flow", "importance": "advanced"},
    )
    void_elements: frozenset[str] = field(
        default=VOID_ELEMENTS,
        metadata={"help": "Elements without a body or close tag", "importance": "advanced"},
    )
    content_preserving_elements: frozenset[str] = field(
        default=CONTENT_PRESERVING_ELEMENTS,
        metadata={"help": "Elements whose body is never reformatted", "importance": "advanced"},
    )
    pre_rewriters: tuple[str, ...] = field(
        default=(),
        metadata={"help": "AST rewriters applied before formatting", "importance": "core"},
    )
    post_rewriters: tuple[str, ...] = field(
        default=(),
        metadata={"help": "String rewriters applied after formatting", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Validate ranges and normalize collection fields.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.indent_width < 0:
            raise ValueError(f"indent_width must be non-negative, got {self.indent_width}")
        if self.max_line_length <= 0:
            raise ValueError(f"max_line_length must be positive, got {self.max_line_length}")

        # Config files hand us lists; keep the frozen instance hashable
        for name in ("inline_elements", "void_elements", "content_preserving_elements"):
            object.__setattr__(self, name, frozenset(tag.lower() for tag in getattr(self, name)))
        for name in ("pre_rewriters", "post_rewriters"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    @property
    def indent_unit(self) -> str:
        """Return the whitespace for one indentation level."""
        return " " * self.indent_width
