#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/options/parser.py
"""Options for the template parser."""

from __future__ import annotations

from dataclasses import dataclass, field

from erbkit.constants import VOID_ELEMENTS
from erbkit.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class ParserOptions(CloneFrozenMixin):
    """Configuration for :class:`erbkit.parsers.erb.ERBParser`.

    Parameters
    ----------
    track_whitespace : bool, default True
        Materialize whitespace inside tags as WhitespaceNode. Required for a
        lossless reprint, and therefore for formatting and autofixing.
    strict : bool, default False
        Raise ParsingError instead of returning a result with errors.
    void_elements : frozenset of str
        Tag names that never take a body or a close tag.

    """

    track_whitespace: bool = field(
        default=True,
        metadata={"help": "Keep whitespace nodes inside tags for lossless reprinting", "importance": "core"},
    )
    strict: bool = field(
        default=False,
        metadata={"help": "Raise on parse errors instead of recording them", "importance": "advanced"},
    )
    void_elements: frozenset[str] = field(
        default=VOID_ELEMENTS,
        metadata={"help": "Elements parsed without a body or close tag", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "void_elements", frozenset(tag.lower() for tag in self.void_elements))
