#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/rewriters/base.py
"""Base classes for formatter rewriters.

Rewriters are opt-in transformations that run around the format printer.
AST rewriters run in the ``pre`` phase and receive the parsed document;
string rewriters run in the ``post`` phase and receive the printed text.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from erbkit.ast.nodes import DocumentNode
from erbkit.constants import RewriterPhase

if TYPE_CHECKING:
    from erbkit.format.context import FormatContext


class BaseRewriter(ABC):
    """Shared interface of all rewriters.

    Subclasses declare ``name`` (kebab-case) and ``description`` as class
    attributes.

    Parameters
    ----------
    options : dict or None
        Rewriter-specific settings

    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    phase: ClassVar[RewriterPhase]

    def __init__(self, options: Optional[dict[str, Any]] = None) -> None:
        self.options: dict[str, Any] = dict(options or {})

    @abstractmethod
    def rewrite(self, target: Any, context: FormatContext) -> Any:
        """Transform ``target`` and return the result."""


class ASTRewriter(BaseRewriter):
    """Rewriter applied to the document before printing.

    ``rewrite`` may edit the tree through :mod:`erbkit.ast.replacement` and
    return the same document, or return a different root.
    """

    phase: ClassVar[RewriterPhase] = "pre"

    @abstractmethod
    def rewrite(self, target: DocumentNode, context: FormatContext) -> DocumentNode:
        """Transform the document and return the root to print."""


class StringRewriter(BaseRewriter):
    """Rewriter applied to the formatted text after printing."""

    phase: ClassVar[RewriterPhase] = "post"

    @abstractmethod
    def rewrite(self, target: str, context: FormatContext) -> str:
        """Transform the formatted text and return it."""
