#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/printers/base.py
"""Base class for printers.

A printer is a visitor that writes into a :class:`PrintContext`. The base
class refuses to print trees that carry parse errors unless asked to.
"""

from __future__ import annotations

import logging
from typing import Any

from erbkit.ast.nodes import Node, ParseResult
from erbkit.ast.visitors import Visitor
from erbkit.exceptions import PrintError
from erbkit.printers.context import PrintContext

logger = logging.getLogger(__name__)


class Printer(Visitor):
    """Base printer.

    Parameters
    ----------
    context : PrintContext or None
        Output state; a fresh context is created when omitted

    Examples
    --------
        >>> IdentityPrinter.print(parse_result)
        '<div>...</div>'

    """

    def __init__(self, context: PrintContext | None = None) -> None:
        self.context = context or PrintContext()

    @classmethod
    def print(cls, input: Node | ParseResult, ignore_errors: bool = False, **kwargs: Any) -> str:
        """Print a node or parse result with a new printer instance.

        Parameters
        ----------
        input : Node or ParseResult
            What to print
        ignore_errors : bool, default False
            Print even when the tree carries parse errors
        **kwargs
            Passed to the printer constructor

        Returns
        -------
        str
            The printed text

        Raises
        ------
        PrintError
            If the tree has parse errors and ``ignore_errors`` is False

        """
        return cls(**kwargs).render(input, ignore_errors=ignore_errors)

    def render(self, input: Node | ParseResult, ignore_errors: bool = False) -> str:
        """Print ``input`` with this printer and return the text.

        Raises
        ------
        PrintError
            If the tree has parse errors and ``ignore_errors`` is False

        """
        node = input.value if isinstance(input, ParseResult) else input
        if not ignore_errors:
            self._validate_no_errors(node)

        self.context.reset()
        self.visit(node)
        return self.context.output()

    @staticmethod
    def _validate_no_errors(node: Node) -> None:
        errors = node.recursive_errors()
        if errors:
            raise PrintError(f"Cannot print AST with parse errors ({len(errors)} error(s) found)", errors=errors)

    def write(self, text: str) -> None:
        """Append ``text`` to the output."""
        self.context.write(text)
