#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/printers/__init__.py
"""Printers: the print context, the printer base class and the lossless reprinter."""

from erbkit.printers.base import Printer
from erbkit.printers.context import PrintContext
from erbkit.printers.identity import IdentityPrinter

__all__ = ["IdentityPrinter", "PrintContext", "Printer"]
