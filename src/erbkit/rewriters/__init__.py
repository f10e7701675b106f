#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/rewriters/__init__.py
"""Opt-in transformations run before and after the format printer."""

from __future__ import annotations

from erbkit.rewriters.base import ASTRewriter, BaseRewriter, StringRewriter
from erbkit.rewriters.builtin import BUILTIN_REWRITERS, TailwindClassSorter, sort_classes, tailwind_sort_key
from erbkit.rewriters.registry import RewriterRegistry

__all__ = [
    "ASTRewriter",
    "BaseRewriter",
    "StringRewriter",
    "RewriterRegistry",
    "TailwindClassSorter",
    "BUILTIN_REWRITERS",
    "sort_classes",
    "tailwind_sort_key",
]
