#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/rewriters/registry.py
"""Registry of rewriter classes.

A registry maps rewriter names to classes. It is an ordinary value: callers
construct one (usually through :meth:`RewriterRegistry.with_builtins`) and
pass it to the formatter, so tests and embedders never share state.

Third-party packages can publish rewriters under the ``erbkit.rewriters``
entry point group; :meth:`RewriterRegistry.load_entry_points` registers them.

Examples
--------
    >>> registry = RewriterRegistry.with_builtins()
    >>> registry.names()
    ['tailwind-class-sorter']
    >>> registry.get("tailwind-class-sorter")
    <class 'erbkit.rewriters.builtin.TailwindClassSorter'>

"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Optional

from erbkit.constants import REWRITER_ENTRY_POINT_GROUP
from erbkit.exceptions import RewriterError
from erbkit.rewriters.base import ASTRewriter, BaseRewriter, StringRewriter

logger = logging.getLogger(__name__)


class RewriterRegistry:
    """Name-to-class catalog of rewriters."""

    def __init__(self) -> None:
        self._rewriters: dict[str, type[BaseRewriter]] = {}

    @classmethod
    def with_builtins(cls) -> RewriterRegistry:
        """Create a registry holding the built-in rewriters."""
        from erbkit.rewriters.builtin import BUILTIN_REWRITERS

        registry = cls()
        for rewriter_class in BUILTIN_REWRITERS:
            registry.register(rewriter_class)
        return registry

    @staticmethod
    def _validate(rewriter_class: object) -> str:
        if not isinstance(rewriter_class, type) or not issubclass(rewriter_class, (ASTRewriter, StringRewriter)):
            raise RewriterError(f"Rewriter must subclass ASTRewriter or StringRewriter, got {rewriter_class!r}")
        name = getattr(rewriter_class, "name", "")
        if not isinstance(name, str) or not name:
            raise RewriterError(f"Rewriter class {rewriter_class.__name__} does not declare a name")
        return name

    def register(self, rewriter_class: type[BaseRewriter]) -> None:
        """Register a rewriter class under its ``name``.

        A class registered under an existing name replaces the earlier one.

        Raises
        ------
        RewriterError
            If the class is not a rewriter or has no name

        """
        name = self._validate(rewriter_class)
        if name in self._rewriters:
            logger.warning(f"Rewriter '{name}' already registered, overwriting")
        self._rewriters[name] = rewriter_class
        logger.debug(f"Registered rewriter: {name}")

    def unregister(self, name: str) -> bool:
        """Remove a rewriter; return False when it was not registered."""
        if name in self._rewriters:
            del self._rewriters[name]
            logger.debug(f"Unregistered rewriter: {name}")
            return True
        return False

    def get(self, name: str) -> Optional[type[BaseRewriter]]:
        """Return the class registered under ``name``, or None."""
        return self._rewriters.get(name)

    def has(self, name: str) -> bool:
        """Return True when ``name`` is registered."""
        return name in self._rewriters

    def names(self) -> list[str]:
        """Return registered names, sorted."""
        return sorted(self._rewriters)

    def all(self) -> list[type[BaseRewriter]]:
        """Return registered classes in registration order."""
        return list(self._rewriters.values())

    def create(self, name: str, options: Optional[dict] = None) -> BaseRewriter:
        """Instantiate the rewriter registered under ``name``.

        Raises
        ------
        RewriterError
            If no rewriter has that name

        """
        rewriter_class = self.get(name)
        if rewriter_class is None:
            raise RewriterError(f"Unknown rewriter: {name}", rewriter_name=name)
        return rewriter_class(options)

    def load_entry_points(self, group: str = REWRITER_ENTRY_POINT_GROUP) -> int:
        """Register rewriter classes published under an entry point group.

        Entry points that fail to load or do not name a rewriter class are
        logged and skipped.

        Returns
        -------
        int
            Number of rewriters registered

        """
        count = 0
        for entry_point in importlib.metadata.entry_points(group=group):
            try:
                rewriter_class = entry_point.load()
                self.register(rewriter_class)
            except RewriterError as e:
                logger.warning(f"Entry point '{entry_point.name}' is not a valid rewriter: {e}")
                continue
            except Exception as e:
                logger.warning(f"Failed to load rewriter entry point '{entry_point.name}': {e}")
                continue
            count += 1

        logger.debug(f"Loaded {count} rewriter(s) from entry point group '{group}'")
        return count
