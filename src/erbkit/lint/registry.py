#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/lint/registry.py
"""Registry of lint rule classes."""

from __future__ import annotations

import logging
from typing import Optional

from erbkit.constants import UNNECESSARY_DIRECTIVE_RULE
from erbkit.exceptions import RuleError
from erbkit.lint.offense import Severity
from erbkit.lint.rules.base import Rule
from erbkit.options.linter import LinterOptions

logger = logging.getLogger(__name__)

# Reported by the linter itself rather than by a registered rule
LINTER_RULE_NAMES = frozenset({UNNECESSARY_DIRECTIVE_RULE})


class RuleRegistry:
    """Name-to-class catalog of lint rules.

    Like :class:`~erbkit.rewriters.registry.RewriterRegistry`, this is a
    plain value passed to whoever needs it.

    Examples
    --------
        >>> registry = RuleRegistry.with_builtins()
        >>> rules = registry.build_rules(LinterOptions(disabled_rules=("erb-no-empty-tags",)))

    """

    def __init__(self) -> None:
        self._rules: dict[str, type[Rule]] = {}

    @classmethod
    def with_builtins(cls) -> RuleRegistry:
        """Create a registry holding the built-in rules."""
        from erbkit.lint.rules import BUILTIN_RULES

        registry = cls()
        for rule_class in BUILTIN_RULES:
            registry.register(rule_class)
        return registry

    def register(self, rule_class: type[Rule]) -> None:
        """Register a rule class under its ``rule_name``.

        Raises
        ------
        RuleError
            If the class is not a rule or has no name

        """
        if not isinstance(rule_class, type) or not issubclass(rule_class, Rule):
            raise RuleError(f"Rule must subclass Rule, got {rule_class!r}")
        if not rule_class.rule_name:
            raise RuleError(f"Rule class {rule_class.__name__} does not declare a rule_name")
        if rule_class.rule_name in self._rules:
            logger.warning(f"Rule '{rule_class.rule_name}' already registered, overwriting")
        self._rules[rule_class.rule_name] = rule_class
        logger.debug(f"Registered rule: {rule_class.rule_name}")

    def unregister(self, name: str) -> bool:
        """Remove a rule; return False when it was not registered."""
        return self._rules.pop(name, None) is not None

    def get(self, name: str) -> Optional[type[Rule]]:
        """Return the class registered under ``name``, or None."""
        return self._rules.get(name)

    def has(self, name: str) -> bool:
        """Return True when ``name`` is registered."""
        return name in self._rules

    def names(self) -> list[str]:
        """Return registered rule names in registration order."""
        return list(self._rules)

    def all(self) -> list[type[Rule]]:
        """Return registered classes in registration order."""
        return list(self._rules.values())

    def build_rules(self, options: Optional[LinterOptions] = None) -> list[Rule]:
        """Instantiate the rules enabled by ``options``, in registration order.

        Raises
        ------
        RuleError
            If ``options`` names a rule that is not registered

        """
        options = options or LinterOptions()
        referenced = set(options.enabled_rules or ()) | set(options.disabled_rules) | set(options.severity_overrides)
        unknown = sorted(name for name in referenced if name not in self._rules and name not in LINTER_RULE_NAMES)
        if unknown:
            raise RuleError(f"Unknown rule(s): {', '.join(unknown)}", rule_name=unknown[0])

        rules = []
        for name, rule_class in self._rules.items():
            if not options.is_enabled(name):
                continue
            override = options.severity_overrides.get(name)
            rules.append(rule_class(Severity(override) if override is not None else None))
        return rules
