#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/options/linter.py
"""Options for the linter and the fix pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from erbkit.options.base import CloneFrozenMixin

_VALID_SEVERITIES = frozenset({"error", "warning", "info", "hint"})


@dataclass(frozen=True)
class LinterOptions(CloneFrozenMixin):
    """Configuration for rule selection and autofix safety.

    Parameters
    ----------
    enabled_rules : tuple of str or None, default None
        When set, only these rules run
    disabled_rules : tuple of str, default ()
        Rules that never run
    severity_overrides : mapping of str to str
        Per-rule severity replacing the rule's default
    include_unsafe : bool, default False
        Also apply fixes from rules declared unsafe

    """

    enabled_rules: tuple[str, ...] | None = field(
        default=None,
        metadata={"help": "Only run these rules (default: all registered rules)", "importance": "core"},
    )
    disabled_rules: tuple[str, ...] = field(
        default=(),
        metadata={"help": "Rules to skip", "importance": "core"},
    )
    severity_overrides: Mapping[str, str] = field(
        default_factory=dict,
        metadata={"help": "Rule name to severity (error, warning, info, hint)", "importance": "advanced"},
    )
    include_unsafe: bool = field(
        default=False,
        metadata={"help": "Apply fixes that may change template behavior", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Validate severities and freeze collection fields.

        Raises
        ------
        ValueError
            If a severity override names an unknown severity.

        """
        for rule_name, severity in self.severity_overrides.items():
            if severity not in _VALID_SEVERITIES:
                raise ValueError(
                    f"Invalid severity '{severity}' for rule '{rule_name}'; "
                    f"expected one of {', '.join(sorted(_VALID_SEVERITIES))}"
                )

        if self.enabled_rules is not None:
            object.__setattr__(self, "enabled_rules", tuple(self.enabled_rules))
        object.__setattr__(self, "disabled_rules", tuple(self.disabled_rules))
        object.__setattr__(self, "severity_overrides", MappingProxyType(dict(self.severity_overrides)))

    def is_enabled(self, rule_name: str) -> bool:
        """Return True when ``rule_name`` should run."""
        if rule_name in self.disabled_rules:
            return False
        return self.enabled_rules is None or rule_name in self.enabled_rules
