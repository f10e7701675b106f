#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/options/base.py
"""Base classes for erbkit options.

Options are frozen dataclasses. Field metadata carries a ``help`` string and
an ``importance`` level so configuration loaders can describe each field.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)

    @classmethod
    def field_names(cls) -> set[str]:
        """Return the names of all dataclass fields."""
        return {f.name for f in fields(cls)}  # type: ignore[arg-type]

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> Self:
        """Build an instance from a mapping, rejecting unknown keys.

        Keys may use dashes instead of underscores, as config files do.

        Raises
        ------
        ValueError
            If ``data`` contains keys that are not fields

        """
        normalized = {str(key).replace("-", "_"): value for key, value in data.items()}
        unknown = sorted(set(normalized) - cls.field_names())
        if unknown:
            raise ValueError(f"Unknown {cls.__name__} option(s): {', '.join(unknown)}")
        return cls(**normalized)
