"""
Selection criteria — the user's filters for one resolution.

Built once from CLI flags (or any other caller) and passed by value
into ``resolve``. Nothing in the engine keeps selection state between
calls.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


def _pieces(entry: Any) -> list[str]:
    """Split one flag value on commas.

    A value holding only blanks and commas is an error, not "no filter".
    """
    pieces = [p.strip() for p in str(entry).split(",") if p.strip()]
    if not pieces:
        raise ValueError(f"empty value {str(entry)!r}")
    return pieces


class SelectionCriteria(BaseModel):
    """Immutable set of selection filters.

    ``only`` and ``only_phase`` combine with union semantics. When both
    are empty the default-enabled modules are selected. Skip filters are
    applied after the candidate set is built.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    only: frozenset[str] = frozenset()
    only_phase: frozenset[int] = frozenset()
    skip: frozenset[str] = frozenset()
    skip_tag: frozenset[str] = frozenset()
    skip_category: frozenset[str] = frozenset()
    no_deps: bool = False

    @field_validator("only", "skip", "skip_tag", "skip_category", mode="before")
    @classmethod
    def _split_values(cls, value: Any) -> Any:
        # Accept "a,b" style values as well as iterables of them.
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = [value]
        if isinstance(value, Iterable):
            items: set[str] = set()
            for entry in value:
                items.update(_pieces(entry))
            return frozenset(items)
        return value

    @field_validator("only_phase", mode="before")
    @classmethod
    def _coerce_phases(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, (int, str)):
            value = [value]
        phases: set[int] = set()
        for entry in value:
            for part in _pieces(entry):
                try:
                    phases.add(int(part))
                except ValueError:
                    raise ValueError(f"phase must be an integer, got {part!r}") from None
        return frozenset(phases)

    @property
    def is_explicit(self) -> bool:
        """Whether the caller named modules or phases explicitly."""
        return bool(self.only or self.only_phase)

    def to_dict(self) -> dict:
        """JSON-friendly view with sorted lists."""
        return {
            "only": sorted(self.only),
            "only_phase": sorted(self.only_phase),
            "skip": sorted(self.skip),
            "skip_tag": sorted(self.skip_tag),
            "skip_category": sorted(self.skip_category),
            "no_deps": self.no_deps,
        }
