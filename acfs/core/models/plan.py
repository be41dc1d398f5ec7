"""
Resolution — the validated plan plus its audit trail.

A ``Resolution`` is produced once per ``resolve`` call and never
mutated afterwards. It holds the ordered plan, the effective run set
used for O(1) membership checks, and the inclusion/exclusion reason
maps that together cover every module in the registry.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from acfs.core.models.selection import SelectionCriteria

# ── Reason strings ──────────────────────────────────────────────

REASON_EXPLICIT = "explicitly requested"
REASON_PHASE = "in requested phase"
REASON_DEFAULT = "enabled by default"
REASON_DEPENDENCY = "dependency of {requester}"

EXCLUDE_DISABLED = "disabled by default"
EXCLUDE_SKIPPED = "explicitly skipped"
EXCLUDE_TAG = "tag skipped: {tag}"
EXCLUDE_CATEGORY = "category skipped: {category}"
EXCLUDE_NOT_SELECTED = "not selected"


def _frozen_map(data: Mapping[str, str]) -> Mapping[str, str]:
    """Read-only copy with keys in sorted order."""
    return MappingProxyType({key: data[key] for key in sorted(data)})


@dataclass(frozen=True)
class Resolution:
    """Ordered plan with inclusion and exclusion reasons."""

    plan: tuple[str, ...]
    reasons: Mapping[str, str]
    exclude_reasons: Mapping[str, str]
    criteria: SelectionCriteria = field(default_factory=SelectionCriteria)
    effective_run: frozenset[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "plan", tuple(self.plan))
        object.__setattr__(self, "reasons", _frozen_map(self.reasons))
        object.__setattr__(self, "exclude_reasons", _frozen_map(self.exclude_reasons))
        object.__setattr__(self, "effective_run", frozenset(self.plan))

    # ── Introspection ────────────────────────────────────────────

    def should_run(self, module_id: str) -> bool:
        """O(1) membership test against the effective run set."""
        return module_id in self.effective_run

    def plan_order(self) -> tuple[str, ...]:
        """The plan in execution order. Safe to iterate repeatedly."""
        return self.plan

    def reason_for(self, module_id: str) -> str | None:
        """Why a module is in the plan, or None if it is not."""
        return self.reasons.get(module_id)

    def exclude_reason_for(self, module_id: str) -> str | None:
        """Why a module was left out, or None if it runs."""
        return self.exclude_reasons.get(module_id)

    def __iter__(self) -> Iterator[str]:
        return iter(self.plan)

    def __len__(self) -> int:
        return len(self.plan)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self.effective_run

    @property
    def is_empty(self) -> bool:
        return not self.plan

    # ── Serialization ────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "criteria": self.criteria.to_dict(),
            "plan": list(self.plan),
            "reasons": dict(self.reasons),
            "exclude_reasons": dict(self.exclude_reasons),
            "fingerprint": self.fingerprint(),
        }

    def fingerprint(self) -> str:
        """Stable SHA-256 over the plan and both reason maps.

        Two resolutions over the same registry and criteria always
        produce the same fingerprint, which lets a resumed run detect
        that it is working from the same plan.
        """
        canonical = json.dumps(
            {
                "plan": list(self.plan),
                "reasons": dict(self.reasons),
                "exclude_reasons": dict(self.exclude_reasons),
            },
            sort_keys=True,
            separators=(",", ":"),
        )
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
