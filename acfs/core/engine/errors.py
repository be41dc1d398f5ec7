"""
Planning errors — typed failures carrying the offending identifiers.

Every error aborts the resolution: no partial plan is returned. Callers
branch on the exception class (or its ``kind``) and can render
``to_dict()`` for machine-readable output.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any


class PlanningError(Exception):
    """Base class for every manifest and resolution failure."""

    kind = "planning_error"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": str(self)}


class ManifestError(PlanningError):
    """The manifest cannot be loaded or describes an invalid registry.

    Covers unreadable or malformed files, duplicate module identities
    and dependencies on modules that do not exist.
    """

    kind = "manifest_invalid"


class UnknownIdentifierError(PlanningError):
    """A selection names a module id or phase that the registry lacks."""

    kind = "unknown_identifier"

    def __init__(self, field: str, identifiers: Iterable[str | int]):
        self.field = field
        self.identifiers: tuple[str, ...] = tuple(sorted(str(i) for i in identifiers))
        super().__init__(
            f"Unknown {field.replace('_', '-')} value(s): {', '.join(self.identifiers)}"
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["field"] = self.field
        data["identifiers"] = list(self.identifiers)
        return data


class UnsatisfiableDependencyError(PlanningError):
    """A selected module needs a dependency that a skip rule removed."""

    kind = "unsatisfiable_dependency"

    def __init__(self, module_id: str, dependency: str, exclude_reason: str):
        self.module_id = module_id
        self.dependency = dependency
        self.exclude_reason = exclude_reason
        super().__init__(
            f"Module '{module_id}' requires '{dependency}', "
            f"which was removed ({exclude_reason})"
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["module"] = self.module_id
        data["dependency"] = self.dependency
        data["exclude_reason"] = self.exclude_reason
        return data


class StructuralDependencyError(PlanningError):
    """The dependency graph itself is broken (cycle or phase inversion)."""

    kind = "structural_dependency_violation"


class DependencyCycleError(StructuralDependencyError):
    """The dependency relation contains a cycle."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle: tuple[str, ...] = tuple(cycle)
        super().__init__(f"Dependency cycle: {' -> '.join(self.cycle)}")

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["cycle"] = list(self.cycle)
        return data


class PhaseOrderError(StructuralDependencyError):
    """A module depends on a module scheduled in a later phase."""

    def __init__(
        self,
        module_id: str,
        module_phase: int,
        dependency: str,
        dependency_phase: int,
    ):
        self.module_id = module_id
        self.module_phase = module_phase
        self.dependency = dependency
        self.dependency_phase = dependency_phase
        super().__init__(
            f"Module '{module_id}' (phase {module_phase}) depends on "
            f"'{dependency}' (phase {dependency_phase}), which runs later"
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["module"] = self.module_id
        data["module_phase"] = self.module_phase
        data["dependency"] = self.dependency
        data["dependency_phase"] = self.dependency_phase
        return data
