"""
Plan use case — load the manifest and resolve a selection.

Shared by ``acfs plan``, ``acfs explain`` and ``acfs run``. Errors are
captured in the result rather than raised, so the CLI can render them
as text or JSON with the right exit code.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from acfs.core.config.loader import load_manifest, resolve_manifest_path
from acfs.core.engine.errors import PlanningError, UnknownIdentifierError
from acfs.core.engine.registry import ModuleRegistry
from acfs.core.engine.resolver import resolve
from acfs.core.models.plan import Resolution
from acfs.core.models.selection import SelectionCriteria


@dataclass
class PlanResult:
    """Outcome of resolving a selection against the manifest."""

    manifest_path: Path | None = None
    registry: ModuleRegistry | None = None
    resolution: Resolution | None = None
    error: PlanningError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.resolution is not None

    def to_dict(self) -> dict:
        result: dict = {"manifest": str(self.manifest_path) if self.manifest_path else None}
        if self.error is not None:
            result["error"] = self.error.to_dict()
            return result

        assert self.resolution is not None
        assert self.registry is not None
        result.update(self.resolution.to_dict())
        result["modules"] = [
            {
                "id": module_id,
                "phase": self.registry.get(module_id).phase,
                "reason": self.resolution.reason_for(module_id),
            }
            for module_id in self.resolution.plan_order()
        ]
        return result


def plan_install(
    criteria: SelectionCriteria | None = None,
    manifest_path: Path | None = None,
) -> PlanResult:
    """Resolve ``criteria`` against the manifest.

    Args:
        criteria: Selection filters (None = default selection).
        manifest_path: Optional explicit manifest path.

    Returns:
        PlanResult holding either the Resolution or the error.
    """
    result = PlanResult()

    try:
        result.manifest_path = resolve_manifest_path(manifest_path)
        result.registry = load_manifest(result.manifest_path)
    except PlanningError as e:
        result.error = e
        return result

    try:
        result.resolution = resolve(result.registry, criteria)
    except PlanningError as e:
        result.error = e

    return result


def explain_module(module_id: str, result: PlanResult) -> dict:
    """Describe why a module is or is not part of a resolved plan.

    Raises:
        UnknownIdentifierError: ``module_id`` is not in the manifest.
    """
    assert result.registry is not None and result.resolution is not None
    module = result.registry.lookup(module_id)
    if module is None:
        raise UnknownIdentifierError("module", [module_id])

    resolution = result.resolution
    runs = resolution.should_run(module_id)
    position = resolution.plan_order().index(module_id) + 1 if runs else None
    return {
        "id": module.id,
        "phase": module.phase,
        "category": module.category,
        "tags": list(module.tags),
        "dependencies": list(module.dependencies),
        "dependents": list(result.registry.dependents_of(module_id)),
        "enabled_by_default": module.enabled_by_default,
        "runs": runs,
        "position": position,
        "reason": resolution.reason_for(module_id) if runs else resolution.exclude_reason_for(module_id),
    }
