"""
Manifest check use case — validate the manifest and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from acfs.core.config.loader import load_manifest, resolve_manifest_path
from acfs.core.engine.errors import PlanningError
from acfs.core.engine.planner import check_phase_order
from acfs.core.engine.registry import ModuleRegistry


@dataclass
class ManifestCheckResult:
    """Result of manifest validation."""

    valid: bool = False
    manifest_path: Path | None = None
    registry: ModuleRegistry | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        registry = self.registry
        return {
            "valid": self.valid,
            "manifest": str(self.manifest_path) if self.manifest_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "module_count": len(registry) if registry else 0,
            "phases": list(registry.phases()) if registry else [],
            "default_enabled": (
                sum(1 for m in registry if m.enabled_by_default) if registry else 0
            ),
        }


def check_manifest(manifest_path: Path | None = None) -> ManifestCheckResult:
    """Validate the manifest: schema, references, cycles and phase order.

    Args:
        manifest_path: Optional explicit manifest path.

    Returns:
        ManifestCheckResult with validation status and any issues.
    """
    result = ManifestCheckResult()

    try:
        result.manifest_path = resolve_manifest_path(manifest_path)
        registry = load_manifest(result.manifest_path)
    except PlanningError as e:
        result.errors.append(str(e))
        return result

    result.registry = registry

    try:
        check_phase_order(registry.ids(), registry)
    except PlanningError as e:
        result.errors.append(str(e))

    # Semantic warnings
    if len(registry) == 0:
        result.warnings.append("Manifest defines no modules.")

    phases = registry.phases()
    if phases:
        missing = sorted(set(range(phases[0], phases[-1] + 1)) - set(phases))
        if missing:
            result.warnings.append(
                f"Phase numbers skip {', '.join(str(p) for p in missing)}."
            )

    for module in registry:
        if not module.category:
            result.warnings.append(f"Module '{module.id}' has no category.")

    for module in registry:
        if module.enabled_by_default:
            continue
        users = [
            d for d in registry.dependents_of(module.id)
            if registry.get(d).enabled_by_default
        ]
        if users:
            result.warnings.append(
                f"Module '{module.id}' is disabled by default but required by "
                f"{', '.join(users)}; default runs will pull it in."
            )

    result.valid = not result.errors
    return result
