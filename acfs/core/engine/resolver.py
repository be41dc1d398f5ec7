"""
Resolver — the full planning pipeline and its introspection view.

``resolve`` is a pure function of (registry, criteria): same inputs,
same Resolution, byte for byte. ``Planner`` wraps it for callers that
want to keep the latest result around; the cached Resolution is
replaced as a whole on every call and never edited.
"""

from __future__ import annotations

import logging

from acfs.core.engine.closure import close_over_dependencies
from acfs.core.engine.planner import build_plan
from acfs.core.engine.registry import ModuleRegistry
from acfs.core.engine.selection import compute_candidates
from acfs.core.models.plan import Resolution
from acfs.core.models.selection import SelectionCriteria

logger = logging.getLogger(__name__)


def resolve(registry: ModuleRegistry, criteria: SelectionCriteria | None = None) -> Resolution:
    """Select, close over dependencies and order modules.

    Args:
        registry: The validated module registry.
        criteria: Selection filters. None means default selection.

    Returns:
        Resolution with the ordered plan and reasons for every module.

    Raises:
        UnknownIdentifierError: unknown module id or phase in criteria.
        UnsatisfiableDependencyError: a skip rule removed a needed module.
        PhaseOrderError: a planned module depends on a later phase.
    """
    if criteria is None:
        criteria = SelectionCriteria()

    selection = compute_candidates(criteria, registry)
    closure = close_over_dependencies(selection, registry, no_deps=criteria.no_deps)
    plan = build_plan(closure.included, registry)

    resolution = Resolution(
        plan=plan,
        reasons=closure.included,
        exclude_reasons=closure.excluded,
        criteria=criteria,
    )
    logger.info(
        "Resolved plan: %d of %d modules selected",
        len(resolution),
        len(registry),
    )
    return resolution


class Planner:
    """Holds a registry and the most recent Resolution.

    Queries answer from the last ``resolve`` call. Before the first call
    (or after a failed one) nothing is planned and every query reports
    that.
    """

    def __init__(self, registry: ModuleRegistry):
        self._registry = registry
        self._current: Resolution | None = None

    @property
    def registry(self) -> ModuleRegistry:
        return self._registry

    @property
    def current(self) -> Resolution | None:
        return self._current

    def resolve(self, criteria: SelectionCriteria | None = None) -> Resolution:
        """Resolve and replace the cached result.

        On failure the previous result is dropped so no stale plan
        survives a rejected selection.
        """
        self._current = None
        resolution = resolve(self._registry, criteria)
        self._current = resolution
        return resolution

    def should_run(self, module_id: str) -> bool:
        current = self._current
        return current is not None and current.should_run(module_id)

    def plan_order(self) -> tuple[str, ...]:
        current = self._current
        return current.plan_order() if current is not None else ()

    def reason_for(self, module_id: str) -> str | None:
        current = self._current
        return current.reason_for(module_id) if current is not None else None

    def exclude_reason_for(self, module_id: str) -> str | None:
        current = self._current
        return current.exclude_reason_for(module_id) if current is not None else None
