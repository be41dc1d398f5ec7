"""
Plan builder — order the closed module set for execution.

Primary key is the phase number, secondary a topological order of the
dependency graph restricted to the closed set. Kahn's algorithm with a
heap keyed on ``(phase, id)`` gives both at once: whenever a module of
phase N is still pending, some module of phase <= N is ready, so the
emitted phases never decrease.
"""

from __future__ import annotations

import heapq
import logging
from collections.abc import Iterable

from acfs.core.engine.errors import DependencyCycleError, PhaseOrderError
from acfs.core.engine.registry import ModuleRegistry

logger = logging.getLogger(__name__)


def check_phase_order(module_ids: Iterable[str], registry: ModuleRegistry) -> None:
    """Reject dependencies that live in a later phase than their dependent.

    Only edges with both ends inside ``module_ids`` are checked.
    Same-phase dependencies are allowed and ordered topologically.

    Raises:
        PhaseOrderError: for the first violation in identity order.
    """
    selected = set(module_ids)
    for module_id in sorted(selected):
        module = registry.get(module_id)
        for dep in module.dependencies:
            if dep not in selected:
                continue
            dep_phase = registry.get(dep).phase
            if dep_phase > module.phase:
                raise PhaseOrderError(module.id, module.phase, dep, dep_phase)


def build_plan(module_ids: Iterable[str], registry: ModuleRegistry) -> tuple[str, ...]:
    """Return the execution order for a closed module set.

    Args:
        module_ids: The closure-resolved set. Dependencies outside it
            (possible with no-deps) are ignored.
        registry: The module registry.

    Returns:
        Module ids ordered by phase, then dependency precedence, ties
        broken by identity.

    Raises:
        PhaseOrderError: a dependency is scheduled in a later phase.
    """
    selected = set(module_ids)
    check_phase_order(selected, registry)

    pending: dict[str, int] = {}
    dependents: dict[str, list[str]] = {m: [] for m in selected}
    for module_id in selected:
        deps = [d for d in registry.get(module_id).dependencies if d in selected]
        pending[module_id] = len(deps)
        for dep in deps:
            dependents[dep].append(module_id)

    ready = [(registry.get(m).phase, m) for m, count in pending.items() if count == 0]
    heapq.heapify(ready)

    plan: list[str] = []
    while ready:
        _, module_id = heapq.heappop(ready)
        plan.append(module_id)
        for successor in dependents[module_id]:
            pending[successor] -= 1
            if pending[successor] == 0:
                heapq.heappush(ready, (registry.get(successor).phase, successor))

    if len(plan) < len(selected):
        stuck = sorted(m for m, count in pending.items() if count > 0)
        raise DependencyCycleError(stuck)

    logger.debug("Plan built: %d modules", len(plan))
    return tuple(plan)
