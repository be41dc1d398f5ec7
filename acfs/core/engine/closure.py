"""
Dependency closure — expand the candidates with everything they need.

Walks each candidate's dependencies transitively. A dependency that a
skip rule removed makes the whole selection unsatisfiable; any other
excluded module ("not selected", "disabled by default") is pulled back
in with a "dependency of" reason.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from acfs.core.engine.errors import UnsatisfiableDependencyError
from acfs.core.engine.registry import ModuleRegistry
from acfs.core.engine.selection import CandidateSet
from acfs.core.models.plan import REASON_DEPENDENCY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClosureResult:
    """Closed module set with updated inclusion and exclusion reasons."""

    included: dict[str, str]
    excluded: dict[str, str]


def close_over_dependencies(
    selection: CandidateSet,
    registry: ModuleRegistry,
    no_deps: bool = False,
) -> ClosureResult:
    """Add every transitive hard dependency of the candidate set.

    Candidates are walked in identity order and each walk is
    breadth-first over sorted dependency lists, so the first recorded
    "dependency of" reason is the same on every run.

    Args:
        selection: Output of ``compute_candidates``.
        registry: The module registry.
        no_deps: Skip the closure and use the candidates as-is. The
            resulting plan may be missing dependencies.

    Raises:
        UnsatisfiableDependencyError: a needed dependency was removed
            by a skip rule.
    """
    included = dict(selection.candidates)
    excluded = dict(selection.excluded)

    if no_deps:
        logger.debug("Dependency closure disabled (no-deps)")
        return ClosureResult(included=included, excluded=excluded)

    for root in sorted(selection.candidates):
        queue: deque[str] = deque([root])
        while queue:
            module_id = queue.popleft()
            for dep in registry.get(module_id).dependencies:
                if dep in included:
                    continue
                if dep in selection.skipped:
                    raise UnsatisfiableDependencyError(module_id, dep, excluded[dep])
                excluded.pop(dep, None)
                included[dep] = REASON_DEPENDENCY.format(requester=module_id)
                queue.append(dep)

    added = len(included) - len(selection.candidates)
    logger.debug("Dependency closure added %d modules", added)
    return ClosureResult(included=included, excluded=excluded)
