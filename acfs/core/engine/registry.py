"""
Module registry — the read-only catalog of every known module.

The registry is built once from the manifest and validated on
construction: duplicate identities, dependencies on unknown modules
and dependency cycles are all fatal. After that it only answers
queries, so it can be shared freely between readers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from types import MappingProxyType

from acfs.core.engine.errors import DependencyCycleError, ManifestError
from acfs.core.models.module import Module

logger = logging.getLogger(__name__)

# DFS node colors
_IN_PROGRESS = 1
_DONE = 2


class ModuleRegistry:
    """Immutable, validated collection of modules keyed by identity.

    Set-valued queries return tuples sorted by module id so that every
    consumer sees the same order.
    """

    def __init__(self, modules: Iterable[Module]):
        by_id: dict[str, Module] = {}
        duplicates: set[str] = set()
        for module in modules:
            if module.id in by_id:
                duplicates.add(module.id)
            by_id[module.id] = module

        if duplicates:
            raise ManifestError(f"Duplicate module ids: {', '.join(sorted(duplicates))}")

        self._modules = MappingProxyType({k: by_id[k] for k in sorted(by_id)})
        self._validate_references()
        self._check_cycles()

        dependents: dict[str, list[str]] = {k: [] for k in self._modules}
        for module in self._modules.values():
            for dep in module.dependencies:
                dependents[dep].append(module.id)
        self._dependents = {k: tuple(sorted(v)) for k, v in dependents.items()}

        logger.debug(
            "Registry built: %d modules across phases %s",
            len(self._modules),
            list(self.phases()),
        )

    # ── Validation ───────────────────────────────────────────────

    def _validate_references(self) -> None:
        errors: list[str] = []
        for module in self._modules.values():
            for dep in module.dependencies:
                if dep not in self._modules:
                    errors.append(f"'{module.id}' depends on unknown module '{dep}'")
        if errors:
            raise ManifestError("Invalid dependencies: " + "; ".join(errors))

    def _check_cycles(self) -> None:
        """Depth-first search with an in-progress marker per node.

        Reaching a node that is still in progress means the current
        path loops back on itself; the loop is reported from that node.
        """
        state: dict[str, int] = {}
        path: list[str] = []

        def visit(module_id: str) -> None:
            state[module_id] = _IN_PROGRESS
            path.append(module_id)
            for dep in self._modules[module_id].dependencies:
                marker = state.get(dep)
                if marker == _IN_PROGRESS:
                    start = path.index(dep)
                    raise DependencyCycleError([*path[start:], dep])
                if marker is None:
                    visit(dep)
            path.pop()
            state[module_id] = _DONE

        for module_id in self._modules:
            if module_id not in state:
                visit(module_id)

    # ── Lookups ──────────────────────────────────────────────────

    def lookup(self, module_id: str) -> Module | None:
        """Return the module with this identity, or None."""
        return self._modules.get(module_id)

    def get(self, module_id: str) -> Module:
        """Return the module with this identity; KeyError if unknown."""
        return self._modules[module_id]

    def all_modules(self) -> tuple[Module, ...]:
        return tuple(self._modules.values())

    def ids(self) -> tuple[str, ...]:
        return tuple(self._modules)

    def modules_in_phase(self, phase: int) -> tuple[Module, ...]:
        return tuple(m for m in self._modules.values() if m.phase == phase)

    def modules_with_tag(self, tag: str) -> tuple[Module, ...]:
        return tuple(m for m in self._modules.values() if tag in m.tags)

    def modules_in_category(self, category: str) -> tuple[Module, ...]:
        return tuple(m for m in self._modules.values() if m.category == category)

    def dependents_of(self, module_id: str) -> tuple[str, ...]:
        """Ids of modules that list ``module_id`` as a direct dependency."""
        return self._dependents.get(module_id, ())

    def phases(self) -> tuple[int, ...]:
        return tuple(sorted({m.phase for m in self._modules.values()}))

    def tags(self) -> tuple[str, ...]:
        return tuple(sorted({t for m in self._modules.values() for t in m.tags}))

    def categories(self) -> tuple[str, ...]:
        return tuple(sorted({m.category for m in self._modules.values() if m.category}))

    # ── Container protocol ───────────────────────────────────────

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def __iter__(self) -> Iterator[Module]:
        return iter(self._modules.values())

    def __repr__(self) -> str:
        return f"<ModuleRegistry modules={len(self._modules)}>"
