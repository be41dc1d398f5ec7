"""
Tests for the plan builder — phase grouping and topological order.
"""

import pytest

from acfs.core.engine.errors import PhaseOrderError, StructuralDependencyError
from acfs.core.engine.planner import build_plan, check_phase_order
from acfs.core.engine.registry import ModuleRegistry
from acfs.core.models.module import Module


class TestBuildPlan:
    def test_full_sample_order(self, registry):
        plan = build_plan(
            [m.id for m in registry if m.enabled_by_default],
            registry,
        )
        assert plan == (
            "base.system",
            "users.ubuntu",
            "lang.bun",
            "lang.rust",
            "tools.ast_grep",
            "tools.atuin",
            "agents.claude",
            "stack.ultimate_bug_scanner",
        )

    def test_input_order_irrelevant(self, registry):
        ids = ["agents.claude", "lang.bun", "base.system"]
        assert build_plan(ids, registry) == build_plan(list(reversed(ids)), registry)

    def test_same_phase_dependency_ordered_first(self):
        registry = ModuleRegistry([
            Module(id="shell.a_plugins", phase=4, dependencies=["shell.zsh"]),
            Module(id="shell.zsh", phase=4),
        ])
        assert build_plan(registry.ids(), registry) == ("shell.zsh", "shell.a_plugins")

    def test_lexicographic_tie_break(self):
        registry = ModuleRegistry([
            Module(id="c", phase=1),
            Module(id="a", phase=1),
            Module(id="b", phase=1),
        ])
        assert build_plan(registry.ids(), registry) == ("a", "b", "c")

    def test_phase_beats_identity(self):
        registry = ModuleRegistry([
            Module(id="a.late", phase=2),
            Module(id="z.early", phase=1),
        ])
        assert build_plan(registry.ids(), registry) == ("z.early", "a.late")

    def test_dependencies_outside_set_ignored(self, registry):
        assert build_plan(["agents.claude"], registry) == ("agents.claude",)

    def test_empty(self, registry):
        assert build_plan([], registry) == ()


class TestPhaseOrder:
    def _inverted(self) -> ModuleRegistry:
        return ModuleRegistry([
            Module(id="early", phase=1, dependencies=["late"]),
            Module(id="late", phase=2),
        ])

    def test_later_phase_dependency_rejected(self):
        registry = self._inverted()
        with pytest.raises(PhaseOrderError) as exc_info:
            build_plan(registry.ids(), registry)
        err = exc_info.value
        assert (err.module_id, err.dependency) == ("early", "late")
        assert (err.module_phase, err.dependency_phase) == (1, 2)
        assert isinstance(err, StructuralDependencyError)

    def test_violation_outside_selection_ignored(self):
        registry = self._inverted()
        assert build_plan(["late"], registry) == ("late",)
        check_phase_order(["early"], registry)
