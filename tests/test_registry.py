"""
Tests for the module registry — construction checks and queries.
"""

import pytest

from acfs.core.engine.errors import DependencyCycleError, ManifestError, StructuralDependencyError
from acfs.core.engine.registry import ModuleRegistry
from acfs.core.models.module import Module


class TestConstruction:
    def test_duplicate_ids_rejected(self):
        with pytest.raises(ManifestError, match="Duplicate module ids: a"):
            ModuleRegistry([Module(id="a", phase=1), Module(id="a", phase=2)])

    def test_unknown_dependency_rejected(self):
        with pytest.raises(ManifestError, match="unknown module 'missing'"):
            ModuleRegistry([Module(id="a", phase=1, dependencies=["missing"])])

    def test_cycle_reports_path(self):
        modules = [
            Module(id="a", phase=1, dependencies=["b"]),
            Module(id="b", phase=1, dependencies=["c"]),
            Module(id="c", phase=1, dependencies=["a"]),
        ]
        with pytest.raises(DependencyCycleError) as exc_info:
            ModuleRegistry(modules)
        assert exc_info.value.cycle == ("a", "b", "c", "a")
        assert "a -> b -> c -> a" in str(exc_info.value)

    def test_cycle_not_through_entry_point(self):
        modules = [
            Module(id="a", phase=1, dependencies=["b"]),
            Module(id="b", phase=1, dependencies=["c"]),
            Module(id="c", phase=1, dependencies=["b"]),
        ]
        with pytest.raises(DependencyCycleError) as exc_info:
            ModuleRegistry(modules)
        assert exc_info.value.cycle == ("b", "c", "b")

    def test_self_dependency_is_a_cycle(self):
        with pytest.raises(StructuralDependencyError):
            ModuleRegistry([Module(id="a", phase=1, dependencies=["a"])])

    def test_diamond_is_not_a_cycle(self):
        modules = [
            Module(id="top", phase=3, dependencies=["left", "right"]),
            Module(id="left", phase=2, dependencies=["base"]),
            Module(id="right", phase=2, dependencies=["base"]),
            Module(id="base", phase=1),
        ]
        assert len(ModuleRegistry(modules)) == 4

    def test_empty_registry(self):
        registry = ModuleRegistry([])
        assert len(registry) == 0
        assert registry.phases() == ()


class TestQueries:
    def test_lookup(self, registry):
        assert registry.lookup("lang.bun").phase == 6
        assert registry.lookup("nonexistent.module") is None

    def test_get_raises_for_unknown(self, registry):
        with pytest.raises(KeyError):
            registry.get("nonexistent.module")

    def test_all_modules_sorted(self, registry):
        ids = [m.id for m in registry.all_modules()]
        assert ids == sorted(ids)
        assert len(ids) == 10

    def test_modules_in_phase(self, registry):
        assert [m.id for m in registry.modules_in_phase(6)] == ["lang.bun", "lang.rust"]
        assert registry.modules_in_phase(99) == ()

    def test_modules_with_tag(self, registry):
        assert [m.id for m in registry.modules_with_tag("runtime")] == ["lang.bun", "lang.rust"]

    def test_modules_in_category(self, registry):
        ids = [m.id for m in registry.modules_in_category("tools")]
        assert ids == ["tools.ast_grep", "tools.atuin", "tools.vault"]

    def test_dependents_of(self, registry):
        assert registry.dependents_of("lang.bun") == ("agents.claude", "stack.ultimate_bug_scanner")
        assert registry.dependents_of("agents.claude") == ()

    def test_phases_tags_categories(self, registry):
        assert registry.phases() == (1, 2, 6, 7, 8, 9, 10)
        assert "runtime" in registry.tags()
        assert registry.categories() == (
            "agents", "base", "db", "lang", "stack", "tools", "users",
        )

    def test_container_protocol(self, registry):
        assert "base.system" in registry
        assert "nope" not in registry
        assert [m.id for m in registry] == list(registry.ids())
