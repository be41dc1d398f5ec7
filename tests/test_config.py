"""
Tests for manifest loading — lookup order, parsing and validation errors.
"""

import textwrap
from pathlib import Path

import pytest

from acfs.core.config.loader import (
    MANIFEST_FILE,
    find_manifest_file,
    load_manifest,
    parse_modules,
    resolve_manifest_path,
)
from acfs.core.data import default_manifest_path
from acfs.core.engine.errors import DependencyCycleError, ManifestError


class TestFindManifest:
    def test_finds_in_current_dir(self, manifest_file):
        assert find_manifest_file(manifest_file.parent) == manifest_file.resolve()

    def test_finds_in_parent(self, manifest_file):
        child = manifest_file.parent / "a" / "b"
        child.mkdir(parents=True)
        assert find_manifest_file(child) == manifest_file.resolve()

    def test_returns_none_when_absent(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        # tmp_path parents never contain an acfs manifest
        assert find_manifest_file(empty) is None


class TestResolvePath:
    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ACFS_MANIFEST", str(tmp_path / "env.yaml"))
        explicit = tmp_path / "explicit.yaml"
        assert resolve_manifest_path(explicit) == explicit

    def test_env_var(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ACFS_MANIFEST", str(tmp_path / "env.yaml"))
        assert resolve_manifest_path() == tmp_path / "env.yaml"

    def test_search_from_cwd(self, manifest_file, monkeypatch):
        monkeypatch.chdir(manifest_file.parent)
        assert resolve_manifest_path() == manifest_file.resolve()

    def test_bundled_fallback(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert resolve_manifest_path() == default_manifest_path()


class TestLoadManifest:
    def test_load_sample(self, manifest_file):
        registry = load_manifest(manifest_file)
        assert len(registry) == 6
        assert registry.get("agents.claude").dependencies == ("lang.bun",)
        assert registry.get("base.system").install == ("echo base",)
        assert not registry.get("db.postgres18").enabled_by_default

    def test_load_bundled(self):
        registry = load_manifest(default_manifest_path())
        assert "base.system" in registry
        assert registry.phases()[0] == 1
        assert all(m.category for m in registry)

    def test_bare_list_accepted(self, tmp_path):
        path = tmp_path / MANIFEST_FILE
        path.write_text("- id: solo\n  phase: 1\n")
        assert load_manifest(path).ids() == ("solo",)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ManifestError, match="not found"):
            load_manifest(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / MANIFEST_FILE
        path.write_text("modules: [unclosed\n")
        with pytest.raises(ManifestError, match="Invalid YAML"):
            load_manifest(path)

    def test_unknown_dependency(self, tmp_path):
        path = tmp_path / MANIFEST_FILE
        path.write_text(textwrap.dedent("""\
            modules:
              - id: a
                phase: 1
                dependencies: [ghost]
        """))
        with pytest.raises(ManifestError, match="ghost"):
            load_manifest(path)

    def test_cycle(self, tmp_path):
        path = tmp_path / MANIFEST_FILE
        path.write_text(textwrap.dedent("""\
            modules:
              - id: a
                phase: 1
                dependencies: [b]
              - id: b
                phase: 1
                dependencies: [a]
        """))
        with pytest.raises(DependencyCycleError):
            load_manifest(path)


class TestParseModules:
    def test_missing_modules_key(self):
        with pytest.raises(ManifestError, match="No 'modules' key"):
            parse_modules({"version": 1})

    def test_modules_not_a_list(self):
        with pytest.raises(ManifestError, match="Expected a list"):
            parse_modules({"modules": "base.system"})

    def test_entry_not_a_mapping(self):
        with pytest.raises(ManifestError, match="not a mapping"):
            parse_modules({"modules": ["base.system"]})

    def test_schema_violation_names_module(self):
        with pytest.raises(ManifestError, match="Invalid module base.system"):
            parse_modules({"modules": [{"id": "base.system", "phase": 0}]})

    def test_unknown_field_rejected(self):
        with pytest.raises(ManifestError):
            parse_modules({"modules": [{"id": "a", "phase": 1, "colour": "red"}]})

    def test_empty_document(self):
        with pytest.raises(ManifestError):
            parse_modules(None, source=str(Path("empty.yaml")))
