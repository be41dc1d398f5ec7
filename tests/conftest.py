"""
Shared test fixtures and configuration.
"""

import logging
import textwrap
from pathlib import Path

import pytest

from acfs.core.engine.registry import ModuleRegistry
from acfs.core.models.module import Module


def make_module(module_id: str, phase: int, **kwargs) -> Module:
    """Shorthand for building a Module in tests."""
    return Module(id=module_id, phase=phase, **kwargs)


# A trimmed-down ACFS manifest: enough phases, tags and categories to
# exercise every selection rule.
SAMPLE_MODULES = [
    make_module("base.system", 1, category="base", tags=["core"]),
    make_module("users.ubuntu", 2, category="users", tags=["core"],
                dependencies=["base.system"]),
    make_module("lang.bun", 6, category="lang", tags=["runtime", "javascript"],
                dependencies=["base.system"]),
    make_module("lang.rust", 6, category="lang", tags=["runtime", "rust"],
                dependencies=["base.system"]),
    make_module("tools.atuin", 7, category="tools", tags=["shell-history"],
                dependencies=["base.system"]),
    make_module("tools.ast_grep", 7, category="tools", tags=["search"],
                dependencies=["lang.rust"]),
    make_module("tools.vault", 7, category="tools", tags=["secrets"],
                enabled_by_default=False, dependencies=["base.system"]),
    make_module("agents.claude", 8, category="agents", tags=["agent"],
                dependencies=["lang.bun"]),
    make_module("db.postgres18", 9, category="db", tags=["database"],
                enabled_by_default=False, dependencies=["base.system"]),
    make_module("stack.ultimate_bug_scanner", 10, category="stack", tags=["stack"],
                dependencies=["lang.bun", "tools.ast_grep"]),
]

SAMPLE_MANIFEST_YAML = textwrap.dedent("""\
    version: 1
    modules:
      - id: base.system
        phase: 1
        category: base
        tags: [core]
        install: ["echo base"]
      - id: lang.bun
        phase: 6
        category: lang
        tags: [runtime, javascript]
        dependencies: [base.system]
      - id: lang.rust
        phase: 6
        category: lang
        tags: [runtime, rust]
        dependencies: [base.system]
      - id: tools.atuin
        phase: 7
        category: tools
        dependencies: [base.system]
      - id: agents.claude
        phase: 8
        category: agents
        tags: [agent]
        dependencies: [lang.bun]
      - id: db.postgres18
        phase: 9
        category: db
        tags: [database]
        enabled_by_default: false
        dependencies: [base.system]
""")


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the user's manifest, checkpoint and log settings."""
    monkeypatch.delenv("ACFS_MANIFEST", raising=False)
    monkeypatch.delenv("ACFS_LOG_LEVEL", raising=False)
    monkeypatch.delenv("ACFS_LOG_FILE", raising=False)
    monkeypatch.delenv("ACFS_LOG_FILE_LEVEL", raising=False)
    monkeypatch.setenv("ACFS_STATE_DIR", str(tmp_path / "acfs-state"))


@pytest.fixture(autouse=True)
def restore_root_logger():
    """CLI invocations reconfigure the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def sample_modules() -> list[Module]:
    return list(SAMPLE_MODULES)


@pytest.fixture
def registry() -> ModuleRegistry:
    """Registry built from SAMPLE_MODULES."""
    return ModuleRegistry(SAMPLE_MODULES)


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    """A small valid manifest on disk."""
    path = tmp_path / "acfs.manifest.yaml"
    path.write_text(SAMPLE_MANIFEST_YAML)
    return path


@pytest.fixture
def checkpoint_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "checkpoint.json"
