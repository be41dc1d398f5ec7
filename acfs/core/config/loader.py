"""
Manifest loader — reads the module manifest into a ModuleRegistry.

The manifest is YAML, validated against the ``Module`` pydantic model.
Lookup order when no explicit path is given:

    ACFS_MANIFEST env var  >  acfs.manifest.yaml (searching upward)  >  bundled default
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from acfs.core.data import default_manifest_path
from acfs.core.engine.errors import ManifestError
from acfs.core.engine.registry import ModuleRegistry
from acfs.core.models.module import Module

logger = logging.getLogger(__name__)

# Default manifest filename
MANIFEST_FILE = "acfs.manifest.yaml"
MANIFEST_ENV_VAR = "ACFS_MANIFEST"


def find_manifest_file(start_dir: Path | None = None) -> Path | None:
    """Search for acfs.manifest.yaml starting from a directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to the manifest, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / MANIFEST_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def resolve_manifest_path(path: Path | None = None) -> Path:
    """Pick the manifest to load: explicit, env var, search, bundled."""
    if path is not None:
        return path

    env_path = os.environ.get(MANIFEST_ENV_VAR)
    if env_path:
        return Path(env_path)

    found = find_manifest_file()
    if found is not None:
        return found

    return default_manifest_path()


def parse_modules(data: object, source: str = "<manifest>") -> list[Module]:
    """Validate raw manifest data into Module models.

    Accepts either a mapping with a ``modules`` list or a bare list.

    Raises:
        ManifestError: wrong shape or schema violations.
    """
    if isinstance(data, dict):
        entries = data.get("modules")
        if entries is None:
            raise ManifestError(f"No 'modules' key in {source}")
    else:
        entries = data

    if not isinstance(entries, list):
        raise ManifestError(
            f"Expected a list of modules in {source}, got {type(entries).__name__}"
        )

    modules: list[Module] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ManifestError(f"Module #{index} in {source} is not a mapping")
        try:
            modules.append(Module.model_validate(entry))
        except ValidationError as e:
            label = entry.get("id", f"#{index}")
            raise ManifestError(f"Invalid module {label} in {source}: {e}") from e

    return modules


def load_manifest(path: Path | None = None) -> ModuleRegistry:
    """Load and validate the manifest into a registry.

    Args:
        path: Explicit manifest path. If None, see ``resolve_manifest_path``.

    Returns:
        Validated ModuleRegistry.

    Raises:
        ManifestError: missing or invalid file, duplicate ids, unknown
            dependencies.
        DependencyCycleError: the manifest declares a dependency cycle.
    """
    path = resolve_manifest_path(path)

    if not path.is_file():
        raise ManifestError(f"Manifest file not found: {path}")

    logger.debug("Loading manifest from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML in {path}: {e}") from e

    registry = ModuleRegistry(parse_modules(data, source=str(path)))
    logger.info("Loaded manifest %s with %d modules", path, len(registry))
    return registry
