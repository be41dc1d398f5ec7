"""
Bundled static data — the default module manifest.

Usage::

    from acfs.core.data import default_manifest_path

    path = default_manifest_path()
"""

from __future__ import annotations

from pathlib import Path

_DATA_DIR = Path(__file__).parent

DEFAULT_MANIFEST = "manifest.yaml"


def default_manifest_path() -> Path:
    """Path of the manifest shipped with the package."""
    return _DATA_DIR / DEFAULT_MANIFEST
