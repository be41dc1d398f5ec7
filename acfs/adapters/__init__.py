"""Installers — the executor's bindings to real install actions.

Public re-exports for convenient access.
"""

from acfs.adapters.base import InstallContext, Installer
from acfs.adapters.mock import MockInstaller
from acfs.adapters.noop import NoopInstaller
from acfs.adapters.registry import InstallerRegistry
from acfs.adapters.shell import ShellInstaller

__all__ = [
    "InstallContext",
    "Installer",
    "InstallerRegistry",
    "MockInstaller",
    "NoopInstaller",
    "ShellInstaller",
]
