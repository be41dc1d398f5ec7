"""
No-op installer — for modules that declare no install commands.

Such modules still take part in ordering and checkpoints (they usually
group other modules or mark a milestone), so they succeed immediately.
"""

from __future__ import annotations

from acfs.adapters.base import InstallContext, Installer
from acfs.core.models.action import Receipt


class NoopInstaller(Installer):
    @property
    def name(self) -> str:
        return "noop"

    def is_available(self) -> bool:
        return True

    def validate(self, context: InstallContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: InstallContext) -> Receipt:
        return Receipt.success(
            context.action,
            installer=self.name,
            output="nothing to install",
        )
