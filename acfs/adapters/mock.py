"""
Mock installer — test double for every install action.

Used by ``acfs run --mock`` and the test-suite to walk a plan without
touching the machine. Succeeds by default; individual modules can be
configured to fail.
"""

from __future__ import annotations

from acfs.adapters.base import InstallContext, Installer
from acfs.core.models.action import Receipt


class MockInstaller(Installer):
    """Records every call and returns configurable receipts.

    Failures are keyed by module id rather than action id, so a test can
    set them up before the operation id is known.
    """

    def __init__(
        self,
        installer_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] installed",
    ):
        self._name = installer_name
        self._available = available
        self._default_output = default_output
        self._failures: dict[str, str] = {}
        self._call_log: list[InstallContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[InstallContext]:
        """All contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def installed(self) -> list[str]:
        """Module ids in the order they were executed."""
        return [ctx.module_id for ctx in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, module_id: str, error: str = "Mock failure") -> None:
        """Make installs of ``module_id`` fail."""
        self._failures[module_id] = error

    def clear_failure(self, module_id: str) -> None:
        self._failures.pop(module_id, None)

    def validate(self, context: InstallContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: InstallContext) -> Receipt:
        self._call_log.append(context)

        if context.module_id in self._failures:
            return Receipt.failure(
                context.action,
                installer=self._name,
                error=self._failures[context.module_id],
                metadata={"mock": True},
            )

        return Receipt.success(
            context.action,
            installer=self._name,
            output=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._call_log.clear()
        self._failures.clear()
