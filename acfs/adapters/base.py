"""
Installer base — the contract between the executor and install actions.

The planner decides whether and when a module runs; an installer does
the actual work. The executor only reaches installers through the
``InstallerRegistry``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from acfs.core.models.action import Action, Receipt


class InstallContext(BaseModel):
    """What an installer gets to work with for one module."""

    action: Action
    dry_run: bool = False
    timeout: int = 900  # seconds per command

    @property
    def module_id(self) -> str:
        return self.action.module_id


class Installer(ABC):
    """Abstract base class for all installers.

    Installers perform side effects and return receipts. They never
    raise; failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The installer identifier (e.g., 'shell', 'noop')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the installer can run on this machine. Never raises."""

    @abstractmethod
    def validate(self, context: InstallContext) -> tuple[bool, str]:
        """Check that the action can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: InstallContext) -> Receipt:
        """Install the module and return a receipt."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
