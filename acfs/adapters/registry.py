"""
Installer registry — central dispatch for install actions.

The executor never calls installers directly. The registry resolves
the installer for an action (or the mock in mock mode), validates,
honors dry-run, times the call and turns anything an installer raises
into a failed receipt.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from acfs.adapters.base import InstallContext, Installer
from acfs.adapters.mock import MockInstaller
from acfs.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class InstallerRegistry:
    """Registry and dispatcher for installers."""

    def __init__(self, mock_mode: bool = False, timeout: int = 900):
        self._installers: dict[str, Installer] = {}
        self._mock_mode = mock_mode
        self._mock: Installer | None = None
        self._timeout = timeout

    @property
    def mock_mode(self) -> bool:
        return self._mock_mode

    def set_mock_mode(self, enabled: bool, mock_installer: Installer | None = None) -> None:
        """Route every action to one mock installer (default: MockInstaller)."""
        self._mock_mode = enabled
        self._mock = mock_installer

    def register(self, installer: Installer) -> None:
        name = installer.name
        if name in self._installers:
            logger.warning("Overwriting existing installer: %s", name)
        self._installers[name] = installer
        logger.debug("Registered installer: %s", name)

    def unregister(self, name: str) -> None:
        self._installers.pop(name, None)

    def get(self, name: str) -> Installer | None:
        return self._installers.get(name)

    def list_installers(self) -> list[str]:
        return list(self._installers.keys())

    def installer_status(self) -> dict[str, dict[str, Any]]:
        """Availability of every registered installer."""
        status = {}
        for name, installer in self._installers.items():
            try:
                available = installer.is_available()
            except Exception:
                available = False
            status[name] = {
                "name": name,
                "available": available,
                "type": installer.__class__.__name__,
            }
        return status

    def _resolve(self, action: Action) -> Installer | None:
        if self._mock_mode:
            if self._mock is None:
                self._mock = MockInstaller()
            return self._mock
        return self._installers.get(action.installer)

    def execute_action(self, action: Action, dry_run: bool = False) -> Receipt:
        """Run one action through its installer. Never raises.

        Args:
            action: The install action.
            dry_run: Validate only; return a skipped receipt.
        """
        start = time.monotonic()
        installer = self._resolve(action)

        if installer is None:
            return Receipt.failure(
                action,
                installer=action.installer,
                error=f"No installer registered for '{action.installer}'",
            )

        context = InstallContext(action=action, dry_run=dry_run, timeout=self._timeout)

        try:
            is_valid, error_msg = installer.validate(context)
        except Exception as e:
            is_valid, error_msg = False, f"validation raised {e}"
        if not is_valid:
            return Receipt.failure(
                action,
                installer=installer.name,
                error=f"Validation failed: {error_msg}",
            )

        if dry_run:
            return Receipt.skip(
                action,
                installer=installer.name,
                reason=f"[dry-run] would install {action.module_id}",
                metadata={"dry_run": True},
            )

        try:
            receipt = installer.execute(context)
        except Exception as e:
            logger.error("Installer %s raised for %s: %s", installer.name, action.module_id, e)
            receipt = Receipt.failure(
                action,
                installer=installer.name,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = int((time.monotonic() - start) * 1000)
        return receipt
