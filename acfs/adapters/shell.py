"""
Shell installer — run a module's install commands.

Commands run in order through ``sh``; the first non-zero exit stops
the module and fails its receipt. Output from every command is kept
in the receipt for the run report.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time

from acfs.adapters.base import InstallContext, Installer
from acfs.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellInstaller(Installer):
    """Execute ``Action.commands`` one by one.

    Commands inherit the working directory and environment of the
    ``acfs`` process.
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def validate(self, context: InstallContext) -> tuple[bool, str]:
        if not context.action.commands:
            return False, f"Module '{context.module_id}' has no install commands"
        if not all(cmd.strip() for cmd in context.action.commands):
            return False, "Empty command in install list"
        return True, ""

    def execute(self, context: InstallContext) -> Receipt:
        action = context.action
        outputs: list[str] = []
        start = time.monotonic()

        for index, command in enumerate(action.commands):
            logger.debug("[%s] %s", action.module_id, command)
            try:
                result = subprocess.run(
                    command,
                    shell=True,
                    capture_output=True,
                    text=True,
                    timeout=context.timeout,
                )
            except subprocess.TimeoutExpired:
                return Receipt.failure(
                    action,
                    installer=self.name,
                    error=f"Command timed out after {context.timeout}s: {command}",
                    duration_ms=_elapsed_ms(start),
                    metadata={"command": command, "index": index},
                )
            except OSError as e:
                return Receipt.failure(
                    action,
                    installer=self.name,
                    error=f"Command execution error: {e}",
                    duration_ms=_elapsed_ms(start),
                    metadata={"command": command, "index": index},
                )

            stdout = result.stdout.strip()
            if stdout:
                outputs.append(stdout)

            if result.returncode != 0:
                stderr = result.stderr.strip()
                return Receipt.failure(
                    action,
                    installer=self.name,
                    error=stderr or f"Command exited with code {result.returncode}: {command}",
                    output="\n".join(outputs),
                    duration_ms=_elapsed_ms(start),
                    metadata={
                        "command": command,
                        "index": index,
                        "return_code": result.returncode,
                    },
                )

        return Receipt.success(
            action,
            installer=self.name,
            output="\n".join(outputs),
            duration_ms=_elapsed_ms(start),
            metadata={"commands": len(action.commands)},
        )


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
