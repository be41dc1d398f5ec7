"""
Action and Receipt models — the executor contract.

Actions are requests to install one module. Receipts are the results.
The executor sends Actions through the installer registry and gets
Receipts back. Installers report failures in the Receipt, never by
raising.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """A request to install a single module.

    Built by ``build_actions`` in plan order, one per planned module.
    """

    id: str                         # "<operation_id>:<module_id>"
    module_id: str
    installer: str                  # which installer handles this
    phase: int = 0
    commands: list[str] = Field(default_factory=list)
    params: dict[str, Any] = Field(default_factory=dict)


class Receipt(BaseModel):
    """Result of installing (or skipping) one module."""

    installer: str
    action_id: str
    module_id: str = ""
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the install succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the install failed."""
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    # ── Constructors ─────────────────────────────────────────────

    @classmethod
    def for_action(cls, action: Action, installer: str, status: str, **kwargs: Any) -> Receipt:
        return cls(
            installer=installer,
            action_id=action.id,
            module_id=action.module_id,
            status=status,
            **kwargs,
        )

    @classmethod
    def success(cls, action: Action, installer: str, output: str = "", **kwargs: Any) -> Receipt:
        """Receipt for a module that installed cleanly."""
        return cls.for_action(action, installer, "ok", output=output, **kwargs)

    @classmethod
    def failure(cls, action: Action, installer: str, error: str, **kwargs: Any) -> Receipt:
        """Receipt for a failed install; ``error`` is shown to the user."""
        return cls.for_action(action, installer, "failed", error=error, **kwargs)

    @classmethod
    def skip(cls, action: Action, installer: str, reason: str = "", **kwargs: Any) -> Receipt:
        """Receipt for a module that was not run; ``reason`` goes in ``output``."""
        return cls.for_action(action, installer, "skipped", output=reason, **kwargs)
