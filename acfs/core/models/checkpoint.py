"""
CheckpointState — the executor's record of finished modules.

Serialized to ``checkpoint.json``. The planner never reads it: a rerun
recomputes the same plan from the manifest and criteria, and the
executor skips whatever this record says is already done.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class CompletedModule(BaseModel):
    """One module that finished successfully."""

    module_id: str
    completed_at: str = Field(default_factory=_now_iso)
    operation_id: str = ""


class RunRecord(BaseModel):
    """Summary of the most recent run."""

    operation_id: str = ""
    started_at: str = ""
    ended_at: str = ""
    status: str = ""  # ok, partial, failed
    modules_total: int = 0
    modules_succeeded: int = 0
    modules_failed: int = 0
    modules_skipped: int = 0


class CheckpointState(BaseModel):
    """Root checkpoint document.

    Disposable: deleting it only means the next run installs every
    planned module again.
    """

    schema_version: int = 1

    created_at: str = Field(default_factory=_now_iso)
    updated_at: str = Field(default_factory=_now_iso)

    plan_fingerprint: str = ""
    completed: dict[str, CompletedModule] = Field(default_factory=dict)
    last_run: RunRecord = Field(default_factory=RunRecord)

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = _now_iso()

    def is_complete(self, module_id: str) -> bool:
        return module_id in self.completed

    def mark_complete(self, module_id: str, operation_id: str = "") -> None:
        """Record a module as installed. Re-marking keeps the first record."""
        if module_id not in self.completed:
            self.completed[module_id] = CompletedModule(
                module_id=module_id,
                operation_id=operation_id,
            )

    def forget(self, module_id: str) -> bool:
        """Drop one completion record. Returns whether it existed."""
        return self.completed.pop(module_id, None) is not None

    def reset(self) -> None:
        """Forget every completion and the recorded plan."""
        self.completed.clear()
        self.plan_fingerprint = ""
        self.last_run = RunRecord()
