"""
Engine executor — walk a resolved plan, resuming from checkpoints.

The planner hands over a Resolution; this module turns it into one
install Action per module and runs them in plan order through the
installer registry. Completed modules are recorded in the checkpoint
after each success, so an interrupted run can be repeated and will
skip what already finished.

Flow:
    Resolution → build_actions → execute_plan(checkpoint) → ExecutionReport
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from acfs.adapters.registry import InstallerRegistry
from acfs.core.engine.registry import ModuleRegistry
from acfs.core.models.action import Action, Receipt
from acfs.core.models.checkpoint import CheckpointState, RunRecord
from acfs.core.models.plan import Resolution
from acfs.core.persistence.checkpoint_file import save_checkpoint

logger = logging.getLogger(__name__)

SKIP_ALREADY_COMPLETED = "already completed"
SKIP_BLOCKED = "blocked by failure of {module_id}"


@dataclass
class ExecutionPlan:
    """Install actions in plan order."""

    operation_id: str = ""
    fingerprint: str = ""
    actions: list[Action] = field(default_factory=list)

    @property
    def total_actions(self) -> int:
        return len(self.actions)

    @property
    def module_ids(self) -> list[str]:
        return [a.module_id for a in self.actions]


@dataclass
class ExecutionReport:
    """Result of executing a plan."""

    operation_id: str = ""
    started_at: str = ""
    ended_at: str = ""
    dry_run: bool = False
    receipts: list[Receipt] = field(default_factory=list)

    def _count(self, status: str) -> int:
        return sum(1 for r in self.receipts if r.status == status)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return self._count("ok")

    @property
    def failed(self) -> int:
        return self._count("failed")

    @property
    def skipped(self) -> int:
        return self._count("skipped")

    @property
    def all_ok(self) -> bool:
        return not self.failed

    @property
    def status(self) -> str:
        """ok, partial (something installed before a failure) or failed."""
        if not self.failed:
            return "ok"
        return "partial" if self.succeeded else "failed"

    def receipt_for(self, module_id: str) -> Receipt | None:
        for receipt in self.receipts:
            if receipt.module_id == module_id:
                return receipt
        return None

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "dry_run": self.dry_run,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def build_actions(
    resolution: Resolution,
    registry: ModuleRegistry,
    operation_id: str,
) -> ExecutionPlan:
    """Create one install action per planned module, in plan order.

    Modules with install commands go to the ``shell`` installer; the
    rest go to ``noop``.
    """
    plan = ExecutionPlan(operation_id=operation_id, fingerprint=resolution.fingerprint())

    for module_id in resolution.plan_order():
        module = registry.get(module_id)
        plan.actions.append(
            Action(
                id=f"{operation_id}:{module_id}",
                module_id=module_id,
                installer="shell" if module.install else "noop",
                phase=module.phase,
                commands=list(module.install),
                params={"reason": resolution.reason_for(module_id) or ""},
            )
        )

    return plan


def execute_plan(
    plan: ExecutionPlan,
    installers: InstallerRegistry,
    checkpoint: CheckpointState | None = None,
    checkpoint_path: Path | None = None,
    dry_run: bool = False,
    record: bool = True,
) -> ExecutionReport:
    """Execute actions in order, skipping modules already checkpointed.

    The first failure stops the run; later modules are reported as
    skipped. On a real run each success is saved to ``checkpoint_path``
    straight away. A dry run, or a run with ``record=False``, reads the
    checkpoint but never updates it.

    Args:
        plan: The execution plan.
        installers: Installer registry for dispatch.
        checkpoint: Completion record from previous runs, if any.
        checkpoint_path: Where to persist the checkpoint.
        dry_run: Validate but don't execute.
        record: Record completions. Off for mock runs, where nothing was
            really installed.

    Returns:
        ExecutionReport with one receipt per planned module.
    """
    report = ExecutionReport(
        operation_id=plan.operation_id,
        started_at=_now_iso(),
        dry_run=dry_run,
    )
    record = record and checkpoint is not None and not dry_run
    persist = record and checkpoint_path is not None

    if record:
        if checkpoint.plan_fingerprint and checkpoint.plan_fingerprint != plan.fingerprint:
            logger.info("Plan differs from the last recorded run; completed modules still apply")
        checkpoint.plan_fingerprint = plan.fingerprint

    blocked_by: str | None = None
    for action in plan.actions:
        if blocked_by is not None:
            receipt = Receipt.skip(
                action,
                installer=action.installer,
                reason=SKIP_BLOCKED.format(module_id=blocked_by),
            )
        elif checkpoint is not None and checkpoint.is_complete(action.module_id):
            receipt = Receipt.skip(
                action,
                installer=action.installer,
                reason=SKIP_ALREADY_COMPLETED,
            )
        else:
            receipt = installers.execute_action(action, dry_run=dry_run)
            if receipt.ok and record:
                checkpoint.mark_complete(action.module_id, operation_id=plan.operation_id)
                if persist:
                    save_checkpoint(checkpoint, checkpoint_path)
            elif receipt.failed:
                blocked_by = action.module_id

        report.receipts.append(receipt)

        status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
        logger.info("%s %s → %s", status_marker, action.module_id, receipt.status)

    report.ended_at = _now_iso()

    if record:
        checkpoint.last_run = RunRecord(
            operation_id=report.operation_id,
            started_at=report.started_at,
            ended_at=report.ended_at,
            status=report.status,
            modules_total=report.total,
            modules_succeeded=report.succeeded,
            modules_failed=report.failed,
            modules_skipped=report.skipped,
        )
        if persist:
            save_checkpoint(checkpoint, checkpoint_path)

    return report


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"op-{now}-{short}"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()
