"""
Run use case — resolve a selection and execute it with checkpoints.

The full vertical slice: load manifest → resolve → build actions →
load checkpoint → execute → persist. A rerun with the same manifest
and criteria resolves the same plan and skips the modules the
checkpoint already records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from acfs.adapters.noop import NoopInstaller
from acfs.adapters.registry import InstallerRegistry
from acfs.adapters.shell import ShellInstaller
from acfs.core.engine.errors import PlanningError
from acfs.core.engine.executor import (
    ExecutionPlan,
    ExecutionReport,
    build_actions,
    execute_plan,
    generate_operation_id,
)
from acfs.core.models.checkpoint import CheckpointState
from acfs.core.models.selection import SelectionCriteria
from acfs.core.persistence.checkpoint_file import (
    default_checkpoint_path,
    load_checkpoint,
    save_checkpoint,
)
from acfs.core.use_cases.plan import PlanResult, plan_install

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of a resolve-and-execute run."""

    planning: PlanResult | None = None
    plan: ExecutionPlan | None = None
    report: ExecutionReport | None = None
    checkpoint_path: Path | None = None
    resumed: int = 0  # modules skipped because the checkpoint had them

    @property
    def error(self) -> PlanningError | None:
        return self.planning.error if self.planning else None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error is not None:
            result["error"] = self.error.to_dict()
            return result

        result["checkpoint"] = str(self.checkpoint_path) if self.checkpoint_path else None
        result["resumed"] = self.resumed
        if self.plan is not None:
            result["plan"] = self.plan.module_ids
            result["fingerprint"] = self.plan.fingerprint
        if self.report is not None:
            result["report"] = self.report.to_dict()
        return result


def default_installers(mock_mode: bool = False) -> InstallerRegistry:
    """Installer registry with the shell and noop installers registered."""
    registry = InstallerRegistry(mock_mode=mock_mode)
    registry.register(ShellInstaller())
    registry.register(NoopInstaller())
    return registry


def run_install(
    criteria: SelectionCriteria | None = None,
    manifest_path: Path | None = None,
    checkpoint_path: Path | None = None,
    resume: bool = True,
    dry_run: bool = False,
    mock_mode: bool = False,
    installers: InstallerRegistry | None = None,
) -> RunResult:
    """Resolve ``criteria`` and install the plan.

    Args:
        criteria: Selection filters (None = default selection).
        manifest_path: Optional explicit manifest path.
        checkpoint_path: Checkpoint file (default: ~/.acfs/state/checkpoint.json).
        resume: Honor completions recorded by earlier runs. When False
            the checkpoint is reset before executing.
        dry_run: Validate every action but execute nothing.
        mock_mode: Route every action to the mock installer. Nothing was
            really installed, so the checkpoint is read but never written.
        installers: Optional pre-configured installer registry.

    Returns:
        RunResult; ``error`` is set when planning failed and nothing ran.
    """
    result = RunResult()
    result.planning = planning = plan_install(criteria, manifest_path)
    if not planning.ok:
        return result

    assert planning.resolution is not None
    assert planning.registry is not None

    result.checkpoint_path = checkpoint_path or default_checkpoint_path()
    checkpoint = load_checkpoint(result.checkpoint_path)
    record = not dry_run and not mock_mode
    if not resume:
        checkpoint.reset()
        if record:
            save_checkpoint(checkpoint, result.checkpoint_path)

    result.resumed = sum(
        1 for module_id in planning.resolution.plan_order()
        if checkpoint.is_complete(module_id)
    )
    if result.resumed:
        logger.info("Resuming: %d planned modules already completed", result.resumed)

    if installers is None:
        installers = default_installers(mock_mode=mock_mode)

    result.plan = build_actions(planning.resolution, planning.registry, generate_operation_id())
    result.report = execute_plan(
        result.plan,
        installers,
        checkpoint=checkpoint,
        checkpoint_path=result.checkpoint_path,
        dry_run=dry_run,
        record=record,
    )
    return result


def show_checkpoint(checkpoint_path: Path | None = None) -> tuple[Path, CheckpointState]:
    """Load the checkpoint for display."""
    path = checkpoint_path or default_checkpoint_path()
    return path, load_checkpoint(path)
