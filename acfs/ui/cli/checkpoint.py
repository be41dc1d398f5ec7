"""
CLI commands for the install checkpoint.

The checkpoint records which modules finished in earlier runs; these
commands inspect or clear it.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

_state_file_option = click.option(
    "--state-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Checkpoint file (default: $ACFS_STATE_DIR/checkpoint.json).",
)


@click.group()
def checkpoint() -> None:
    """Checkpoint — show or reset completed modules."""


@checkpoint.command()
@_state_file_option
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def show(state_file: Path | None, as_json: bool) -> None:
    """Show modules recorded as completed."""
    from acfs.core.use_cases.run import show_checkpoint

    path, state = show_checkpoint(state_file)

    if as_json:
        data = state.model_dump(mode="json")
        data["path"] = str(path)
        click.echo(json.dumps(data, indent=2))
        return

    click.secho(f"💾 Checkpoint: {path}", fg="cyan", bold=True)
    if not state.completed:
        click.echo("   No modules completed yet.")
        click.echo()
        return

    click.echo(f"   Completed: {len(state.completed)}")
    for module_id in sorted(state.completed):
        record = state.completed[module_id]
        click.echo(f"     ✓ {module_id:<32} {record.completed_at}")

    last = state.last_run
    if last.operation_id:
        click.echo()
        click.secho("   Last run:", fg="white", bold=True)
        status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(
            last.status, "white"
        )
        click.echo(f"     {last.operation_id} — ", nl=False)
        click.secho(last.status, fg=status_color)
        click.echo(
            f"     {last.modules_succeeded} ok, {last.modules_failed} failed, "
            f"{last.modules_skipped} skipped"
        )
    click.echo()


@checkpoint.command()
@_state_file_option
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
def reset(state_file: Path | None, yes: bool) -> None:
    """Forget every completed module."""
    from acfs.core.persistence.checkpoint_file import clear_checkpoint, default_checkpoint_path

    path = state_file or default_checkpoint_path()
    if not yes:
        click.confirm(f"Reset checkpoint {path}?", abort=True)

    if clear_checkpoint(path):
        click.secho(f"🗑  Checkpoint reset: {path}", fg="green")
    else:
        click.echo(f"   No checkpoint at {path}")
