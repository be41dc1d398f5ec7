"""
ACFS planner — CLI entrypoint.

Usage:
    acfs --help
    acfs plan --only agents.claude
    acfs explain lang.bun --only-phase 8
    acfs run --skip-tag database --dry-run
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from acfs import __version__
from acfs.core.observability.logging_config import level_from_flags, setup_from_environment
from acfs.ui.cli.options import (
    EXIT_EXECUTION_FAILED,
    EXIT_PLANNING_FAILED,
    criteria_from_options,
    selection_options,
)


@click.group()
@click.version_option(version=__version__, prog_name="acfs")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--manifest",
    "-m",
    "manifest_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Path to the module manifest (default: $ACFS_MANIFEST, ./acfs.manifest.yaml, bundled).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    manifest_path: Path | None,
) -> None:
    """ACFS — plan and run resumable environment installs."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["manifest_path"] = manifest_path

    setup_from_environment(level_from_flags(debug=debug, verbose=verbose, quiet=quiet))


def _fail_planning(error, as_json: bool) -> None:
    """Print a planning error and exit with the planning exit code."""
    if as_json:
        click.echo(json.dumps({"error": error.to_dict()}, indent=2))
    else:
        click.secho(f"❌ {error}", fg="red")
    sys.exit(EXIT_PLANNING_FAILED)


@cli.command()
@selection_options
@click.option("--show-excluded", is_flag=True, help="Also list excluded modules with reasons.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, show_excluded: bool, as_json: bool, **selection) -> None:
    """Resolve the selection and print the ordered install plan."""
    from acfs.core.use_cases.plan import plan_install

    criteria = criteria_from_options(**selection)
    result = plan_install(criteria, manifest_path=ctx.obj.get("manifest_path"))

    if result.error is not None:
        _fail_planning(result.error, as_json)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    resolution = result.resolution
    registry = result.registry
    assert resolution is not None and registry is not None

    click.secho(
        f"\n📋 Install plan: {len(resolution)} of {len(registry)} modules",
        fg="cyan",
        bold=True,
    )
    if criteria.no_deps:
        click.secho("   ⚠️  --no-deps: dependencies were not added", fg="yellow")
    click.echo()

    if resolution.is_empty:
        click.echo("   Nothing to install.")

    current_phase = None
    for position, module_id in enumerate(resolution.plan_order(), start=1):
        module = registry.get(module_id)
        if module.phase != current_phase:
            current_phase = module.phase
            click.secho(f"   Phase {current_phase}", fg="white", bold=True)
        click.echo(f"     {position:>3}. {module_id:<32} ({resolution.reason_for(module_id)})")

    if show_excluded and resolution.exclude_reasons:
        click.echo()
        click.secho("   Excluded", fg="white", bold=True)
        for module_id, reason in resolution.exclude_reasons.items():
            click.echo(f"        {module_id:<32} ({reason})")

    click.echo()


@cli.command()
@click.argument("module_id")
@selection_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def explain(ctx: click.Context, module_id: str, as_json: bool, **selection) -> None:
    """Explain whether MODULE_ID would run under the given selection."""
    from acfs.core.engine.errors import UnknownIdentifierError
    from acfs.core.use_cases.plan import explain_module, plan_install

    criteria = criteria_from_options(**selection)
    result = plan_install(criteria, manifest_path=ctx.obj.get("manifest_path"))

    if result.error is not None:
        _fail_planning(result.error, as_json)

    try:
        info = explain_module(module_id, result)
    except UnknownIdentifierError as e:
        _fail_planning(e, as_json)

    if as_json:
        click.echo(json.dumps(info, indent=2))
        return

    if info["runs"]:
        click.secho(f"✓ {module_id} runs", fg="green", bold=True, nl=False)
        click.echo(f" (#{info['position']}, phase {info['phase']})")
    else:
        click.secho(f"✗ {module_id} does not run", fg="yellow", bold=True)
    click.echo(f"   Reason:       {info['reason']}")
    if info["dependencies"]:
        click.echo(f"   Depends on:   {', '.join(info['dependencies'])}")
    if info["dependents"]:
        click.echo(f"   Required by:  {', '.join(info['dependents'])}")
    if info["tags"]:
        click.echo(f"   Tags:         {', '.join(info['tags'])}")
    if info["category"]:
        click.echo(f"   Category:     {info['category']}")


@cli.command()
@click.option("--phase", type=int, default=None, help="Only modules in this phase.")
@click.option("--tag", default=None, help="Only modules carrying this tag.")
@click.option("--category", default=None, help="Only modules in this category.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def modules(
    ctx: click.Context,
    phase: int | None,
    tag: str | None,
    category: str | None,
    as_json: bool,
) -> None:
    """List modules in the manifest."""
    from acfs.core.config.loader import load_manifest
    from acfs.core.engine.errors import PlanningError

    try:
        registry = load_manifest(ctx.obj.get("manifest_path"))
    except PlanningError as e:
        _fail_planning(e, as_json)

    selected = list(registry)
    if phase is not None:
        selected = [m for m in selected if m.phase == phase]
    if tag is not None:
        selected = [m for m in selected if m.has_tag(tag)]
    if category is not None:
        selected = [m for m in selected if m.category == category]
    selected.sort(key=lambda m: (m.phase, m.id))

    if as_json:
        click.echo(json.dumps([m.model_dump(mode="json") for m in selected], indent=2))
        return

    click.secho(f"\n📦 Modules: {len(selected)}", fg="cyan", bold=True)
    for module in selected:
        default = "" if module.enabled_by_default else "  [off by default]"
        deps = f"  ← {', '.join(module.dependencies)}" if module.dependencies else ""
        click.echo(f"   {module.phase:>2}  {module.id:<32}{default}{deps}")
    click.echo()


@cli.command()
@selection_options
@click.option("--dry-run", is_flag=True, help="Validate every step but install nothing.")
@click.option("--mock", is_flag=True, help="Use the mock installer (no real execution).")
@click.option(
    "--state-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Checkpoint file (default: $ACFS_STATE_DIR/checkpoint.json).",
)
@click.option("--no-resume", is_flag=True, help="Ignore and reset recorded completions.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    dry_run: bool,
    mock: bool,
    state_file: Path | None,
    no_resume: bool,
    as_json: bool,
    **selection,
) -> None:
    """Resolve the selection and install it, resuming from the checkpoint.

    Examples:

        acfs run --only agents.claude

        acfs run --skip-category db --dry-run

        acfs run --mock --no-resume
    """
    from acfs.core.use_cases.run import run_install

    criteria = criteria_from_options(**selection)
    result = run_install(
        criteria,
        manifest_path=ctx.obj.get("manifest_path"),
        checkpoint_path=state_file,
        resume=not no_resume,
        dry_run=dry_run,
        mock_mode=mock,
    )

    if result.error is not None:
        _fail_planning(result.error, as_json)

    report = result.report
    assert report is not None

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if report.failed > 0:
            sys.exit(EXIT_EXECUTION_FAILED)
        return

    mode_label = "[dry-run] " if dry_run else "[mock] " if mock else ""
    click.secho(f"\n⚡ {mode_label}install — {report.total} modules", fg="cyan", bold=True)
    if result.resumed:
        click.echo(f"   Resuming: {result.resumed} already completed")
    click.echo()

    for receipt in report.receipts:
        if receipt.ok:
            click.secho(f"   ✓ {receipt.module_id}", fg="green", nl=False)
            timing = f" ({receipt.duration_ms}ms)" if receipt.duration_ms else ""
            click.echo(timing)
            if ctx.obj.get("verbose") and receipt.output:
                for line in receipt.output.split("\n")[:10]:
                    click.echo(f"     │ {line}")
        elif receipt.failed:
            click.secho(f"   ✗ {receipt.module_id}", fg="red")
            if receipt.error:
                for line in receipt.error.split("\n")[:5]:
                    click.echo(f"     │ {line}")
        else:
            click.secho(f"   ⊘ {receipt.module_id} ", fg="yellow", nl=False)
            click.echo(f"({receipt.output})")

    click.echo()
    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(
        report.status, "white"
    )
    click.secho(
        f"   Result: {report.succeeded} installed, {report.skipped} skipped, "
        f"{report.failed} failed",
        fg=status_color,
        bold=True,
    )
    click.echo()

    if report.failed > 0:
        click.echo("   Fix the failure and rerun the same command to resume.")
        sys.exit(EXIT_EXECUTION_FAILED)


# ── Register sub-command groups from acfs/ui/cli/ ─────────────────

from acfs.ui.cli.checkpoint import checkpoint  # noqa: E402
from acfs.ui.cli.manifest import manifest  # noqa: E402

cli.add_command(checkpoint)
cli.add_command(manifest)


if __name__ == "__main__":
    cli()
