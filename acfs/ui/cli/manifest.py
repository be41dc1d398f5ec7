"""
CLI commands for the module manifest.

Thin wrappers over ``acfs.core.use_cases.manifest_check``.
"""

from __future__ import annotations

import json
import sys

import click

from acfs.ui.cli.options import EXIT_PLANNING_FAILED


@click.group()
def manifest() -> None:
    """Manifest — validate the module catalog."""


@manifest.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def manifest_check(ctx: click.Context, as_json: bool) -> None:
    """Validate the manifest: schema, references, cycles, phase order."""
    from acfs.core.use_cases.manifest_check import check_manifest

    result = check_manifest(manifest_path=ctx.obj.get("manifest_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else EXIT_PLANNING_FAILED)

    if result.valid:
        assert result.registry is not None
        registry = result.registry
        click.secho("✅ Manifest is valid", fg="green", bold=True)
        click.echo(f"   File:    {result.manifest_path}")
        click.echo(f"   Modules: {len(registry)}")
        click.echo(f"   Phases:  {', '.join(str(p) for p in registry.phases())}")
    else:
        click.secho("❌ Manifest errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    click.echo()
    if not result.valid:
        sys.exit(EXIT_PLANNING_FAILED)
