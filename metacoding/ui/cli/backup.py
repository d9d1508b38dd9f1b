"""
CLI commands for managed-tree snapshots.

Thin wrappers over ``metacoding.core.services.backup``.
"""

from __future__ import annotations

import json
from pathlib import Path

import click


def _resolve_project_root(ctx: click.Context) -> Path:
    """Resolve project root from context or CWD."""
    return ctx.obj.get("project_root") or Path.cwd()


@click.group()
def backup() -> None:
    """Snapshots — create, list, and prune .backup/ copies of .github/."""


@backup.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def create(ctx: click.Context, as_json: bool) -> None:
    """Snapshot the managed tree now."""
    from metacoding.core.services.backup import create_snapshot

    snapshot = create_snapshot(_resolve_project_root(ctx))

    if as_json:
        click.echo(json.dumps(snapshot.to_dict(), indent=2))
        return

    click.secho(f"✅ Snapshot created: {snapshot.timestamp}", fg="green", bold=True)
    click.echo(f"   Files: {snapshot.file_count}")


@backup.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """List snapshots, newest first."""
    from metacoding.core.services.backup import list_snapshots

    names = list_snapshots(_resolve_project_root(ctx))

    if as_json:
        click.echo(json.dumps({"snapshots": names}, indent=2))
        return

    if not names:
        click.secho("No snapshots found.", fg="yellow")
        return

    click.secho(f"📦 Snapshots ({len(names)}):", fg="cyan", bold=True)
    for name in names:
        click.echo(f"   • {name}")


@backup.command()
@click.option("--keep", default=None, type=int, help="Snapshots to keep (default: 5).")
@click.pass_context
def prune(ctx: click.Context, keep: int | None) -> None:
    """Delete all but the newest snapshots."""
    from metacoding.core.services.backup import KEEP_SNAPSHOTS, prune_snapshots

    removed = prune_snapshots(
        _resolve_project_root(ctx), keep if keep is not None else KEEP_SNAPSHOTS
    )
    if removed:
        click.secho(f"🗑️  Removed {len(removed)} snapshot(s)", fg="green")
    else:
        click.echo("Nothing to prune.")
