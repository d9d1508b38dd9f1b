"""
metacoding — CLI entrypoint.

Usage:
    metacoding --help
    metacoding init --template python
    metacoding update --no-backup
    metacoding validate --strict
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from metacoding import __version__
from metacoding.core.errors import MetacodingError, ValidationFailedError
from metacoding.core.models.project import IDE_VSCODE
from metacoding.core.models.validation import ValidationReport
from metacoding.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    resolve_level,
    setup_logging,
)
from metacoding.core.services.prompts import ClickPrompter, Prompter

_STATUS_ICONS = {"pass": "✅", "warn": "⚠️ ", "fail": "❌"}


def _project_root(ctx: click.Context) -> Path:
    return ctx.obj.get("project_root") or Path.cwd()


def _prompter(ctx: click.Context) -> Prompter | None:
    """Interactive prompts only when attached to a terminal."""
    return ClickPrompter() if ctx.obj.get("interactive") else None


def _fail(prefix: str, error: Exception) -> None:
    click.secho(f"{prefix} {error}", fg="red", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="metacoding")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--project-root",
    "-C",
    "project_root",
    type=click.Path(file_okay=False),
    default=None,
    help="Project directory (default: current directory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    project_root: str | None,
) -> None:
    """metacoding — guided AI-assistant setup for your project."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["project_root"] = Path(project_root).resolve() if project_root else None
    ctx.obj.setdefault("interactive", sys.stdin.isatty())

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
        quiet_third_party=not debug,
    )


# ── init ────────────────────────────────────────────────────────


@cli.command()
@click.option("--template", "-t", default=None, help="Template category (default: detected).")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing setup without asking.")
@click.option("--skip-vscode", is_flag=True, help="Do not touch VS Code settings.")
@click.option("--skip-git", is_flag=True, help="Do not warn about a missing git repository.")
@click.option("--vscode", is_flag=True, help="Set up for VS Code + GitHub Copilot.")
@click.option("--cursor", is_flag=True, help="Set up for Cursor IDE.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def init(
    ctx: click.Context,
    template: str | None,
    force: bool,
    skip_vscode: bool,
    skip_git: bool,
    vscode: bool,
    cursor: bool,
    as_json: bool,
) -> None:
    """Initialize metacoding in the project."""
    from metacoding.core.use_cases.init import run_init

    quiet = ctx.obj.get("quiet", False)
    if not (quiet or as_json):
        click.secho("🚀 Welcome to metacoding Setup!\n", fg="cyan", bold=True)

    try:
        result = run_init(
            _project_root(ctx),
            template=template,
            force=force,
            skip_vscode=skip_vscode,
            skip_git=skip_git,
            vscode=vscode,
            cursor=cursor,
            prompter=_prompter(ctx),
        )
    except (MetacodingError, OSError) as e:
        _fail("Error during initialization:", e)
        return

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.cancelled:
        click.secho("Setup cancelled.", fg="yellow")
        return

    if not quiet:
        for path in result.files:
            click.echo(f"   • {path}")
        if result.cursor and result.cursor.written:
            for path in result.cursor.written:
                click.echo(f"   • {path}")
    for warning in result.warnings:
        click.secho(f"⚠️  {warning}", fg="yellow")

    click.secho("\n✅ metacoding setup complete!\n", fg="green", bold=True)
    if not quiet:
        _next_steps(result.ide)


def _next_steps(ide: str) -> None:
    click.secho("Next steps:", fg="cyan")
    if ide == IDE_VSCODE:
        click.echo("  1. Restart VS Code to apply settings")
        click.echo("  2. Open GitHub Copilot Chat")
    else:
        click.echo("  1. Open your project in Cursor IDE")
        click.echo("  2. Check that .cursor/rules/workflow.mdc is loaded")
    click.echo('  3. Ask: "What is the development workflow for this project?"')
    click.echo()


# ── update ──────────────────────────────────────────────────────


@cli.command()
@click.option("--template", "-t", default=None, help="Template category (default: detected).")
@click.option("--backup/--no-backup", "create_backup", default=True,
              help="Snapshot .github/ before updating (default: on).")
@click.option("--force", "-f", is_flag=True, help="Replace conflicted files without asking.")
@click.option("--dry-run", is_flag=True, help="Validate the current setup and change nothing.")
@click.option("--strict", is_flag=True, help="With --dry-run: treat warnings as errors.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def update(
    ctx: click.Context,
    template: str | None,
    create_backup: bool,
    force: bool,
    dry_run: bool,
    strict: bool,
    as_json: bool,
) -> None:
    """Update instruction files to the latest templates."""
    if dry_run:
        _validate(ctx, strict=strict, auto_fix=False, template=template, as_json=as_json)
        return

    from metacoding.core.use_cases.update import run_update

    try:
        summary = run_update(
            _project_root(ctx),
            template=template,
            create_backup=create_backup,
            force=force,
            prompter=_prompter(ctx),
        )
    except (MetacodingError, OSError) as e:
        _fail("Error during update:", e)
        return

    if as_json:
        click.echo(json.dumps(summary.to_dict(), indent=2))
        return

    if summary.resolution.preserved:
        click.secho(
            f"💾 Preserved {len(summary.resolution.preserved)} user files with user. prefix",
            fg="yellow",
        )
    if force and summary.conflicts:
        click.secho(f"⚠️  Force mode: Replaced {len(summary.conflicts)} conflicted files",
                    fg="yellow")

    click.secho("\n✅ metacoding update complete!\n", fg="green", bold=True)
    click.secho("Update Summary:", fg="cyan")
    click.echo(f"  Template: {summary.category}")
    click.echo(f"  Files updated: {len(summary.files_updated)}")
    if summary.conflicts:
        click.echo(f"  Conflicts resolved: {len(summary.conflicts)}")
    if summary.backup_created:
        click.echo("  Backup: Created in .backup/ directory")


# ── validate ────────────────────────────────────────────────────


@cli.command()
@click.option("--fix", "auto_fix", is_flag=True, help="Restore missing files and settings.")
@click.option("--strict", is_flag=True, help="Treat warnings as errors.")
@click.option("--template", "-t", default=None, help="Template category used by --fix.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def validate(
    ctx: click.Context, auto_fix: bool, strict: bool, template: str | None, as_json: bool
) -> None:
    """Check the metacoding setup in the project."""
    _validate(ctx, strict=strict, auto_fix=auto_fix, template=template, as_json=as_json)


def _print_report(report: ValidationReport) -> None:
    for check in report.checks:
        suffix = f" - {check.message}" if check.message else ""
        click.echo(f"{_STATUS_ICONS[check.status]} {check.check}{suffix}")
    for path in report.fixed:
        click.secho(f"🔧 Fixed {path}", fg="cyan")
    click.echo(f"\nSummary: {report.passed}/{report.total} checks passed")


def _validate(
    ctx: click.Context, *, strict: bool, auto_fix: bool, template: str | None, as_json: bool
) -> None:
    from metacoding.core.use_cases.validate import run_validate

    try:
        report = run_validate(
            _project_root(ctx), strict=strict, auto_fix=auto_fix, template=template
        )
    except ValidationFailedError as e:
        if as_json:
            click.echo(json.dumps(e.report.to_dict(), indent=2))
        else:
            _print_report(e.report)
        _fail("Error during validation:", e)
        return
    except (MetacodingError, OSError) as e:
        _fail("Error during validation:", e)
        return

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    _print_report(report)
    click.secho("🎉 metacoding setup is valid and ready to use!", fg="green", bold=True)


# ── detect ──────────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show what metacoding detects about the project."""
    from metacoding.core.services.detection import detect_project

    signals = detect_project(_project_root(ctx))

    if as_json:
        click.echo(json.dumps(signals.to_dict(), indent=2))
        return

    click.secho(f"📋 {signals.name}", fg="cyan", bold=True)
    click.echo(f"   Category:   {signals.category}")
    click.echo(f"   Tech stack: {', '.join(signals.tech_stack)}")
    click.echo(f"   Git:        {'yes' if signals.has_git else 'no'}")
    click.echo(f"   VS Code:    {'yes' if signals.has_vscode else 'no'}")


# ── Sub-groups ──────────────────────────────────────────────────

from metacoding.ui.cli.backup import backup
from metacoding.ui.cli.templates import templates

cli.add_command(backup)
cli.add_command(templates)


if __name__ == "__main__":
    cli()
