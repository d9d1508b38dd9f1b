"""
CLI commands for browsing the template corpus.

Thin wrappers over ``metacoding.core.services.template_resolver``.
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def templates() -> None:
    """Templates — list categories and preview what they install."""


@templates.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_cmd(as_json: bool) -> None:
    """List selectable template categories."""
    from metacoding.core.config.template_loader import load_descriptor
    from metacoding.core.services.template_resolver import TemplateResolver

    resolver = TemplateResolver()
    entries = [
        {"name": name, "description": load_descriptor(resolver.templates_dir, name).description}
        for name in resolver.available_categories()
    ]

    if as_json:
        click.echo(json.dumps({"templates": entries}, indent=2))
        return

    click.secho("📚 Available templates:", fg="cyan", bold=True)
    for entry in entries:
        click.echo(f"   • {entry['name']:<12} {entry['description']}")


@templates.command()
@click.argument("category")
@click.option("--cursor", is_flag=True, help="Resolve for Cursor IDE instead of VS Code.")
@click.option("--stack", default="", help="Comma-separated tech stack (e.g. 'TypeScript').")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def show(category: str, cursor: bool, stack: str, as_json: bool) -> None:
    """Show the files CATEGORY would install."""
    from metacoding.core.errors import TemplateNotFoundError
    from metacoding.core.models.project import IDE_CURSOR, IDE_VSCODE, ProjectConfiguration
    from metacoding.core.services.prompts import split_csv
    from metacoding.core.services.template_resolver import TemplateResolver

    config = ProjectConfiguration(
        name="preview",
        category=category,
        tech_stack=tuple(split_csv(stack)),
        ide=IDE_CURSOR if cursor else IDE_VSCODE,
    )
    try:
        template = TemplateResolver().get_template(category, config)
    except TemplateNotFoundError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({
            "name": template.name,
            "description": template.description,
            "files": [m.model_dump() for m in template.files],
        }, indent=2))
        return

    click.secho(f"📄 {template.name}", fg="cyan", bold=True)
    if template.description:
        click.echo(f"   {template.description}")
    for mapping in template.files:
        marker = " (substituted)" if mapping.substitute else ""
        click.echo(f"   • {mapping.destination}  ← {mapping.source}{marker}")
