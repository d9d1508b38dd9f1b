"""
Init use case — set up metacoding in a project directory.

Ties together IDE choice, project detection, configuration gathering,
template resolution, and the .gitignore / IDE collaborators.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from metacoding.core.errors import IdeOptionsError
from metacoding.core.models.project import (
    CATEGORIES,
    CATEGORY_LABELS,
    DEFAULT_DESCRIPTION,
    IDE_CURSOR,
    IDE_VSCODE,
    ProjectConfiguration,
    default_build_tool,
    default_tech_stack,
    default_test_framework,
)
from metacoding.core.services import cursor_rules, filesystem, gitignore, ide_settings
from metacoding.core.services.detection import ProjectSignals, detect_project
from metacoding.core.services.prompts import Prompter, Question, ask
from metacoding.core.services.template_resolver import TemplateResolver

logger = logging.getLogger(__name__)

IDE_CHOICES = [
    ("VS Code + GitHub Copilot (recommended for most users)", IDE_VSCODE),
    ("Cursor IDE (alternative AI-powered editor)", IDE_CURSOR),
]


@dataclass
class InitResult:
    """Result of the init use case."""

    ide: str = IDE_VSCODE
    category: str = ""
    config: ProjectConfiguration | None = None
    files: list[str] = field(default_factory=list)
    gitignore_updated: bool = False
    vscode_configured: bool = False
    cursor: cursor_rules.InstallResult | None = None
    warnings: list[str] = field(default_factory=list)
    cancelled: bool = False

    def to_dict(self) -> dict:
        if self.cancelled:
            return {"cancelled": True}
        return {
            "ide": self.ide,
            "category": self.category,
            "config": self.config.model_dump() if self.config else None,
            "files": self.files,
            "gitignore_updated": self.gitignore_updated,
            "vscode_configured": self.vscode_configured,
            "cursor": self.cursor.to_dict() if self.cursor else None,
            "warnings": self.warnings,
        }


def resolve_ide_choice(
    *,
    vscode: bool = False,
    cursor: bool = False,
    prompter: Prompter | None = None,
) -> str:
    """Explicit flag, else ask, else VS Code.

    Raises:
        IdeOptionsError: Both flags were given.
    """
    if vscode and cursor:
        raise IdeOptionsError("Cannot specify both --vscode and --cursor flags. Please choose one.")
    if vscode:
        return IDE_VSCODE
    if cursor:
        return IDE_CURSOR
    if prompter is None:
        return IDE_VSCODE
    return prompter.select(
        "ideChoice",
        "Which AI coding environment would you like to set up?",
        IDE_CHOICES,
        IDE_VSCODE,
    )


def default_configuration(
    signals: ProjectSignals, category: str, ide: str
) -> ProjectConfiguration:
    """Configuration used when nobody is asked."""
    return ProjectConfiguration(
        name=signals.name,
        description=DEFAULT_DESCRIPTION,
        tech_stack=tuple(default_tech_stack(category)),
        category=category,
        test_framework=default_test_framework(category),
        build_tool=default_build_tool(category),
        ide=ide,
    )


def _require_name(value: str) -> bool | str:
    return True if value.strip() else "Project name is required"


def prompt_configuration(
    prompter: Prompter, signals: ProjectSignals, category: str, ide: str
) -> ProjectConfiguration:
    """Ask the user for the project configuration."""
    answers = ask(prompter, [
        Question("name", "input", "Project name:", default=signals.name or "my-project",
                 validate=_require_name),
        Question("description", "input", "Project description:", default=DEFAULT_DESCRIPTION),
        Question("projectType", "list", "What type of project are you working on?",
                 choices=[(CATEGORY_LABELS[c], c) for c in CATEGORIES], default=category),
    ])
    chosen = answers["projectType"]

    answers.update(ask(prompter, [
        Question("techStack", "csv", "Tech stack (comma-separated):",
                 default=", ".join(default_tech_stack(chosen))),
        Question("enableTesting", "confirm", "Enable test automation features?", default=True),
    ]))

    return ProjectConfiguration(
        name=answers["name"].strip(),
        description=answers["description"],
        tech_stack=tuple(answers["techStack"]),
        category=chosen,
        test_framework=default_test_framework(chosen) if answers["enableTesting"] else None,
        build_tool=default_build_tool(chosen),
        ide=ide,
    )


def run_init(
    project_root: Path,
    *,
    template: str | None = None,
    force: bool = False,
    skip_vscode: bool = False,
    skip_git: bool = False,
    vscode: bool = False,
    cursor: bool = False,
    prompter: Prompter | None = None,
    resolver: TemplateResolver | None = None,
) -> InitResult:
    """Set up metacoding files in ``project_root``.

    Args:
        template: Category override; defaults to the detected category.
        force: Overwrite an existing setup without asking and use
            default answers instead of prompting.
        prompter: Interactive collaborator; ``None`` means
            non-interactive (defaults everywhere).

    Raises:
        IdeOptionsError: Conflicting IDE flags.
        TemplateNotFoundError: Unknown category.
    """
    resolver = resolver or TemplateResolver()
    interactive = None if force else prompter

    ide = resolve_ide_choice(vscode=vscode, cursor=cursor, prompter=interactive)
    result = InitResult(ide=ide)

    signals = detect_project(project_root)

    if filesystem.is_setup(project_root) and not force:
        proceed = prompter.confirm(
            "proceed",
            "metacoding is already set up in this directory. Do you want to reconfigure it?",
            False,
        ) if prompter else False
        if not proceed:
            logger.info("Reconfiguration declined")
            result.cancelled = True
            return result

    category = template or signals.category
    if interactive is None:
        config = default_configuration(signals, category, ide)
    else:
        config = prompt_configuration(interactive, signals, category, ide)
    result.config = config
    result.category = config.category

    filesystem.ensure_dir(project_root, filesystem.INSTRUCTIONS_DIR)
    tmpl, files = resolver.render_template(config.category, config)
    for file in files:
        filesystem.write_text(project_root, file.path, file.content)
        result.files.append(file.path)
    logger.info("Wrote %d file(s) for template '%s'", len(files), config.category)

    result.gitignore_updated = gitignore.update_gitignore(project_root)

    if ide == IDE_VSCODE:
        if not skip_vscode:
            ide_settings.update_settings(project_root, tmpl.vscode_settings)
            result.vscode_configured = True
    else:
        workflow = cursor_rules.generate_workflow_rules(resolver, config.category, config)
        rules = cursor_rules.generate_pattern_rules(resolver, config.category, config)
        backups = cursor_rules.backup_existing_rules(project_root) if force else []
        result.cursor = cursor_rules.install_rules(project_root, workflow, rules, overwrite=force)
        result.cursor.backups = backups
        if result.cursor.conflicts:
            result.warnings.append(
                "Existing Cursor rules were left untouched: " + ", ".join(result.cursor.conflicts)
            )

    if not skip_git and not signals.has_git:
        result.warnings.append("No git repository found. Consider running 'git init'.")

    return result
