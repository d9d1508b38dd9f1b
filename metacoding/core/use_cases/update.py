"""
Update use case — re-apply templates to an existing setup.

Steps: pick the category, render the canonical files, detect conflicts
against what is installed, decide them, snapshot the managed tree,
apply the decisions, write everything that was not in conflict, refresh
IDE settings, and prune old snapshots. A cancelled update writes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from metacoding.core.errors import SetupNotFoundError
from metacoding.core.models.backup import BackupSnapshot
from metacoding.core.models.conflict import ApplyResult
from metacoding.core.models.project import (
    DEFAULT_DESCRIPTION,
    ProjectConfiguration,
    default_build_tool,
    default_test_framework,
)
from metacoding.core.services import backup, filesystem, ide_settings
from metacoding.core.services.conflict_resolution import (
    apply_resolutions,
    decide,
    detect_conflicts,
    resolve_all,
)
from metacoding.core.services.detection import detect_category, detect_project
from metacoding.core.services.prompts import Prompter, ScriptedPrompter
from metacoding.core.services.template_resolver import TemplateResolver

logger = logging.getLogger(__name__)


@dataclass
class UpdateSummary:
    """Result of the update use case."""

    category: str = ""
    snapshot: BackupSnapshot | None = None
    files_updated: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)
    resolution: ApplyResult = field(default_factory=ApplyResult)
    pruned: list[str] = field(default_factory=list)

    @property
    def backup_created(self) -> bool:
        return self.snapshot is not None

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "backup": self.snapshot.to_dict() if self.snapshot else None,
            "files_updated": self.files_updated,
            "conflicts": self.conflicts,
            "resolution": self.resolution.model_dump(),
            "pruned": self.pruned,
        }


def current_category(project_root: Path, override: str | None = None) -> str:
    """Category to update against.

    Raises:
        SetupNotFoundError: No override and no managed tree.
    """
    if override:
        return override
    if not filesystem.dir_exists(project_root, filesystem.MANAGED_DIR):
        raise SetupNotFoundError('No metacoding setup found. Run "metacoding init" first.')
    return detect_category(project_root)


def existing_managed_files(project_root: Path) -> list[str]:
    """Root document plus every entry of the instructions directory."""
    files = []
    if filesystem.file_exists(project_root, filesystem.ROOT_INSTRUCTIONS):
        files.append(filesystem.ROOT_INSTRUCTIONS)
    for name in filesystem.list_entries(project_root, filesystem.INSTRUCTIONS_DIR):
        files.append(f"{filesystem.INSTRUCTIONS_DIR}/{name}")
    return files


def update_configuration(project_root: Path, category: str) -> ProjectConfiguration:
    """Rebuild the configuration from what the project looks like now."""
    signals = detect_project(project_root)
    return ProjectConfiguration(
        name=signals.name,
        description=DEFAULT_DESCRIPTION,
        tech_stack=tuple(signals.tech_stack),
        category=category,
        test_framework=default_test_framework(category),
        build_tool=default_build_tool(category),
    )


def run_update(
    project_root: Path,
    *,
    template: str | None = None,
    create_backup: bool = True,
    force: bool = False,
    prompter: Prompter | None = None,
    resolver: TemplateResolver | None = None,
) -> UpdateSummary:
    """Bring an existing setup in line with the current templates.

    Args:
        template: Category override.
        create_backup: Snapshot ``.github/`` first.
        force: Replace every conflicted file without asking.
        prompter: Collaborator used to decide conflicts.

    Raises:
        SetupNotFoundError: Nothing to update.
        UpdateCancelledError: The user cancelled during conflict resolution.
        TemplateNotFoundError: Unknown category.
    """
    resolver = resolver or TemplateResolver()
    # Non-interactive runs keep user edits (preserved as user.<name>)
    prompter = prompter or ScriptedPrompter({"global_choice": "keep"})

    category = current_category(project_root, template)
    summary = UpdateSummary(category=category)
    logger.info("Updating with template '%s'", category)

    config = update_configuration(project_root, category)
    tmpl, files = resolver.render_template(category, config)

    conflicts = detect_conflicts(project_root, files, existing_managed_files(project_root))
    summary.conflicts = [c.destination for c in conflicts]

    pairs = resolve_all(conflicts, "replace") if force else decide(conflicts, prompter)

    # First write of the run
    if create_backup:
        summary.snapshot = backup.create_snapshot(project_root)

    summary.resolution = apply_resolutions(project_root, pairs)

    conflicted = set(summary.conflicts)
    for file in files:
        if file.path in conflicted:
            continue
        filesystem.write_text(project_root, file.path, file.content)
        summary.files_updated.append(file.path)

    ide_settings.update_settings(project_root, tmpl.vscode_settings)
    summary.pruned = backup.prune_snapshots(project_root)

    logger.info(
        "Update complete: %d written, %d conflict(s)",
        len(summary.files_updated), len(conflicts),
    )
    return summary
