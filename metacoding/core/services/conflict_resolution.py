"""
Conflict resolution — reconcile user edits with canonical templates.

An update run goes through three phases:

    detect   read-only; a conflict is an installed file whose content
             differs from the canonical rendered template
    decide   one global strategy (keep / replace / individual / cancel),
             expanded into one Resolution per Conflict
    apply    per pair: ``keep`` moves the user's file to a ``user.``
             sibling and writes canonical content; ``replace`` overwrites;
             ``skip`` leaves the file alone

"keep" therefore never leaves the user's content in place: it is
preserved under the sentinel name and the destination always ends up
canonical. A copy left by an earlier keep is saved first as
``user.<name>.backup-<timestamp>``. A failure during apply propagates
immediately; resolutions already applied earlier in the batch stay
applied.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Iterable

from metacoding.core.errors import UpdateCancelledError
from metacoding.core.models.conflict import (
    SENTINEL_PREFIX,
    ApplyResult,
    Conflict,
    ConflictPair,
    Resolution,
    ResolutionAction,
)
from metacoding.core.models.template import GeneratedFile
from metacoding.core.services import filesystem
from metacoding.core.services.change_detection import has_changed
from metacoding.core.services.prompts import Prompter

logger = logging.getLogger(__name__)

GLOBAL_CHOICES = [
    ("Keep my versions (save as user.filename)", "keep"),
    ("Replace with template versions", "replace"),
    ("Review each conflict individually", "individual"),
    ("Cancel update", "cancel"),
]

ITEM_CHOICES = [
    ("Keep my version (save as user.filename)", "keep"),
    ("Replace with template version", "replace"),
    ("Skip this file", "skip"),
]


def user_file_name(destination: str) -> str:
    """Sibling path holding a preserved user copy: ``dir/user.<name>``."""
    path = PurePosixPath(destination)
    return str(path.with_name(f"{SENTINEL_PREFIX}{path.name}"))


# ── Detect ──────────────────────────────────────────────────────


def detect_conflicts(
    project_root: Path,
    files: Iterable[GeneratedFile],
    existing: Iterable[str] | None = None,
) -> list[Conflict]:
    """Find installed files that diverge from their canonical content.

    Args:
        project_root: Project directory.
        files: Canonical rendered template files.
        existing: Optional allow-list of installed destinations to
            consider; by default every destination present on disk is.
    """
    allowed = set(existing) if existing is not None else None
    conflicts: list[Conflict] = []

    for file in files:
        if allowed is not None and file.path not in allowed:
            continue
        target = project_root / file.path
        if not target.is_file():
            continue
        if has_changed(target, file.content):
            conflicts.append(Conflict(
                destination=file.path,
                template_content=file.content,
                user_content=target.read_text(encoding="utf-8"),
            ))

    logger.info("Detected %d conflict(s)", len(conflicts))
    return conflicts


# ── Decide ──────────────────────────────────────────────────────


def _resolution(conflict: Conflict, action: ResolutionAction, applies_to_all: bool) -> Resolution:
    return Resolution(
        action=action,
        preserved_as=user_file_name(conflict.destination) if action == "keep" else None,
        applies_to_all=applies_to_all,
    )


def resolve_all(conflicts: list[Conflict], action: ResolutionAction) -> list[ConflictPair]:
    """Pair every conflict with the same resolution."""
    return [
        ConflictPair(conflict=c, resolution=_resolution(c, action, True))
        for c in conflicts
    ]


def decide(conflicts: list[Conflict], prompter: Prompter) -> list[ConflictPair]:
    """Ask for a strategy and pair each conflict with its resolution.

    Raises:
        UpdateCancelledError: The user chose to cancel.
    """
    if not conflicts:
        return []

    choice = prompter.select(
        "global_choice",
        f"Found {len(conflicts)} conflict(s). How would you like to handle them?",
        GLOBAL_CHOICES,
    )
    logger.debug("Conflict strategy: %s", choice)

    if choice == "cancel":
        raise UpdateCancelledError()

    if choice == "individual":
        pairs: list[ConflictPair] = []
        for conflict in conflicts:
            action = prompter.select(
                "choice", f"Conflict in {conflict.destination}:", ITEM_CHOICES
            )
            pairs.append(ConflictPair(
                conflict=conflict, resolution=_resolution(conflict, action, False)
            ))
        return pairs

    return resolve_all(conflicts, choice)


# ── Apply ───────────────────────────────────────────────────────


def apply_resolutions(project_root: Path, pairs: list[ConflictPair]) -> ApplyResult:
    """Carry out each paired resolution in order."""
    result = ApplyResult()

    for pair in pairs:
        conflict, resolution = pair.conflict, pair.resolution
        destination = conflict.destination

        if resolution.action == "keep":
            preserved = resolution.preserved_as or user_file_name(destination)
            if filesystem.file_exists(project_root, preserved):
                # Copy from an earlier keep
                filesystem.backup_file(project_root, preserved)
            filesystem.move(project_root, destination, preserved)
            filesystem.write_text(project_root, destination, conflict.template_content)
            result.preserved.append(preserved)
            result.updated.append(destination)
            logger.info("Kept user copy of %s as %s", destination, preserved)
        elif resolution.action == "replace":
            filesystem.write_text(project_root, destination, conflict.template_content)
            result.updated.append(destination)
            logger.info("Replaced %s with template version", destination)
        else:
            result.skipped.append(destination)
            logger.info("Skipped %s", destination)

    return result
