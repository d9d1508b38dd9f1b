"""
.gitignore management — append-only exclusion section.

The section is identified by its header line. If any ``# metacoding:``
marker already exists the file is left untouched; nothing the user
wrote is ever rewritten.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

GITIGNORE_FILE = ".gitignore"
SECTION_MARKER = "# metacoding:"
SECTION_HEADER = "# metacoding: AI coding assistant exclusions"
EXCLUDED_PATTERNS = (
    ".github/copilot-instructions.md",
    ".github/instructions/",
    ".vscode/copilot-instructions.md",
    ".idea/copilot-instructions.md",
)


def section_lines() -> list[str]:
    return [SECTION_HEADER, *EXCLUDED_PATTERNS]


def has_patterns(project_root: Path) -> bool:
    path = project_root / GITIGNORE_FILE
    if not path.is_file():
        return False
    return SECTION_MARKER in path.read_text(encoding="utf-8")


def update_gitignore(project_root: Path) -> bool:
    """Append the exclusion section if absent.

    Returns:
        True when the file was created or extended, False when the
        section was already present.
    """
    path = project_root / GITIGNORE_FILE
    existing = path.read_text(encoding="utf-8") if path.is_file() else ""

    if SECTION_MARKER in existing:
        logger.debug("%s already has the metacoding section", GITIGNORE_FILE)
        return False

    if not existing:
        prefix = ""
    elif existing.endswith("\n"):
        prefix = "\n"
    else:
        prefix = "\n\n"

    with path.open("a", encoding="utf-8") as fh:
        fh.write(prefix + "\n".join(section_lines()) + "\n")

    logger.info("Added AI assistant exclusions to %s", GITIGNORE_FILE)
    return True
