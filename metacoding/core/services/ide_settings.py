"""
IDE settings — merge required keys into ``.vscode/settings.json``.

Existing user keys are preserved. The two instruction-file keys are
always forced to ``true``; template-provided settings are layered
underneath them. An unparseable settings file is copied aside as
``settings.json.backup-<timestamp>`` and replaced.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from metacoding.core.services import filesystem

logger = logging.getLogger(__name__)

SETTINGS_DIR = ".vscode"
SETTINGS_FILE = ".vscode/settings.json"

REQUIRED_SETTINGS: dict[str, Any] = {
    "github.copilot.chat.codeGeneration.useInstructionFiles": True,
    "chat.promptFiles": True,
}


def read_settings(project_root: Path) -> dict[str, Any]:
    """Current settings, or ``{}`` when missing or unparseable."""
    path = project_root / SETTINGS_FILE
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def is_configured(project_root: Path) -> bool:
    """True when every required key is present and ``true``."""
    settings = read_settings(project_root)
    return all(settings.get(key) is True for key in REQUIRED_SETTINGS)


def has_settings_dir(project_root: Path) -> bool:
    return (project_root / SETTINGS_DIR).is_dir()


def update_settings(
    project_root: Path, extra: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Merge required (and template) settings into the settings file.

    Returns the merged settings as written.
    """
    path = project_root / SETTINGS_FILE
    existing: dict[str, Any] = {}

    if path.is_file():
        try:
            loaded = json.loads(path.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Malformed %s (%s); backing up and starting fresh", SETTINGS_FILE, e)
            filesystem.backup_file(project_root, SETTINGS_FILE)
            loaded = {}
        if isinstance(loaded, dict):
            existing = loaded
        else:
            logger.warning("%s is not a JSON object; backing up and starting fresh", SETTINGS_FILE)
            filesystem.backup_file(project_root, SETTINGS_FILE)

    merged = {**existing, **(extra or {}), **REQUIRED_SETTINGS}
    filesystem.write_text(project_root, SETTINGS_FILE, json.dumps(merged, indent=2) + "\n")
    logger.info("Updated %s (%d keys)", SETTINGS_FILE, len(merged))
    return merged
