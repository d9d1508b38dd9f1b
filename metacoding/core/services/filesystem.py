"""
Filesystem primitives used by the engine.

Every path argument is relative to ``root`` unless it is already
absolute. Errors are not caught here: ``OSError`` (permission denied,
missing file, disk full) propagates to the caller.
"""

from __future__ import annotations

import logging
import shutil
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger(__name__)

MANAGED_DIR = ".github"
ROOT_INSTRUCTIONS = ".github/copilot-instructions.md"
INSTRUCTIONS_DIR = ".github/instructions"


def _abs(root: Path, path: str | Path) -> Path:
    p = Path(path)
    return p if p.is_absolute() else root / p


def is_setup(root: Path) -> bool:
    """True when both the root instructions file and instructions dir exist."""
    return (root / ROOT_INSTRUCTIONS).is_file() and (root / INSTRUCTIONS_DIR).is_dir()


def dir_exists(root: Path, path: str | Path) -> bool:
    return _abs(root, path).is_dir()


def file_exists(root: Path, path: str | Path) -> bool:
    return _abs(root, path).exists()


def ensure_dir(root: Path, path: str | Path) -> Path:
    """Create a directory (and parents) if missing. Idempotent."""
    target = _abs(root, path)
    target.mkdir(parents=True, exist_ok=True)
    return target


def read_text(root: Path, path: str | Path) -> str:
    """Read a UTF-8 text file. Raises if it does not exist."""
    return _abs(root, path).read_text(encoding="utf-8")


def write_text(root: Path, path: str | Path, content: str) -> Path:
    """Write a UTF-8 text file, creating parent directories."""
    target = _abs(root, path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    logger.debug("Wrote %s (%d bytes)", target, len(content))
    return target


def copy(root: Path, source: str | Path, destination: str | Path) -> Path:
    """Copy a file or a whole directory tree."""
    src = _abs(root, source)
    dst = _abs(root, destination)
    dst.parent.mkdir(parents=True, exist_ok=True)
    if src.is_dir():
        shutil.copytree(src, dst, dirs_exist_ok=True)
    else:
        shutil.copy2(src, dst)
    return dst


def move(root: Path, source: str | Path, destination: str | Path) -> Path:
    src = _abs(root, source)
    dst = _abs(root, destination)
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(src), str(dst))
    return dst


def list_entries(root: Path, path: str | Path) -> list[str]:
    """Names inside a directory, sorted; empty if the directory is absent."""
    target = _abs(root, path)
    if not target.is_dir():
        return []
    return sorted(child.name for child in target.iterdir())


def backup_file(root: Path, path: str | Path) -> Path:
    """Copy a single file to ``<file>.backup-<timestamp>`` and return it."""
    src = _abs(root, path)
    stamp = datetime.now(UTC).strftime("%Y-%m-%dT%H-%M-%S-%f")
    dst = src.with_name(f"{src.name}.backup-{stamp}")
    shutil.copy2(src, dst)
    logger.info("Backed up %s → %s", src, dst.name)
    return dst


def relative(root: Path, path: Path) -> str:
    """POSIX-style path of ``path`` relative to ``root``."""
    return path.relative_to(root).as_posix()
