"""
Snapshot backups of the managed configuration tree.

Each snapshot is a directory under ``.backup/`` named by the UTC time
it was taken (``YYYYMMDD_HHMMSS``), holding a copy of ``.github/``.
Names are zero-padded, so lexicographic order is chronological order.
Only the newest ``KEEP_SNAPSHOTS`` are retained; directories whose
names do not match the pattern are never touched.
"""

from __future__ import annotations

import logging
import re
import shutil
from datetime import UTC, datetime, timedelta
from pathlib import Path

from metacoding.core.models.backup import BackupSnapshot
from metacoding.core.services.filesystem import MANAGED_DIR

logger = logging.getLogger(__name__)

BACKUP_ROOT = ".backup"
SNAPSHOT_FORMAT = "%Y%m%d_%H%M%S"
SNAPSHOT_NAME_RE = re.compile(r"^\d{8}_\d{6}$")
KEEP_SNAPSHOTS = 5


def snapshot_name(now: datetime | None = None) -> str:
    """Fixed-width, sortable name for a snapshot taken at ``now``."""
    moment = now or datetime.now(UTC)
    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.strftime(SNAPSHOT_FORMAT)


def is_snapshot_name(name: str) -> bool:
    return bool(SNAPSHOT_NAME_RE.match(name))


def backup_root(project_root: Path) -> Path:
    return project_root / BACKUP_ROOT


def list_files(directory: Path) -> list[Path]:
    """Every file below ``directory``, recursively, in sorted order."""
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.rglob("*") if p.is_file())


def create_snapshot(project_root: Path, *, now: datetime | None = None) -> BackupSnapshot:
    """Copy the managed tree into a new timestamped snapshot.

    An absent or empty managed tree still yields a valid (empty)
    snapshot directory. An existing snapshot is never reused: when the
    name for ``now`` is taken, the timestamp moves forward one second
    at a time until a free name is found.
    """
    moment = now or datetime.now(UTC)
    root = backup_root(project_root)
    timestamp = snapshot_name(moment)
    while (root / timestamp).exists():
        moment += timedelta(seconds=1)
        timestamp = snapshot_name(moment)

    snapshot_path = root / timestamp
    root.mkdir(parents=True, exist_ok=True)
    snapshot_path.mkdir()

    source = project_root / MANAGED_DIR
    files: list[str] = []
    if source.is_dir():
        shutil.copytree(source, snapshot_path / MANAGED_DIR)
        files = [p.relative_to(project_root).as_posix() for p in list_files(source)]

    logger.info("Snapshot %s created with %d file(s)", timestamp, len(files))
    return BackupSnapshot(timestamp=timestamp, path=snapshot_path, files=files)


def list_snapshots(project_root: Path) -> list[str]:
    """Snapshot names, newest first."""
    root = backup_root(project_root)
    if not root.is_dir():
        return []
    names = [c.name for c in root.iterdir() if c.is_dir() and is_snapshot_name(c.name)]
    return sorted(names, reverse=True)


def prune_snapshots(project_root: Path, keep: int = KEEP_SNAPSHOTS) -> list[str]:
    """Delete all but the ``keep`` newest snapshots. Returns deleted names."""
    stale = list_snapshots(project_root)[keep:]
    root = backup_root(project_root)
    for name in stale:
        shutil.rmtree(root / name)
        logger.debug("Removed old snapshot %s", name)
    if stale:
        logger.info("Pruned %d old snapshot(s)", len(stale))
    return stale
