"""
Backup snapshot model.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class BackupSnapshot(BaseModel):
    """A timestamped copy of the managed configuration tree.

    Attributes:
        timestamp:    Directory name, ``YYYYMMDD_HHMMSS`` (sortable).
        path:         Snapshot root directory.
        files:        Every file copied, relative to the project root.
    """

    timestamp: str
    path: Path
    files: list[str] = Field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.files)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "path": str(self.path),
            "files": self.files,
        }
