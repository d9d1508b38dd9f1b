"""
Change detection — content fingerprints for installed files.

Fingerprints only ever compare inside one process, so the digest is
an implementation detail. A missing file always counts as changed.
"""

from __future__ import annotations

import hashlib
from pathlib import Path


def fingerprint(content: str) -> str:
    """Hex digest of text content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def file_fingerprint(path: Path) -> str | None:
    """Digest of a file's text, or None when it does not exist."""
    if not path.is_file():
        return None
    return fingerprint(path.read_text(encoding="utf-8"))


def has_changed(path: Path, original_content: str) -> bool:
    """True when ``path`` is missing or its content differs from ``original_content``."""
    current = file_fingerprint(path)
    if current is None:
        return True
    return current != fingerprint(original_content)
