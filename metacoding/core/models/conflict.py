"""
Conflict models — divergence between installed files and templates.

A ``Conflict`` is paired with exactly one ``Resolution`` inside a
``ConflictPair``; the two never travel as separate parallel lists.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# Filename prefix for a user's preserved copy during a "keep" resolution
SENTINEL_PREFIX = "user."

ResolutionAction = Literal["keep", "replace", "skip"]
GlobalStrategy = Literal["keep", "replace", "individual", "cancel"]


class Conflict(BaseModel):
    """An installed file whose content differs from the canonical template.

    ``destination`` is relative to the project root.
    """

    destination: str
    template_content: str
    user_content: str
    has_changes: bool = True


class Resolution(BaseModel):
    """How one conflict is to be resolved.

    ``preserved_as`` is only set for ``keep`` and names the sibling
    path (relative to the project root) that receives the user's copy.
    """

    action: ResolutionAction
    preserved_as: str | None = None
    applies_to_all: bool = False


class ConflictPair(BaseModel):
    conflict: Conflict
    resolution: Resolution


class ApplyResult(BaseModel):
    """Outcome of applying a batch of resolutions."""

    updated: list[str] = Field(default_factory=list)
    preserved: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
