"""
Project configuration — what the user told us about their project.

Built once per invocation (from prompts or defaults) and never mutated
afterwards. The resolver and the substitution engine both read it.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# ── Categories ──────────────────────────────────────────────────

CATEGORY_GENERAL = "general"
CATEGORY_REACT = "react"
CATEGORY_NODE = "node"
CATEGORY_PYTHON = "python"
CATEGORY_JAVASCRIPT = "javascript"

# Shared language pack: has a descriptor, never offered as a category
CATEGORY_TYPESCRIPT = "typescript"

CATEGORIES = (
    CATEGORY_REACT,
    CATEGORY_NODE,
    CATEGORY_PYTHON,
    CATEGORY_JAVASCRIPT,
    CATEGORY_GENERAL,
)

CATEGORY_LABELS = {
    CATEGORY_REACT: "React/Frontend Application",
    CATEGORY_NODE: "Node.js/Backend Application",
    CATEGORY_PYTHON: "Python Application",
    CATEGORY_JAVASCRIPT: "JavaScript Application",
    CATEGORY_GENERAL: "General/Other",
}

# ── IDE targets ─────────────────────────────────────────────────

IDE_VSCODE = "vscode"
IDE_CURSOR = "cursor"

IdeChoice = Literal["vscode", "cursor"]

DEFAULT_DESCRIPTION = "A guided development project using metacoding workflow"


class ProjectConfiguration(BaseModel):
    """Immutable description of the project being configured.

    ``tech_stack`` keeps the user's order (it is rendered joined), but
    membership checks treat it as a set.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = DEFAULT_DESCRIPTION
    tech_stack: tuple[str, ...] = Field(default_factory=tuple)
    category: str = CATEGORY_GENERAL
    test_framework: str | None = None
    build_tool: str | None = None
    ide: IdeChoice | None = None

    def uses(self, tag: str) -> bool:
        """Check whether a tech-stack tag is present."""
        return tag in set(self.tech_stack)

    @property
    def effective_ide(self) -> str:
        """IDE target, defaulting to VS Code when none was chosen."""
        return self.ide or IDE_VSCODE


def default_tech_stack(category: str) -> list[str]:
    """Tech-stack suggestion offered for a category."""
    return {
        CATEGORY_REACT: ["React", "TypeScript", "Jest", "Vite"],
        CATEGORY_NODE: ["Node.js", "TypeScript", "Express", "Jest"],
        CATEGORY_PYTHON: ["Python", "FastAPI", "Pytest"],
    }.get(category, ["TypeScript", "Jest"])


def default_test_framework(category: str) -> str:
    return {
        CATEGORY_REACT: "Jest + React Testing Library",
        CATEGORY_NODE: "Jest",
        CATEGORY_PYTHON: "Pytest",
    }.get(category, "Jest")


def default_build_tool(category: str) -> str:
    return {
        CATEGORY_REACT: "Vite",
        CATEGORY_NODE: "TypeScript Compiler",
        CATEGORY_PYTHON: "Poetry",
    }.get(category, "TypeScript Compiler")
