"""
Detection service — infer a project's category and tech stack.

Looks at marker files and ``package.json`` dependencies under an
explicit project root. Category inference is an ordered list of
(predicate, category) rules where the first match wins: framework
signals always outrank plain language signals.

Pure logic — reads the filesystem, never writes.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from metacoding.core.models.project import (
    CATEGORY_GENERAL,
    CATEGORY_NODE,
    CATEGORY_PYTHON,
    CATEGORY_REACT,
)

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"
VCS_DIR = ".git"
IDE_SETTINGS_DIR = ".vscode"

# ── Signals ─────────────────────────────────────────────────────

FRONTEND_DEPENDENCIES = ("react", "react-dom", "@types/react")
FRONTEND_FILES = (
    "src/App.tsx",
    "src/App.jsx",
    "public/index.html",
    "vite.config.ts",
    "vite.config.js",
)

BACKEND_DEPENDENCIES = ("express", "fastify", "koa", "@types/node", "nodemon")
BACKEND_FILES = ("server.js", "server.ts", "app.js", "app.ts")

PYTHON_FILES = (
    "requirements.txt",
    "pyproject.toml",
    "setup.py",
    "Pipfile",
    "poetry.lock",
    "main.py",
    "app.py",
)

# (dependency names, tag) in check order; tags are not exclusive
TECH_STACK_TAGS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("react",), "React"),
    (("typescript", "@types/node"), "TypeScript"),
    (("express",), "Express"),
    (("jest",), "Jest"),
    (("vite",), "Vite"),
    (("webpack",), "Webpack"),
    (("next",), "Next.js"),
)
PYTHON_TAG = "Python"
DEFAULT_TECH_STACK = ("TypeScript", "Jest")


@dataclass
class ProjectSignals:
    """What detection found in a project directory."""

    name: str
    category: str = CATEGORY_GENERAL
    has_git: bool = False
    has_vscode: bool = False
    has_manifest: bool = False
    tech_stack: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "category": self.category,
            "has_git": self.has_git,
            "has_vscode": self.has_vscode,
            "has_manifest": self.has_manifest,
            "tech_stack": self.tech_stack,
        }


# ── Manifest ────────────────────────────────────────────────────


def read_manifest_dependencies(project_root: Path) -> dict[str, str] | None:
    """Return merged dependencies + devDependencies from package.json.

    Returns None when there is no manifest or it cannot be parsed; a
    malformed manifest is "no signal", never an error.
    """
    path = project_root / MANIFEST_FILE
    if not path.is_file():
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring %s: top level is not an object", path)
        return None

    deps: dict[str, str] = {}
    for key in ("dependencies", "devDependencies"):
        section = data.get(key)
        if isinstance(section, dict):
            deps.update({str(k): str(v) for k, v in section.items()})
    return deps


def _any_exists(project_root: Path, names: tuple[str, ...]) -> bool:
    return any((project_root / name).exists() for name in names)


def _depends_on(deps: dict[str, str] | None, names: tuple[str, ...]) -> bool:
    return bool(deps) and any(name in deps for name in names)


# ── Category rules ──────────────────────────────────────────────

Predicate = Callable[[Path, "dict[str, str] | None"], bool]


def has_frontend_indicators(project_root: Path, deps: dict[str, str] | None) -> bool:
    return _depends_on(deps, FRONTEND_DEPENDENCIES) or _any_exists(project_root, FRONTEND_FILES)


def has_backend_indicators(project_root: Path, deps: dict[str, str] | None) -> bool:
    return _depends_on(deps, BACKEND_DEPENDENCIES) or _any_exists(project_root, BACKEND_FILES)


def has_python_indicators(project_root: Path, deps: dict[str, str] | None = None) -> bool:
    return _any_exists(project_root, PYTHON_FILES)


CATEGORY_RULES: tuple[tuple[Predicate, str], ...] = (
    (has_frontend_indicators, CATEGORY_REACT),
    (has_backend_indicators, CATEGORY_NODE),
    (has_python_indicators, CATEGORY_PYTHON),
)


def detect_category(project_root: Path) -> str:
    """Evaluate the category rules in order; first match wins."""
    deps = read_manifest_dependencies(project_root)
    for predicate, category in CATEGORY_RULES:
        if predicate(project_root, deps):
            logger.debug("Category '%s' matched by %s", category, predicate.__name__)
            return category
    return CATEGORY_GENERAL


def detect_tech_stack(project_root: Path) -> list[str]:
    """Derive tech-stack tags from the manifest and language markers."""
    deps = read_manifest_dependencies(project_root)
    tags: list[str] = []

    if deps:
        for names, tag in TECH_STACK_TAGS:
            if _depends_on(deps, names):
                tags.append(tag)

    if has_python_indicators(project_root):
        tags.append(PYTHON_TAG)

    if not tags:
        tags.extend(DEFAULT_TECH_STACK)
    return tags


def detect_project(project_root: Path) -> ProjectSignals:
    """Inspect ``project_root`` and summarize every signal found."""
    signals = ProjectSignals(
        name=project_root.resolve().name,
        category=detect_category(project_root),
        has_git=(project_root / VCS_DIR).exists(),
        has_vscode=(project_root / IDE_SETTINGS_DIR).exists(),
        has_manifest=(project_root / MANIFEST_FILE).exists(),
        tech_stack=detect_tech_stack(project_root),
    )
    logger.info(
        "Detected project '%s': category=%s stack=%s",
        signals.name, signals.category, signals.tech_stack,
    )
    return signals
