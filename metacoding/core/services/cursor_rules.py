"""
Cursor rules — translate instruction documents into ``.mdc`` rule files.

Cursor reads rules from ``.cursor/rules/*.mdc``. Each file carries a
small YAML frontmatter (description, glob patterns, alwaysApply) and a
Markdown body. The root instructions document becomes
``workflow.mdc`` (always applied); every other instruction document
becomes a rule scoped to a glob derived from its filename.

Existing rule files are never overwritten silently: installation
reports them as conflicts unless the caller backs them up first and
asks to overwrite.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from metacoding import __version__
from metacoding.core.models.project import (
    CATEGORY_NODE,
    CATEGORY_PYTHON,
    CATEGORY_REACT,
    CATEGORY_TYPESCRIPT,
    ProjectConfiguration,
)
from metacoding.core.services import filesystem
from metacoding.core.services.substitution import substitute
from metacoding.core.services.template_resolver import ROOT_DOCUMENT, TemplateResolver

logger = logging.getLogger(__name__)

RULES_DIR = ".cursor/rules"
RULE_SUFFIX = ".mdc"
WORKFLOW_RULE = "workflow.mdc"
WORKFLOW_PATTERN = "**/*"
RULES_TITLE = "# Cursor AI Development Rules"

# Applied in order; "GitHub Copilot" must go before bare "Copilot"
_REBRANDING = (
    (re.compile(r"# GitHub Copilot", re.IGNORECASE), "# Cursor AI"),
    (re.compile(r"GitHub Copilot"), "Cursor AI"),
    (re.compile(r"Copilot"), "Cursor AI"),
    (re.compile(r"\.vscode"), ".cursor"),
    (re.compile(r"Visual Studio Code"), "Cursor IDE"),
    (re.compile(r"VS Code"), "Cursor IDE"),
)

_TEST_PATTERNS = {
    CATEGORY_TYPESCRIPT: "**/*.test.ts",
    CATEGORY_NODE: "**/*.test.ts",
    CATEGORY_REACT: "**/*.test.{tsx,ts}",
    CATEGORY_PYTHON: "**/test_*.py",
}

_CATEGORY_PATTERNS = {
    CATEGORY_TYPESCRIPT: "**/*.{ts,js}",
    CATEGORY_NODE: "**/*.{ts,js}",
    CATEGORY_REACT: "**/*.{tsx,jsx,ts,js}",
    CATEGORY_PYTHON: "**/*.py",
}


@dataclass
class PatternRule:
    """One generated ``.mdc`` file."""

    filename: str
    pattern: str
    content: str


@dataclass
class InstallResult:
    success: bool
    written: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)
    backups: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "written": self.written,
            "conflicts": self.conflicts,
            "backups": self.backups,
        }


# ── Text transforms ─────────────────────────────────────────────


def rebrand(content: str) -> str:
    """Replace Copilot / VS Code references with their Cursor equivalents."""
    for pattern, replacement in _REBRANDING:
        content = pattern.sub(replacement, content)
    return content


def rule_filename(instruction_name: str) -> str:
    """``react.testing.instructions.md`` → ``react-testing-instructions.mdc``."""
    stem = PurePosixPath(instruction_name).name
    if stem.endswith(".md"):
        stem = stem[: -len(".md")]
    clean = re.sub(r"[^a-zA-Z0-9-]", "-", stem)
    clean = re.sub(r"-+", "-", clean).strip("-").lower()
    return f"{clean}{RULE_SUFFIX}"


def file_pattern(instruction_name: str, category: str) -> str:
    """Glob a rule applies to, from the document name and the category."""
    name = PurePosixPath(instruction_name).name.lower()
    if name.startswith("typescript") or name.startswith("ts."):
        return "**/*.ts"
    if "test" in name:
        return _TEST_PATTERNS.get(category, "**/*.test.*")
    if name.startswith("react"):
        return "**/*.{tsx,jsx}"
    if name.startswith("python"):
        return "**/*.py"
    return _CATEGORY_PATTERNS.get(category, WORKFLOW_PATTERN)


def rules_header() -> str:
    return (
        "<!--\n"
        f"Generated by metacoding v{__version__}\n"
        "Do not edit manually - regenerate using metacoding update\n"
        "-->\n\n"
        f"{RULES_TITLE}"
    )


def mdc_content(body: str, pattern: str) -> str:
    """Wrap a rule body in frontmatter."""
    always = pattern == WORKFLOW_PATTERN
    description = (
        "General workflow and development rules" if always else f"AI rules for {pattern} files"
    )
    frontmatter = (
        "---\n"
        f'description: "{description}"\n'
        f'patterns: ["{pattern}"]\n'
        f"alwaysApply: {'true' if always else 'false'}\n"
        "---\n\n"
    )
    return frontmatter + body


# ── Generation ──────────────────────────────────────────────────


def generate_workflow_rules(
    resolver: TemplateResolver, category: str, config: ProjectConfiguration
) -> str:
    """Body of ``workflow.mdc``: the substituted root document, rebranded."""
    root = next(
        (m for m in resolver.instruction_mappings(category, config)
         if PurePosixPath(m.source).name == ROOT_DOCUMENT),
        None,
    )
    if root is None:
        logger.warning("No root instructions document for '%s'; using default rules", category)
        body = (
            "# Default Cursor AI Rules\n\n"
            "No specific instructions found for this project type.\n"
        )
        return f"{rules_header()}\n\n{body}"

    content = substitute(resolver.load(root).content, config)
    return f"{rules_header()}\n\n<!-- Source: {root.source} -->\n{rebrand(content)}"


def generate_pattern_rules(
    resolver: TemplateResolver, category: str, config: ProjectConfiguration | None = None
) -> list[PatternRule]:
    """One rule per instruction document other than the root document."""
    by_destination = {m.destination: m for m in resolver.instruction_mappings(category, config)}
    rules: list[PatternRule] = []
    for mapping in by_destination.values():
        name = PurePosixPath(mapping.destination).name
        if PurePosixPath(mapping.source).name == ROOT_DOCUMENT:
            continue
        pattern = file_pattern(name, category)
        body = f"{rules_header()}\n\n{rebrand(resolver.load(mapping).content)}"
        rules.append(PatternRule(
            filename=rule_filename(name),
            pattern=pattern,
            content=mdc_content(body, pattern),
        ))
    return rules


# ── Installation ────────────────────────────────────────────────


def existing_rules(project_root: Path) -> list[str]:
    """Rule files already present, relative to the project root."""
    return [
        f"{RULES_DIR}/{name}"
        for name in filesystem.list_entries(project_root, RULES_DIR)
        if name.endswith(RULE_SUFFIX)
    ]


def backup_existing_rules(project_root: Path) -> list[str]:
    """Copy each existing ``.mdc`` aside; returns the backup paths."""
    backups = []
    for rel in existing_rules(project_root):
        backup = filesystem.backup_file(project_root, rel)
        backups.append(filesystem.relative(project_root, backup))
    return backups


def install_rules(
    project_root: Path,
    workflow: str,
    rules: list[PatternRule],
    *,
    overwrite: bool = False,
) -> InstallResult:
    """Write ``workflow.mdc`` and the pattern rules.

    With ``overwrite=False`` nothing is written if any target exists;
    the existing targets are returned as conflicts instead.
    """
    targets = [(f"{RULES_DIR}/{WORKFLOW_RULE}", mdc_content(workflow, WORKFLOW_PATTERN))]
    targets += [(f"{RULES_DIR}/{rule.filename}", rule.content) for rule in rules]

    if not overwrite:
        conflicts = [rel for rel, _ in targets if filesystem.file_exists(project_root, rel)]
        if conflicts:
            logger.warning("Cursor rules already exist: %s", ", ".join(conflicts))
            return InstallResult(success=False, conflicts=conflicts)

    filesystem.ensure_dir(project_root, RULES_DIR)
    result = InstallResult(success=True)
    for rel, content in targets:
        filesystem.write_text(project_root, rel, content)
        result.written.append(rel)

    logger.info("Installed %d Cursor rule file(s)", len(result.written))
    return result
