"""
Validate use case — check an installed setup without changing it.

Checks: required files, IDE settings, git repository, and unresolved
template variables in the root document. With ``auto_fix`` missing
required files are restored from the resolved template set and IDE
settings are re-applied before validating again.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from metacoding.core.errors import MetacodingError, ValidationFailedError
from metacoding.core.models.validation import ValidationReport
from metacoding.core.services import filesystem, ide_settings
from metacoding.core.services.detection import VCS_DIR
from metacoding.core.services.template_resolver import TemplateResolver
from metacoding.core.use_cases.update import current_category, update_configuration

logger = logging.getLogger(__name__)

REQUIRED_FILES = (
    filesystem.ROOT_INSTRUCTIONS,
    f"{filesystem.INSTRUCTIONS_DIR}/code-review.instructions.md",
    f"{filesystem.INSTRUCTIONS_DIR}/docs-update.instructions.md",
    f"{filesystem.INSTRUCTIONS_DIR}/release.instructions.md",
    f"{filesystem.INSTRUCTIONS_DIR}/test-runner.instructions.md",
)

_UNRESOLVED = re.compile(r"\{\{[^{}]*\}\}")


def _check_files(project_root: Path, report: ValidationReport) -> None:
    missing = [f for f in REQUIRED_FILES if not filesystem.file_exists(project_root, f)]
    for rel in missing:
        report.add(f"File {rel}", "fail", "Missing required file", fixable=True)
    if not missing:
        report.add("File structure")


def _check_settings(project_root: Path, report: ValidationReport, strict: bool) -> None:
    path = project_root / ide_settings.SETTINGS_FILE
    if not path.is_file():
        report.add("VS Code settings file", "fail" if strict else "warn", "File not found",
                   fixable=True)
        return

    try:
        settings = json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        report.add("VS Code configuration", "fail", "Error reading settings file", fixable=True)
        return
    if not isinstance(settings, dict):
        report.add("VS Code configuration", "fail", "Settings file is not a JSON object",
                   fixable=True)
        return

    missing = [k for k in ide_settings.REQUIRED_SETTINGS if settings.get(k) is not True]
    for key in missing:
        report.add(f"VS Code setting '{key}'", "fail" if strict else "warn", "Not configured",
                   fixable=True)
    if not missing:
        report.add("VS Code configuration")


def _check_git(project_root: Path, report: ValidationReport, strict: bool) -> None:
    if (project_root / VCS_DIR).exists():
        report.add("Git repository")
    else:
        report.add("Git repository", "fail" if strict else "warn", "No Git repository found")


def _check_integrity(project_root: Path, report: ValidationReport) -> None:
    if not filesystem.file_exists(project_root, filesystem.ROOT_INSTRUCTIONS):
        report.add("Template integrity", "warn", "Main instruction file missing")
        return
    content = filesystem.read_text(project_root, filesystem.ROOT_INSTRUCTIONS)
    leftover = sorted(set(_UNRESOLVED.findall(content)))
    if leftover:
        report.add("Template integrity", "fail",
                   f"Unprocessed template variables found: {', '.join(leftover)}")
    else:
        report.add("Template integrity")


def collect_checks(project_root: Path, *, strict: bool = False) -> ValidationReport:
    """Run every check and return the report (never raises on findings)."""
    report = ValidationReport()
    _check_files(project_root, report)
    _check_settings(project_root, report, strict)
    _check_git(project_root, report, strict)
    _check_integrity(project_root, report)
    logger.info("Validation: %d/%d checks passed", report.passed, report.total)
    return report


def fix_setup(
    project_root: Path,
    *,
    template: str | None = None,
    resolver: TemplateResolver | None = None,
) -> list[str]:
    """Restore missing required files and re-apply IDE settings.

    Existing files are never overwritten. Returns what was fixed.
    """
    resolver = resolver or TemplateResolver()
    fixed: list[str] = []

    category = current_category(project_root, template)
    config = update_configuration(project_root, category)
    tmpl, files = resolver.render_template(category, config)

    for file in files:
        if file.path in REQUIRED_FILES and not filesystem.file_exists(project_root, file.path):
            filesystem.write_text(project_root, file.path, file.content)
            fixed.append(file.path)

    if not ide_settings.is_configured(project_root):
        ide_settings.update_settings(project_root, tmpl.vscode_settings)
        fixed.append(ide_settings.SETTINGS_FILE)

    logger.info("Auto-fix restored %d item(s)", len(fixed))
    return fixed


def run_validate(
    project_root: Path,
    *,
    strict: bool = False,
    auto_fix: bool = False,
    template: str | None = None,
    resolver: TemplateResolver | None = None,
) -> ValidationReport:
    """Validate the setup in ``project_root``.

    Raises:
        ValidationFailedError: Any check failed, or (strict) any warned.
    """
    report = collect_checks(project_root, strict=strict)

    if auto_fix and any(c.fixable and c.status != "pass" for c in report.checks):
        try:
            fixed = fix_setup(project_root, template=template, resolver=resolver)
        except MetacodingError as e:
            logger.warning("Auto-fix skipped: %s", e)
            fixed = []
        report = collect_checks(project_root, strict=strict)
        report.fixed = fixed

    if report.has_errors:
        raise ValidationFailedError("Validation failed with errors", report)
    if strict and report.has_warnings:
        raise ValidationFailedError("Validation completed with warnings", report)
    return report
