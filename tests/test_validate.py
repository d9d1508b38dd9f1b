"""
Tests for the validate use case.
"""

from pathlib import Path

import pytest

from metacoding.core.errors import ValidationFailedError
from metacoding.core.use_cases.init import run_init
from metacoding.core.use_cases.validate import REQUIRED_FILES, collect_checks, run_validate

ROOT_DOC = ".github/copilot-instructions.md"
RELEASE = ".github/instructions/release.instructions.md"


@pytest.fixture
def valid_project(project: Path) -> Path:
    (project / ".git").mkdir()
    run_init(project)
    return project


def _status(report, check: str) -> str:
    return next(c.status for c in report.checks if c.check == check)


class TestChecks:
    def test_valid_setup(self, valid_project: Path):
        report = run_validate(valid_project)
        assert not report.has_errors
        assert not report.has_warnings
        assert report.passed == report.total == 4

    def test_required_files(self):
        assert len(REQUIRED_FILES) == 5
        assert REQUIRED_FILES[0] == ROOT_DOC

    def test_missing_file_fails(self, valid_project: Path):
        (valid_project / RELEASE).unlink()
        with pytest.raises(ValidationFailedError) as exc:
            run_validate(valid_project)
        assert _status(exc.value.report, f"File {RELEASE}") == "fail"

    def test_missing_git_warns(self, valid_project: Path):
        (valid_project / ".git").rmdir()
        report = run_validate(valid_project)
        assert _status(report, "Git repository") == "warn"

    def test_missing_git_strict_fails(self, valid_project: Path):
        (valid_project / ".git").rmdir()
        with pytest.raises(ValidationFailedError):
            run_validate(valid_project, strict=True)

    def test_missing_settings(self, valid_project: Path):
        (valid_project / ".vscode" / "settings.json").unlink()
        report = collect_checks(valid_project)
        assert _status(report, "VS Code settings file") == "warn"
        strict = collect_checks(valid_project, strict=True)
        assert _status(strict, "VS Code settings file") == "fail"

    def test_unconfigured_setting(self, valid_project: Path):
        (valid_project / ".vscode" / "settings.json").write_text('{"chat.promptFiles": true}')
        report = collect_checks(valid_project)
        key = "github.copilot.chat.codeGeneration.useInstructionFiles"
        assert _status(report, f"VS Code setting '{key}'") == "warn"

    def test_unreadable_settings_fail(self, valid_project: Path):
        (valid_project / ".vscode" / "settings.json").write_text("{ nope")
        report = collect_checks(valid_project)
        assert _status(report, "VS Code configuration") == "fail"

    def test_unresolved_variables(self, valid_project: Path):
        (valid_project / ROOT_DOC).write_text("# {{PROJECT_NAME}}\n")
        with pytest.raises(ValidationFailedError) as exc:
            run_validate(valid_project)
        check = next(c for c in exc.value.report.checks if c.check == "Template integrity")
        assert "{{PROJECT_NAME}}" in check.message

    def test_report_to_dict(self, valid_project: Path):
        data = run_validate(valid_project).to_dict()
        assert data["valid"] is True
        assert data["passed"] == 4


class TestAutoFix:
    def test_restores_missing_file(self, valid_project: Path):
        (valid_project / RELEASE).unlink()
        report = run_validate(valid_project, auto_fix=True)
        assert RELEASE in report.fixed
        assert (valid_project / RELEASE).is_file()
        assert not report.has_errors

    def test_repairs_settings(self, valid_project: Path):
        (valid_project / ".vscode" / "settings.json").write_text("{ nope")
        report = run_validate(valid_project, auto_fix=True)
        assert ".vscode/settings.json" in report.fixed
        assert _status(report, "VS Code configuration") == "pass"

    def test_does_not_overwrite_edits(self, valid_project: Path):
        (valid_project / ROOT_DOC).write_text("my own root document\n")
        (valid_project / RELEASE).unlink()
        run_validate(valid_project, auto_fix=True)
        assert (valid_project / ROOT_DOC).read_text() == "my own root document\n"

    def test_nothing_to_fix_without_setup(self, project: Path):
        with pytest.raises(ValidationFailedError) as exc:
            run_validate(project, auto_fix=True)
        assert exc.value.report.fixed == []
