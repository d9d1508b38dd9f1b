"""
Tests for the engine's collaborators — filesystem, IDE settings,
.gitignore, and prompts.
"""

import json
from pathlib import Path

import pytest

from metacoding.core.services import filesystem, gitignore, ide_settings
from metacoding.core.services.prompts import Question, ScriptedPrompter, ask, split_csv

# ── Filesystem ───────────────────────────────────────────────────────


class TestFilesystem:
    def test_is_setup_needs_both(self, project: Path):
        assert not filesystem.is_setup(project)
        filesystem.ensure_dir(project, filesystem.INSTRUCTIONS_DIR)
        assert not filesystem.is_setup(project)
        filesystem.write_text(project, filesystem.ROOT_INSTRUCTIONS, "x")
        assert filesystem.is_setup(project)

    def test_write_creates_parents(self, project: Path):
        filesystem.write_text(project, "a/b/c.md", "hello")
        assert filesystem.read_text(project, "a/b/c.md") == "hello"

    def test_copy_tree_and_move(self, project: Path):
        filesystem.write_text(project, "src/one.md", "1")
        filesystem.copy(project, "src", "dst")
        assert (project / "dst" / "one.md").read_text() == "1"
        filesystem.move(project, "dst/one.md", "moved/one.md")
        assert not (project / "dst" / "one.md").exists()
        assert (project / "moved" / "one.md").exists()

    def test_list_entries(self, project: Path):
        assert filesystem.list_entries(project, "nope") == []
        filesystem.write_text(project, "d/b.md", "")
        filesystem.write_text(project, "d/a.md", "")
        assert filesystem.list_entries(project, "d") == ["a.md", "b.md"]

    def test_backup_file(self, project: Path):
        filesystem.write_text(project, "conf.json", "{}")
        backup = filesystem.backup_file(project, "conf.json")
        assert backup.name.startswith("conf.json.backup-")
        assert backup.read_text() == "{}"

    def test_read_missing_raises(self, project: Path):
        with pytest.raises(FileNotFoundError):
            filesystem.read_text(project, "missing.md")


# ── IDE settings ─────────────────────────────────────────────────────


class TestIdeSettings:
    def _settings(self, root: Path) -> dict:
        return json.loads((root / ide_settings.SETTINGS_FILE).read_text())

    def test_creates_settings(self, project: Path):
        ide_settings.update_settings(project)
        settings = self._settings(project)
        assert settings == ide_settings.REQUIRED_SETTINGS
        assert ide_settings.is_configured(project)

    def test_preserves_user_keys(self, project: Path):
        filesystem.write_text(project, ide_settings.SETTINGS_FILE, '{"editor.fontSize": 14}')
        ide_settings.update_settings(project, {"editor.tabSize": 2})
        settings = self._settings(project)
        assert settings["editor.fontSize"] == 14
        assert settings["editor.tabSize"] == 2
        assert settings["chat.promptFiles"] is True

    def test_required_keys_always_forced(self, project: Path):
        filesystem.write_text(project, ide_settings.SETTINGS_FILE, '{"chat.promptFiles": false}')
        ide_settings.update_settings(project, {"chat.promptFiles": False})
        assert self._settings(project)["chat.promptFiles"] is True

    def test_malformed_settings_backed_up(self, project: Path):
        filesystem.write_text(project, ide_settings.SETTINGS_FILE, "{ broken")
        ide_settings.update_settings(project)
        backups = [n for n in filesystem.list_entries(project, ".vscode")
                   if n.startswith("settings.json.backup-")]
        assert len(backups) == 1
        assert (project / ".vscode" / backups[0]).read_text() == "{ broken"
        assert ide_settings.is_configured(project)

    def test_not_configured(self, project: Path):
        assert not ide_settings.is_configured(project)
        filesystem.write_text(project, ide_settings.SETTINGS_FILE, '{"chat.promptFiles": true}')
        assert not ide_settings.is_configured(project)

    def test_read_settings_tolerates_garbage(self, project: Path):
        filesystem.write_text(project, ide_settings.SETTINGS_FILE, "[]")
        assert ide_settings.read_settings(project) == {}


# ── .gitignore ───────────────────────────────────────────────────────


class TestGitignore:
    def test_creates_file(self, project: Path):
        assert gitignore.update_gitignore(project) is True
        lines = (project / ".gitignore").read_text().splitlines()
        assert lines[0] == gitignore.SECTION_HEADER
        assert ".github/instructions/" in lines

    def test_appends_after_missing_newline(self, project: Path):
        (project / ".gitignore").write_text("node_modules/")
        gitignore.update_gitignore(project)
        content = (project / ".gitignore").read_text()
        assert content.startswith("node_modules/\n\n# metacoding:")

    def test_appends_after_newline(self, project: Path):
        (project / ".gitignore").write_text("dist/\n")
        gitignore.update_gitignore(project)
        assert (project / ".gitignore").read_text().startswith("dist/\n\n# metacoding:")

    def test_idempotent(self, project: Path):
        gitignore.update_gitignore(project)
        first = (project / ".gitignore").read_text()
        assert gitignore.update_gitignore(project) is False
        assert (project / ".gitignore").read_text() == first
        assert gitignore.has_patterns(project)

    def test_has_patterns_without_file(self, project: Path):
        assert not gitignore.has_patterns(project)


# ── Prompts ──────────────────────────────────────────────────────────


class TestPrompts:
    def test_split_csv(self):
        assert split_csv(" React, ,TypeScript ,") == ["React", "TypeScript"]

    def test_ask_with_defaults(self):
        answers = ask(ScriptedPrompter(), [
            Question("name", "input", "Name?", default="demo"),
            Question("kind", "list", "Kind?", choices=[("A", "a"), ("B", "b")], default="b"),
            Question("ok", "confirm", "Ok?", default=True),
            Question("stack", "csv", "Stack?", default="X, Y"),
        ])
        assert answers == {"name": "demo", "kind": "b", "ok": True, "stack": ["X", "Y"]}

    def test_scripted_answers_win(self):
        prompter = ScriptedPrompter({"name": "shop", "stack": ["React"]})
        answers = ask(prompter, [
            Question("name", "input", "Name?", default="demo"),
            Question("stack", "csv", "Stack?", default="X"),
        ])
        assert answers == {"name": "shop", "stack": ["React"]}
        assert prompter.asked == ["name", "stack"]

    def test_invalid_select_answer(self):
        with pytest.raises(ValueError):
            ScriptedPrompter({"kind": "z"}).select("kind", "Kind?", [("A", "a")])

    def test_validation_failure(self):
        prompter = ScriptedPrompter({"name": "  "})
        with pytest.raises(ValueError):
            prompter.text("name", "Name?", validate=lambda v: bool(v.strip()) or "required")
