"""
Tests for the template resolver — composition order, IDE exclusion,
language pack trigger, destination uniqueness, and rendering.
"""

from pathlib import Path

import pytest

from metacoding.core.config.template_loader import available_categories, load_descriptor
from metacoding.core.errors import TemplateError, TemplateNotFoundError
from metacoding.core.models.project import ProjectConfiguration
from metacoding.core.models.template import StaticFile, TemplatedFile
from metacoding.core.services.template_resolver import TemplateResolver

ROOT_DOC = ".github/copilot-instructions.md"
TEST_RUNNER = ".github/instructions/test-runner.instructions.md"
TS_PACK = ".github/instructions/typescript.coding.instructions.md"


def _dests(mappings) -> list[str]:
    return [m.destination for m in mappings]


# ── Descriptor loading ───────────────────────────────────────────────


class TestDescriptors:
    def test_available_excludes_language_pack(self, corpus: Path):
        assert available_categories(corpus) == ["general", "javascript", "python", "react"]

    def test_missing_corpus_lists_nothing(self, tmp_path: Path):
        assert available_categories(tmp_path / "nowhere") == []

    def test_name_defaults_to_category(self, corpus: Path):
        (corpus / "python" / "template.yml").write_text("description: Py\n")
        descriptor = load_descriptor(corpus, "python")
        assert descriptor.name == "python"
        assert descriptor.description == "Py"

    def test_vscode_settings_loaded(self, corpus: Path):
        assert load_descriptor(corpus, "react").vscode_settings == {"editor.tabSize": 2}

    def test_non_mapping_descriptor(self, corpus: Path):
        (corpus / "python" / "template.yml").write_text("- a\n- b\n")
        with pytest.raises(TemplateError, match="mapping"):
            load_descriptor(corpus, "python")

    def test_unknown_category(self, corpus: Path):
        with pytest.raises(TemplateNotFoundError) as exc:
            load_descriptor(corpus, "cobol")
        assert exc.value.category == "cobol"
        assert "cobol" in str(exc.value)


# ── Resolution ───────────────────────────────────────────────────────


class TestResolve:
    def test_react_composition_order(self, corpus_resolver: TemplateResolver):
        mappings = corpus_resolver.resolve("react")
        assert _dests(mappings) == [
            ROOT_DOC,
            ".github/instructions/docs-update.instructions.md",
            ".github/instructions/release.instructions.md",
            ".github/instructions/code-review.instructions.md",
            TEST_RUNNER,
            TS_PACK,
            ".github/instructions/react.coding.instructions.md",
            ".github/instructions/react.testing.instructions.md",
            "docs/notes.md",
        ]

    def test_only_root_document_and_templates_substituted(self, corpus_resolver):
        substituted = [m.destination for m in corpus_resolver.resolve("react") if m.substitute]
        assert substituted == [ROOT_DOC, "docs/notes.md"]

    def test_testing_document_by_category(self, corpus_resolver, config):
        by_dest = {m.destination: m.source for m in corpus_resolver.resolve("python", config)}
        assert by_dest[TEST_RUNNER] == "python/python.testing.instructions.md"

    def test_javascript_uses_generic_testing_document(self, corpus_resolver):
        by_dest = {m.destination: m.source for m in corpus_resolver.resolve("javascript")}
        assert by_dest[TEST_RUNNER] == "general/test-runner.instructions.md"

    def test_general_has_universal_files_once(self, corpus_resolver):
        dests = _dests(corpus_resolver.resolve("general"))
        assert len(dests) == len(set(dests)) == 5
        assert dests.count(ROOT_DOC) == 1

    def test_destinations_are_unique(self, corpus_resolver):
        for category in ("general", "react", "python", "javascript"):
            dests = _dests(corpus_resolver.resolve(category))
            assert len(dests) == len(set(dests)), category

    def test_language_pack_by_category(self, corpus_resolver):
        assert TS_PACK in _dests(corpus_resolver.resolve("react"))

    def test_language_pack_by_tech_stack(self, corpus_resolver):
        plain = ProjectConfiguration(name="p", category="python", tech_stack=("Python",))
        typed = ProjectConfiguration(name="p", category="python", tech_stack=("TypeScript",))
        assert TS_PACK not in _dests(corpus_resolver.resolve("python", plain))
        assert TS_PACK in _dests(corpus_resolver.resolve("python", typed))

    def test_cursor_suppresses_all_instruction_documents(self, corpus_resolver):
        config = ProjectConfiguration(name="p", category="react", ide="cursor")
        assert _dests(corpus_resolver.resolve("react", config)) == ["docs/notes.md"]

    def test_cursor_general_resolves_nothing(self, corpus_resolver):
        config = ProjectConfiguration(name="p", ide="cursor")
        assert corpus_resolver.resolve("general", config) == []

    def test_later_step_wins_on_same_destination(self, corpus: Path, corpus_resolver):
        (corpus / "react" / "test-runner.instructions.md").write_text("override\n")
        mappings = corpus_resolver.resolve("react")
        matching = [m for m in mappings if m.destination == TEST_RUNNER]
        assert len(matching) == 1
        assert matching[0].source == "react/test-runner.instructions.md"

    def test_scaffold_skips_instruction_names(self, corpus: Path, corpus_resolver):
        (corpus / "react" / "files" / "extra.instructions.md").write_text("x\n")
        assert "extra.instructions.md" not in _dests(corpus_resolver.scaffold_mappings("react"))

    def test_unknown_category(self, corpus_resolver):
        with pytest.raises(TemplateNotFoundError, match="Template 'cobol' not found"):
            corpus_resolver.resolve("cobol")

    def test_missing_descriptor(self, corpus: Path, corpus_resolver):
        (corpus / "broken").mkdir()
        with pytest.raises(TemplateNotFoundError, match="configuration not found"):
            corpus_resolver.resolve("broken")


# ── Loading & rendering ──────────────────────────────────────────────


class TestRender:
    def test_load_variants(self, corpus_resolver):
        mappings = {m.destination: m for m in corpus_resolver.resolve("react")}
        assert isinstance(corpus_resolver.load(mappings[ROOT_DOC]), TemplatedFile)
        assert isinstance(corpus_resolver.load(mappings[TEST_RUNNER]), StaticFile)

    def test_render_substitutes(self, corpus_resolver, config):
        template, files = corpus_resolver.render_template("python", config)
        by_path = {f.path: f.content for f in files}
        assert by_path[ROOT_DOC] == "# demo\n\nPython, Pytest\n"
        assert by_path[TEST_RUNNER] == "python tests\n"
        assert template.name == "python"

    def test_scaffold_template_rendered_without_suffix(self, corpus_resolver):
        config = ProjectConfiguration(name="shop", category="react")
        _, files = corpus_resolver.render_template("react", config)
        notes = next(f for f in files if f.path == "docs/notes.md")
        assert notes.content == "Notes for shop\n"
        assert notes.source == "react/files/docs/notes.md.template"


class TestPackagedCorpus:
    def test_categories(self, resolver: TemplateResolver):
        assert resolver.available_categories() == ["general", "javascript", "node", "python", "react"]

    @pytest.mark.parametrize("category", ["general", "javascript", "node", "python", "react"])
    def test_every_category_renders_required_documents(self, resolver, category):
        config = ProjectConfiguration(name="demo", category=category)
        _, files = resolver.render_template(category, config)
        paths = {f.path for f in files}
        assert ROOT_DOC in paths
        assert TEST_RUNNER in paths
        root = next(f for f in files if f.path == ROOT_DOC)
        assert "{{" not in root.content
        assert "demo" in root.content
