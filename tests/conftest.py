"""
Shared test fixtures and configuration.
"""

import json
from pathlib import Path

import pytest

from metacoding.core.models.project import ProjectConfiguration
from metacoding.core.services.template_resolver import TemplateResolver


@pytest.fixture
def packaged_templates() -> Path:
    """The template corpus shipped with the package."""
    return Path(__file__).parent.parent / "metacoding" / "templates"


@pytest.fixture
def resolver(packaged_templates: Path) -> TemplateResolver:
    return TemplateResolver(packaged_templates)


@pytest.fixture
def corpus(tmp_path: Path) -> Path:
    """A small, fully controlled template corpus.

    general:     root document (with placeholders) + 3 cross-cutting docs
                 + the generic testing document
    react:       testing doc + coding doc + one scaffold template
    python:      testing doc only
    javascript:  descriptor only (falls back to the generic testing doc)
    typescript:  shared language pack
    """
    root = tmp_path / "corpus"

    def write(rel: str, content: str) -> None:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    write("general/template.yml", "name: general\ndescription: General\n")
    write("general/copilot-instructions.md", "# {{PROJECT_NAME}}\n\n{{TECH_STACK}}\n")
    write("general/docs-update.instructions.md", "docs\n")
    write("general/release.instructions.md", "release\n")
    write("general/code-review.instructions.md", "review\n")
    write("general/test-runner.instructions.md", "generic tests\n")

    write("react/template.yml", "name: react\nvscode_settings:\n  editor.tabSize: 2\n")
    write("react/react.testing.instructions.md", "react tests\n")
    write("react/react.coding.instructions.md", "react coding\n")
    write("react/files/docs/notes.md.template", "Notes for {{PROJECT_NAME}}\n")

    write("python/template.yml", "name: python\n")
    write("python/python.testing.instructions.md", "python tests\n")

    write("javascript/template.yml", "name: javascript\n")

    write("typescript/template.yml", "name: typescript\n")
    write("typescript/typescript.coding.instructions.md", "ts coding\n")
    return root


@pytest.fixture
def corpus_resolver(corpus: Path) -> TemplateResolver:
    return TemplateResolver(corpus)


@pytest.fixture
def config() -> ProjectConfiguration:
    return ProjectConfiguration(
        name="demo",
        description="Demo project",
        tech_stack=("Python", "Pytest"),
        category="python",
    )


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An empty project directory."""
    root = tmp_path / "demo"
    root.mkdir()
    return root


@pytest.fixture
def make_manifest():
    """Write a package.json into a directory."""

    def _make(root: Path, deps: dict | None = None, dev_deps: dict | None = None) -> Path:
        data: dict = {"name": root.name}
        if deps is not None:
            data["dependencies"] = deps
        if dev_deps is not None:
            data["devDependencies"] = dev_deps
        path = root / "package.json"
        path.write_text(json.dumps(data))
        return path

    return _make
