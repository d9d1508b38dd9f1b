"""
Tests for variable substitution — placeholders, legacy tokens, single pass.
"""

from metacoding.core.models.project import ProjectConfiguration
from metacoding.core.services.substitution import (
    DEFAULT_BUILD_TOOL,
    DEFAULT_TEST_FRAMEWORK,
    build_variables,
    category_guidance,
    domain_label,
    substitute,
)


def _config(**overrides) -> ProjectConfiguration:
    values = {
        "name": "shop",
        "description": "An online shop",
        "tech_stack": ("React", "TypeScript"),
        "category": "react",
    }
    values.update(overrides)
    return ProjectConfiguration(**values)


class TestVariables:
    def test_every_key_has_a_value(self):
        variables = build_variables(_config())
        assert variables["PROJECT_NAME"] == "shop"
        assert variables["PROJECT_DESCRIPTION"] == "An online shop"
        assert variables["TECH_STACK"] == "React, TypeScript"
        assert variables["PROJECT_TYPE"] == "react"
        assert variables["PROJECT_DOMAIN"] == "React frontend"

    def test_defaults_for_missing_tools(self):
        variables = build_variables(_config())
        assert variables["TEST_FRAMEWORK"] == DEFAULT_TEST_FRAMEWORK == "Jest"
        assert variables["BUILD_TOOL"] == DEFAULT_BUILD_TOOL == "TypeScript Compiler"

    def test_explicit_tools_win(self):
        variables = build_variables(_config(test_framework="Vitest", build_tool="Vite"))
        assert variables["TEST_FRAMEWORK"] == "Vitest"
        assert variables["BUILD_TOOL"] == "Vite"

    def test_domain_labels(self):
        assert domain_label("node") == "Node.js backend"
        assert domain_label("python") == "Python"
        assert domain_label("general") == "software"
        assert domain_label("javascript") == "software"

    def test_guidance_is_category_specific(self):
        assert "React Components" in category_guidance("react")
        assert "API Development" in category_guidance("node")
        assert "PEP 8" in category_guidance("python")
        assert "Best Practices" in category_guidance("general")


class TestSubstitute:
    def test_replaces_every_occurrence(self):
        out = substitute("{{PROJECT_NAME}} / {{PROJECT_NAME}}", _config())
        assert out == "shop / shop"

    def test_unknown_placeholder_untouched(self):
        out = substitute("{{UNKNOWN}} and {{PROJECT_NAME}}", _config())
        assert out == "{{UNKNOWN}} and shop"

    def test_legacy_placeholders(self):
        text = (
            "[short project description]\n"
            "[Main goal 1]\n[Main goal 2]\n[Main goal 3]\n"
            "[List primary technologies]\n"
            "[project specific]\n"
        )
        out = substitute(text, _config())
        assert out.splitlines() == [
            "An online shop",
            "Provide guided development workflow",
            "Ensure code quality and best practices",
            "Enable efficient team collaboration",
            "React, TypeScript",
            "React frontend",
        ]

    def test_value_containing_placeholder_is_not_rescanned(self):
        config = _config(name="{{PROJECT_DESCRIPTION}}")
        out = substitute("Name: {{PROJECT_NAME}}", config)
        assert out == "Name: {{PROJECT_DESCRIPTION}}"

    def test_no_placeholders_is_identity(self):
        text = "plain text with { braces } and [brackets]"
        assert substitute(text, _config()) == text

    def test_empty_tech_stack(self):
        out = substitute("[{{TECH_STACK}}]", _config(tech_stack=()))
        assert out == "[]"
