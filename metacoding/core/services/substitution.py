"""
Variable substitution — replace ``{{KEY}}`` placeholders in template text.

Flat key → value replacement only: no loops, no conditionals, no
escaping. All placeholders (current and legacy bracket forms) are
matched by one combined pattern and replaced in a single pass, so a
value that happens to contain ``{{OTHER_KEY}}`` is written out
literally and never rescanned.
"""

from __future__ import annotations

import logging
import re

from metacoding.core.models.project import (
    CATEGORY_NODE,
    CATEGORY_PYTHON,
    CATEGORY_REACT,
    ProjectConfiguration,
)

logger = logging.getLogger(__name__)

DEFAULT_TEST_FRAMEWORK = "Jest"
DEFAULT_BUILD_TOOL = "TypeScript Compiler"

# ── Category-derived text ───────────────────────────────────────

_DOMAIN_LABELS = {
    CATEGORY_REACT: "React frontend",
    CATEGORY_NODE: "Node.js backend",
    CATEGORY_PYTHON: "Python",
}
_DEFAULT_DOMAIN_LABEL = "software"

_GUIDANCE = {
    CATEGORY_REACT: """
- **React Components:** Follow modern React patterns with hooks and functional components
- **JSX Best Practices:** Use semantic HTML elements and proper JSX syntax
- **State Management:** Implement efficient state management with React hooks
- **Component Architecture:** Build reusable, testable React components
- **Frontend Performance:** Optimize rendering and bundle size for better user experience""",
    CATEGORY_NODE: """
- **Server Architecture:** Design scalable Node.js server applications
- **API Development:** Build robust REST APIs with proper error handling
- **Backend Services:** Implement efficient server-side business logic
- **Database Integration:** Use appropriate data persistence patterns
- **Performance:** Optimize server response times and resource usage""",
    CATEGORY_PYTHON: """
- **Django Development:** Follow Django best practices for web applications
- **Flask Applications:** Build lightweight Flask applications when appropriate
- **Python Standards:** Adhere to PEP 8 and Python coding conventions
- **Backend Development:** Implement scalable Python backend solutions
- **Framework Integration:** Use appropriate Python frameworks for different use cases""",
}
_DEFAULT_GUIDANCE = """
- **Best Practices:** Follow language-specific coding standards and conventions
- **Architecture:** Implement modular and maintainable code structure
- **Testing:** Write comprehensive tests for all functionality
- **Documentation:** Maintain clear and up-to-date documentation"""

# Fixed goals for the legacy "[Main goal N]" placeholders
_LEGACY_GOALS = (
    "Provide guided development workflow",
    "Ensure code quality and best practices",
    "Enable efficient team collaboration",
)

VARIABLE_KEYS = (
    "PROJECT_NAME",
    "PROJECT_DESCRIPTION",
    "TECH_STACK",
    "PROJECT_TYPE",
    "TEST_FRAMEWORK",
    "BUILD_TOOL",
    "PROJECT_DOMAIN",
    "PROJECT_SPECIFIC_GUIDANCE",
)


def domain_label(category: str) -> str:
    """Human-readable domain label for a category."""
    return _DOMAIN_LABELS.get(category, _DEFAULT_DOMAIN_LABEL)


def category_guidance(category: str) -> str:
    """Multi-line, category-specific guidance block."""
    return _GUIDANCE.get(category, _DEFAULT_GUIDANCE)


def build_variables(config: ProjectConfiguration) -> dict[str, str]:
    """Compute the value for every recognized ``{{KEY}}``."""
    return {
        "PROJECT_NAME": config.name,
        "PROJECT_DESCRIPTION": config.description,
        "TECH_STACK": ", ".join(config.tech_stack),
        "PROJECT_TYPE": config.category,
        "TEST_FRAMEWORK": config.test_framework or DEFAULT_TEST_FRAMEWORK,
        "BUILD_TOOL": config.build_tool or DEFAULT_BUILD_TOOL,
        "PROJECT_DOMAIN": domain_label(config.category),
        "PROJECT_SPECIFIC_GUIDANCE": category_guidance(config.category),
    }


def build_replacements(config: ProjectConfiguration) -> dict[str, str]:
    """Map every literal token (``{{KEY}}`` and legacy forms) to its value."""
    variables = build_variables(config)
    tokens = {f"{{{{{key}}}}}": value for key, value in variables.items()}

    tokens["[short project description]"] = config.description
    tokens["[Main goal 1]"] = _LEGACY_GOALS[0]
    tokens["[Main goal 2]"] = _LEGACY_GOALS[1]
    tokens["[Main goal 3]"] = _LEGACY_GOALS[2]
    tokens["[List primary technologies]"] = variables["TECH_STACK"]
    tokens["[project specific]"] = variables["PROJECT_DOMAIN"]
    return tokens


def substitute(content: str, config: ProjectConfiguration) -> str:
    """Replace every recognized placeholder in ``content``.

    Unrecognized ``{{...}}`` tokens are left untouched.
    """
    tokens = build_replacements(config)
    # Longest first so no token can shadow a longer one sharing its prefix
    alternatives = sorted(tokens, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(t) for t in alternatives))

    count = 0

    def _replace(match: re.Match[str]) -> str:
        nonlocal count
        count += 1
        return tokens[match.group(0)]

    result = pattern.sub(_replace, content)
    logger.debug("Substituted %d placeholder(s) for project '%s'", count, config.name)
    return result
