"""
Template resolver — decide which files a project gets, and where.

Composition for a category (in order):

    1. Universal files from ``general/``: the root instructions document
       (substituted) plus the cross-cutting instruction documents.
    2. One testing document chosen by category.
    3. The shared TypeScript pack, when the category always uses it or
       the tech stack lists ``TypeScript``.
    4. Every other ``*.instructions.md`` in the category's own directory.
    5. Scaffold files from ``<category>/files/``; names ending in
       ``.template`` are substituted and lose that suffix.

Steps 1-4 produce instruction documents. They are all suppressed when
the project targets Cursor, whose rules are generated separately.

Destinations are unique: when two steps compute the same destination,
the later mapping replaces the earlier one.
"""

from __future__ import annotations

import logging
from pathlib import Path

from metacoding.core.config.template_loader import (
    DESCRIPTOR_FILE,
    available_categories,
    default_templates_dir,
    load_descriptor,
)
from metacoding.core.errors import TemplateNotFoundError
from metacoding.core.models.project import (
    CATEGORY_GENERAL,
    CATEGORY_JAVASCRIPT,
    CATEGORY_NODE,
    CATEGORY_PYTHON,
    CATEGORY_REACT,
    CATEGORY_TYPESCRIPT,
    IDE_CURSOR,
    ProjectConfiguration,
)
from metacoding.core.models.template import (
    FileMapping,
    GeneratedFile,
    StaticFile,
    Template,
    TemplatedFile,
)
from metacoding.core.services.filesystem import INSTRUCTIONS_DIR, ROOT_INSTRUCTIONS
from metacoding.core.services.substitution import substitute

logger = logging.getLogger(__name__)

ROOT_DOCUMENT = "copilot-instructions.md"
UNIVERSAL_FILES = (
    ROOT_DOCUMENT,
    "docs-update.instructions.md",
    "release.instructions.md",
    "code-review.instructions.md",
)

GENERIC_TESTING_FILE = "test-runner.instructions.md"
TESTING_FILES = {
    CATEGORY_REACT: "react.testing.instructions.md",
    CATEGORY_NODE: "nodejs.testing.instructions.md",
    CATEGORY_PYTHON: "python.testing.instructions.md",
    CATEGORY_JAVASCRIPT: GENERIC_TESTING_FILE,
    CATEGORY_GENERAL: GENERIC_TESTING_FILE,
}

LANGUAGE_PACK = CATEGORY_TYPESCRIPT
LANGUAGE_PACK_CATEGORIES = (CATEGORY_NODE, CATEGORY_REACT)
LANGUAGE_PACK_TAG = "TypeScript"

INSTRUCTION_SUFFIX = ".instructions.md"
TEMPLATE_SUFFIX = ".template"
SCAFFOLD_DIR = "files"


def instruction_destination(filename: str) -> str:
    """Install path for an instruction-category file."""
    if filename == ROOT_DOCUMENT:
        return ROOT_INSTRUCTIONS
    return f"{INSTRUCTIONS_DIR}/{filename}"


def is_instruction_name(filename: str) -> bool:
    return filename == ROOT_DOCUMENT or filename.endswith(INSTRUCTION_SUFFIX)


class TemplateResolver:
    """Resolves categories into file mappings against one template corpus."""

    def __init__(self, templates_dir: Path | None = None):
        self.templates_dir = templates_dir or default_templates_dir()

    # ── Catalog ─────────────────────────────────────────────────

    def available_categories(self) -> list[str]:
        return available_categories(self.templates_dir)

    def get_template(
        self, category: str, config: ProjectConfiguration | None = None
    ) -> Template:
        """Load a category's descriptor and resolve its file mappings.

        Raises:
            TemplateNotFoundError: Unknown category or missing descriptor.
        """
        descriptor = load_descriptor(self.templates_dir, category)
        files = self.resolve(category, config)
        return Template(name=category, descriptor=descriptor, files=files)

    # ── Resolution ──────────────────────────────────────────────

    def resolve(
        self, category: str, config: ProjectConfiguration | None = None
    ) -> list[FileMapping]:
        """Compute the ordered, destination-unique mapping list."""
        self._require_category(category)

        resolved: dict[str, FileMapping] = {}
        include_instructions = config is None or config.effective_ide != IDE_CURSOR

        if include_instructions:
            for mapping in self.instruction_mappings(category, config):
                resolved[mapping.destination] = mapping
        else:
            logger.debug("Cursor target: skipping instruction documents for '%s'", category)

        for mapping in self.scaffold_mappings(category):
            resolved[mapping.destination] = mapping

        files = list(resolved.values())
        logger.info("Resolved %d file(s) for template '%s'", len(files), category)
        return files

    def instruction_mappings(
        self, category: str, config: ProjectConfiguration | None = None
    ) -> list[FileMapping]:
        """Steps 1-4: instruction documents, regardless of IDE target."""
        mappings: list[FileMapping] = []
        general_dir = self.templates_dir / CATEGORY_GENERAL

        # 1. Universal files
        for filename in UNIVERSAL_FILES:
            if (general_dir / filename).is_file():
                mappings.append(FileMapping(
                    source=f"{CATEGORY_GENERAL}/{filename}",
                    destination=instruction_destination(filename),
                    substitute=filename == ROOT_DOCUMENT,
                ))

        # 2. Testing document
        testing_file = TESTING_FILES.get(category)
        if testing_file:
            testing_dest = instruction_destination(GENERIC_TESTING_FILE)
            if (self.templates_dir / category / testing_file).is_file():
                mappings.append(FileMapping(
                    source=f"{category}/{testing_file}",
                    destination=testing_dest,
                ))
            elif category == CATEGORY_JAVASCRIPT and (general_dir / GENERIC_TESTING_FILE).is_file():
                mappings.append(FileMapping(
                    source=f"{CATEGORY_GENERAL}/{GENERIC_TESTING_FILE}",
                    destination=testing_dest,
                ))

        # 3. Shared language pack
        if self.uses_language_pack(category, config):
            for filename in self._instruction_names(self.templates_dir / LANGUAGE_PACK):
                mappings.append(FileMapping(
                    source=f"{LANGUAGE_PACK}/{filename}",
                    destination=instruction_destination(filename),
                ))

        # 4. Remaining category-specific documents
        if category != CATEGORY_GENERAL:
            for filename in self._instruction_names(self.templates_dir / category):
                if filename in UNIVERSAL_FILES:
                    continue
                mappings.append(FileMapping(
                    source=f"{category}/{filename}",
                    destination=instruction_destination(filename),
                ))

        return mappings

    def scaffold_mappings(self, category: str) -> list[FileMapping]:
        """Step 5: non-instruction project files under ``<category>/files``."""
        files_dir = self.templates_dir / category / SCAFFOLD_DIR
        if not files_dir.is_dir():
            return []

        mappings: list[FileMapping] = []
        for path in sorted(p for p in files_dir.rglob("*") if p.is_file()):
            rel = path.relative_to(files_dir).as_posix()
            is_template = rel.endswith(TEMPLATE_SUFFIX)
            destination = rel[: -len(TEMPLATE_SUFFIX)] if is_template else rel
            if is_instruction_name(Path(destination).name):
                continue
            mappings.append(FileMapping(
                source=f"{category}/{SCAFFOLD_DIR}/{rel}",
                destination=destination,
                substitute=is_template,
            ))
        return mappings

    @staticmethod
    def uses_language_pack(category: str, config: ProjectConfiguration | None) -> bool:
        """Either trigger is enough: the category, or the tech-stack tag."""
        if category in LANGUAGE_PACK_CATEGORIES:
            return True
        return config is not None and config.uses(LANGUAGE_PACK_TAG)

    # ── Loading & rendering ─────────────────────────────────────

    def load(self, mapping: FileMapping) -> TemplatedFile | StaticFile:
        """Read a mapping's source into its templated or static variant."""
        content = (self.templates_dir / mapping.source).read_text(encoding="utf-8")
        if mapping.substitute:
            return TemplatedFile(
                source=mapping.source, destination=mapping.destination, content=content
            )
        return StaticFile(
            source=mapping.source, destination=mapping.destination, content=content
        )

    def render(
        self, mappings: list[FileMapping], config: ProjectConfiguration
    ) -> list[GeneratedFile]:
        """Load every mapping and apply substitution where required."""
        rendered: list[GeneratedFile] = []
        for mapping in mappings:
            loaded = self.load(mapping)
            if isinstance(loaded, TemplatedFile):
                content = substitute(loaded.content, config)
            else:
                content = loaded.content
            rendered.append(GeneratedFile(
                path=loaded.destination, content=content, source=loaded.source
            ))
        return rendered

    def render_template(
        self, category: str, config: ProjectConfiguration
    ) -> tuple[Template, list[GeneratedFile]]:
        """Resolve and render in one step."""
        template = self.get_template(category, config)
        return template, self.render(template.files, config)

    # ── Helpers ─────────────────────────────────────────────────

    def _require_category(self, category: str) -> None:
        category_dir = self.templates_dir / category
        if not category_dir.is_dir():
            raise TemplateNotFoundError(f"Template '{category}' not found", category)
        if not (category_dir / DESCRIPTOR_FILE).is_file():
            raise TemplateNotFoundError(
                f"Template configuration not found for '{category}'", category
            )

    @staticmethod
    def _instruction_names(directory: Path) -> list[str]:
        if not directory.is_dir():
            return []
        return sorted(
            child.name
            for child in directory.iterdir()
            if child.is_file()
            and child.name != DESCRIPTOR_FILE
            and child.name.endswith(INSTRUCTION_SUFFIX)
        )
