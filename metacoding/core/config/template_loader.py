"""
Template loader — locates the template corpus and reads descriptors.

Templates live in templates/<category>/template.yml. This module finds
the corpus, loads descriptors into ``TemplateDescriptor`` models, and
lists the categories a user may choose from.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from metacoding.core.errors import TemplateError, TemplateNotFoundError
from metacoding.core.models.project import CATEGORY_TYPESCRIPT
from metacoding.core.models.template import TemplateDescriptor

logger = logging.getLogger(__name__)

DESCRIPTOR_FILE = "template.yml"

# Categories with a descriptor that must never be offered on their own
EXCLUDED_CATEGORIES = frozenset({CATEGORY_TYPESCRIPT})

TEMPLATES_DIR_ENV = "METACODING_TEMPLATES_DIR"


def default_templates_dir() -> Path:
    """Return the template corpus directory.

    ``METACODING_TEMPLATES_DIR`` overrides the corpus shipped inside
    the package.
    """
    override = os.environ.get(TEMPLATES_DIR_ENV)
    if override:
        return Path(override)
    return Path(__file__).resolve().parent.parent.parent / "templates"


def load_descriptor(templates_dir: Path, category: str) -> TemplateDescriptor:
    """Load and validate ``<category>/template.yml``.

    Raises:
        TemplateNotFoundError: If the category directory or its
            descriptor is missing.
        TemplateError: If the descriptor is not a valid mapping.
    """
    category_dir = templates_dir / category
    if not category_dir.is_dir():
        raise TemplateNotFoundError(f"Template '{category}' not found", category)

    path = category_dir / DESCRIPTOR_FILE
    if not path.is_file():
        raise TemplateNotFoundError(
            f"Template configuration not found for '{category}'", category
        )

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise TemplateError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TemplateError(
            f"Expected a YAML mapping in {path}, got {type(data).__name__}"
        )

    data.setdefault("name", category)
    try:
        descriptor = TemplateDescriptor.model_validate(data)
    except ValidationError as e:
        raise TemplateError(f"Invalid template configuration for '{category}': {e}") from e

    logger.debug("Loaded template descriptor: %s from %s", descriptor.name, path)
    return descriptor


def available_categories(templates_dir: Path) -> list[str]:
    """List categories that have a descriptor and may be chosen directly.

    Expects structure::

        templates/
            general/
                template.yml
            react/
                template.yml
            typescript/
                template.yml       # shared pack, excluded
    """
    if not templates_dir.is_dir():
        logger.debug("Templates directory not found: %s", templates_dir)
        return []

    categories: list[str] = []
    for child in sorted(templates_dir.iterdir()):
        if not child.is_dir() or child.name in EXCLUDED_CATEGORIES:
            continue
        if (child / DESCRIPTOR_FILE).is_file():
            categories.append(child.name)

    logger.debug("Available templates: %s", categories)
    return categories
