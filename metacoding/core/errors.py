"""
Error taxonomy for the composition and update engine.

Services raise these; the CLI maps them to a single prefixed line on
stderr and a non-zero exit status. Filesystem ``OSError``s are never
wrapped — they propagate to the host unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from metacoding.core.models.validation import ValidationReport


class MetacodingError(Exception):
    """Base class for every error the engine raises on purpose."""


class TemplateError(MetacodingError):
    """A template definition could not be loaded."""


class TemplateNotFoundError(TemplateError):
    """The requested category or its descriptor does not exist on disk."""

    def __init__(self, message: str, category: str):
        super().__init__(message)
        self.category = category


class SetupNotFoundError(MetacodingError):
    """An update was requested but the project was never initialized."""


class UpdateCancelledError(MetacodingError):
    """The user chose to cancel during conflict resolution."""

    def __init__(self, message: str = "Update cancelled by user"):
        super().__init__(message)


class IdeOptionsError(MetacodingError):
    """Mutually exclusive IDE flags were given together."""


class ValidationFailedError(MetacodingError):
    """Validation finished with errors (or warnings in strict mode)."""

    def __init__(self, message: str, report: ValidationReport):
        super().__init__(message)
        self.report = report
