"""
Domain models — Pydantic types for the composition and update engine.

All models are re-exported here for convenient access:

    from metacoding.core.models import ProjectConfiguration, FileMapping, Conflict
"""

from metacoding.core.models.backup import BackupSnapshot
from metacoding.core.models.conflict import (
    SENTINEL_PREFIX,
    ApplyResult,
    Conflict,
    ConflictPair,
    Resolution,
)
from metacoding.core.models.project import ProjectConfiguration
from metacoding.core.models.template import (
    FileMapping,
    GeneratedFile,
    StaticFile,
    Template,
    TemplateDescriptor,
    TemplatedFile,
    TemplatePrompt,
)
from metacoding.core.models.validation import ValidationCheck, ValidationReport

__all__ = [
    # conflict.py
    "ApplyResult",
    # backup.py
    "BackupSnapshot",
    "Conflict",
    "ConflictPair",
    # template.py
    "FileMapping",
    "GeneratedFile",
    # project.py
    "ProjectConfiguration",
    "Resolution",
    "SENTINEL_PREFIX",
    "StaticFile",
    "Template",
    "TemplateDescriptor",
    "TemplatePrompt",
    "TemplatedFile",
    # validation.py
    "ValidationCheck",
    "ValidationReport",
]
