"""
Template models — descriptors, file mappings, and resolved files.

A *template* is the on-disk bundle for one category: a ``template.yml``
descriptor plus instruction documents and optional scaffold files.
The resolver turns it into ``FileMapping``s, loads those into
``TemplatedFile`` / ``StaticFile`` variants, and renders them into
``GeneratedFile``s ready for writing.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class TemplatePrompt(BaseModel):
    """An extra question a template may ask during initialization."""

    name: str
    type: Literal["input", "list", "confirm"] = "input"
    message: str = ""
    choices: list[str] = Field(default_factory=list)
    default: Any = None


class TemplateDescriptor(BaseModel):
    """Contents of a category's ``template.yml``."""

    name: str
    description: str = ""
    prompts: list[TemplatePrompt] = Field(default_factory=list)
    vscode_settings: dict[str, Any] = Field(default_factory=dict)


class FileMapping(BaseModel):
    """One source → destination pair in a resolved template set.

    Attributes:
        source:      Logical path inside the template corpus
                     (``<category>/<file>`` or ``<category>/files/<file>``).
        destination: Path relative to the project root.
        substitute:  Whether variable substitution runs before writing.
    """

    source: str
    destination: str
    substitute: bool = False


class TemplatedFile(BaseModel):
    """Raw template content that still needs variable substitution."""

    kind: Literal["templated"] = "templated"
    source: str
    destination: str
    content: str


class StaticFile(BaseModel):
    """Content that is written verbatim."""

    kind: Literal["static"] = "static"
    source: str
    destination: str
    content: str


LoadedFile = Annotated[Union[TemplatedFile, StaticFile], Field(discriminator="kind")]


class GeneratedFile(BaseModel):
    """A fully rendered file, ready to be written.

    Attributes:
        path:      Relative path from project root.
        content:   Final file content (substitution already applied).
        source:    Template corpus path it was rendered from.
    """

    path: str
    content: str
    source: str = ""


class Template(BaseModel):
    """A resolved template: descriptor plus the mappings to install."""

    name: str
    descriptor: TemplateDescriptor
    files: list[FileMapping] = Field(default_factory=list)

    @property
    def description(self) -> str:
        return self.descriptor.description

    @property
    def vscode_settings(self) -> dict[str, Any]:
        return self.descriptor.vscode_settings

    def destinations(self) -> list[str]:
        return [f.destination for f in self.files]
