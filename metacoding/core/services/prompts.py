"""
Prompt collaborator — how the engine asks the user questions.

Services never talk to the terminal directly; they receive a
``Prompter``. ``ClickPrompter`` asks interactively through click,
``ScriptedPrompter`` answers from a pre-filled mapping (tests and
non-interactive runs).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Protocol

import click

logger = logging.getLogger(__name__)

Validator = Callable[[str], "bool | str"]


@dataclass
class Question:
    """One question in a prompt flow.

    ``choices`` is a list of (label, value) pairs for ``list`` questions.
    ``csv`` questions return the comma-separated answer as a list of
    stripped items.
    """

    name: str
    type: Literal["input", "list", "confirm", "csv"] = "input"
    message: str = ""
    choices: list[tuple[str, str]] = field(default_factory=list)
    default: Any = None
    validate: Validator | None = None


class Prompter(Protocol):
    def text(self, name: str, message: str, default: str | None = None,
             validate: Validator | None = None) -> str: ...

    def select(self, name: str, message: str, choices: list[tuple[str, str]],
               default: str | None = None) -> str: ...

    def confirm(self, name: str, message: str, default: bool = False) -> bool: ...

    def csv(self, name: str, message: str, default: str = "") -> list[str]: ...


def split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def ask(prompter: Prompter, questions: list[Question]) -> dict[str, Any]:
    """Run a list of questions and collect answers keyed by name."""
    answers: dict[str, Any] = {}
    for q in questions:
        if q.type == "list":
            answers[q.name] = prompter.select(q.name, q.message, q.choices, q.default)
        elif q.type == "confirm":
            answers[q.name] = prompter.confirm(q.name, q.message, bool(q.default))
        elif q.type == "csv":
            answers[q.name] = prompter.csv(q.name, q.message, q.default or "")
        else:
            answers[q.name] = prompter.text(q.name, q.message, q.default, q.validate)
    return answers


class ClickPrompter:
    """Interactive prompts on the controlling terminal."""

    def text(self, name: str, message: str, default: str | None = None,
             validate: Validator | None = None) -> str:
        while True:
            value = click.prompt(message, default=default, show_default=default is not None)
            outcome = validate(value) if validate else True
            if outcome is True:
                return value
            click.secho(str(outcome) if outcome else "Invalid value", fg="red", err=True)

    def select(self, name: str, message: str, choices: list[tuple[str, str]],
               default: str | None = None) -> str:
        click.echo(message)
        for label, value in choices:
            click.echo(f"  {value:<12} {label}")
        values = [value for _, value in choices]
        return click.prompt(
            "Choice",
            type=click.Choice(values),
            default=default if default in values else None,
            show_choices=False,
        )

    def confirm(self, name: str, message: str, default: bool = False) -> bool:
        return click.confirm(message, default=default)

    def csv(self, name: str, message: str, default: str = "") -> list[str]:
        return split_csv(click.prompt(message, default=default))


class ScriptedPrompter:
    """Answers from a mapping; unanswered questions take their default.

    A list value under a ``select`` question is consumed one item per
    call, which lets per-item questions (one per conflict) be scripted.
    """

    def __init__(self, answers: dict[str, Any] | None = None):
        self.answers: dict[str, Any] = dict(answers or {})
        self.asked: list[str] = []

    def _take(self, name: str, *, consume: bool = False) -> Any:
        self.asked.append(name)
        value = self.answers.get(name)
        if consume and isinstance(value, list):
            return value.pop(0) if value else None
        return value

    def text(self, name: str, message: str, default: str | None = None,
             validate: Validator | None = None) -> str:
        value = self._take(name)
        value = default if value is None else value
        if validate is not None and validate(value or "") is not True:
            raise ValueError(f"Scripted answer for '{name}' failed validation")
        return value or ""

    def select(self, name: str, message: str, choices: list[tuple[str, str]],
               default: str | None = None) -> str:
        value = self._take(name, consume=True)
        value = default if value is None else value
        values = [v for _, v in choices]
        if value not in values:
            raise ValueError(f"Scripted answer {value!r} for '{name}' is not one of {values}")
        return value

    def confirm(self, name: str, message: str, default: bool = False) -> bool:
        value = self._take(name)
        return default if value is None else bool(value)

    def csv(self, name: str, message: str, default: str = "") -> list[str]:
        value = self._take(name)
        if value is None:
            return split_csv(default)
        if isinstance(value, str):
            return split_csv(value)
        return list(value)
