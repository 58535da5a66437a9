"""
zkapp_cli.prompts
=================

Interactive prompts as small state machines, decoupled from rendering.

A :class:`Prompt` moves ``UNANSWERED -> VALIDATING -> ACCEPTED | REJECTED``
each time an answer is submitted. Validation rules are pure functions that
return ``None`` to accept or an error message to reject; they know nothing
about the terminal.

Rendering and reading are the job of a :class:`Prompter`. The CLI uses
:class:`ConsolePrompter` (typer prompts on a rich console); tests drive
the pipeline with a scripted prompter that returns canned answers.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence

import typer
from rich.console import Console

from .errors import PromptCancelled, SelectionCancelled

Validator = Callable[[str], Optional[str]]

__all__ = [
    "PromptState",
    "Prompt",
    "Prompter",
    "ConsolePrompter",
    "Validator",
    "required",
    "numeric",
    "non_negative_integer",
    "non_negative",
    "plain_decimal",
    "ask",
    "select",
]


# --- validators (pure) ------------------------------------------------------------


def required(label: str) -> Validator:
    def _check(value: str) -> Optional[str]:
        return None if value else f"{label} is required."

    return _check


def numeric(label: str) -> Validator:
    def _check(value: str) -> Optional[str]:
        try:
            ok = math.isfinite(float(value))
        except ValueError:
            ok = False
        return None if ok else f"{label} must be a number."

    return _check


def non_negative(label: str) -> Validator:
    def _check(value: str) -> Optional[str]:
        return f"{label} can't be negative." if float(value) < 0 else None

    return _check


_PLAIN_DECIMAL = re.compile(r"[0-9]+(\.[0-9]+)?")
_DIGITS = re.compile(r"[0-9]+")


def plain_decimal(label: str) -> Validator:
    """Digits with an optional fraction; no sign, exponent or separators."""

    def _check(value: str) -> Optional[str]:
        if _PLAIN_DECIMAL.fullmatch(value):
            return None
        return f"{label} must be a plain decimal number, e.g. 0.1."

    return _check


def non_negative_integer(label: str) -> Validator:
    def _check(value: str) -> Optional[str]:
        return None if _DIGITS.fullmatch(value) else f"{label} must be a number."

    return _check


def _normalize(raw: str) -> str:
    return "".join(raw.split())


# --- state machine ----------------------------------------------------------------


class PromptState(str, Enum):
    UNANSWERED = "unanswered"
    VALIDATING = "validating"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class Prompt:
    message: str
    validators: Sequence[Validator] = ()
    normalize: Callable[[str], str] = _normalize
    state: PromptState = PromptState.UNANSWERED
    value: Optional[str] = None
    error: Optional[str] = None
    attempts: int = 0

    def submit(self, raw: str) -> PromptState:
        """
        Validate one answer. Validators run in order and the first message
        wins; a rejected prompt can be answered again.
        """
        if self.state is PromptState.ACCEPTED:
            raise RuntimeError("prompt already accepted")
        self.attempts += 1
        self.state = PromptState.VALIDATING
        value = self.normalize(raw)
        for check in self.validators:
            err = check(value)
            if err:
                self.state = PromptState.REJECTED
                self.error = err
                return self.state
        self.value = value
        self.error = None
        self.state = PromptState.ACCEPTED
        return self.state


# --- rendering ----------------------------------------------------------------------


class Prompter(Protocol):
    """Reads raw answers from the operator. Raises PromptCancelled on abort."""

    def read(self, message: str) -> str: ...

    def show_error(self, message: str) -> None: ...

    def show(self, renderable: object) -> None: ...


@dataclass
class ConsolePrompter:
    """Terminal prompter backed by typer input and a rich console."""

    console: Console = field(default_factory=Console)

    def read(self, message: str) -> str:
        try:
            return typer.prompt(message, default="", show_default=False, prompt_suffix=" ")
        except typer.Abort as e:
            raise PromptCancelled() from e

    def show_error(self, message: str) -> None:
        self.console.print(f"  [red]{message}[/red]")

    def show(self, renderable: object) -> None:
        self.console.print(renderable)


def ask(prompter: Prompter, message: str, validators: Sequence[Validator] = ()) -> str:
    """
    Ask until the answer validates; there is no retry limit. Cancellation
    propagates as PromptCancelled.
    """
    prompt = Prompt(message, validators)
    while prompt.submit(prompter.read(prompt.message)) is not PromptState.ACCEPTED:
        prompter.show_error(prompt.error or "Invalid value.")
    assert prompt.value is not None
    return prompt.value


def select(
    prompter: Prompter, message: str, choices: Sequence[str], *, question: str = "Enter a number:"
) -> int:
    """
    Numbered single choice. Returns the zero-based index of the chosen entry.
    Raises SelectionCancelled if the operator aborts.
    """
    if not choices:
        raise ValueError("select() needs at least one choice")
    lines: List[str] = [message]
    lines += [f"  {i}) {label}" for i, label in enumerate(choices, start=1)]
    prompter.show("\n".join(lines))

    def _in_range(value: str) -> Optional[str]:
        if not value.isdigit() or not 1 <= int(value) <= len(choices):
            return f"Choose a number between 1 and {len(choices)}."
        return None

    try:
        answer = ask(prompter, question, [required("Choice"), _in_range])
    except PromptCancelled as e:
        raise SelectionCancelled() from e
    return int(answer) - 1
