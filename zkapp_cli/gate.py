"""
Confirmation gate: nothing is sent until the operator says so.

States: PENDING -> CONFIRMED | ABORTED. Only an exact "yes" or "y" (any case,
surrounding whitespace ignored) confirms; every other answer, an empty one
included, aborts. A decided gate stays decided. With auto-confirm (``--yes``)
the gate confirms without asking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple

from .errors import PromptCancelled
from .prompts import Prompter
from .ui import summary_table

__all__ = ["GateState", "ConfirmationGate", "confirm_submission"]

_AFFIRMATIVE = frozenset({"yes", "y"})


class GateState(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ABORTED = "aborted"


@dataclass
class ConfirmationGate:
    auto_confirm: bool = False
    state: GateState = field(default=GateState.PENDING)

    def decide(self, answer: Optional[str]) -> GateState:
        if self.state is not GateState.PENDING:
            return self.state
        if answer is not None and answer.strip().lower() in _AFFIRMATIVE:
            self.state = GateState.CONFIRMED
        else:
            self.state = GateState.ABORTED
        return self.state

    def abort(self) -> GateState:
        if self.state is GateState.PENDING:
            self.state = GateState.ABORTED
        return self.state

    @property
    def confirmed(self) -> bool:
        return self.state is GateState.CONFIRMED


def confirm_submission(
    gate: ConfirmationGate,
    prompter: Prompter,
    summary: Sequence[Tuple[str, str]],
) -> GateState:
    """Show the summary and ask once, unless auto-confirm is on."""
    if gate.state is not GateState.PENDING:
        return gate.state
    if gate.auto_confirm:
        return gate.decide("yes")
    prompter.show("Confirm to send transaction")
    prompter.show(summary_table(summary))
    try:
        answer = prompter.read("Are you sure you want to send (yes/no)?")
    except PromptCancelled:
        return gate.abort()
    return gate.decide(answer)
