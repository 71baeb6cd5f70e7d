"""
Step machine shared by the quotation and booking wizards.

A wizard has an ordered tuple of named steps and exactly one active step.
Going back is always allowed. Going forward out of a step is gated by that
step's gate: a pure function of the draft that returns the field errors
blocking the move (an empty dict means the move is allowed). Gates never look
at anything but the draft, so ``can_advance(step, draft)`` can be asked at any
time without side effects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from core.exceptions import ValidationError

logger = logging.getLogger(__name__)

Gate = Callable[[Any], Dict[str, List[str]]]


def require_fields(*names: str) -> Gate:
    """Gate that blocks while any of ``names`` is empty on the draft."""

    def gate(draft) -> Dict[str, List[str]]:
        errors: Dict[str, List[str]] = {}
        for name in names:
            val = getattr(draft, name, None)
            if val is None or (isinstance(val, str) and not val.strip()):
                errors[name] = ["This field is required."]
        return errors

    return gate


@dataclass(frozen=True)
class StepMachine:
    steps: Tuple[str, ...]
    gates: Mapping[str, Gate] = field(default_factory=dict)

    def position(self, step: str) -> int:
        try:
            return self.steps.index(step)
        except ValueError:
            raise ValidationError({"step": [f"Unknown step '{step}'."]})

    def next_step(self, step: str) -> Optional[str]:
        pos = self.position(step)
        return self.steps[pos + 1] if pos + 1 < len(self.steps) else None

    def previous_step(self, step: str) -> Optional[str]:
        pos = self.position(step)
        return self.steps[pos - 1] if pos > 0 else None

    def blockers(self, step: str, draft) -> Dict[str, List[str]]:
        gate = self.gates.get(step)
        return gate(draft) if gate else {}

    def can_advance(self, step: str, draft) -> bool:
        return self.next_step(step) is not None and not self.blockers(step, draft)

    def blockers_before(self, target: str, draft) -> Tuple[Optional[str], Dict[str, List[str]]]:
        """First step before ``target`` whose gate blocks, with its errors."""
        for step in self.steps[: self.position(target)]:
            errors = self.blockers(step, draft)
            if errors:
                return step, errors
        return None, {}

    def can_reach(self, target: str, draft) -> bool:
        return self.blockers_before(target, draft)[0] is None


@dataclass
class WizardState:
    """Serializable part of a wizard: kept in the session cache between requests."""

    step: str = ""
    record_id: Optional[str] = None
    errors: Dict[str, List[str]] = field(default_factory=dict)
    notices: List[str] = field(default_factory=list)

    @property
    def editing(self) -> bool:
        return self.record_id is not None


class Wizard:
    """Base for the pricing wizards.

    Subclasses set ``machine`` and ``name`` and may override ``on_enter`` to
    run work (e.g. a rate search) when a step becomes active by moving
    forward.
    """

    name = "wizard"
    machine: StepMachine

    def __init__(self, store, state: WizardState):
        self.store = store
        self.state = state

    @property
    def step(self) -> str:
        return self.state.step

    @property
    def draft(self):
        return self.state.draft

    def can_advance(self) -> bool:
        return self.machine.can_advance(self.state.step, self.draft)

    def notify(self, message: str) -> None:
        self.state.notices.append(message)

    def fail(self, errors: Dict[str, List[str]], step: Optional[str] = None) -> ValidationError:
        """Record ``errors`` on the state (optionally snapping to ``step``) and build the exception."""
        self.state.errors = {name: list(msgs) for name, msgs in errors.items()}
        if step is not None:
            self.state.step = step
        return ValidationError(errors)

    def require_step(self, *steps: str) -> None:
        if self.state.step not in steps:
            raise ValidationError({"step": [f"Not available while on step '{self.state.step}'."]})

    async def on_enter(self, step: str) -> None:
        return None

    async def advance(self) -> str:
        current = self.state.step
        target = self.machine.next_step(current)
        if target is None:
            raise self.fail({"step": ["Already on the last step."]})
        errors = self.machine.blockers(current, self.draft)
        if errors:
            logger.debug("%s: advance from %s blocked by %s", self.name, current, sorted(errors))
            raise self.fail(errors)
        self.state.errors = {}
        self.state.step = target
        await self.on_enter(target)
        return target

    def back(self) -> str:
        target = self.machine.previous_step(self.state.step)
        if target is not None:
            self.state.step = target
        self.state.errors = {}
        return self.state.step

    async def goto(self, target: str) -> str:
        current_pos = self.machine.position(self.state.step)
        target_pos = self.machine.position(target)
        if target_pos <= current_pos:
            self.state.step = target
            self.state.errors = {}
            return target
        blocking_step, errors = self.machine.blockers_before(target, self.draft)
        if blocking_step is not None:
            raise self.fail(errors, step=blocking_step)
        self.state.errors = {}
        self.state.step = target
        await self.on_enter(target)
        return target

    def dismiss_notices(self) -> None:
        self.state.notices = []
