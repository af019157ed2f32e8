"""Ordered steps of the trip wizard."""

import logging
from collections.abc import Callable
from enum import IntEnum

from app.schemas.travel import TravelContext

logger = logging.getLogger(__name__)


class PlanningStep(IntEnum):
    DESTINATION = 1
    BUDGET = 2
    ACCOMMODATION = 3
    FLIGHT = 4
    ADD_ONS = 5
    SUMMARY = 6


# Extra conditions a step must meet before the wizard moves past it
_GUARDS: dict[PlanningStep, Callable[[TravelContext], bool]] = {
    PlanningStep.BUDGET: lambda ctx: ctx.budget > 0,
}


class PlanningStateMachine:
    """
    Tracks the current wizard step.

    ``complete(step)`` only advances from the current step, one step at a
    time. A step whose guard fails (budget not set) stays put without an
    error; the caller re-presents that step's prompt.
    """

    def __init__(self, current_step: PlanningStep = PlanningStep.DESTINATION):
        self.current_step = PlanningStep(current_step)

    @property
    def is_finished(self) -> bool:
        return self.current_step is PlanningStep.SUMMARY

    def can_complete(self, step: PlanningStep, context: TravelContext) -> bool:
        if step != self.current_step or self.is_finished:
            return False
        guard = _GUARDS.get(PlanningStep(step))
        return guard is None or guard(context)

    def complete(self, step: PlanningStep, context: TravelContext) -> bool:
        """Advance past ``step``; returns whether the step changed."""
        if not self.can_complete(step, context):
            logger.debug(f"complete({step!r}) ignored at {self.current_step.name}")
            return False
        self.current_step = PlanningStep(step + 1)
        return True
