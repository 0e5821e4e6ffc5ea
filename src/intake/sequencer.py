"""
Step Sequencer.

Finite state machine over the 13 intake steps plus the landing and terminal
states. It only moves identifiers around: no content validation, and moving
backwards never touches the preferences.
"""

import logging
from typing import Callable

from .state import AppState, INTAKE_STEPS

logger = logging.getLogger(__name__)

FIRST_STEP = INTAKE_STEPS[0]
LAST_STEP = INTAKE_STEPS[-1]


def is_intake_step(state: AppState) -> bool:
    """Check if a state is one of the 13 intake steps."""
    return state in INTAKE_STEPS


def step_index(state: AppState) -> int:
    """0-based position in the intake flow (0 for non-intake states)."""
    if state in INTAKE_STEPS:
        return INTAKE_STEPS.index(state)
    return 0


def advance(state: AppState) -> AppState:
    """
    Next state after completing a step.

    The last intake step routes to GENERATING. Non-intake states stay put.
    """
    if state not in INTAKE_STEPS:
        return state
    index = INTAKE_STEPS.index(state)
    if index == len(INTAKE_STEPS) - 1:
        return AppState.GENERATING
    return INTAKE_STEPS[index + 1]


def retreat(state: AppState) -> AppState:
    """
    Previous state when the user goes back.

    The first intake step routes to LANDING. Non-intake states stay put.
    """
    if state not in INTAKE_STEPS:
        return state
    index = INTAKE_STEPS.index(state)
    if index == 0:
        return AppState.LANDING
    return INTAKE_STEPS[index - 1]


class StepSequencer:
    """
    Holds the current wizard state and notifies a listener on every change.

    Usage:
        seq = StepSequencer()
        seq.advance()       # TYPE -> BEDROOMS
        seq.go_to(AppState.WIZARD_STEP_VIBE)
    """

    steps = INTAKE_STEPS
    total_steps = len(INTAKE_STEPS)

    def __init__(
        self,
        initial: AppState = FIRST_STEP,
        on_state_change: Callable[[AppState], None] | None = None,
    ):
        self._state = initial
        self._on_state_change = on_state_change

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def current_step_index(self) -> int:
        return step_index(self._state)

    def advance(self) -> AppState:
        return self.go_to(advance(self._state))

    def retreat(self) -> AppState:
        return self.go_to(retreat(self._state))

    def go_to(self, state: AppState) -> AppState:
        """Unconditional jump (also used for post-error recovery)."""
        previous = self._state
        self._state = state
        if previous != state:
            logger.debug(f"Wizard state {previous.value} -> {state.value}")
        if self._on_state_change:
            self._on_state_change(state)
        return state
