"""
Finite state machine for the booking wizard's step flow.

Defines the five wizard steps and the explicit transitions between them.
Going back discards nothing by itself; the wizard clears later-step data
when an earlier choice changes.

Usage:
    sm = WizardStateMachine()
    sm.transition(WizardTrigger.TYPE_SELECTED)
    assert sm.current_step == WizardStep.SELECT_DATE
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class WizardStep(str, Enum):
    """Steps of the booking wizard, in display order."""
    SELECT_TYPE = "select_type"
    SELECT_DATE = "select_date"
    SELECT_TIME = "select_time"
    ENTER_DETAILS = "enter_details"
    COMPLETED = "completed"


# Numbered steps shown in the progress bar
STEP_LABELS: dict[WizardStep, str] = {
    WizardStep.SELECT_TYPE: "Terminart",
    WizardStep.SELECT_DATE: "Datum",
    WizardStep.SELECT_TIME: "Uhrzeit",
    WizardStep.ENTER_DETAILS: "Daten",
}


class WizardTrigger(str, Enum):
    """Events that move the wizard between steps."""
    TYPE_SELECTED = "type_selected"
    DATE_SELECTED = "date_selected"
    TIME_SELECTED = "time_selected"
    BOOKING_SUCCESS = "booking_success"
    BOOKING_CONFLICT = "booking_conflict"
    BOOKING_FAILED = "booking_failed"
    GO_BACK = "go_back"
    RESET = "reset"


@dataclass
class Transition:
    """A single valid step transition."""
    from_step: WizardStep
    to_step: WizardStep
    trigger: WizardTrigger


@dataclass
class StepEntry:
    """Recorded history entry for a step visit."""
    step: WizardStep
    entered_at: datetime
    trigger: Optional[WizardTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current step."""


class WizardStateMachine:
    """
    Deterministic step machine for the booking wizard.

    Every transition must be explicitly defined. Attempting an action that
    has no transition from the current step raises with the list of
    triggers that are allowed.
    """

    TRANSITIONS: list[Transition] = [
        # --- Forward ---
        Transition(WizardStep.SELECT_TYPE, WizardStep.SELECT_DATE, WizardTrigger.TYPE_SELECTED),
        Transition(WizardStep.SELECT_DATE, WizardStep.SELECT_TIME, WizardTrigger.DATE_SELECTED),
        Transition(WizardStep.SELECT_TIME, WizardStep.ENTER_DETAILS, WizardTrigger.TIME_SELECTED),

        # --- Submission result ---
        Transition(WizardStep.ENTER_DETAILS, WizardStep.COMPLETED, WizardTrigger.BOOKING_SUCCESS),
        Transition(WizardStep.ENTER_DETAILS, WizardStep.SELECT_TIME,
                   WizardTrigger.BOOKING_CONFLICT),
        Transition(WizardStep.ENTER_DETAILS, WizardStep.ENTER_DETAILS,
                   WizardTrigger.BOOKING_FAILED),

        # --- Back navigation ---
        Transition(WizardStep.SELECT_DATE, WizardStep.SELECT_TYPE, WizardTrigger.GO_BACK),
        Transition(WizardStep.SELECT_TIME, WizardStep.SELECT_DATE, WizardTrigger.GO_BACK),
        Transition(WizardStep.ENTER_DETAILS, WizardStep.SELECT_TIME, WizardTrigger.GO_BACK),

        # --- Start over ---
        Transition(WizardStep.SELECT_TYPE, WizardStep.SELECT_TYPE, WizardTrigger.RESET),
        Transition(WizardStep.SELECT_DATE, WizardStep.SELECT_TYPE, WizardTrigger.RESET),
        Transition(WizardStep.SELECT_TIME, WizardStep.SELECT_TYPE, WizardTrigger.RESET),
        Transition(WizardStep.ENTER_DETAILS, WizardStep.SELECT_TYPE, WizardTrigger.RESET),
        Transition(WizardStep.COMPLETED, WizardStep.SELECT_TYPE, WizardTrigger.RESET),
    ]

    def __init__(self) -> None:
        self._current_step = WizardStep.SELECT_TYPE
        self._history: list[StepEntry] = [
            StepEntry(step=WizardStep.SELECT_TYPE, entered_at=datetime.now())
        ]
        self._failure_count: int = 0

    @property
    def current_step(self) -> WizardStep:
        return self._current_step

    @property
    def failure_count(self) -> int:
        """Number of submissions rejected by a conflict or storage failure."""
        return self._failure_count

    def transition(self, trigger: WizardTrigger) -> WizardStep:
        """
        Execute a step transition.

        Args:
            trigger: The event triggering the transition.

        Returns:
            The new wizard step.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_step == self._current_step and t.trigger == trigger:
                old_step = self._current_step
                self._current_step = t.to_step

                self._history.append(StepEntry(
                    step=self._current_step,
                    entered_at=datetime.now(),
                    trigger=trigger,
                ))

                if trigger in (WizardTrigger.BOOKING_CONFLICT, WizardTrigger.BOOKING_FAILED):
                    self._failure_count += 1

                logger.debug(
                    "Wizard step: %s -> %s (trigger: %s)",
                    old_step.value, self._current_step.value, trigger.value,
                )
                return self._current_step

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_step.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def can(self, trigger: WizardTrigger) -> bool:
        return trigger in self.get_valid_triggers()

    def get_valid_triggers(self) -> list[WizardTrigger]:
        """Return all triggers valid from the current step."""
        return [t.trigger for t in self.TRANSITIONS if t.from_step == self._current_step]

    def get_history(self) -> list[StepEntry]:
        """Return the full step transition history."""
        return list(self._history)

    def get_step_trace(self) -> list[str]:
        """Return ordered list of step names visited."""
        return [entry.step.value for entry in self._history]

    def step_number(self) -> int:
        """1-based position of the current step (5 once completed)."""
        return list(WizardStep).index(self._current_step) + 1

    def is_terminal(self) -> bool:
        return self._current_step == WizardStep.COMPLETED
