from bikewerkstatt.wizard.booking_wizard import BookingWizard
from bikewerkstatt.wizard.state_machine import (
    InvalidTransitionError,
    WizardStateMachine,
    WizardStep,
    WizardTrigger,
)

__all__ = [
    "BookingWizard",
    "WizardStateMachine",
    "WizardStep",
    "WizardTrigger",
    "InvalidTransitionError",
]
