"""
Booking wizard with four input steps: Type -> Date -> Time -> Details.

Holds the in-progress selection for one customer. Nothing is persisted until
``submit()``, which re-validates against the store at that moment, so a slot
taken in the meantime sends the customer back to time selection instead of
double-booking it.

Usage:
    wizard = BookingWizard(store)
    wizard.select_type("reparatur")
    wizard.select_date("2026-10-20")
    wizard.select_time(wizard.available_slots()[0].time)
    wizard.update_customer(name="Jo Lee", phone="+49 170 1234567")
    result = wizard.submit()
"""

from typing import Optional

from bikewerkstatt.clock import Clock, SystemClock
from bikewerkstatt.config import BookingRulesConfig, settings
from bikewerkstatt.logging_context import get_session_logger, new_session_id, set_session_id
from bikewerkstatt.schemas.booking_schema import AppointmentType, Booking, CustomerData, TimeSlot
from bikewerkstatt.tools.availability import generate_time_slots, group_slots
from bikewerkstatt.tools.booking import BookingOutcome, BookingResult, create_booking
from bikewerkstatt.tools.booking_store import BookingStore
from bikewerkstatt.tools.catalog import get_all_appointment_types, get_appointment_type
from bikewerkstatt.tools.conflicts import has_conflict
from bikewerkstatt.tools.schedule import (
    format_date_long,
    format_date_short,
    get_available_dates,
    get_today,
    is_business_day,
)
from bikewerkstatt.tools.validation import (
    MSG_SLOT_TAKEN,
    MSG_TIME_NOT_OFFERED,
    FieldError,
    get_field_error,
    validate_booking_date,
    validate_customer_data,
)
from bikewerkstatt.wizard.state_machine import (
    InvalidTransitionError,
    WizardStateMachine,
    WizardStep,
    WizardTrigger,
)

logger = get_session_logger(__name__)

SHORT_ID_LENGTH = 8
CUSTOMER_FIELDS = ("name", "phone", "email", "notes")


class BookingWizard:
    """
    One customer's walk through the booking steps.

    Changing the appointment type or the date clears the selected time,
    since the old slot may not exist for the new choice.
    """

    def __init__(
        self,
        store: BookingStore,
        clock: Optional[Clock] = None,
        rules: Optional[BookingRulesConfig] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.store = store
        self.clock = clock or SystemClock()
        self.rules = rules or settings.booking
        self.session_id = session_id or new_session_id()
        self.sm = WizardStateMachine()
        self._reset_selection()

    def _reset_selection(self) -> None:
        self.selected_type: Optional[AppointmentType] = None
        self.selected_date: Optional[str] = None
        self.selected_time: Optional[str] = None
        self.customer = CustomerData()
        self.errors: list[FieldError] = []
        self.booking: Optional[Booking] = None

    def _activate(self, trigger: WizardTrigger) -> None:
        """Tag log records with this session and check the step allows the action."""
        set_session_id(self.session_id)
        if not self.sm.can(trigger):
            raise InvalidTransitionError(
                f"'{trigger.value}' is not possible from step '{self.step.value}'"
            )

    @property
    def step(self) -> WizardStep:
        return self.sm.current_step

    # ------------------------------------------------------------------ #
    # Step 1: appointment type
    # ------------------------------------------------------------------ #

    def available_types(self) -> list[AppointmentType]:
        return get_all_appointment_types()

    def select_type(self, type_id: str) -> bool:
        self._activate(WizardTrigger.TYPE_SELECTED)
        appointment_type = get_appointment_type(type_id)
        if appointment_type is None:
            self.errors = [FieldError(
                "appointmentType", "Bitte wählen Sie einen Termintyp.", "missing",
            )]
            return False

        if self.selected_type is not None and self.selected_type.id != appointment_type.id:
            self.selected_time = None
        self.selected_type = appointment_type
        self.errors = []
        self.sm.transition(WizardTrigger.TYPE_SELECTED)
        logger.info("Appointment type selected: %s", appointment_type.id)
        return True

    # ------------------------------------------------------------------ #
    # Step 2: date
    # ------------------------------------------------------------------ #

    def available_dates(self) -> list[str]:
        return get_available_dates(self.clock, self.rules.max_days_ahead)

    def today_shortcut(self) -> Optional[str]:
        """Today's date if the shop is open today."""
        today = get_today(self.clock)
        return today if is_business_day(today) else None

    def select_date(self, date_str: str) -> bool:
        self._activate(WizardTrigger.DATE_SELECTED)
        errors = validate_booking_date(date_str, self.clock, self.rules)
        if errors:
            self.errors = errors
            logger.info("Date %s rejected: %s", date_str, [e.code for e in errors])
            return False

        if date_str != self.selected_date:
            self.selected_time = None
        self.selected_date = date_str
        self.errors = []
        self.sm.transition(WizardTrigger.DATE_SELECTED)
        logger.info("Date selected: %s", date_str)
        return True

    # ------------------------------------------------------------------ #
    # Step 3: time
    # ------------------------------------------------------------------ #

    def time_slots(self) -> list[TimeSlot]:
        """All slots for the current type and date, recomputed from the store."""
        if self.selected_type is None or self.selected_date is None:
            return []
        return generate_time_slots(
            self.selected_date, self.selected_type, self.store, self.clock, self.rules
        )

    def available_slots(self) -> list[TimeSlot]:
        return [slot for slot in self.time_slots() if slot.available]

    def grouped_slots(self) -> list[tuple[str, list[TimeSlot]]]:
        return group_slots(self.available_slots())

    def select_time(self, time_str: str) -> bool:
        """Pick a start time after checking it is still free."""
        self._activate(WizardTrigger.TIME_SELECTED)
        slot = next((s for s in self.time_slots() if s.time == time_str), None)
        if slot is None:
            self.errors = [FieldError("time", MSG_TIME_NOT_OFFERED, "not_offered")]
            return False

        if has_conflict(
            self.store,
            self.selected_date,
            time_str,
            self.selected_type.duration_minutes,
            self.selected_type.buffer_minutes,
        ):
            self.errors = [FieldError("time", MSG_SLOT_TAKEN, "conflict")]
            return False
        if not slot.available:
            self.errors = [FieldError(
                "time",
                f"Termine müssen mindestens {self.rules.lead_time_hours} Stunden "
                "im Voraus gebucht werden.",
                "lead_time",
            )]
            return False

        self.selected_time = time_str
        self.errors = []
        self.sm.transition(WizardTrigger.TIME_SELECTED)
        logger.info("Time selected: %s %s", self.selected_date, time_str)
        return True

    # ------------------------------------------------------------------ #
    # Step 4: customer details and submission
    # ------------------------------------------------------------------ #

    def update_customer(self, **fields: str) -> None:
        """Update contact fields and drop their stale errors."""
        unknown = set(fields) - set(CUSTOMER_FIELDS)
        if unknown:
            raise ValueError(f"Unknown customer field(s): {sorted(unknown)}")
        self.customer = self.customer.model_copy(update=fields)
        self.errors = [e for e in self.errors if e.field not in fields]

    def submit(self) -> BookingResult:
        """Validate everything against the current store and book the slot."""
        self._activate(WizardTrigger.BOOKING_SUCCESS)

        customer_errors = validate_customer_data(self.customer)
        if customer_errors:
            self.errors = customer_errors
            return {
                "success": False,
                "outcome": BookingOutcome.INVALID,
                "message": "Please correct the highlighted fields.",
                "errors": customer_errors,
            }

        result = create_booking(
            self.store,
            self.selected_type,
            self.selected_date,
            self.selected_time,
            self.customer,
            self.clock,
            self.rules,
        )
        outcome = result["outcome"]

        if outcome == BookingOutcome.BOOKED:
            self.booking = result["booking"]
            self.errors = []
            self.sm.transition(WizardTrigger.BOOKING_SUCCESS)
        elif outcome == BookingOutcome.CONFLICT:
            self.selected_time = None
            self.errors = [FieldError("time", MSG_SLOT_TAKEN, "conflict")]
            self.sm.transition(WizardTrigger.BOOKING_CONFLICT)
            logger.info("Submission hit a taken slot; back to time selection")
        elif outcome == BookingOutcome.STORAGE_ERROR:
            self.errors = list(result.get("errors", []))
            self.sm.transition(WizardTrigger.BOOKING_FAILED)
        else:
            self.errors = list(result.get("errors", []))
        return result

    # ------------------------------------------------------------------ #
    # Navigation and display helpers
    # ------------------------------------------------------------------ #

    def go_back(self) -> WizardStep:
        self.errors = []
        return self.sm.transition(WizardTrigger.GO_BACK)

    def reset(self) -> None:
        self.sm.transition(WizardTrigger.RESET)
        self._reset_selection()
        logger.info("Wizard reset")

    def get_field_error(self, field: str) -> Optional[str]:
        return get_field_error(self.errors, field)

    def summary(self) -> str:
        """Read-back line shown above the contact form."""
        if not (self.selected_type and self.selected_date and self.selected_time):
            return ""
        return (
            f"{self.selected_type.name} am {format_date_short(self.selected_date)} "
            f"um {self.selected_time} Uhr"
        )

    def confirmation_message(self) -> str:
        if self.booking is None:
            return ""
        return (
            f"Vielen Dank, {self.customer.name}. "
            "Der Termin ist vorgemerkt. Wir bestätigen ihn kurzfristig. "
            f"{format_date_long(self.booking.date)}, {self.booking.time} Uhr. "
            f"Buchungs-ID: {self.short_booking_id}"
        )

    @property
    def short_booking_id(self) -> Optional[str]:
        if self.booking is None:
            return None
        return self.booking.id[:SHORT_ID_LENGTH]
