"""
Offline console demo: walks through the booking wizard in the terminal.

Uses the real wizard, slot generator, validation and admin dashboard on an
in-memory store. No files are written. Designed for live demo walkthroughs.

Usage:
    python console_demo.py
    python console_demo.py --scenario booking
    python console_demo.py --scenario conflict
    python console_demo.py --scenario admin
"""

import argparse
from datetime import datetime, timedelta
from typing import Optional

from bikewerkstatt.admin.dashboard import AdminDashboard
from bikewerkstatt.clock import Clock, FixedClock, SystemClock
from bikewerkstatt.config import settings
from bikewerkstatt.schemas.booking_schema import CustomerData
from bikewerkstatt.tools.booking import create_booking
from bikewerkstatt.tools.booking_store import BookingStore, InMemoryBookingStore
from bikewerkstatt.tools.catalog import get_appointment_type
from bikewerkstatt.tools.export import STATUS_LABELS
from bikewerkstatt.tools.schedule import format_date_long, format_date_short, is_business_day
from bikewerkstatt.utils import DATE_FORMAT
from bikewerkstatt.wizard.booking_wizard import BookingWizard
from bikewerkstatt.wizard.state_machine import STEP_LABELS, WizardStep, WizardTrigger

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


def _next_business_day(clock: Clock) -> str:
    day = clock.today() + timedelta(days=1)
    while not is_business_day(day.strftime(DATE_FORMAT)):
        day += timedelta(days=1)
    return day.strftime(DATE_FORMAT)


class ConsoleSession:
    """Drives one BookingWizard from typed or scripted input."""

    MAX_INPUT_LENGTH = 500

    def __init__(self, store: Optional[BookingStore] = None, clock: Optional[Clock] = None) -> None:
        self.clock = clock or SystemClock()
        self.store = store or InMemoryBookingStore(clock=self.clock)
        self.wizard = BookingWizard(self.store, self.clock)

    def shop_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[{settings.business.name}]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def show_errors(self) -> None:
        for error in self.wizard.errors:
            print(f"{RED}  ! {error.field}: {error.message}{RESET}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {title}{RESET}")
        print(f"{BOLD}  {settings.business.name}, {settings.business.city}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def _footer(self) -> None:
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{DIM}  Step trace: {' -> '.join(self.wizard.sm.get_step_trace())}{RESET}")
        print(f"{DIM}  Bookings stored: {len(self.store.list_all())}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    # ------------------------------------------------------------------ #
    # Prompts per step
    # ------------------------------------------------------------------ #

    def prompt(self) -> None:
        step = self.wizard.step
        if step == WizardStep.SELECT_TYPE:
            lines = [f"{t.icon} {t.id}: {t.name} ({t.duration_minutes} Min)"
                     for t in self.wizard.available_types()]
            self.shop_say("Welche Terminart? " + " | ".join(lines))
        elif step == WizardStep.SELECT_DATE:
            dates = self.wizard.available_dates()[:5]
            today = self.wizard.today_shortcut()
            hint = f" (Heute: {format_date_short(today)})" if today else ""
            self.shop_say(f"Welches Datum?{hint} Nächste Tage: {', '.join(dates)}")
        elif step == WizardStep.SELECT_TIME:
            groups = self.wizard.grouped_slots()
            if not groups:
                self.shop_say("An diesem Tag ist leider nichts frei. Tippen Sie 'zurück'.")
                return
            text = "; ".join(f"{label}: {' '.join(s.time for s in slots)}"
                             for label, slots in groups)
            self.shop_say(f"Freie Zeiten am {format_date_long(self.wizard.selected_date)}: {text}")
        elif step == WizardStep.ENTER_DETAILS:
            self.shop_say(
                f"{self.wizard.summary()}. Bitte Name; Telefon; E-Mail; Notizen "
                "(durch Semikolon getrennt)."
            )

    def handle_input(self, text: str) -> None:
        if text.lower() in ("zurück", "back"):
            if not self.wizard.sm.can(WizardTrigger.GO_BACK):
                self.shop_say("Hier geht es nicht weiter zurück.")
                return
            self.wizard.go_back()
            self.system_log(f"Step: {self.wizard.step.value}")
            return

        step = self.wizard.step
        if step == WizardStep.SELECT_TYPE:
            self.wizard.select_type(text)
        elif step == WizardStep.SELECT_DATE:
            self.wizard.select_date(text)
        elif step == WizardStep.SELECT_TIME:
            self.wizard.select_time(text)
        elif step == WizardStep.ENTER_DETAILS:
            self._submit_details(text)

        self.show_errors()
        label = STEP_LABELS.get(self.wizard.step, "Fertig")
        self.system_log(f"Step {self.wizard.sm.step_number()}: {label}")

    def _submit_details(self, text: str) -> None:
        parts = [p.strip() for p in text.split(";")] + ["", "", "", ""]
        self.wizard.update_customer(name=parts[0], phone=parts[1], email=parts[2], notes=parts[3])
        result = self.wizard.submit()
        self.system_log(f"Submission outcome: {result['outcome'].value}")
        if result["success"]:
            self.shop_say(self.wizard.confirmation_message())
        elif self.wizard.step == WizardStep.SELECT_TIME:
            print(f"{YELLOW}  Der Termin wurde gerade vergeben. Bitte eine andere Uhrzeit wählen.{RESET}")

    # ------------------------------------------------------------------ #
    # Run modes
    # ------------------------------------------------------------------ #

    def run_steps(self, steps: list[str]) -> None:
        for step in steps:
            if self.wizard.sm.is_terminal():
                break
            self.prompt()
            print(f"\n{BLUE}[Kunde] {RESET}{step}")
            self.handle_input(step)

    def run(self) -> None:
        self._banner("BOOKING WIZARD - Console Demo (type 'quit' to exit)")
        while not self.wizard.sm.is_terminal():
            self.prompt()
            user_input = input(f"\n{BLUE}[Kunde] {RESET}").strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                return
            if len(user_input) > self.MAX_INPUT_LENGTH:
                self.shop_say("Das war etwas lang. Bitte kürzer fassen.")
                continue
            self.handle_input(user_input)
        self._footer()


def _demo_clock() -> FixedClock:
    now = datetime.now().replace(hour=9, minute=0, second=0, microsecond=0)
    return FixedClock(now)


def run_scenario(scenario: str) -> ConsoleSession:
    """Auto-play a pre-scripted scenario for demo purposes."""
    clock = _demo_clock()
    session = ConsoleSession(InMemoryBookingStore(clock=clock), clock)
    day = _next_business_day(clock)
    details = "Jo Lee; +49 170 1234567; jo@example.com; Schaltung hakt"

    if scenario == "booking":
        session._banner("Scenario: booking")
        session.run_steps(["reparatur", day, "10:00", "A; 123; bad", details])

    elif scenario == "conflict":
        session._banner("Scenario: slot taken in another tab")
        session.run_steps(["reparatur", day, "10:00"])
        other = create_booking(
            session.store,
            get_appointment_type("probefahrt"),
            day,
            "10:00",
            CustomerData(name="Other Tab", phone="069 123456"),
            clock,
        )
        session.system_log(f"Another tab booked {day} 10:00: {other['outcome'].value}")
        session.handle_input(details)
        session.run_steps(["10:45", details])

    elif scenario == "admin":
        session._banner("Scenario: admin dashboard")
        session.run_steps(["beratung", day, "11:00", details])
        dashboard = AdminDashboard(session.store, clock=clock)
        dashboard.login("0000")
        session.system_log(f"Wrong PIN: {dashboard.pin_error}")
        dashboard.login(settings.admin.pin)
        booking = dashboard.list_bookings()[0]
        dashboard.change_status(booking.id, "confirmed")
        for b in dashboard.list_bookings():
            session.system_log(
                f"{format_date_short(b.date)} {b.time} {b.appointment_type.name} "
                f"{b.customer.name} [{STATUS_LABELS[b.status]}]"
            )
        session.system_log(f"Stats: {dashboard.stats()}")
        session.system_log(f"Export file: {dashboard.export_filename()}")
        print(dashboard.export_csv())
    else:
        print(f"{RED}Unknown scenario: {scenario}{RESET}")
        return session

    session._footer()
    return session


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline booking wizard demo")
    parser.add_argument(
        "--scenario",
        choices=["booking", "conflict", "admin"],
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    args = parser.parse_args()

    if args.scenario:
        run_scenario(args.scenario)
    else:
        ConsoleSession().run()


if __name__ == "__main__":
    main()
