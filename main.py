"""
Command-line entry point for the booking core.

Works against the JSON booking file configured by BOOKINGS_FILE (or --file).
Admin commands need the shop PIN.

Usage:
    python main.py dates
    python main.py slots --type reparatur --date 2026-10-20
    python main.py book --type reparatur --date 2026-10-20 --time 10:00 \\
        --name "Jo Lee" --phone "+49 170 1234567"
    python main.py list --pin 1234 --status requested
    python main.py export --pin 1234 --output termine.csv
    python main.py status bk_123_abc confirmed --pin 1234
    python main.py console
"""

import argparse
import logging
import sys

from bikewerkstatt.admin.dashboard import AdminAuthError, AdminDashboard
from bikewerkstatt.config import settings
from bikewerkstatt.schemas.booking_schema import BookingStatus, CustomerData
from bikewerkstatt.tools.availability import generate_time_slots, group_slots
from bikewerkstatt.tools.booking import create_booking
from bikewerkstatt.tools.booking_store import JsonFileBookingStore
from bikewerkstatt.tools.catalog import get_all_appointment_types, get_appointment_type
from bikewerkstatt.tools.export import STATUS_LABELS, write_csv
from bikewerkstatt.tools.schedule import format_date_long, format_date_short, get_available_dates
from bikewerkstatt.utils import is_valid_date

logger = logging.getLogger(__name__)

STATUS_CHOICES = ["all"] + [s.value for s in BookingStatus]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{settings.business.name} booking tool")
    parser.add_argument(
        "--file",
        default=settings.storage.bookings_file,
        help="Path to the JSON booking file (default: BOOKINGS_FILE).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("types", help="List appointment types.")
    sub.add_parser("dates", help="List bookable dates.")

    slots = sub.add_parser("slots", help="Show time slots for a date.")
    slots.add_argument("--type", required=True, dest="type_id")
    slots.add_argument("--date", required=True)
    slots.add_argument("--all", action="store_true", help="Include blocked slots.")

    book = sub.add_parser("book", help="Request a booking.")
    book.add_argument("--type", required=True, dest="type_id")
    book.add_argument("--date", required=True)
    book.add_argument("--time", required=True)
    book.add_argument("--name", required=True)
    book.add_argument("--phone", required=True)
    book.add_argument("--email", default="")
    book.add_argument("--notes", default="")

    for name, help_text in [
        ("list", "List bookings (admin)."),
        ("export", "Export bookings as CSV (admin)."),
    ]:
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("--pin", required=True)
        cmd.add_argument("--status", choices=STATUS_CHOICES, default="all")
        if name == "export":
            cmd.add_argument("--output", default=None)

    status = sub.add_parser("status", help="Change a booking's status (admin).")
    status.add_argument("booking_id")
    status.add_argument("status", choices=[s.value for s in BookingStatus])
    status.add_argument("--pin", required=True)

    delete = sub.add_parser("delete", help="Delete a booking (admin).")
    delete.add_argument("booking_id")
    delete.add_argument("--pin", required=True)

    reset = sub.add_parser("reset", help="Delete all bookings (admin).")
    reset.add_argument("--pin", required=True)

    sub.add_parser("console", help="Start the interactive console demo.")
    return parser


def _dashboard(store: JsonFileBookingStore, pin: str) -> AdminDashboard:
    dashboard = AdminDashboard(store)
    if not dashboard.login(pin):
        raise AdminAuthError(dashboard.pin_error)
    return dashboard


def _run(args: argparse.Namespace) -> int:
    store = JsonFileBookingStore(args.file)

    if args.command == "types":
        for t in get_all_appointment_types():
            print(f"{t.id:<12} {t.icon} {t.name} ({t.duration_minutes} Min + {t.buffer_minutes} Min Puffer)")
        return 0

    if args.command == "dates":
        for d in get_available_dates():
            print(f"{d}  {format_date_long(d)}")
        return 0

    if args.command in ("slots", "book"):
        appointment_type = get_appointment_type(args.type_id)
        if appointment_type is None:
            logger.error("Unknown appointment type: %s", args.type_id)
            return 2

    if args.command == "slots":
        if not is_valid_date(args.date):
            logger.error("Invalid date (expected YYYY-MM-DD): %s", args.date)
            return 2
        slots = generate_time_slots(args.date, appointment_type, store)
        if args.all:
            for slot in slots:
                mark = "frei" if slot.available else f"belegt ({slot.reason.value})"
                print(f"{slot.time}  {mark}")
        else:
            for label, members in group_slots([s for s in slots if s.available]):
                print(f"{label}: {' '.join(s.time for s in members)}")
        return 0

    if args.command == "book":
        customer = CustomerData(
            name=args.name, phone=args.phone, email=args.email, notes=args.notes
        )
        result = create_booking(store, appointment_type, args.date, args.time, customer)
        if result["success"]:
            print(f"Termin angefragt: {result['booking'].id}")
            return 0
        for error in result.get("errors", []):
            print(f"{error.field}: {error.message}", file=sys.stderr)
        return 1

    if args.command == "console":
        from console_demo import ConsoleSession

        ConsoleSession(store).run()
        return 0

    dashboard = _dashboard(store, args.pin)

    if args.command == "list":
        bookings = dashboard.list_bookings(args.status)
        if not bookings:
            print(dashboard.empty_message(args.status))
        for b in bookings:
            print(
                f"{b.id}  {format_date_short(b.date)} {b.time}  {b.appointment_type.name:<24} "
                f"{b.customer.name:<20} {b.customer.phone:<18} {STATUS_LABELS[b.status]}"
            )
    elif args.command == "export":
        path = args.output or dashboard.export_filename()
        write_csv(path, dashboard.list_bookings(args.status))
        print(path)
    elif args.command == "status":
        result = dashboard.change_status(args.booking_id, args.status)
        print(result["message"])
        return 0 if result["success"] else 1
    elif args.command == "delete":
        print(dashboard.delete(args.booking_id)["message"])
    elif args.command == "reset":
        dashboard.reset_demo()
    return 0


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        return _run(args)
    except AdminAuthError as exc:
        logger.error("%s", exc)
        return 3


if __name__ == "__main__":
    sys.exit(main())
