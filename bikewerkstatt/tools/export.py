"""
Semicolon-separated export of bookings for spreadsheet tools.

Every cell is quoted and inner quotes are doubled. The text starts with a
UTF-8 byte-order mark so umlauts display correctly when the file is opened
in Excel.
"""

import csv
import io
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from bikewerkstatt.clock import Clock
from bikewerkstatt.schemas.booking_schema import Booking, BookingStatus
from bikewerkstatt.tools.schedule import format_date_short, get_today

logger = logging.getLogger(__name__)

BOM = "\ufeff"

HEADERS = [
    "ID",
    "Terminart",
    "Datum",
    "Uhrzeit",
    "Dauer (Min)",
    "Name",
    "Telefon",
    "E-Mail",
    "Notizen",
    "Status",
    "Erstellt am",
]

STATUS_LABELS: dict[BookingStatus, str] = {
    BookingStatus.REQUESTED: "Angefragt",
    BookingStatus.CONFIRMED: "Bestätigt",
    BookingStatus.CANCELED: "Storniert",
}


def _flatten(text: Optional[str]) -> str:
    """Collapse runs of line breaks into a single space."""
    if not text:
        return ""
    return " ".join(part for part in text.replace("\r", "\n").split("\n") if part)


def booking_row(booking: Booking) -> list[str]:
    return [
        booking.id,
        booking.appointment_type.name,
        format_date_short(booking.date),
        booking.time,
        str(booking.appointment_type.duration_minutes),
        booking.customer.name,
        booking.customer.phone,
        booking.customer.email or "",
        _flatten(booking.customer.notes),
        STATUS_LABELS.get(booking.status, booking.status.value),
        booking.created_at.strftime("%d.%m.%Y"),
    ]


def generate_csv(bookings: Iterable[Booking]) -> str:
    """Render bookings as a BOM-prefixed, semicolon-delimited table."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";", quoting=csv.QUOTE_ALL, lineterminator="\n")
    buffer.write(";".join(HEADERS) + "\n")
    writer.writerows(booking_row(b) for b in bookings)
    return BOM + buffer.getvalue().rstrip("\n")


def export_filename(clock: Optional[Clock] = None) -> str:
    return f"bikewerkstatt_termine_{get_today(clock)}.csv"


def write_csv(path: Union[str, Path], bookings: Iterable[Booking]) -> Path:
    """Write the export to disk and return the path written."""
    target = Path(path)
    content = generate_csv(bookings)
    target.write_text(content, encoding="utf-8")
    logger.info("Exported bookings to %s", target)
    return target
