"""
Booking persistence behind a small key-value style contract.

The booking logic only depends on ``BookingStore``. Two implementations are
provided: an in-memory list for tests and the console demo, and a JSON file
that plays the role of the browser's local storage.
"""

import json
import logging
import os
import random
import string
import tempfile
import time
from pathlib import Path
from typing import Optional, Union

from pydantic import TypeAdapter, ValidationError

from bikewerkstatt.clock import Clock, SystemClock
from bikewerkstatt.schemas.booking_schema import Booking, BookingStatus, NewBooking

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 7

_booking_list = TypeAdapter(list[Booking])


class StorageError(Exception):
    """Raised when the underlying store cannot be written."""


def generate_id() -> str:
    """Timestamp plus random base36 suffix, e.g. ``bk_1760870400000_k3j9x0a``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=_ID_SUFFIX_LENGTH))
    return f"bk_{int(time.time() * 1000)}_{suffix}"


class BookingStore:
    """Storage contract used by the booking tools, wizard and admin dashboard.

    Subclasses implement ``_load`` and ``_save``; the list operations are
    shared and always work on a fresh read so concurrent writers are seen.
    """

    clock: Optional[Clock] = None

    def _load(self) -> list[Booking]:
        raise NotImplementedError

    def _save(self, bookings: list[Booking]) -> None:
        raise NotImplementedError

    def list_all(self) -> list[Booking]:
        """Return every stored booking, canceled ones included, in insertion order."""
        return self._load()

    def get(self, booking_id: str) -> Optional[Booking]:
        for booking in self._load():
            if booking.id == booking_id:
                return booking
        return None

    def list_for_date(self, date_str: str) -> list[Booking]:
        """Non-canceled bookings on a date."""
        return [b for b in self._load() if b.date == date_str and b.is_active]

    def append(self, new_booking: NewBooking) -> Booking:
        """Store a booking, assigning its id and creation timestamp."""
        bookings = self._load()
        booking = Booking(
            **new_booking.model_dump(),
            id=generate_id(),
            created_at=(self.clock or SystemClock()).now(),
        )
        bookings.append(booking)
        self._save(bookings)
        return booking

    def update_status(self, booking_id: str, status: BookingStatus) -> Optional[Booking]:
        """Change a booking's status. Returns None if the id is unknown."""
        bookings = self._load()
        for index, booking in enumerate(bookings):
            if booking.id == booking_id:
                bookings[index] = booking.model_copy(update={"status": status})
                self._save(bookings)
                return bookings[index]
        return None

    def delete(self, booking_id: str) -> bool:
        """Remove a booking. Returns False if the id is unknown."""
        bookings = self._load()
        remaining = [b for b in bookings if b.id != booking_id]
        if len(remaining) == len(bookings):
            return False
        self._save(remaining)
        return True

    def clear(self) -> None:
        raise NotImplementedError


class InMemoryBookingStore(BookingStore):
    """Process-local store. Used by tests and the offline console demo."""

    def __init__(
        self, bookings: Optional[list[Booking]] = None, clock: Optional[Clock] = None
    ) -> None:
        self.clock = clock
        self._bookings: list[Booking] = list(bookings or [])

    def _load(self) -> list[Booking]:
        return list(self._bookings)

    def _save(self, bookings: list[Booking]) -> None:
        self._bookings = list(bookings)

    def clear(self) -> None:
        self._bookings = []


class JsonFileBookingStore(BookingStore):
    """Persists the booking list as one JSON array in a file.

    An unreadable or corrupt file is logged and read as empty; the next
    successful write replaces it. Writes go to a temporary file in the same
    directory that is then renamed over the target, so a failed write leaves
    the previous contents in place. Write failures raise StorageError.
    """

    def __init__(self, path: Union[str, Path], clock: Optional[Clock] = None) -> None:
        self.path = Path(path)
        self.clock = clock

    def _load(self) -> list[Booking]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            return _booking_list.validate_json(raw)
        except (OSError, ValidationError) as exc:
            logger.error("Error reading bookings from %s: %s", self.path, exc)
            return []

    def _save(self, bookings: list[Booking]) -> None:
        payload = json.dumps(
            [b.model_dump(mode="json") for b in bookings], ensure_ascii=False, indent=2
        )
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            logger.error("Error writing bookings to %s: %s", self.path, exc)
            raise StorageError(f"Could not write bookings to {self.path}") from exc

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not remove {self.path}") from exc
