"""
Admin dashboard: PIN gate, booking list, status changes and export.

Updates and deletes of bookings that no longer exist are silent no-ops; the
dashboard simply reflects whatever the store holds on the next read.
"""

from typing import Optional, Union

from bikewerkstatt.admin.auth import CredentialVerifier, StaticPinVerifier
from bikewerkstatt.clock import Clock
from bikewerkstatt.logging_context import get_session_logger, new_session_id, set_session_id
from bikewerkstatt.schemas.booking_schema import Booking, BookingStatus
from bikewerkstatt.tools.booking import (
    BookingOutcome,
    BookingResult,
    delete_booking,
    update_booking_status,
)
from bikewerkstatt.tools.booking_store import BookingStore
from bikewerkstatt.tools.export import STATUS_LABELS, export_filename, generate_csv

logger = get_session_logger(__name__)

StatusFilter = Union[str, BookingStatus]

MSG_WRONG_PIN = "Falscher PIN. Bitte versuchen Sie es erneut."


class AdminAuthError(PermissionError):
    """Raised when a dashboard action is attempted without logging in."""


class AdminDashboard:
    """Read and manage bookings behind the admin PIN."""

    def __init__(
        self,
        store: BookingStore,
        verifier: Optional[CredentialVerifier] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.store = store
        self.verifier = verifier or StaticPinVerifier()
        self.clock = clock
        self.session_id = new_session_id("ADM")
        self.pin_error: Optional[str] = None
        self._authenticated = False

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    def login(self, pin: str) -> bool:
        set_session_id(self.session_id)
        if self.verifier.verify(pin):
            self._authenticated = True
            self.pin_error = None
            logger.info("Admin logged in")
            return True
        self.pin_error = MSG_WRONG_PIN
        return False

    def logout(self) -> None:
        self._authenticated = False
        logger.info("Admin logged out")

    def _require_auth(self) -> None:
        if not self._authenticated:
            raise AdminAuthError("Admin login required")
        set_session_id(self.session_id)

    # ------------------------------------------------------------------ #
    # Reading
    # ------------------------------------------------------------------ #

    def list_bookings(self, status_filter: StatusFilter = "all") -> list[Booking]:
        """Bookings newest appointment first (date desc, then time desc)."""
        self._require_auth()
        bookings = sorted(self.store.list_all(), key=lambda b: (b.date, b.time), reverse=True)
        if status_filter == "all":
            return bookings
        status = BookingStatus(status_filter)
        return [b for b in bookings if b.status == status]

    def stats(self) -> dict[str, int]:
        self._require_auth()
        bookings = self.store.list_all()
        return {
            status.value: sum(1 for b in bookings if b.status == status)
            for status in BookingStatus
        }

    def empty_message(self, status_filter: StatusFilter = "all") -> str:
        """Text shown when the filtered list is empty."""
        if status_filter == "all":
            return "Es wurden noch keine Termine gebucht."
        label = STATUS_LABELS[BookingStatus(status_filter)]
        return f'Keine Buchungen mit Status "{label}" vorhanden.'

    # ------------------------------------------------------------------ #
    # Writing
    # ------------------------------------------------------------------ #

    def change_status(self, booking_id: str, status: StatusFilter) -> BookingResult:
        self._require_auth()
        result = update_booking_status(self.store, booking_id, BookingStatus(status))
        if result["outcome"] == BookingOutcome.NOT_FOUND:
            logger.debug("Booking %s vanished before status change", booking_id)
        return result

    def delete(self, booking_id: str) -> BookingResult:
        self._require_auth()
        return delete_booking(self.store, booking_id)

    def reset_demo(self) -> None:
        """Delete every booking."""
        self._require_auth()
        self.store.clear()
        logger.warning("All bookings deleted (demo reset)")

    # ------------------------------------------------------------------ #
    # Export
    # ------------------------------------------------------------------ #

    def export_csv(self, status_filter: StatusFilter = "all") -> str:
        """CSV of the currently filtered list."""
        return generate_csv(self.list_bookings(status_filter))

    def export_filename(self) -> str:
        return export_filename(self.clock)
