"""Appointment, opening-hours, booking and slot data models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bikewerkstatt.utils import is_valid_date, is_valid_time, time_to_minutes


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""

    REQUESTED = "requested"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"


class SlotBlockReason(str, Enum):
    """Why a generated slot is not bookable."""

    LEAD_TIME = "lead_time"
    CONFLICT = "conflict"


class AppointmentType(BaseModel):
    """Bookable service with its duration and trailing buffer."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    icon: str = ""
    duration_minutes: int = Field(gt=0)
    buffer_minutes: int = Field(default=0, ge=0)

    @property
    def total_minutes(self) -> int:
        """Duration plus buffer: the length of the occupied interval."""
        return self.duration_minutes + self.buffer_minutes


class OpeningHours(BaseModel):
    """Opening window for one weekday. open/close are ignored when closed."""

    model_config = ConfigDict(frozen=True)

    open: str = ""
    close: str = ""
    closed: bool = False

    @model_validator(mode="after")
    def _check_window(self) -> "OpeningHours":
        if self.closed:
            return self
        if not (is_valid_time(self.open) and is_valid_time(self.close)):
            raise ValueError(f"open/close must be HH:MM, got {self.open!r}-{self.close!r}")
        if time_to_minutes(self.open) > time_to_minutes(self.close):
            raise ValueError(f"open {self.open} is after close {self.close}")
        return self


WeeklySchedule = dict[int, OpeningHours]


class CustomerData(BaseModel):
    """Contact details entered in the wizard. Checked by validate_customer_data."""

    name: str = ""
    phone: str = ""
    email: Optional[str] = ""
    notes: Optional[str] = ""


class NewBooking(BaseModel):
    """A booking before the store assigns its id and creation time."""

    appointment_type: AppointmentType
    date: str
    time: str
    customer: CustomerData
    status: BookingStatus = BookingStatus.REQUESTED

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        if not is_valid_date(value):
            raise ValueError(f"date must be YYYY-MM-DD, got {value!r}")
        return value

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        if not is_valid_time(value):
            raise ValueError(f"time must be HH:MM, got {value!r}")
        return value


class Booking(NewBooking):
    """Stored booking record."""

    id: str
    created_at: datetime

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.time)

    @property
    def end_minutes(self) -> int:
        """End of the occupied interval, buffer included."""
        return self.start_minutes + self.appointment_type.total_minutes

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.CANCELED


class TimeSlot(BaseModel):
    """Candidate start time. Derived on every request, never persisted."""

    time: str
    available: bool
    reason: Optional[SlotBlockReason] = None
