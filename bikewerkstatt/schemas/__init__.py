from bikewerkstatt.schemas.booking_schema import (
    AppointmentType,
    Booking,
    BookingStatus,
    CustomerData,
    NewBooking,
    OpeningHours,
    SlotBlockReason,
    TimeSlot,
    WeeklySchedule,
)

__all__ = [
    "AppointmentType", "Booking", "BookingStatus", "CustomerData", "NewBooking",
    "OpeningHours", "SlotBlockReason", "TimeSlot", "WeeklySchedule",
]
