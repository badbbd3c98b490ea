"""Appointment type catalog and the weekly opening template."""

import logging
from typing import Optional

from bikewerkstatt.schemas.booking_schema import AppointmentType, OpeningHours, WeeklySchedule

logger = logging.getLogger(__name__)

APPOINTMENT_TYPES: list[AppointmentType] = [
    AppointmentType(
        id="beratung",
        name="Beratung E-Bike / Kauf",
        description=(
            "Persönliche Beratung für E-Bikes und Fahrradkauf. "
            "Wir finden gemeinsam das perfekte Rad für Sie."
        ),
        icon="💬",
        duration_minutes=45,
        buffer_minutes=10,
    ),
    AppointmentType(
        id="reparatur",
        name="Reparatur / Inspektion",
        description=(
            "Professionelle Reparatur und gründliche Inspektion Ihres Fahrrads "
            "durch unsere Werkstatt-Experten."
        ),
        icon="🔧",
        duration_minutes=30,
        buffer_minutes=10,
    ),
    AppointmentType(
        id="probefahrt",
        name="Probefahrt",
        description=(
            "Testen Sie Ihr Wunschrad auf einer Probefahrt durch Frankfurt. "
            "Unverbindlich und kostenlos."
        ),
        icon="🚴",
        duration_minutes=30,
        buffer_minutes=10,
    ),
]

# 0 = Sunday .. 6 = Saturday
WEEKLY_SCHEDULE: WeeklySchedule = {
    0: OpeningHours(closed=True),
    1: OpeningHours(open="10:00", close="18:00"),
    2: OpeningHours(open="10:00", close="18:00"),
    3: OpeningHours(open="10:00", close="18:00"),
    4: OpeningHours(open="10:00", close="18:00"),
    5: OpeningHours(open="10:00", close="18:00"),
    6: OpeningHours(open="10:00", close="14:00"),
}


def get_all_appointment_types() -> list[AppointmentType]:
    """Return the bookable appointment types in display order."""
    return list(APPOINTMENT_TYPES)


def get_appointment_type(type_id: str) -> Optional[AppointmentType]:
    """Look up an appointment type by id. Returns None if unknown."""
    normalized = type_id.lower().strip()
    for appointment_type in APPOINTMENT_TYPES:
        if appointment_type.id == normalized:
            return appointment_type
    logger.debug("Unknown appointment type: %r", type_id)
    return None
