"""
Centralized configuration with environment variable overrides.

Business details, booking rules, the admin PIN and the storage location are
configurable here. The appointment catalog and the weekly opening template
are static and live in ``bikewerkstatt.tools.catalog``.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from bikewerkstatt.logging_context import add_session_filter

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] [%(session_id)s] %(levelname)s: %(message)s"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BusinessConfig:
    """Shop details shown in the wizard summary and the admin header."""

    name: str = os.getenv("BUSINESS_NAME", "BikeWerkstatt Demo")
    address: str = os.getenv("BUSINESS_ADDRESS", "Musterstraße 12")
    city: str = os.getenv("BUSINESS_CITY", "60311 Frankfurt am Main")
    phone: str = os.getenv("BUSINESS_PHONE", "+49 000 000000")
    email: str = os.getenv("BUSINESS_EMAIL", "demo@bikewerkstatt.de")


@dataclass(frozen=True)
class BookingRulesConfig:
    """Slot granularity, minimum lead time and booking horizon."""

    slot_step_minutes: int = _safe_int("SLOT_STEP_MINUTES", "15")
    lead_time_hours: int = _safe_int("LEAD_TIME_HOURS", "4")
    max_days_ahead: int = _safe_int("MAX_DAYS_AHEAD", "30")


@dataclass(frozen=True)
class AdminConfig:
    """Shared PIN for the admin dashboard. Demo-grade, not a security boundary."""

    pin: str = os.getenv("ADMIN_PIN", "1234")


@dataclass(frozen=True)
class StorageConfig:
    """Location of the JSON file backing the booking store."""

    bookings_file: str = os.getenv("BOOKINGS_FILE", "bikewerkstatt_bookings.json")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    booking: BookingRulesConfig = field(default_factory=BookingRulesConfig)
    admin: AdminConfig = field(default_factory=AdminConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.booking.slot_step_minutes < 1:
        raise ValueError(
            f"SLOT_STEP_MINUTES must be >= 1, got {config.booking.slot_step_minutes}"
        )
    if config.booking.lead_time_hours < 0:
        raise ValueError(
            f"LEAD_TIME_HOURS must be >= 0, got {config.booking.lead_time_hours}"
        )
    if config.booking.max_days_ahead < 0:
        raise ValueError(
            f"MAX_DAYS_AHEAD must be >= 0, got {config.booking.max_days_ahead}"
        )
    if not config.admin.pin.strip():
        raise ValueError("ADMIN_PIN must not be empty")
    if not config.storage.bookings_file.strip():
        raise ValueError("BOOKINGS_FILE must not be empty")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        add_session_filter(handler)
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
