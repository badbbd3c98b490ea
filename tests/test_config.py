"""Tests for configuration loading and validation."""

import pytest

from bikewerkstatt.config import (
    AdminConfig,
    AppConfig,
    BookingRulesConfig,
    BusinessConfig,
    StorageConfig,
    _safe_int,
    _validate_config,
)


def _config(**overrides) -> AppConfig:
    parts = {
        "business": BusinessConfig(),
        "booking": BookingRulesConfig(),
        "admin": AdminConfig(),
        "storage": StorageConfig(),
        "log_level": "INFO",
    }
    parts.update(overrides)
    return AppConfig(**parts)


class TestConfigDefaults:
    def test_default_config_passes_validation(self):
        _validate_config(AppConfig())  # should not raise

    def test_booking_rule_defaults(self):
        rules = BookingRulesConfig()
        assert rules.slot_step_minutes == 15
        assert rules.lead_time_hours == 4
        assert rules.max_days_ahead == 30

    def test_config_is_frozen(self):
        config = AppConfig()
        with pytest.raises(Exception):
            config.log_level = "DEBUG"  # type: ignore[misc]


class TestConfigValidation:
    def test_zero_slot_step_rejected(self):
        config = _config(booking=BookingRulesConfig(slot_step_minutes=0))
        with pytest.raises(ValueError, match="SLOT_STEP_MINUTES"):
            _validate_config(config)

    def test_negative_lead_time_rejected(self):
        config = _config(booking=BookingRulesConfig(lead_time_hours=-1))
        with pytest.raises(ValueError, match="LEAD_TIME_HOURS"):
            _validate_config(config)

    def test_negative_horizon_rejected(self):
        config = _config(booking=BookingRulesConfig(max_days_ahead=-5))
        with pytest.raises(ValueError, match="MAX_DAYS_AHEAD"):
            _validate_config(config)

    def test_zero_lead_time_allowed(self):
        _validate_config(_config(booking=BookingRulesConfig(lead_time_hours=0)))

    def test_blank_pin_rejected(self):
        with pytest.raises(ValueError, match="ADMIN_PIN"):
            _validate_config(_config(admin=AdminConfig(pin="  ")))

    def test_blank_bookings_file_rejected(self):
        with pytest.raises(ValueError, match="BOOKINGS_FILE"):
            _validate_config(_config(storage=StorageConfig(bookings_file="")))


class TestSafeInt:
    def test_default_used_when_unset(self):
        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_env_value_parsed(self, monkeypatch):
        monkeypatch.setenv("BW_TEST_INT", "7")
        assert _safe_int("BW_TEST_INT", "1") == 7

    def test_bad_value_names_variable(self, monkeypatch):
        monkeypatch.setenv("BW_TEST_INT", "soon")
        with pytest.raises(ValueError, match="BW_TEST_INT"):
            _safe_int("BW_TEST_INT", "1")
