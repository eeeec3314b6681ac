"""Tests for configuration loading and validation."""

import pytest

from mobile_wash.config import (
    AppConfig,
    PricingConfig,
    SchedulingConfig,
    _validate_config,
    validate_scheduling,
)


def _config(scheduling=None, pricing=None) -> AppConfig:
    return AppConfig(
        scheduling=scheduling or SchedulingConfig(),
        pricing=pricing or PricingConfig(),
        log_level="INFO",
        service_name="test",
    )


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_defaults_match_operating_model(self):
        scheduling = SchedulingConfig(
            open_time="08:00", close_time="18:00", slot_window_minutes=90,
            slot_step_minutes=60, buffer_minutes=30, team_capacity=3,
        )
        validate_scheduling(scheduling)
        assert scheduling.opens_at.hour == 8
        assert scheduling.closes_at.hour == 18

    def test_bad_time_format(self):
        with pytest.raises(ValueError, match="OPERATING_HOURS_START"):
            _validate_config(_config(SchedulingConfig(open_time="8am", close_time="18:00")))

    def test_open_after_close(self):
        with pytest.raises(ValueError, match="must be before"):
            _validate_config(_config(SchedulingConfig(open_time="18:00", close_time="08:00")))

    def test_zero_capacity(self):
        with pytest.raises(ValueError, match="TEAM_CAPACITY"):
            _validate_config(_config(SchedulingConfig(
                open_time="08:00", close_time="18:00", team_capacity=0,
            )))

    def test_zero_step(self):
        with pytest.raises(ValueError, match="SLOT_STEP_MINUTES"):
            _validate_config(_config(SchedulingConfig(
                open_time="08:00", close_time="18:00", slot_step_minutes=0,
            )))

    def test_negative_buffer(self):
        with pytest.raises(ValueError, match="BUFFER_MINUTES"):
            _validate_config(_config(SchedulingConfig(
                open_time="08:00", close_time="18:00", buffer_minutes=-1,
            )))

    def test_negative_fee(self):
        with pytest.raises(ValueError, match="DEFAULT_FEE_PER_KM"):
            _validate_config(_config(pricing=PricingConfig(default_fee_per_km=-2)))

    def test_zero_default_radius(self):
        with pytest.raises(ValueError, match="DEFAULT_ZONE_RADIUS_KM"):
            _validate_config(_config(pricing=PricingConfig(default_zone_radius_km=0)))

    def test_safe_int_parsing(self):
        from mobile_wash.config import _safe_int

        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_rejects_garbage(self, monkeypatch):
        from mobile_wash.config import _safe_int

        monkeypatch.setenv("TEAM_CAPACITY_TEST", "three")
        with pytest.raises(ValueError, match="TEAM_CAPACITY_TEST"):
            _safe_int("TEAM_CAPACITY_TEST", "3")

    def test_safe_float_parsing(self):
        from mobile_wash.config import _safe_float

        assert _safe_float("NONEXISTENT_VAR_12345", "3.14") == pytest.approx(3.14)
