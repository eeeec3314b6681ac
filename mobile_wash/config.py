"""
Centralized configuration with environment variable overrides.

Operating hours, slot geometry, crew capacity and pricing fallbacks are
configurable here. Nothing is hardcoded in the zone, pricing or
availability logic; those components take these objects as parameters.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime

from dotenv import load_dotenv

from mobile_wash.logging_context import request_id_handler

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _parse_hhmm(value: str):
    return datetime.strptime(value.strip(), "%H:%M").time()


@dataclass(frozen=True)
class SchedulingConfig:
    """Operating hours and slot generation parameters for a zone."""

    open_time: str = os.getenv("OPERATING_HOURS_START", "08:00")
    close_time: str = os.getenv("OPERATING_HOURS_END", "18:00")
    slot_window_minutes: int = _safe_int("SLOT_WINDOW_MINUTES", "90")
    slot_step_minutes: int = _safe_int("SLOT_STEP_MINUTES", "60")
    buffer_minutes: int = _safe_int("BUFFER_MINUTES", "30")
    team_capacity: int = _safe_int("TEAM_CAPACITY", "3")

    @property
    def opens_at(self):
        return _parse_hhmm(self.open_time)

    @property
    def closes_at(self):
        return _parse_hhmm(self.close_time)


@dataclass(frozen=True)
class PricingConfig:
    """Fallbacks used when pricing rules or zone geometry leave a value out."""

    unknown_zone_distance_fee: float = _safe_float("UNKNOWN_ZONE_DISTANCE_FEE", "10")
    default_free_distance_km: float = _safe_float("DEFAULT_FREE_DISTANCE_KM", "5")
    default_fee_per_km: float = _safe_float("DEFAULT_FEE_PER_KM", "2")
    default_max_fee: float = _safe_float("DEFAULT_MAX_FEE", "50")
    default_zone_radius_km: float = _safe_float("DEFAULT_ZONE_RADIUS_KM", "10")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    service_name: str = os.getenv("SERVICE_NAME", "mobile-wash-booking")


def validate_scheduling(scheduling: SchedulingConfig) -> None:
    """Validate a single scheduling block, used for globals and zone overrides."""
    for env_name, value in [
        ("OPERATING_HOURS_START", scheduling.open_time),
        ("OPERATING_HOURS_END", scheduling.close_time),
    ]:
        try:
            _parse_hhmm(value)
        except (ValueError, AttributeError):
            raise ValueError(f"{env_name} must be HH:MM, got {value!r}") from None

    if scheduling.opens_at >= scheduling.closes_at:
        raise ValueError(
            "OPERATING_HOURS_START must be before OPERATING_HOURS_END, "
            f"got {scheduling.open_time}-{scheduling.close_time}"
        )
    if scheduling.slot_window_minutes < 1:
        raise ValueError(
            f"SLOT_WINDOW_MINUTES must be >= 1, got {scheduling.slot_window_minutes}"
        )
    if scheduling.slot_step_minutes < 1:
        raise ValueError(
            f"SLOT_STEP_MINUTES must be >= 1, got {scheduling.slot_step_minutes}"
        )
    if scheduling.buffer_minutes < 0:
        raise ValueError(
            f"BUFFER_MINUTES must be >= 0, got {scheduling.buffer_minutes}"
        )
    if scheduling.team_capacity < 1:
        raise ValueError(
            f"TEAM_CAPACITY must be >= 1, got {scheduling.team_capacity}"
        )


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    validate_scheduling(config.scheduling)

    for fee_name, fee_value in [
        ("UNKNOWN_ZONE_DISTANCE_FEE", config.pricing.unknown_zone_distance_fee),
        ("DEFAULT_FREE_DISTANCE_KM", config.pricing.default_free_distance_km),
        ("DEFAULT_FEE_PER_KM", config.pricing.default_fee_per_km),
        ("DEFAULT_MAX_FEE", config.pricing.default_max_fee),
    ]:
        if fee_value < 0:
            raise ValueError(f"{fee_name} must be >= 0, got {fee_value}")

    if config.pricing.default_zone_radius_km <= 0:
        raise ValueError(
            f"DEFAULT_ZONE_RADIUS_KM must be > 0, got {config.pricing.default_zone_radius_km}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        handlers=[request_id_handler()],
    )
    logger.info(
        "Configuration loaded for '%s' (hours %s-%s, capacity %d)",
        config.service_name,
        config.scheduling.open_time,
        config.scheduling.close_time,
        config.scheduling.team_capacity,
    )
    return config


# Singleton instance
settings = load_config()
