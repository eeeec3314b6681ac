"""Shared test fixtures and helpers."""

import json
from datetime import datetime
from typing import Optional

import pytest

from mobile_wash.config import SchedulingConfig
from mobile_wash.schemas.booking_schema import Booking, BookingStatus
from mobile_wash.schemas.catalog_schema import Addon, Service
from mobile_wash.schemas.pricing_schema import PricingRule
from mobile_wash.schemas.zone_schema import Zone
from mobile_wash.tools.catalog import Catalog

RIYADH_CENTER = (24.7136, 46.6753)
DAMMAM_RING = [
    [26.4207, 50.0888],
    [26.4207, 50.1288],
    [26.4507, 50.1288],
    [26.4507, 50.0888],
]


def make_center_zone(
    zone_id: int = 1,
    lat: float = RIYADH_CENTER[0],
    lng: float = RIYADH_CENTER[1],
    radius_km: float = 15,
) -> Zone:
    return Zone.model_validate({
        "id": zone_id,
        "name_ar": "الرياض",
        "name_en": "Riyadh",
        "polygon_or_center": json.dumps(
            {"type": "center", "lat": lat, "lng": lng, "radius_km": radius_km}
        ),
    })


def make_polygon_zone(zone_id: int = 2, ring: Optional[list] = None) -> Zone:
    return Zone.model_validate({
        "id": zone_id,
        "name_ar": "الدمام",
        "name_en": "Dammam",
        "polygon_or_center": {"type": "polygon", "coordinates": ring or DAMMAM_RING},
    })


def make_service(
    service_id: int = 1, team: float = 150, solo: float = 100, minutes: int = 45
) -> Service:
    return Service(
        id=service_id,
        slug=f"wash-{service_id}",
        name_en="Exterior Wash",
        base_price_team=team,
        base_price_solo=solo,
        est_minutes=minutes,
    )


def make_addon(addon_id: int, price: float, minutes: int = 0) -> Addon:
    return Addon(id=addon_id, slug=f"addon-{addon_id}", price=price, est_minutes=minutes)


def make_rule(key: str, value, enabled: bool = True) -> PricingRule:
    if not isinstance(value, str):
        value = json.dumps(value)
    return PricingRule(key=key, value_json=value, enabled=enabled)


def make_booking(
    booking_id: int,
    start: datetime,
    end: datetime,
    zone_id: int = 1,
    status: BookingStatus = BookingStatus.CONFIRMED,
) -> Booking:
    return Booking(
        id=booking_id,
        zone_id=zone_id,
        scheduled_window_start=start,
        scheduled_window_end=end,
        status=status,
    )


@pytest.fixture
def scheduling() -> SchedulingConfig:
    return SchedulingConfig(
        open_time="08:00",
        close_time="18:00",
        slot_window_minutes=90,
        slot_step_minutes=60,
        buffer_minutes=30,
        team_capacity=3,
    )


@pytest.fixture
def catalog() -> Catalog:
    """Two zones, one service and two add-ons, no rules or bookings."""
    return Catalog.build(
        zones=[make_center_zone(), make_polygon_zone()],
        services=[make_service()],
        addons=[make_addon(10, 25, minutes=20), make_addon(11, 35, minutes=30)],
    )
