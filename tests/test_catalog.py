"""Tests for loading a catalog snapshot from raw store records."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from mobile_wash.config import SchedulingConfig
from mobile_wash.schemas.booking_schema import BookingStatus
from mobile_wash.tools.catalog import Catalog

RAW = {
    "zones": [
        {
            "id": 2,
            "name_ar": "الدمام",
            "name_en": "Dammam",
            "polygon_or_center": '{"type": "polygon", "coordinates": '
                                 '[[26.42, 50.08], [26.42, 50.12], [26.45, 50.12]]}',
            "notes": None,
        },
        {"id": 1, "name_ar": "الرياض", "name_en": "Riyadh",
         "polygon_or_center": '{"lat": 24.7, "lng": 46.6}'},
    ],
    "services": [
        {"id": 1, "slug": "basic-wash", "base_price_team": 50, "base_price_solo": 35,
         "est_minutes": 45},
    ],
    "addons": [{"id": 5, "slug": "wax", "price": 15, "est_minutes": 20}],
    "pricing_rules": [
        {"key": "distance_fee", "value_json": '{"max_free_distance_km": 5}', "enabled": True},
        {"key": "car_type_multipliers", "value_json": {"suv": 1.2}, "enabled": False},
    ],
    "bookings": [
        {"id": 1, "zone_id": 1, "scheduled_window_start": "2024-01-15T10:00:00",
         "scheduled_window_end": "2024-01-15T11:30:00", "status": "confirmed"},
        {"id": 2, "zone_id": 1, "scheduled_window_start": "2024-01-15T10:00:00",
         "scheduled_window_end": "2024-01-15T11:30:00", "status": "canceled"},
    ],
    "schedules": {"2": {"open_time": "09:00", "close_time": "17:00"}},
}


class TestCatalogFromDict:
    def test_loads_all_record_sets(self):
        catalog = Catalog.from_dict(RAW)
        assert [z.id for z in catalog.zones_in_order()] == [1, 2]
        assert catalog.get_service(1).base_price_solo == 35
        assert catalog.get_addon(5).est_minutes == 20
        assert catalog.bookings[1].status == BookingStatus.CANCELED

    def test_malformed_geometry_does_not_fail_load(self):
        catalog = Catalog.from_dict(RAW)
        assert catalog.get_zone(1).geometry is None
        assert catalog.get_zone(2).geometry is not None

    def test_rules_parsed_once(self):
        catalog = Catalog.from_dict(RAW)
        assert catalog.rules.distance_fee.max_free_distance_km == 5
        assert catalog.rules.car_type_multipliers is None

    def test_schedule_overrides(self):
        catalog = Catalog.from_dict(RAW)
        default = SchedulingConfig()
        assert catalog.scheduling_for(2, default).open_time == "09:00"
        assert catalog.scheduling_for(1, default) is default

    def test_invalid_schedule_override_rejected(self):
        raw = {**RAW, "schedules": {"1": {"open_time": "18:00", "close_time": "08:00"}}}
        with pytest.raises(ValueError, match="OPERATING_HOURS_START"):
            Catalog.from_dict(raw)

    def test_invalid_service_rejected(self):
        raw = {**RAW, "services": [{"id": 1, "slug": "x", "base_price_team": -1,
                                    "base_price_solo": 1, "est_minutes": 10}]}
        with pytest.raises(ValidationError):
            Catalog.from_dict(raw)

    def test_inverted_booking_rejected(self):
        raw = {**RAW, "bookings": [
            {"id": 9, "zone_id": 1, "scheduled_window_start": "2024-01-15T12:00:00",
             "scheduled_window_end": "2024-01-15T11:00:00"},
        ]}
        with pytest.raises(ValidationError):
            Catalog.from_dict(raw)

    def test_list_rule_payload_does_not_fail_load(self):
        raw = {**RAW, "pricing_rules": [
            {"key": "distance_fee", "value_json": [5, 2.5, 50], "enabled": True},
        ]}
        catalog = Catalog.from_dict(raw)
        assert catalog.rules.distance_fee is None
        assert catalog.rules.get_rule("distance_fee").enabled is True

    @pytest.mark.parametrize("instant", ["2024-01-15T09:00:00Z", "2024-01-15T09:00:00+03:00"])
    def test_offset_booking_instants_rejected(self, instant):
        raw = {**RAW, "bookings": [
            {"id": 9, "zone_id": 1, "scheduled_window_start": instant,
             "scheduled_window_end": "2024-01-15T10:30:00"},
        ]}
        with pytest.raises(ValidationError, match="without UTC offset"):
            Catalog.from_dict(raw)

    def test_schedule_override_numbers_are_coerced(self):
        raw = {**RAW, "schedules": {"2": {"team_capacity": "2", "buffer_minutes": "15"}}}
        override = Catalog.from_dict(raw).scheduling_for(2, SchedulingConfig())
        assert override.team_capacity == 2
        assert override.buffer_minutes == 15
        assert override.open_time == SchedulingConfig().open_time

    def test_schedule_override_unknown_key_rejected(self):
        raw = {**RAW, "schedules": {"2": {"crew_size": 2}}}
        with pytest.raises(ValueError, match="crew_size"):
            Catalog.from_dict(raw)

    def test_schedule_override_bad_number_rejected(self):
        raw = {**RAW, "schedules": {"2": {"team_capacity": "two"}}}
        with pytest.raises(ValueError):
            Catalog.from_dict(raw)

    def test_empty_export(self):
        catalog = Catalog.from_dict({})
        assert catalog.zones == {}
        assert catalog.rules.active == {}


class TestConfirmedBookings:
    def test_filters_status_zone_and_overlap(self):
        catalog = Catalog.from_dict(RAW)
        found = catalog.confirmed_bookings(
            1, datetime(2024, 1, 15, 11, 0), datetime(2024, 1, 15, 12, 0)
        )
        assert [b.id for b in found] == [1]
        assert catalog.confirmed_bookings(
            1, datetime(2024, 1, 15, 11, 30), datetime(2024, 1, 15, 12, 0)
        ) == []
        assert catalog.confirmed_bookings(
            2, datetime(2024, 1, 15, 0, 0), datetime(2024, 1, 16, 0, 0)
        ) == []
