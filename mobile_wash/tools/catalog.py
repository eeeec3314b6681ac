"""
Read-only snapshot of the records the booking core computes over.

The store that owns zones, services, add-ons, pricing rules and bookings is
outside this package. A booking workflow loads a snapshot once per request
and passes it to the zone, pricing and availability functions, which keep
no state of their own.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional

from mobile_wash.config import SchedulingConfig, validate_scheduling
from mobile_wash.schemas.booking_schema import Booking, BookingStatus, ScheduleOverride
from mobile_wash.schemas.catalog_schema import Addon, Service
from mobile_wash.schemas.pricing_schema import PricingRule
from mobile_wash.schemas.zone_schema import Zone
from mobile_wash.tools.pricing_rules import PricingRuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Catalog:
    """Zones, catalog items, pricing rules and bookings as of one read."""

    zones: dict[int, Zone] = field(default_factory=dict)
    services: dict[int, Service] = field(default_factory=dict)
    addons: dict[int, Addon] = field(default_factory=dict)
    rules: PricingRuleSet = field(default_factory=PricingRuleSet)
    bookings: tuple[Booking, ...] = ()
    schedules: dict[int, SchedulingConfig] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        zones: Iterable[Zone] = (),
        services: Iterable[Service] = (),
        addons: Iterable[Addon] = (),
        pricing_rules: Iterable[PricingRule] = (),
        bookings: Iterable[Booking] = (),
        schedules: Optional[dict[int, SchedulingConfig]] = None,
    ) -> "Catalog":
        """Assemble a snapshot from already-validated records."""
        schedules = dict(schedules or {})
        for scheduling in schedules.values():
            validate_scheduling(scheduling)
        return cls(
            zones={z.id: z for z in zones},
            services={s.id: s for s in services},
            addons={a.id: a for a in addons},
            rules=PricingRuleSet.from_rules(pricing_rules),
            bookings=tuple(bookings),
            schedules=schedules,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Catalog":
        """Validate raw store records (e.g. a JSON export) into a snapshot.

        Raises pydantic's ``ValidationError`` for records that do not fit
        their model. Zone geometry and rule payloads never raise; they are
        degraded as described on ``Zone`` and ``PricingRuleSet``.
        """
        catalog = cls.build(
            zones=[Zone.model_validate(z) for z in data.get("zones", [])],
            services=[Service.model_validate(s) for s in data.get("services", [])],
            addons=[Addon.model_validate(a) for a in data.get("addons", [])],
            pricing_rules=[
                PricingRule.model_validate(r) for r in data.get("pricing_rules", [])
            ],
            bookings=[Booking.model_validate(b) for b in data.get("bookings", [])],
            schedules={
                int(zone_id): ScheduleOverride.model_validate(values).to_config()
                for zone_id, values in data.get("schedules", {}).items()
            },
        )
        logger.info(
            "Catalog loaded: %d zone(s), %d service(s), %d addon(s), %d booking(s)",
            len(catalog.zones), len(catalog.services),
            len(catalog.addons), len(catalog.bookings),
        )
        return catalog

    def get_zone(self, zone_id: int) -> Optional[Zone]:
        return self.zones.get(zone_id)

    def get_service(self, service_id: int) -> Optional[Service]:
        return self.services.get(service_id)

    def get_addon(self, addon_id: int) -> Optional[Addon]:
        return self.addons.get(addon_id)

    def zones_in_order(self) -> list[Zone]:
        """All zones by ascending id, the order zone resolution tries them in."""
        return [self.zones[zone_id] for zone_id in sorted(self.zones)]

    def confirmed_bookings(
        self, zone_id: int, start: datetime, end: datetime
    ) -> list[Booking]:
        """Confirmed bookings in a zone whose window overlaps ``[start, end)``."""
        return sorted(
            (
                b for b in self.bookings
                if b.zone_id == zone_id
                and b.status == BookingStatus.CONFIRMED
                and b.scheduled_window_start < end
                and start < b.scheduled_window_end
            ),
            key=lambda b: (b.scheduled_window_start, b.id),
        )

    def scheduling_for(
        self, zone_id: int, default: SchedulingConfig
    ) -> SchedulingConfig:
        """The zone's own scheduling override, or ``default`` when it has none."""
        return self.schedules.get(zone_id, default)
