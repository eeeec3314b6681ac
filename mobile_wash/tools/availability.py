"""
Capacity-constrained time slot availability for a zone.

Candidate windows of a fixed length are generated across the zone's
operating hours, one every ``slot_step_minutes``, so consecutive windows
overlap. A window is available while fewer than ``team_capacity`` confirmed
bookings overlap it and the requested service plus its buffer fits inside
the window length.

Availability is only correct as of the snapshot it was computed from. The
workflow that writes a booking must re-check capacity in the same
transaction as the write; ``is_slot_free`` is advisory.
"""

from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Union

from mobile_wash.config import SchedulingConfig, settings
from mobile_wash.errors import ZoneNotFoundError
from mobile_wash.logging_context import get_request_logger
from mobile_wash.schemas.booking_schema import (
    OperatingHours,
    TimeSlot,
    ZoneSchedule,
    require_local_time,
)
from mobile_wash.tools.catalog import Catalog

logger = get_request_logger(__name__)


def _as_date(day: Union[date, datetime]) -> date:
    return day.date() if isinstance(day, datetime) else day


def _scheduling(
    catalog: Catalog, zone_id: int, scheduling: Optional[SchedulingConfig]
) -> SchedulingConfig:
    return scheduling or catalog.scheduling_for(zone_id, settings.scheduling)


def operating_window(day: date, scheduling: SchedulingConfig) -> tuple[datetime, datetime]:
    """Opening and closing instants of ``day``."""
    return (
        datetime.combine(day, scheduling.opens_at),
        datetime.combine(day, scheduling.closes_at),
    )


def generate_windows(
    day: date, scheduling: SchedulingConfig
) -> Iterator[tuple[datetime, datetime]]:
    """Yield ``[t, t + window)`` from opening time, stepping ``t`` by the slot step."""
    opens, closes = operating_window(day, scheduling)
    window = timedelta(minutes=scheduling.slot_window_minutes)
    step = timedelta(minutes=scheduling.slot_step_minutes)
    start = opens
    while start + window <= closes:
        yield start, start + window
        start += step


def count_overlapping(
    catalog: Catalog, zone_id: int, start: datetime, end: datetime
) -> int:
    return len(catalog.confirmed_bookings(zone_id, start, end))


def get_available_slots(
    catalog: Catalog,
    zone_id: int,
    service_duration: int,
    day: Union[date, datetime],
    scheduling: Optional[SchedulingConfig] = None,
) -> list[TimeSlot]:
    """
    List every candidate window for ``day`` in chronological order,
    each flagged available or not for a service of ``service_duration``
    minutes.

    Raises:
        ZoneNotFoundError: the zone does not exist.
        ValueError: ``service_duration`` is negative.
    """
    if catalog.get_zone(zone_id) is None:
        raise ZoneNotFoundError(zone_id)
    if service_duration < 0:
        raise ValueError(f"service_duration must be >= 0, got {service_duration}")

    scheduling = _scheduling(catalog, zone_id, scheduling)
    fits_window = (
        service_duration + scheduling.buffer_minutes <= scheduling.slot_window_minutes
    )
    if not fits_window:
        logger.info(
            "Service of %d min plus %d min buffer exceeds the %d min window; "
            "no slot in zone %s can take it",
            service_duration, scheduling.buffer_minutes,
            scheduling.slot_window_minutes, zone_id,
        )

    slots = []
    for start, end in generate_windows(_as_date(day), scheduling):
        overlapping = count_overlapping(catalog, zone_id, start, end)
        slots.append(
            TimeSlot(
                start=start,
                end=end,
                available=fits_window and overlapping < scheduling.team_capacity,
                zone_id=zone_id,
            )
        )

    logger.debug(
        "Zone %s on %s: %d/%d slot(s) available",
        zone_id, _as_date(day), sum(s.available for s in slots), len(slots),
    )
    return slots


def is_slot_free(
    catalog: Catalog,
    zone_id: int,
    start: datetime,
    end: datetime,
    scheduling: Optional[SchedulingConfig] = None,
) -> bool:
    """Check a caller-chosen window, e.g. before confirming a reschedule.

    Returns False rather than raising for an unknown zone, an empty or
    inverted window, a window outside operating hours, or a full crew.

    Raises:
        ValueError: ``start`` or ``end`` carries a UTC offset.
    """
    require_local_time(start)
    require_local_time(end)
    if catalog.get_zone(zone_id) is None:
        logger.warning("Slot check for unknown zone %s", zone_id)
        return False
    if end <= start:
        return False

    scheduling = _scheduling(catalog, zone_id, scheduling)
    opens, closes = operating_window(start.date(), scheduling)
    if start < opens or end > closes:
        logger.info(
            "Window %s-%s is outside zone %s hours %s-%s",
            start, end, zone_id, scheduling.open_time, scheduling.close_time,
        )
        return False

    overlapping = count_overlapping(catalog, zone_id, start, end)
    return overlapping < scheduling.team_capacity


def get_zone_schedule(
    catalog: Catalog,
    zone_id: int,
    day: Union[date, datetime],
    scheduling: Optional[SchedulingConfig] = None,
) -> ZoneSchedule:
    """Operating hours, capacity and confirmed bookings of a zone for one day."""
    if catalog.get_zone(zone_id) is None:
        raise ZoneNotFoundError(zone_id)

    scheduling = _scheduling(catalog, zone_id, scheduling)
    day = _as_date(day)
    day_start = datetime.combine(day, datetime.min.time())
    booked = [
        TimeSlot(
            start=booking.scheduled_window_start,
            end=booking.scheduled_window_end,
            available=False,
            zone_id=zone_id,
        )
        for booking in catalog.confirmed_bookings(
            zone_id, day_start, day_start + timedelta(days=1)
        )
    ]
    return ZoneSchedule(
        zone_id=zone_id,
        day=day,
        operating_hours=OperatingHours(
            start=scheduling.open_time, end=scheduling.close_time
        ),
        booked_slots=booked,
        team_capacity=scheduling.team_capacity,
    )
