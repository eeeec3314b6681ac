"""Booking, time slot, and zone schedule data models.

Instants are zone-local wall-clock times without a UTC offset, the way the
bookings store keeps them. Offset-aware values are rejected at the model
boundary so they can never be compared against generated slot windows.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from mobile_wash.config import SchedulingConfig
from mobile_wash.schemas.pricing_schema import CarType
from mobile_wash.schemas.zone_schema import GeoPoint


def require_local_time(value: datetime) -> datetime:
    """Reject instants that carry a UTC offset."""
    if value.tzinfo is not None and value.utcoffset() is not None:
        raise ValueError(
            f"expected a zone-local time without UTC offset, got {value.isoformat()}"
        )
    return value


LocalDateTime = Annotated[datetime, AfterValidator(require_local_time)]


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    ON_THE_WAY = "on_the_way"
    STARTED = "started"
    FINISHED = "finished"
    POSTPONED = "postponed"
    CANCELED = "canceled"


class Booking(BaseModel):
    """An existing appointment, read only to compute zone occupancy."""
    id: int
    zone_id: int
    scheduled_window_start: LocalDateTime
    scheduled_window_end: LocalDateTime
    status: BookingStatus = BookingStatus.CONFIRMED
    customer_id: Optional[int] = None
    service_id: Optional[int] = None

    @model_validator(mode="after")
    def _window_is_ordered(self) -> "Booking":
        if self.scheduled_window_end <= self.scheduled_window_start:
            raise ValueError(
                f"Booking {self.id} window ends before it starts"
            )
        return self


class BookingRequest(BaseModel):
    """Everything the booking workflow collects before placing an appointment."""
    service_id: int
    addons: list[int] = Field(default_factory=list)
    car_type: CarType = CarType.SEDAN
    zone_id: Optional[int] = None
    geo_point: GeoPoint
    scheduled_window_start: LocalDateTime
    scheduled_window_end: LocalDateTime
    is_solo: bool = False


class ScheduleOverride(BaseModel):
    """A zone's scheduling override as exported by the admin side.

    Unset fields fall back to the global scheduling defaults. Unknown keys
    are an error rather than a silently ignored typo.
    """

    model_config = ConfigDict(extra="forbid")

    open_time: Optional[str] = None
    close_time: Optional[str] = None
    slot_window_minutes: Optional[int] = None
    slot_step_minutes: Optional[int] = None
    buffer_minutes: Optional[int] = None
    team_capacity: Optional[int] = None

    def to_config(self) -> SchedulingConfig:
        return SchedulingConfig(**self.model_dump(exclude_none=True))


class TimeSlot(BaseModel):
    """A candidate appointment window. Derived per request, never stored."""
    start: datetime
    end: datetime
    available: bool
    zone_id: int


class OperatingHours(BaseModel):
    start: str
    end: str


class ZoneSchedule(BaseModel):
    """A zone's day at a glance for admin capacity planning."""
    zone_id: int
    day: date
    operating_hours: OperatingHours
    booked_slots: list[TimeSlot] = Field(default_factory=list)
    team_capacity: int
