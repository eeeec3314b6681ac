"""Pricing rule records, typed rule payloads, and price quote models."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from mobile_wash.config import settings
from mobile_wash.schemas.zone_schema import GeoPoint


class CarType(str, Enum):
    SEDAN = "sedan"
    SUV = "suv"
    PICKUP = "pickup"


class PricingRule(BaseModel):
    """A named, toggleable rule as stored by the admin side.

    ``value_json`` is kept exactly as stored, normally a JSON string or an
    already decoded mapping. Any other shape is accepted here and rejected
    as an invalid payload when the rule set is built.
    """
    id: Optional[int] = None
    key: str
    value_json: Any
    enabled: bool = True


class DistanceFeeRule(BaseModel):
    """Payload of the ``distance_fee`` rule."""

    max_free_distance_km: float = Field(
        default_factory=lambda: settings.pricing.default_free_distance_km,
        ge=0,
    )
    fee_per_km: float = Field(
        default_factory=lambda: settings.pricing.default_fee_per_km, ge=0
    )
    max_fee: float = Field(
        default_factory=lambda: settings.pricing.default_max_fee, ge=0
    )


class CarTypeMultipliers(BaseModel):
    """Payload of the ``car_type_multipliers`` rule. Unlisted types price at 1."""
    sedan: Optional[float] = Field(default=None, ge=0)
    suv: Optional[float] = Field(default=None, ge=0)
    pickup: Optional[float] = Field(default=None, ge=0)

    def for_car(self, car_type: CarType) -> float:
        value = getattr(self, CarType(car_type).value)
        return 1.0 if value is None else value


class PriceRequest(BaseModel):
    """Inputs for a price quote."""
    service_id: int
    addons: list[int] = Field(default_factory=list)
    car_type: CarType = CarType.SEDAN
    zone_id: int
    geo_point: GeoPoint
    is_solo: bool = False


class PriceBreakdown(BaseModel):
    """Price quote with the estimated on-site duration in minutes."""
    base_price: float
    addons_total: float
    distance_fee: float
    total_price: float
    estimated_duration: int
