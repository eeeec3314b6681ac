"""
Price quotes: base price, add-ons, distance fee and car-type adjustment.

The quote is a pure function of the catalog snapshot and the request.
Only a missing service or zone aborts a quote; anything else that is
missing or malformed in configuration resolves to a neutral value.
"""

from typing import Optional

from mobile_wash.config import PricingConfig, settings
from mobile_wash.errors import ServiceNotFoundError, ZoneNotFoundError
from mobile_wash.logging_context import get_request_logger
from mobile_wash.schemas.pricing_schema import (
    CarType,
    DistanceFeeRule,
    PriceBreakdown,
    PriceRequest,
)
from mobile_wash.schemas.zone_schema import GeoPoint, Zone
from mobile_wash.tools.catalog import Catalog
from mobile_wash.tools.pricing_rules import PricingRuleSet
from mobile_wash.utils import haversine_km, round_money

logger = get_request_logger(__name__)


def distance_fee_for_distance(distance_km: float, rule: DistanceFeeRule) -> float:
    """Fee for travelling ``distance_km`` from the zone center.

    Free up to ``max_free_distance_km``, then ``fee_per_km`` for every
    kilometre beyond it, capped at ``max_fee``.

    Examples:
        >>> rule = DistanceFeeRule(max_free_distance_km=5, fee_per_km=2.5, max_fee=50)
        >>> distance_fee_for_distance(12, rule)
        17.5
        >>> distance_fee_for_distance(30, rule)
        50.0
    """
    if distance_km <= rule.max_free_distance_km:
        return 0.0
    extra_km = distance_km - rule.max_free_distance_km
    return float(min(rule.max_fee, extra_km * rule.fee_per_km))


def zone_distance_fee(zone: Zone, point: GeoPoint, rules: PricingRuleSet) -> float:
    """Distance fee for a known zone; 0 without an active rule or a zone center."""
    rule = rules.distance_fee
    if rule is None:
        return 0.0
    center = zone.center
    if center is None:
        logger.warning("Zone %s has no center, distance fee waived", zone.id)
        return 0.0
    distance = haversine_km(point.lat, point.lng, center.lat, center.lng)
    fee = distance_fee_for_distance(distance, rule)
    logger.debug("Zone %s: %.2f km from center, fee %.2f", zone.id, distance, fee)
    return fee


def calculate_distance_fee(
    catalog: Catalog,
    point: GeoPoint,
    zone_id: int,
    config: Optional[PricingConfig] = None,
) -> float:
    """Standalone distance fee lookup.

    Unlike a full quote, an unknown zone does not fail here; it is charged
    the flat ``unknown_zone_distance_fee``.
    """
    config = config or settings.pricing
    zone = catalog.get_zone(zone_id)
    if zone is None:
        logger.warning(
            "Zone %s not found, applying flat distance fee %.2f",
            zone_id, config.unknown_zone_distance_fee,
        )
        return round_money(config.unknown_zone_distance_fee)
    return round_money(zone_distance_fee(zone, point, catalog.rules))


def car_type_multiplier(rules: PricingRuleSet, car_type: CarType) -> float:
    multipliers = rules.car_type_multipliers
    if multipliers is None:
        return 1.0
    return multipliers.for_car(car_type)


def calculate_price(catalog: Catalog, request: PriceRequest) -> PriceBreakdown:
    """
    Quote a booking request.

    Raises:
        ServiceNotFoundError: the requested service does not exist.
        ZoneNotFoundError: the requested zone does not exist.

    Unknown add-on ids are dropped from the quote, and an add-on listed
    more than once is charged once.
    """
    service = catalog.get_service(request.service_id)
    if service is None:
        raise ServiceNotFoundError(request.service_id)

    base = service.base_price_solo if request.is_solo else service.base_price_team
    duration = service.est_minutes

    addons_total = 0.0
    for addon_id in dict.fromkeys(request.addons):
        addon = catalog.get_addon(addon_id)
        if addon is None:
            logger.warning("Addon %s not found, left out of the quote", addon_id)
            continue
        addons_total += addon.price
        duration += addon.est_minutes

    zone = catalog.get_zone(request.zone_id)
    if zone is None:
        raise ZoneNotFoundError(request.zone_id)

    distance_fee = round_money(zone_distance_fee(zone, request.geo_point, catalog.rules))
    multiplier = car_type_multiplier(catalog.rules, request.car_type)

    base_price = round_money(base * multiplier)
    addons_price = round_money(addons_total * multiplier)
    total_price = round_money(base_price + addons_price + distance_fee)

    logger.info(
        "Quoted service %s in zone %s: total %.2f (base %.2f, addons %.2f, fee %.2f, x%.2f)",
        service.id, zone.id, total_price, base_price, addons_price, distance_fee, multiplier,
    )
    return PriceBreakdown(
        base_price=base_price,
        addons_total=addons_price,
        distance_fee=distance_fee,
        total_price=total_price,
        estimated_duration=duration,
    )
