"""
Booking planning: the checks a booking workflow runs before it writes.

Resolves the zone, quotes the price and checks the requested window in
that order. Persisting the booking and notifying the customer belong to
the caller, which must re-validate capacity inside the transaction that
writes the booking.
"""

from typing import Optional, TypedDict

from mobile_wash.config import SchedulingConfig
from mobile_wash.errors import NotFoundError
from mobile_wash.logging_context import get_request_logger
from mobile_wash.schemas.booking_schema import BookingRequest
from mobile_wash.schemas.pricing_schema import PriceBreakdown, PriceRequest
from mobile_wash.tools.availability import is_slot_free
from mobile_wash.tools.catalog import Catalog
from mobile_wash.tools.pricing import calculate_price
from mobile_wash.tools.zones import resolve_zone

logger = get_request_logger(__name__)


class BookingPlan(TypedDict, total=False):
    """Result from plan_booking."""

    success: bool
    message: str
    zone_id: int
    quote: PriceBreakdown


def plan_booking(
    catalog: Catalog,
    request: BookingRequest,
    scheduling: Optional[SchedulingConfig] = None,
) -> BookingPlan:
    """Check that a booking request can be placed and price it."""
    if request.zone_id is not None:
        zone_id = request.zone_id
    else:
        zone = resolve_zone(catalog, request.geo_point)
        if zone is None:
            return {
                "success": False,
                "message": "Sorry, this location is outside our service zones.",
            }
        zone_id = zone.id

    price_request = PriceRequest(
        service_id=request.service_id,
        addons=request.addons,
        car_type=request.car_type,
        zone_id=zone_id,
        geo_point=request.geo_point,
        is_solo=request.is_solo,
    )
    try:
        quote = calculate_price(catalog, price_request)
    except NotFoundError as exc:
        logger.warning("Booking refused: %s", exc)
        return {"success": False, "message": f"Cannot book: {exc}.", "zone_id": zone_id}

    start = request.scheduled_window_start
    end = request.scheduled_window_end
    if not is_slot_free(catalog, zone_id, start, end, scheduling):
        return {
            "success": False,
            "message": f"The window {start:%Y-%m-%d %H:%M}-{end:%H:%M} is not available.",
            "zone_id": zone_id,
            "quote": quote,
        }

    logger.info(
        "Booking plan ready for zone %s at %s, total %.2f",
        zone_id, start.isoformat(), quote.total_price,
    )
    return {
        "success": True,
        "message": (
            f"Window {start:%Y-%m-%d %H:%M}-{end:%H:%M} is available. "
            f"Total {quote.total_price:.2f}."
        ),
        "zone_id": zone_id,
        "quote": quote,
    }
