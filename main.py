"""
Command-line entry point for the booking core.

Loads a JSON catalog export (zones, services, addons, pricing_rules,
bookings and optional per-zone schedules) and runs one computation,
printing the result as JSON.

Usage:
    python main.py --catalog catalog.json zone 24.7136 46.6753
    python main.py --catalog catalog.json quote --service 1 --zone 1 --lat 24.75 --lng 46.7 --addon 2
    python main.py --catalog catalog.json slots --zone 1 --duration 45 --date 2024-01-15
    python main.py --catalog catalog.json check --zone 1 --start 2024-01-15T10:00 --end 2024-01-15T11:30
    python main.py --catalog catalog.json schedule --zone 1 --date 2024-01-15
"""

import argparse
import json
import logging
import sys
import uuid
from datetime import date, datetime
from pathlib import Path

from mobile_wash.errors import NotFoundError
from mobile_wash.logging_context import set_request_id
from mobile_wash.schemas.pricing_schema import CarType, PriceRequest
from mobile_wash.schemas.zone_schema import GeoPoint
from mobile_wash.tools.availability import get_available_slots, get_zone_schedule, is_slot_free
from mobile_wash.tools.catalog import Catalog
from mobile_wash.tools.pricing import calculate_price
from mobile_wash.tools.zones import resolve_zone

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve zones, quote prices and list time slots for mobile car washes."
    )
    parser.add_argument(
        "--catalog",
        type=str,
        required=True,
        help="Path to a JSON catalog export.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    zone = commands.add_parser("zone", help="Find the zone covering a coordinate.")
    zone.add_argument("lat", type=float)
    zone.add_argument("lng", type=float)

    quote = commands.add_parser("quote", help="Quote a price.")
    quote.add_argument("--service", type=int, required=True)
    quote.add_argument("--zone", type=int, required=True)
    quote.add_argument("--lat", type=float, required=True)
    quote.add_argument("--lng", type=float, required=True)
    quote.add_argument("--addon", type=int, action="append", default=[])
    quote.add_argument(
        "--car-type", choices=[c.value for c in CarType], default=CarType.SEDAN.value
    )
    quote.add_argument("--solo", action="store_true")

    slots = commands.add_parser("slots", help="List a day's time slots for a zone.")
    slots.add_argument("--zone", type=int, required=True)
    slots.add_argument("--duration", type=int, required=True, help="Service minutes.")
    slots.add_argument("--date", type=date.fromisoformat, required=True)

    check = commands.add_parser("check", help="Check whether a window is free.")
    check.add_argument("--zone", type=int, required=True)
    check.add_argument("--start", type=datetime.fromisoformat, required=True)
    check.add_argument("--end", type=datetime.fromisoformat, required=True)

    schedule = commands.add_parser("schedule", help="Show a zone's day schedule.")
    schedule.add_argument("--zone", type=int, required=True)
    schedule.add_argument("--date", type=date.fromisoformat, required=True)

    return parser


def _run(args: argparse.Namespace, catalog: Catalog):
    if args.command == "zone":
        found = resolve_zone(catalog, GeoPoint(lat=args.lat, lng=args.lng))
        return found.model_dump(mode="json") if found else None

    if args.command == "quote":
        request = PriceRequest(
            service_id=args.service,
            addons=args.addon,
            car_type=args.car_type,
            zone_id=args.zone,
            geo_point=GeoPoint(lat=args.lat, lng=args.lng),
            is_solo=args.solo,
        )
        return calculate_price(catalog, request).model_dump(mode="json")

    if args.command == "slots":
        return [
            slot.model_dump(mode="json")
            for slot in get_available_slots(catalog, args.zone, args.duration, args.date)
        ]

    if args.command == "check":
        return {"available": is_slot_free(catalog, args.zone, args.start, args.end)}

    return get_zone_schedule(catalog, args.zone, args.date).model_dump(mode="json")


def main() -> None:
    args = _build_parser().parse_args()
    set_request_id(f"CLI-{uuid.uuid4().hex[:8]}")

    catalog_path = Path(args.catalog)
    if not catalog_path.exists():
        logger.error("Catalog file not found: %s", catalog_path)
        sys.exit(1)

    try:
        catalog = Catalog.from_dict(json.loads(catalog_path.read_text(encoding="utf-8")))
        result = _run(args, catalog)
    except (NotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        sys.exit(1)

    sys.stdout.write(json.dumps(result, indent=2) + "\n")


if __name__ == "__main__":
    main()
