"""
Zone resolution: map a customer's coordinate to the service zone covering it.

Circular zones use the haversine distance to their center; polygonal zones
use ray casting. Zones whose geometry failed to parse never match.
"""

from typing import Optional, Sequence

from mobile_wash.logging_context import get_request_logger
from mobile_wash.schemas.zone_schema import (
    CenterGeometry,
    GeoPoint,
    PolygonGeometry,
    Zone,
)
from mobile_wash.tools.catalog import Catalog
from mobile_wash.utils import haversine_km

logger = get_request_logger(__name__)


def point_in_polygon(lat: float, lng: float, vertices: Sequence[GeoPoint]) -> bool:
    # Ray casting along the longitude axis; points exactly on an edge may land either side.
    inside = False
    j = len(vertices) - 1
    for i, vertex in enumerate(vertices):
        yi, xi = vertex.lat, vertex.lng
        yj, xj = vertices[j].lat, vertices[j].lng
        if (yi > lat) != (yj > lat):
            x_intersect = (xj - xi) * (lat - yi) / (yj - yi) + xi
            if lng < x_intersect:
                inside = not inside
        j = i
    return inside


def zone_contains(zone: Zone, point: GeoPoint) -> bool:
    """Whether ``point`` lies inside the zone's geometry."""
    geometry = zone.geometry
    if isinstance(geometry, CenterGeometry):
        distance = haversine_km(point.lat, point.lng, geometry.lat, geometry.lng)
        return distance <= geometry.radius_km
    if isinstance(geometry, PolygonGeometry):
        return point_in_polygon(point.lat, point.lng, geometry.coordinates)
    return False


def resolve_zone(catalog: Catalog, point: GeoPoint) -> Optional[Zone]:
    """Return the first zone, by ascending id, that contains ``point``.

    Returns None when no zone covers the location.
    """
    for zone in catalog.zones_in_order():
        if zone.geometry is None:
            logger.debug("Skipping zone %s: no usable geometry", zone.id)
            continue
        if zone_contains(zone, point):
            logger.info("Resolved (%.5f, %.5f) to zone %s", point.lat, point.lng, zone.id)
            return zone
    logger.info("No zone covers (%.5f, %.5f)", point.lat, point.lng)
    return None


def get_zones(catalog: Catalog) -> list[Zone]:
    """Return all zones in resolution order."""
    return catalog.zones_in_order()


def get_zone_by_id(catalog: Catalog, zone_id: int) -> Optional[Zone]:
    """Get a zone by id. Returns None if it does not exist."""
    return catalog.get_zone(zone_id)
