"""Shared geometry and money helpers used across the booking core."""

from math import atan2, cos, radians, sin, sqrt

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two coordinates in kilometres.

    Examples:
        >>> haversine_km(24.7136, 46.6753, 24.7136, 46.6753)
        0.0
        >>> round(haversine_km(0.0, 0.0, 0.0, 1.0), 2)
        111.19
    """
    dlat = radians(lat2 - lat1)
    dlng = radians(lng2 - lng1)
    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlng / 2) ** 2
    return EARTH_RADIUS_KM * 2 * atan2(sqrt(a), sqrt(1 - a))


def round_money(value: float) -> float:
    """Round a currency amount to two decimals.

    Examples:
        >>> round_money(17.999999999999996)
        18.0
    """
    return round(value, 2)
