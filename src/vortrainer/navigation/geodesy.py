"""Spherical-earth distance and bearing helpers.

All angles are decimal degrees and all distances nautical miles. Distance
and bearing use great-circle formulas; ``displace`` uses the flat-earth
step the trainer animates flight with. The two models differ slightly over
long distances and that difference is kept.
"""

import math
from dataclasses import dataclass

EARTH_RADIUS_NM = 3440.065
NM_PER_DEGREE_LAT = 60.0
MAX_RECEPTION_RANGE_NM = 200.0
RANGE_FACTOR = 1.23


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees.

    Values are not validated; out-of-range coordinates give mathematically
    defined but meaningless results.

    Attributes:
        latitude: Degrees north, nominally [-90, 90].
        longitude: Degrees east, nominally [-180, 180].
    """

    latitude: float
    longitude: float

    def __str__(self) -> str:
        return f"{self.latitude:.4f}, {self.longitude:.4f}"


def normalize_degrees(value: float) -> float:
    """Wrap an angle into [0, 360).

    Examples:
        >>> normalize_degrees(-10)
        350
        >>> normalize_degrees(370)
        10
    """
    return ((value % 360) + 360) % 360


def distance_nm(p1: GeoPoint, p2: GeoPoint) -> float:
    """Great-circle distance between two points using the haversine formula.

    Args:
        p1: First point.
        p2: Second point.

    Returns:
        Distance in nautical miles.

    Examples:
        >>> lax = GeoPoint(33.9425, -118.4081)
        >>> round(distance_nm(lax, GeoPoint(33.9425, -117.9000)), 1)
        25.3
    """
    lat1, lat2 = math.radians(p1.latitude), math.radians(p2.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(p2.longitude - p1.longitude)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push a just past 1 for antipodal points.
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_NM * c


def bearing_deg(from_point: GeoPoint, to_point: GeoPoint) -> float:
    """Initial great-circle bearing from one point toward another.

    Args:
        from_point: Origin.
        to_point: Destination.

    Returns:
        True bearing in degrees, [0, 360).
    """
    lat1, lat2 = math.radians(from_point.latitude), math.radians(to_point.latitude)
    dlon = math.radians(to_point.longitude - from_point.longitude)

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
    return (math.degrees(math.atan2(y, x)) + 360) % 360


def max_reception_range_nm(altitude_ft: float) -> float:
    """Line-of-sight VOR reception range for an altitude, capped at 200 nm.

    Examples:
        >>> round(max_reception_range_nm(5000), 1)
        87.0
    """
    if altitude_ft <= 0:
        return 0.0
    return min(MAX_RECEPTION_RANGE_NM, RANGE_FACTOR * math.sqrt(altitude_ft))


def displace(point: GeoPoint, heading: float, distance: float) -> GeoPoint:
    """Move a point along a heading using the flat-earth approximation.

    One degree of latitude is 60 nm and longitude is scaled by the cosine of
    the starting latitude. Negative distances move backward. Undefined at
    the poles.

    Args:
        point: Starting position.
        heading: True heading in degrees, clockwise from north.
        distance: Distance in nautical miles.

    Returns:
        The displaced position.
    """
    heading_rad = math.radians(heading)
    dlat = (distance / NM_PER_DEGREE_LAT) * math.cos(heading_rad)
    dlon = (distance / NM_PER_DEGREE_LAT) * math.sin(heading_rad) / math.cos(
        math.radians(point.latitude)
    )
    return GeoPoint(point.latitude + dlat, point.longitude + dlon)
