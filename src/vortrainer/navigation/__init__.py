"""Geodesy, VOR stations and NAV frequency tuning.

Typical usage:
    from vortrainer.navigation import GeoPoint, StationCatalog, distance_nm

    catalog = StationCatalog.default()
    lax = catalog.find_station("LAX")
    distance_nm(GeoPoint(34.0522, -118.2437), lax.position)
"""

from vortrainer.navigation.frequency_tuner import FrequencyTuner, format_frequency
from vortrainer.navigation.geodesy import (
    GeoPoint,
    bearing_deg,
    displace,
    distance_nm,
    max_reception_range_nm,
    normalize_degrees,
)
from vortrainer.navigation.stations import (
    DEFAULT_STATIONS,
    Station,
    StationCatalog,
    StationCatalogError,
)

__all__ = [
    "DEFAULT_STATIONS",
    "FrequencyTuner",
    "GeoPoint",
    "Station",
    "StationCatalog",
    "StationCatalogError",
    "bearing_deg",
    "displace",
    "distance_nm",
    "format_frequency",
    "max_reception_range_nm",
    "normalize_degrees",
]
