"""VOR station records and the read-only station catalog.

The catalog is loaded once at startup, either from the bundled CSV file or
from the built-in training stations, and is never modified afterwards.

Typical usage:
    catalog = StationCatalog.from_csv(get_data_path("navigation/vor_stations.csv"))

    lax = catalog.find_station("LAX")
    tuned = catalog.find_by_frequency("113.60")
"""

import csv
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from vortrainer.navigation.geodesy import GeoPoint, distance_nm

logger = logging.getLogger(__name__)


class StationCatalogError(Exception):
    """Raised when a station catalog file cannot be read."""


@dataclass(frozen=True)
class Station:
    """A VOR ground station.

    Attributes:
        identifier: Short code, unique within the catalog (e.g., "LAX").
        name: Human-readable name (e.g., "Los Angeles VOR").
        frequency: Tuning token in the NAV band (e.g., "113.60").
        position: Station location.
        declination: Local magnetic declination in degrees. Stored for
            display only; bearings are true.

    Examples:
        >>> lax = Station("LAX", "Los Angeles VOR", "113.60", GeoPoint(33.9425, -118.4081), 12)
        >>> str(lax)
        'LAX (113.60)'
    """

    identifier: str
    name: str
    frequency: str
    position: GeoPoint
    declination: float = 0.0

    def __str__(self) -> str:
        return f"{self.identifier} ({self.frequency})"


DEFAULT_STATIONS = (
    Station("LAX", "Los Angeles VOR", "113.60", GeoPoint(33.9425, -118.4081), 12),
    Station("SAN", "San Diego VOR", "117.80", GeoPoint(32.7353, -117.1900), 12),
    Station("SFO", "San Francisco VOR", "115.80", GeoPoint(37.6213, -122.3790), 14),
)


class StationCatalog:
    """Immutable collection of VOR stations.

    Stations keep their catalog order, which is the order frequency presets
    are offered in.

    Examples:
        >>> catalog = StationCatalog.default()
        >>> catalog.find_by_frequency("117.80").identifier
        'SAN'
        >>> catalog.find_by_frequency("117.8") is None
        True
    """

    def __init__(self, stations: Iterable[Station]) -> None:
        by_id: dict[str, Station] = {}
        for station in stations:
            if station.identifier in by_id:
                logger.warning("Duplicate station identifier %s ignored", station.identifier)
                continue
            by_id[station.identifier] = station

        self._stations = tuple(by_id.values())
        self._by_id = by_id
        logger.info("Station catalog ready with %d stations", len(self._stations))

    @classmethod
    def default(cls) -> "StationCatalog":
        """Catalog of the built-in training stations."""
        return cls(DEFAULT_STATIONS)

    @classmethod
    def from_csv(cls, csv_path: str | Path) -> "StationCatalog":
        """Load a catalog from CSV.

        Expected columns:
            identifier,name,frequency,latitude,longitude,declination

        Rows with missing or malformed values are skipped with a warning.
        Frequencies are kept as written so that "113.60" stays "113.60".

        Args:
            csv_path: Path to the CSV file.

        Returns:
            The loaded catalog.

        Raises:
            StationCatalogError: If the file does not exist or cannot be read.
        """
        path = Path(csv_path)
        if not path.exists():
            raise StationCatalogError(f"Station catalog not found: {csv_path}")

        stations = []
        try:
            with path.open(encoding="utf-8", newline="") as f:
                for row in csv.DictReader(f):
                    try:
                        stations.append(_station_from_row(row))
                    except (KeyError, TypeError, ValueError) as e:
                        logger.warning("Skipping invalid station row %s: %s", row, e)
        except OSError as e:
            raise StationCatalogError(f"Failed to read station catalog: {e}") from e

        logger.info("Loaded %d stations from %s", len(stations), csv_path)
        return cls(stations)

    def find_station(self, identifier: str) -> Station | None:
        """Find a station by identifier (case-sensitive)."""
        return self._by_id.get(identifier)

    def find_by_frequency(self, frequency: str) -> Station | None:
        """Find the station tuned by an exact frequency token.

        Matching is plain string equality; "113.6" does not tune "113.60".
        """
        for station in self._stations:
            if station.frequency == frequency:
                return station
        return None

    def find_nearest(self, position: GeoPoint) -> Station | None:
        """Find the station closest to a position, or None for an empty catalog."""
        if not self._stations:
            return None
        return min(self._stations, key=lambda s: distance_nm(position, s.position))

    @property
    def frequencies(self) -> list[str]:
        return [station.frequency for station in self._stations]

    def __iter__(self) -> Iterator[Station]:
        return iter(self._stations)

    def __len__(self) -> int:
        return len(self._stations)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._by_id


def _station_from_row(row: dict[str, str]) -> Station:
    identifier = (row.get("identifier") or "").strip()
    frequency = (row.get("frequency") or "").strip()
    if not identifier or not frequency:
        raise ValueError("identifier and frequency are required")
    float(frequency)

    declination = row.get("declination") or "0"
    return Station(
        identifier=identifier,
        name=row["name"].strip(),
        frequency=frequency,
        position=GeoPoint(float(row["latitude"]), float(row["longitude"])),
        declination=float(declination),
    )
