"""Tests for the VOR station catalog."""

from pathlib import Path

import pytest

from vortrainer.core.resource_path import get_data_path
from vortrainer.navigation.geodesy import GeoPoint
from vortrainer.navigation.stations import Station, StationCatalog, StationCatalogError

HEADER = "identifier,name,frequency,latitude,longitude,declination\n"


def write_csv(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "stations.csv"
    path.write_text(HEADER + body, encoding="utf-8")
    return path


class TestDefaultCatalog:
    """Test the built-in stations."""

    def test_contains_training_stations(self, catalog: StationCatalog) -> None:
        assert len(catalog) == 3
        assert [s.identifier for s in catalog] == ["LAX", "SAN", "SFO"]
        assert catalog.frequencies == ["113.60", "117.80", "115.80"]

    def test_find_station(self, catalog: StationCatalog) -> None:
        lax = catalog.find_station("LAX")
        assert lax.name == "Los Angeles VOR"
        assert lax.position == GeoPoint(33.9425, -118.4081)
        assert lax.declination == 12
        assert catalog.find_station("lax") is None

    def test_contains(self, catalog: StationCatalog) -> None:
        assert "SFO" in catalog
        assert "JFK" not in catalog

    def test_find_by_frequency_is_exact(self, catalog: StationCatalog) -> None:
        assert catalog.find_by_frequency("117.80").identifier == "SAN"
        assert catalog.find_by_frequency("117.8") is None
        assert catalog.find_by_frequency("108.00") is None

    def test_find_nearest(self, catalog: StationCatalog) -> None:
        assert catalog.find_nearest(GeoPoint(33.0, -117.3)).identifier == "SAN"
        assert catalog.find_nearest(GeoPoint(37.0, -122.0)).identifier == "SFO"

    def test_find_nearest_empty(self) -> None:
        assert StationCatalog([]).find_nearest(GeoPoint(0, 0)) is None

    def test_str(self, catalog: StationCatalog) -> None:
        assert str(catalog.find_station("LAX")) == "LAX (113.60)"


class TestDuplicates:
    """Test duplicate identifiers."""

    def test_first_wins(self) -> None:
        first = Station("AAA", "First", "110.00", GeoPoint(0, 0))
        second = Station("AAA", "Second", "111.00", GeoPoint(1, 1))

        catalog = StationCatalog([first, second])

        assert len(catalog) == 1
        assert catalog.find_station("AAA") is first
        assert catalog.find_by_frequency("111.00") is None


class TestCSVLoading:
    """Test loading stations from CSV."""

    def test_bundled_file_matches_defaults(self) -> None:
        catalog = StationCatalog.from_csv(get_data_path("navigation/vor_stations.csv"))
        default = StationCatalog.default()
        assert list(catalog) == list(default)

    def test_frequency_kept_as_written(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path, "ABC,Alpha,110.50,10.0,20.0,3\n")

        station = StationCatalog.from_csv(path).find_station("ABC")

        assert station.frequency == "110.50"
        assert station.position == GeoPoint(10.0, 20.0)
        assert station.declination == 3

    def test_missing_declination_defaults_to_zero(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path, "ABC,Alpha,110.50,10.0,20.0,\n")
        assert StationCatalog.from_csv(path).find_station("ABC").declination == 0

    def test_invalid_rows_skipped(self, tmp_path: Path) -> None:
        path = write_csv(
            tmp_path,
            "GOOD,Good,110.00,1.0,2.0,0\n"
            "BADLAT,Bad,111.00,north,2.0,0\n"
            ",NoId,112.00,1.0,2.0,0\n"
            "BADFREQ,Bad,one-one-two,1.0,2.0,0\n"
            "SHORT,Short\n",
        )

        catalog = StationCatalog.from_csv(path)

        assert [s.identifier for s in catalog] == ["GOOD"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(StationCatalogError, match="not found"):
            StationCatalog.from_csv(tmp_path / "nope.csv")
