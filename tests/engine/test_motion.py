"""Tests for moving the aircraft along its heading."""

import math

import pytest

from vortrainer.engine.events import AircraftStateChangedEvent, ReceiverUpdatedEvent
from vortrainer.engine.state import ToFrom
from vortrainer.engine.vor_engine import NavigationEngine
from vortrainer.navigation.geodesy import distance_nm


class TestMoveForward:
    """Test flat-earth motion integration."""

    def test_north_sixty_nm(self, engine: NavigationEngine) -> None:
        engine.set_aircraft_position(10.0, 20.0)
        engine.set_aircraft_heading(0)
        engine.move_forward(60)

        assert engine.aircraft.position.latitude == pytest.approx(11.0)
        assert engine.aircraft.position.longitude == pytest.approx(20.0)

    def test_east_scales_with_latitude(self, engine: NavigationEngine) -> None:
        engine.set_aircraft_position(60.0, 0.0)
        engine.set_aircraft_heading(90)
        engine.move_forward(30)

        assert engine.aircraft.position.latitude == pytest.approx(60.0)
        assert engine.aircraft.position.longitude == pytest.approx(1.0)

    def test_zero_distance_changes_nothing(self, engine: NavigationEngine) -> None:
        before_aircraft, before_receiver = engine.aircraft, engine.receiver
        engine.move_forward(0)
        assert engine.aircraft == before_aircraft
        assert engine.receiver == before_receiver

    def test_heading_and_speed_unchanged(self, engine: NavigationEngine) -> None:
        engine.set_aircraft_heading(33)
        engine.move_forward(12.5)
        assert engine.aircraft.heading == 33
        assert engine.aircraft.speed == 120

    def test_forward_then_back_on_east_heading(self, engine: NavigationEngine) -> None:
        start = engine.aircraft.position
        engine.move_forward(10)
        engine.move_forward(-10)
        assert engine.aircraft.position.latitude == pytest.approx(start.latitude, abs=1e-9)
        assert engine.aircraft.position.longitude == pytest.approx(start.longitude, abs=1e-9)

    def test_short_round_trip_on_diagonal(self, engine: NavigationEngine) -> None:
        engine.set_aircraft_heading(45)
        start = engine.aircraft.position
        engine.move_forward(1)
        engine.move_backward(1)
        assert engine.aircraft.position.latitude == pytest.approx(start.latitude, abs=1e-9)
        # Longitude scale is taken at the new latitude on the way back.
        assert engine.aircraft.position.longitude == pytest.approx(start.longitude, abs=1e-5)

    def test_move_backward_is_negative_forward(self, engine: NavigationEngine) -> None:
        engine.set_aircraft_heading(0)
        start = engine.aircraft.position
        engine.move_backward(6)
        assert engine.aircraft.position.latitude == pytest.approx(start.latitude - 0.1)

    def test_distance_matches_great_circle_for_short_hops(self, engine: NavigationEngine) -> None:
        engine.set_aircraft_heading(135)
        start = engine.aircraft.position
        engine.move_forward(5)
        assert distance_nm(start, engine.aircraft.position) == pytest.approx(5, rel=0.01)

    def test_publishes_aircraft_and_receiver_events(self, engine: NavigationEngine, event_bus) -> None:
        aircraft_events, receiver_events = [], []
        event_bus.subscribe(AircraftStateChangedEvent, aircraft_events.append)
        event_bus.subscribe(ReceiverUpdatedEvent, receiver_events.append)

        engine.move_forward(1)

        assert len(aircraft_events) == 1
        assert len(receiver_events) == 1
        assert aircraft_events[0].aircraft.position == engine.aircraft.position


class TestStationPassage:
    """Test the TO/FROM flip when flying over a station."""

    def test_flag_flips_crossing_lax(self, engine: NavigationEngine) -> None:
        engine.reset_to_scenario("station-passage")
        assert engine.receiver.radial == 270
        assert engine.receiver.to_from is ToFrom.TO
        assert engine.receiver.cdi == 0

        engine.move_forward(20)

        assert engine.receiver.radial == 90
        assert engine.receiver.to_from is ToFrom.FROM
        assert engine.receiver.cdi == 0

    def test_distance_shrinks_then_grows(self, engine: NavigationEngine) -> None:
        engine.reset_to_scenario("station-passage")
        distances = []
        for _ in range(20):
            engine.move_forward(1)
            distances.append(engine.receiver.distance)

        closest = distances.index(min(distances))
        assert 0 < closest < len(distances) - 1
        assert all(a >= b for a, b in zip(distances[:closest], distances[1 : closest + 1]))
        assert all(a <= b for a, b in zip(distances[closest:], distances[closest + 1 :]))

    def test_heading_sin_cos_convention(self, engine: NavigationEngine) -> None:
        engine.set_aircraft_position(0.0, 0.0)
        engine.set_aircraft_heading(30)
        engine.move_forward(60)
        assert engine.aircraft.position.latitude == pytest.approx(math.cos(math.radians(30)))
        assert engine.aircraft.position.longitude == pytest.approx(0.5)
