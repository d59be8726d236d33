"""Pytest configuration and fixtures for all tests."""

import os

import pygame
import pytest

from vortrainer.core.event_bus import EventBus
from vortrainer.engine.vor_engine import NavigationEngine
from vortrainer.navigation.stations import StationCatalog
from vortrainer.scenario.training import ScenarioCatalog


@pytest.fixture(scope="session", autouse=True)
def initialize_pygame():
    """Initialize pygame once, headless, for timer and window tests."""
    os.environ["SDL_VIDEODRIVER"] = "dummy"
    os.environ["SDL_AUDIODRIVER"] = "dummy"

    pygame.init()

    yield

    pygame.quit()


@pytest.fixture
def catalog() -> StationCatalog:
    """Built-in LAX/SAN/SFO catalog."""
    return StationCatalog.default()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def engine(catalog, event_bus) -> NavigationEngine:
    """Engine with default settings, tuned to LAX (113.60)."""
    return NavigationEngine(catalog, event_bus=event_bus, scenarios=ScenarioCatalog.default())
