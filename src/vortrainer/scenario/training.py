"""Canned VOR training scenarios.

A scenario places the aircraft, tunes a station and selects a course so the
student starts from a known situation. Scenarios are fixed records; applying
one goes through the engine's mutators in order (position, heading,
frequency, OBS), so the receiver is recomputed at each step.

Typical usage:
    from vortrainer.scenario import ScenarioCatalog

    catalog = ScenarioCatalog.default()
    catalog.get("course-tracking").apply_to(engine)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from vortrainer.engine.vor_engine import NavigationEngine

logger = logging.getLogger(__name__)


class ScenarioError(Exception):
    """Raised when scenarios cannot be loaded or looked up."""


class Difficulty(Enum):
    """Scenario difficulty level."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


@dataclass(frozen=True)
class InitialPosition:
    """Where the aircraft starts.

    Attributes:
        lat: Latitude in degrees.
        lng: Longitude in degrees.
        heading: True heading in degrees.
    """

    lat: float
    lng: float
    heading: float


@dataclass(frozen=True)
class TrainingScenario:
    """A training exercise.

    Attributes:
        id: Unique identifier, e.g. "course-tracking".
        title: Short title.
        description: One-line summary.
        difficulty: Difficulty level.
        initial_position: Aircraft start position and heading.
        target_frequency: Frequency token to tune.
        target_obs: Course to select.
        objectives: What the student should achieve.
        instructions: Step-by-step guidance.
    """

    id: str
    title: str
    description: str
    difficulty: Difficulty
    initial_position: InitialPosition
    target_frequency: str
    target_obs: float
    objectives: tuple[str, ...] = field(default_factory=tuple)
    instructions: tuple[str, ...] = field(default_factory=tuple)

    def apply_to(self, engine: "NavigationEngine") -> None:
        """Set up the engine for this scenario."""
        engine.set_aircraft_position(self.initial_position.lat, self.initial_position.lng)
        engine.set_aircraft_heading(self.initial_position.heading)
        engine.tune_frequency(self.target_frequency)
        engine.set_obs(self.target_obs)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrainingScenario":
        """Build a scenario from a YAML mapping.

        Raises:
            ScenarioError: If a required field is missing or malformed.
        """
        try:
            position = data["initial_position"]
            frequency = data["target_frequency"]
            return cls(
                id=str(data["id"]),
                title=str(data["title"]),
                description=str(data.get("description", "")),
                difficulty=Difficulty(data.get("difficulty", "Beginner")),
                initial_position=InitialPosition(
                    lat=float(position["lat"]),
                    lng=float(position["lng"]),
                    heading=float(position["heading"]),
                ),
                target_frequency=frequency if isinstance(frequency, str) else f"{frequency:.2f}",
                target_obs=float(data["target_obs"]),
                objectives=tuple(data.get("objectives", ())),
                instructions=tuple(data.get("instructions", ())),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ScenarioError(f"Invalid scenario {data.get('id', '?')!r}: {e}") from e


DEFAULT_SCENARIOS = (
    TrainingScenario(
        id="basic-identification",
        title="VOR Station Identification",
        description="Learn to identify and tune to a VOR station",
        difficulty=Difficulty.BEGINNER,
        initial_position=InitialPosition(33.9425, -118.4081, 90),
        target_frequency="113.60",
        target_obs=90,
        objectives=(
            "Tune to LAX VOR (113.60)",
            "Confirm signal reception",
            "Identify station information",
        ),
        instructions=(
            "Use the frequency tuner to select 113.60 MHz",
            "Verify the receiver shows a signal",
            "Note the station ID and name in the frequency panel",
            "The aircraft is positioned near the LAX VOR station",
        ),
    ),
    TrainingScenario(
        id="radial-intercept",
        title="Intercepting a Radial",
        description="Practice intercepting and tracking a specific radial",
        difficulty=Difficulty.INTERMEDIATE,
        initial_position=InitialPosition(33.9525, -118.5081, 45),
        target_frequency="113.60",
        target_obs=90,
        objectives=(
            "Intercept the 090 radial FROM LAX VOR",
            "Center the CDI needle",
            "Understand TO/FROM flag operation",
        ),
        instructions=(
            "Set OBS to 090",
            "Note the CDI needle deflection and TO/FROM flag",
            "Move aircraft to center the CDI needle",
            "Observe how the flag changes from TO to FROM as you cross the station",
        ),
    ),
    TrainingScenario(
        id="course-tracking",
        title="Course Tracking",
        description="Track a course TO a VOR station",
        difficulty=Difficulty.INTERMEDIATE,
        initial_position=InitialPosition(33.9425, -117.9000, 270),
        target_frequency="113.60",
        target_obs=270,
        objectives=(
            "Track the 270 course TO LAX VOR",
            "Maintain course centerline",
            "Understand course corrections",
        ),
        instructions=(
            "Set OBS to 270 (west)",
            "Verify TO flag is displayed",
            "Keep CDI needle centered by adjusting aircraft position",
            "Track the course directly to the VOR station",
        ),
    ),
    TrainingScenario(
        id="station-passage",
        title="VOR Station Passage",
        description="Recognize and navigate through station passage",
        difficulty=Difficulty.ADVANCED,
        initial_position=InitialPosition(33.9425, -118.6000, 90),
        target_frequency="113.60",
        target_obs=90,
        objectives=(
            "Approach LAX VOR on the 090 course",
            "Identify station passage",
            "Continue on the reciprocal bearing",
        ),
        instructions=(
            "Set OBS to 090 and track TO the station",
            "Watch for CDI sensitivity increase near the station",
            "Note the TO/FROM flag reversal at station passage",
            "Continue tracking away from the station on the same radial",
        ),
    ),
)


class ScenarioCatalog:
    """Ordered, read-only set of training scenarios.

    Examples:
        >>> catalog = ScenarioCatalog.default()
        >>> [s.id for s in catalog][:2]
        ['basic-identification', 'radial-intercept']
    """

    def __init__(self, scenarios: tuple[TrainingScenario, ...] | list[TrainingScenario]) -> None:
        self._scenarios: dict[str, TrainingScenario] = {}
        for scenario in scenarios:
            if scenario.id in self._scenarios:
                logger.warning("Duplicate scenario %s ignored", scenario.id)
                continue
            self._scenarios[scenario.id] = scenario

    @classmethod
    def default(cls) -> "ScenarioCatalog":
        return cls(DEFAULT_SCENARIOS)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ScenarioCatalog":
        """Load scenarios from a YAML file with a top-level ``scenarios`` list.

        Raises:
            ScenarioError: If the file is missing, unreadable or malformed.
        """
        path = Path(path)
        if not path.exists():
            raise ScenarioError(f"Scenario file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ScenarioError(f"Failed to load scenarios: {e}") from e

        entries = data.get("scenarios") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise ScenarioError(f"No scenario list in {path}")

        scenarios = [TrainingScenario.from_dict(entry) for entry in entries]
        logger.info("Loaded %d scenarios from %s", len(scenarios), path)
        return cls(scenarios)

    def find(self, scenario_id: str) -> TrainingScenario | None:
        return self._scenarios.get(scenario_id)

    def get(self, scenario_id: str) -> TrainingScenario:
        """Look up a scenario.

        Raises:
            ScenarioError: If no scenario has this id.
        """
        scenario = self._scenarios.get(scenario_id)
        if scenario is None:
            raise ScenarioError(f"Unknown scenario: {scenario_id}")
        return scenario

    def __iter__(self):
        return iter(self._scenarios.values())

    def __len__(self) -> int:
        return len(self._scenarios)
