"""Training scenario catalog."""

from vortrainer.scenario.training import (
    DEFAULT_SCENARIOS,
    Difficulty,
    InitialPosition,
    ScenarioCatalog,
    ScenarioError,
    TrainingScenario,
)

__all__ = [
    "DEFAULT_SCENARIOS",
    "Difficulty",
    "InitialPosition",
    "ScenarioCatalog",
    "ScenarioError",
    "TrainingScenario",
]
