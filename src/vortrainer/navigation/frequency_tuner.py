"""NAV frequency tuner.

Steps the displayed VOR frequency in 50 kHz increments across the
108.00 - 118.00 MHz band and hands the resulting token to the receiver.
Tokens are always formatted with two decimals so they match the station
catalog exactly.
"""

import logging
from collections.abc import Callable
from typing import Literal

logger = logging.getLogger(__name__)

NAV_BAND_MIN_MHZ = 108.0
NAV_BAND_MAX_MHZ = 118.0
NAV_STEP_MHZ = 0.05


def format_frequency(frequency: float) -> str:
    """Format a frequency as a catalog token.

    Examples:
        >>> format_frequency(113.6)
        '113.60'
    """
    return f"{frequency:.2f}"


class FrequencyTuner:
    """Displayed NAV frequency with step and direct-entry tuning.

    Every successful change is passed to ``on_tune``, normally
    ``NavigationEngine.tune_frequency``.

    Examples:
        >>> tuner = FrequencyTuner("113.60", on_tune=engine.tune_frequency)
        >>> tuner.step("up")
        '113.65'
        >>> tuner.set_frequency("121.50")
        False
    """

    def __init__(self, frequency: str = "113.60", on_tune: Callable[[str], None] | None = None) -> None:
        self._frequency = frequency
        self._on_tune = on_tune

    @property
    def frequency(self) -> str:
        return self._frequency

    def step(self, direction: Literal["up", "down"], steps: int = 1) -> str:
        """Move the frequency by whole 50 kHz steps, clamped to the NAV band.

        Args:
            direction: "up" or "down".
            steps: Number of steps to move.

        Returns:
            The new frequency token.
        """
        delta = NAV_STEP_MHZ * steps * (1 if direction == "up" else -1)
        current = float(self._frequency)
        new_freq = max(NAV_BAND_MIN_MHZ, min(NAV_BAND_MAX_MHZ, round(current + delta, 2)))
        self._apply(format_frequency(new_freq))
        return self._frequency

    def set_frequency(self, frequency: str) -> bool:
        """Tune a frequency typed by the user.

        Args:
            frequency: Frequency in MHz, e.g. "115.8" or "115.80".

        Returns:
            True if tuned, False if unparsable or outside the NAV band.
        """
        try:
            value = float(frequency)
        except ValueError:
            logger.warning("Ignoring unparsable frequency %r", frequency)
            return False

        if not NAV_BAND_MIN_MHZ <= value <= NAV_BAND_MAX_MHZ:
            logger.warning("Frequency %s outside NAV band", frequency)
            return False

        self._apply(format_frequency(value))
        return True

    def _apply(self, token: str) -> None:
        self._frequency = token
        logger.debug("NAV frequency set to %s", token)
        if self._on_tune is not None:
            self._on_tune(token)
