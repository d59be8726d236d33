"""Text readouts of the VOR receiver and aircraft.

These helpers only format engine snapshots; they never touch the engine.
The pygame window and the headless runner both print these lines.
"""

from enum import Enum

from vortrainer.engine.state import AircraftState, ReceiverStatus, VORReceiver

CARDINAL_DIRECTIONS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


class CDIStatus(Enum):
    """Coarse reading of the CDI needle."""

    CENTERED = "CENTERED"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    FULL_LEFT = "FULL LEFT"
    FULL_RIGHT = "FULL RIGHT"


def format_radial(radial: int) -> str:
    """Format a radial as three digits, e.g. ``"090°"``."""
    return f"{int(radial):03d}°"


def format_distance(distance: float) -> str:
    """Format a distance, e.g. ``"25.3 nm"``."""
    return f"{distance:.1f} nm"


def cardinal_direction(heading: float) -> str:
    """Nearest of the 16 compass points for a heading.

    Examples:
        >>> cardinal_direction(270)
        'W'
        >>> cardinal_direction(350)
        'N'
    """
    index = int(heading / 22.5 + 0.5) % 16
    return CARDINAL_DIRECTIONS[index]


def cdi_status(cdi: float) -> CDIStatus:
    """Classify needle deflection: under 1 centered, under 5 left/right, else full."""
    magnitude = abs(cdi)
    if magnitude < 1:
        return CDIStatus.CENTERED
    if magnitude < 5:
        return CDIStatus.RIGHT if cdi > 0 else CDIStatus.LEFT
    return CDIStatus.FULL_RIGHT if cdi > 0 else CDIStatus.FULL_LEFT


def receiver_lines(receiver: VORReceiver) -> list[str]:
    """Lines describing the receiver in its current state."""
    status = receiver.status
    if status is ReceiverStatus.NO_SIGNAL:
        return [f"NAV {receiver.frequency} MHz", "No VOR station tuned"]

    station = receiver.selected_station
    lines = [f"NAV {receiver.frequency} MHz  {station.identifier}  {station.name}"]

    if status is ReceiverStatus.OUT_OF_RANGE:
        lines.append(f"OUT OF RANGE  {format_distance(receiver.distance)}")
        return lines

    lines.append(
        f"Radial {format_radial(receiver.radial)}  "
        f"OBS {format_radial(round(receiver.obs) % 360)}  "
        f"{receiver.to_from.value}"
    )
    lines.append(
        f"CDI {receiver.cdi:+.1f} {cdi_status(receiver.cdi).value}  "
        f"{format_distance(receiver.distance)}"
    )
    return lines


def aircraft_lines(aircraft: AircraftState) -> list[str]:
    """Lines describing the aircraft position, heading and speed."""
    heading = round(aircraft.heading) % 360
    return [
        f"Position {aircraft.position}",
        f"Heading {heading:03d}° ({cardinal_direction(aircraft.heading)})  "
        f"{aircraft.speed:.0f} kts  {aircraft.altitude:.0f} ft",
    ]


def status_line(aircraft: AircraftState, receiver: VORReceiver) -> str:
    """Single-line summary for headless logs."""
    return " | ".join(aircraft_lines(aircraft) + receiver_lines(receiver))
