"""State shared between the boat's control, sensing and telemetry loops."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class SharedData:
    """Latest known boat state, targets and sensor readings.

    Every value starts at zero, which the rest of the package treats as
    "not yet known".
    """

    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0
    waypoint_lat: float = 0.0
    waypoint_lon: float = 0.0
    compass: float = 0.0
    wind_vane: float = 0.0
    wind_speed: float = 0.0
    horizontal_tilt: float = 0.0
    vertical_tilt: float = 0.0
    target_angle: int = 0
    target_tension: int = 0
    angle_from_north: int = 0