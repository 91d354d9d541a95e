"""Rudder and sail servo control driven by a PI heading controller."""

from __future__ import annotations

import logging
from typing import NamedTuple, Protocol

from sailnav.shared_data import SharedData

log = logging.getLogger(__name__)

MIN_RUDDER_ANGLE = 70
MAX_RUDDER_ANGLE = 170
MIN_RUDDER_US = 1260
MAX_RUDDER_US = 1740
RUDDER_INIT_US = 1500

MIN_SAIL_US = 1200
MAX_SAIL_US = 1780
SAIL_INIT_US = 1700

RUDDER_INIT_ANGLE = 125


class Servo(Protocol):
    """An output that accepts a pulse width in microseconds."""

    def write_microseconds(self, microseconds: int) -> None: ...


class ServoCommand(NamedTuple):
    """Pulse widths last sent to the rudder and the sail."""

    rudder_us: int
    sail_us: int


def _truncating_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


def map_range(value: int, in_min: int, in_max: int, out_min: int, out_max: int) -> int:
    """Linearly rescale an integer, truncating toward zero.

    Raises ValueError when the input range is empty.
    """
    if in_max == in_min:
        raise ValueError("input range must not be empty")
    scaled = _truncating_div((value - in_min) * (out_max - out_min), in_max - in_min)
    return scaled + out_min


def calculate_shortest_path(current: int, target: int) -> int:
    """Signed turn from ``current`` to ``target`` in degrees, within [-180, 180]."""
    difference = target - current
    if difference > 180:
        difference -= 360
    elif difference < -180:
        difference += 360
    return difference


def sail_position_for_wind(wind_vane: float) -> int:
    """Sail servo pulse width for a wind angle relative to the boat."""
    wind_angle = (int(wind_vane) + 360) % 360

    if wind_angle >= 330 or wind_angle <= 30:
        tension = 0
    elif wind_angle <= 60 or wind_angle >= 300:
        tension = 30
    elif wind_angle <= 120 or wind_angle >= 240:
        tension = 60
    else:
        tension = 100

    return map_range(tension, 0, 100, MIN_SAIL_US, MAX_SAIL_US)


def _constrain(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


class RudderSailController:
    """Steers toward the target heading with a PI loop and trims the sail."""

    def __init__(self, rudder: Servo, sail: Servo, shared: SharedData) -> None:
        self.rudder = rudder
        self.sail = sail
        self.shared = shared
        self.servo_angle_position = RUDDER_INIT_ANGLE
        self.rudder_us = RUDDER_INIT_US
        self.sail_us = SAIL_INIT_US
        self.adjustment = 0.0
        self.cumulative_error = 0.0
        self.rudder.write_microseconds(RUDDER_INIT_US)
        self.sail.write_microseconds(SAIL_INIT_US)

    def control(self, kp: float, ki: float) -> ServoCommand:
        """Run one control step with the given gains and drive both servos."""
        error = calculate_shortest_path(
            self.shared.angle_from_north, self.shared.target_angle
        )
        self.cumulative_error += error
        self.adjustment = kp * error + ki * self.cumulative_error

        self.servo_angle_position = int(
            _constrain(
                self.servo_angle_position - self.adjustment,
                MIN_RUDDER_ANGLE,
                MAX_RUDDER_ANGLE,
            )
        )
        self.rudder_us = map_range(
            self.servo_angle_position,
            MIN_RUDDER_ANGLE,
            MAX_RUDDER_ANGLE,
            MIN_RUDDER_US,
            MAX_RUDDER_US,
        )
        self.rudder.write_microseconds(self.rudder_us)

        self.sail_us = sail_position_for_wind(self.shared.wind_vane)
        self.sail.write_microseconds(self.sail_us)

        log.debug(
            "rudder angle %d -> %d us, sail %d us",
            self.servo_angle_position,
            self.rudder_us,
            self.sail_us,
        )
        return ServoCommand(self.rudder_us, self.sail_us)