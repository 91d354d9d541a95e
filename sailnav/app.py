"""Boat control loop steps and a command that runs the path planner."""

from __future__ import annotations

import argparse
import logging
import math
from typing import NamedTuple

from sailnav.cmps12 import CMPS12
from sailnav.planner import LaylinePathPlanner
from sailnav.shared_data import SharedData

log = logging.getLogger(__name__)

# Fallback inputs used while the sensors and the radio have not reported yet.
DEFAULT_BOAT_LAT = 48.8566
DEFAULT_BOAT_LON = 2.3522
DEFAULT_WAYPOINT_LAT = 47.253699
DEFAULT_WAYPOINT_LON = -1.370199
DEFAULT_COMPASS = 90.0
DEFAULT_WIND_VANE = 180.0
DEFAULT_WIND_SPEED = 5.0


class PlanningInputs(NamedTuple):
    """Values handed to the planner for one step."""

    boat_lat: float
    boat_lon: float
    waypoint_lat: float
    waypoint_lon: float
    compass: float
    wind_vane: float
    wind_speed: float


class SensorReading(NamedTuple):
    """One set of compass readings."""

    bearing: int  # tenths of a degree
    pitch: int
    roll: int
    calibration_state: int


def _or_default(value: float, default: float) -> float:
    return value if value != 0 else default


def _planning_inputs(shared: SharedData) -> PlanningInputs:
    return PlanningInputs(
        boat_lat=_or_default(shared.latitude, DEFAULT_BOAT_LAT),
        boat_lon=_or_default(shared.longitude, DEFAULT_BOAT_LON),
        waypoint_lat=_or_default(shared.waypoint_lat, DEFAULT_WAYPOINT_LAT),
        waypoint_lon=_or_default(shared.waypoint_lon, DEFAULT_WAYPOINT_LON),
        compass=float(_or_default(shared.angle_from_north, DEFAULT_COMPASS)),
        wind_vane=_or_default(shared.wind_vane, DEFAULT_WIND_VANE),
        wind_speed=_or_default(shared.wind_speed, DEFAULT_WIND_SPEED),
    )


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class Boat:
    """Ties the shared state to the planner and the compass."""

    def __init__(
        self,
        shared: SharedData,
        planner: LaylinePathPlanner,
        compass: CMPS12 | None = None,
    ) -> None:
        self.shared = shared
        self.planner = planner
        self.compass = compass
        self.iteration = 0

    def path_finding_step(self, current_time: float) -> float:
        """Plan one heading, store it as the target angle and return it."""
        self.iteration += 1
        inputs = _planning_inputs(self.shared)
        direction = self.planner.calculate_direction(
            inputs.boat_lat,
            inputs.boat_lon,
            inputs.waypoint_lat,
            inputs.waypoint_lon,
            inputs.compass,
            inputs.wind_vane,
            inputs.wind_speed,
            current_time,
        )
        self.shared.target_angle = _round_half_away(direction)
        log.debug("iteration %d: optimal direction %.1f", self.iteration, direction)
        return direction

    def sensor_step(self) -> SensorReading:
        """Read the compass into the shared state.

        Raises RuntimeError when the boat has no compass.
        """
        if self.compass is None:
            raise RuntimeError("no compass attached")
        reading = SensorReading(
            bearing=self.compass.read_compass_bearing(),
            pitch=self.compass.read_pitch(),
            roll=self.compass.read_roll(),
            calibration_state=self.compass.read_calibration_state(),
        )
        self.shared.horizontal_tilt = reading.roll
        self.shared.vertical_tilt = reading.pitch
        self.shared.angle_from_north = reading.bearing // 10
        log.debug(
            "pitch %d, roll %d, calibration %d, direction %d.%d",
            reading.pitch,
            reading.roll,
            reading.calibration_state,
            reading.bearing // 10,
            reading.bearing % 10,
        )
        return reading


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sailnav", description="Run the layline path planner on fixed inputs."
    )
    parser.add_argument("--iterations", type=int, default=10)
    parser.add_argument("--step", type=float, default=0.5, help="seconds between steps")
    parser.add_argument("--boat", type=float, nargs=2, metavar=("LAT", "LON"))
    parser.add_argument("--waypoint", type=float, nargs=2, metavar=("LAT", "LON"))
    parser.add_argument("--compass", type=int, default=0)
    parser.add_argument("--wind-vane", type=float, default=0.0)
    parser.add_argument("--wind-speed", type=float, default=0.0)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the planner for a number of simulated steps and print each result."""
    args = _build_parser().parse_args(argv)
    if args.iterations < 0:
        raise SystemExit("--iterations must not be negative")

    shared = SharedData(
        angle_from_north=args.compass,
        wind_vane=args.wind_vane,
        wind_speed=args.wind_speed,
    )
    if args.boat:
        shared.latitude, shared.longitude = args.boat
    if args.waypoint:
        shared.waypoint_lat, shared.waypoint_lon = args.waypoint

    boat = Boat(shared, LaylinePathPlanner())
    for step in range(args.iterations):
        inputs = _planning_inputs(shared)
        direction = boat.path_finding_step(step * args.step)
        print(f"=== Path Planning Iteration {boat.iteration} ===")
        print(f"Boat Position: {inputs.boat_lat:.6f}, {inputs.boat_lon:.6f}")
        print(f"Waypoint: {inputs.waypoint_lat:.6f}, {inputs.waypoint_lon:.6f}")
        print(
            f"Compass: {inputs.compass:.1f} deg, Wind: {inputs.wind_vane:.1f} deg"
            f" @ {inputs.wind_speed:.1f} m/s"
        )
        print(f"Optimal direction: {direction:.1f} deg")
        print("================================")
    return 0