"""Layline-based upwind path planning with tack confirmation and heading smoothing."""

from __future__ import annotations

import logging
import math
from collections import deque

from sailnav.geo import (
    calculate_azimuth,
    calculate_distance,
    define_no_go_zone,
    get_boat_speed_from_polars,
    is_in_no_go_zone,
)

log = logging.getLogger(__name__)

WAYPOINT_ARRIVAL_DISTANCE = 15.0  # metres
WAYPOINT_TIGHT_ARRIVAL_DISTANCE = 7.0  # metres
DECISION_COOLDOWN = 4.0  # seconds
TACK_CONFIRMATION_THRESHOLD = 5
HEADING_HISTORY_SIZE = 5
TACK_HYSTERESIS_ANGLE_MARGIN = 8.0  # degrees
HEADING_SMOOTHING_FACTOR = 0.3
NO_GO_ZONE_BUFFER = 7.0  # degrees
MINIMUM_INITIAL_DISTANCE = 15.0  # metres
MINIMUM_INITIAL_TIME = 7.0  # seconds

_TACK_NAMES = {True: "PORT", False: "STARBOARD"}


def _signed_difference(a: float, b: float) -> float:
    """Difference ``a - b`` folded the same way the planner always folds it."""
    return math.fmod(a - b + 180.0, 360.0) - 180.0


def _find_vmg_optimal_tack_angle(wind_speed: float) -> float:
    """Tack angle to the true wind that maximises upwind VMG, plus safety buffers."""
    best_vmg = -math.inf
    optimal_angle = 50.0
    for angle in range(35, 71, 5):
        boat_speed = get_boat_speed_from_polars(angle, wind_speed)
        vmg = boat_speed * math.cos(math.radians(angle))
        if vmg > best_vmg:
            best_vmg = vmg
            optimal_angle = float(angle)

    base_buffer = 5.0
    wind_buffer = (wind_speed - 6.0) * 0.8 if wind_speed > 6.0 else 0.0
    return max(optimal_angle, 40.0) + base_buffer + wind_buffer


def _is_point_in_no_go_zone_buffered(
    boat_lat: float,
    boat_lon: float,
    point_lat: float,
    point_lon: float,
    wind_direction: float,
    wind_speed: float,
    buffer: float = 0.0,
) -> bool:
    """Whether the bearing to a point lies in the no-go zone widened by ``buffer``."""
    azimuth = calculate_azimuth(boat_lat, boat_lon, point_lat, point_lon)
    min_angle, max_angle = define_no_go_zone(wind_direction, wind_speed)

    if max_angle > min_angle:
        half_angle = (max_angle - min_angle) / 2.0
    else:
        half_angle = (max_angle + (360.0 - min_angle)) / 2.0

    check_angle = half_angle + buffer
    min_check = math.fmod(wind_direction - check_angle + 360.0, 360.0)
    max_check = math.fmod(wind_direction + check_angle, 360.0)
    return is_in_no_go_zone(azimuth, min_check, max_check)


class LaylinePathPlanner:
    """Chooses a heading toward a waypoint, tacking along laylines when upwind.

    Tacks are confirmed over several consecutive calls, decisions are held
    for a cooldown period, the first tack of a leg is protected for a minimum
    distance and time, and the returned heading is smoothed.
    """

    def __init__(self) -> None:
        self._current_tack_is_port: bool | None = None
        self._pending_tack_is_port: bool | None = None
        self._tack_confirmation_count = 0

        self._last_decision_time = 0.0
        self._last_optimal_heading: float | None = None
        self._last_raw_optimal_heading: float | None = None

        self._leg_start: tuple[float, float, float] | None = None
        self._initial_tack_chosen_for_leg = False

        self._heading_history: deque[float] = deque(maxlen=HEADING_HISTORY_SIZE)

    def calculate_direction(
        self,
        boat_lat: float,
        boat_lon: float,
        waypoint_lat: float,
        waypoint_lon: float,
        compass: float,
        wind_vane: float,
        wind_speed: float,
        current_time: float,
    ) -> float:
        """Return the smoothed optimal heading in degrees.

        ``wind_vane`` is the wind direction relative to the boat, ``compass``
        the boat's heading, ``wind_speed`` in m/s and ``current_time`` in seconds.
        """
        raw = self._calculate_raw_direction(
            boat_lat,
            boat_lon,
            waypoint_lat,
            waypoint_lon,
            compass,
            wind_vane,
            wind_speed,
            current_time,
        )
        self._last_raw_optimal_heading = raw
        return self._apply_heading_smoothing(raw)

    def reset_planner_state(self) -> None:
        """Forget all tacking, timing and smoothing state."""
        self._reset_leg_start_conditions()
        self._last_optimal_heading = None
        self._last_raw_optimal_heading = None
        self._last_decision_time = 0.0
        self._heading_history.clear()
        log.debug("planner state completely reset")

    def _reset_leg_start_conditions(self) -> None:
        self._leg_start = None
        self._initial_tack_chosen_for_leg = False
        self._current_tack_is_port = None
        self._pending_tack_is_port = None
        self._tack_confirmation_count = 0
        log.debug("leg start conditions reset for new upwind navigation")

    def _apply_heading_smoothing(self, new_raw_heading: float) -> float:
        if math.isnan(new_raw_heading):
            return self._last_optimal_heading if self._last_optimal_heading is not None else 0.0

        self._heading_history.append(new_raw_heading)
        sin_sum = sum(math.sin(math.radians(h)) for h in self._heading_history)
        cos_sum = sum(math.cos(math.radians(h)) for h in self._heading_history)
        average = math.fmod(math.degrees(math.atan2(sin_sum, cos_sum)) + 360.0, 360.0)

        if self._last_optimal_heading is None:
            self._last_optimal_heading = average
            return average

        angle_diff = _signed_difference(average, self._last_optimal_heading)
        magnitude = abs(angle_diff)
        if magnitude < 5.0:
            factor = 0.1
        elif magnitude < 15.0:
            factor = 0.2
        elif magnitude > 60.0:
            factor = 0.5
        else:
            factor = HEADING_SMOOTHING_FACTOR

        self._last_optimal_heading = math.fmod(
            self._last_optimal_heading + angle_diff * factor + 360.0, 360.0
        )
        return self._last_optimal_heading

    def _tack_heading(self, port: float, starboard: float) -> float:
        return port if self._current_tack_is_port else starboard

    def _calculate_raw_direction(
        self,
        boat_lat: float,
        boat_lon: float,
        wpt_lat: float,
        wpt_lon: float,
        compass: float,
        wind_vane_relative: float,
        wind_speed: float,
        current_time: float,
    ) -> float:
        vmg_tack_angle = _find_vmg_optimal_tack_angle(wind_speed)
        azimuth_to_wpt = calculate_azimuth(boat_lat, boat_lon, wpt_lat, wpt_lon)
        wind_direction_abs = math.fmod(compass + wind_vane_relative + 360.0, 360.0)
        port_hdg = math.fmod(wind_direction_abs - vmg_tack_angle + 360.0, 360.0)
        starboard_hdg = math.fmod(wind_direction_abs + vmg_tack_angle + 360.0, 360.0)
        distance_to_wpt = calculate_distance(boat_lat, boat_lon, wpt_lat, wpt_lon)

        if (
            self._last_decision_time > 0
            and current_time - self._last_decision_time < DECISION_COOLDOWN
            and self._last_raw_optimal_heading is not None
        ):
            log.debug("in decision cooldown, maintaining course")
            return self._last_raw_optimal_heading

        can_sail_direct = not _is_point_in_no_go_zone_buffered(
            boat_lat,
            boat_lon,
            wpt_lat,
            wpt_lon,
            wind_direction_abs,
            wind_speed,
            NO_GO_ZONE_BUFFER,
        )

        if self._current_tack_is_port is not None:
            if can_sail_direct and distance_to_wpt < WAYPOINT_ARRIVAL_DISTANCE:
                log.debug("switching from tacking to direct sailing near waypoint")
                self._reset_leg_start_conditions()
                self._last_decision_time = current_time
                return azimuth_to_wpt
        elif can_sail_direct:
            log.debug("direct sailing to waypoint")
            self._reset_leg_start_conditions()
            self._last_decision_time = current_time
            return azimuth_to_wpt
        elif self._leg_start is None:
            self._leg_start = (boat_lat, boat_lon, current_time)
            log.debug("initializing new upwind leg")

        if self._current_tack_is_port is None:
            if not self._initial_tack_chosen_for_leg:
                port_diff = abs(_signed_difference(port_hdg, compass))
                starboard_diff = abs(_signed_difference(starboard_hdg, compass))
                self._current_tack_is_port = port_diff < starboard_diff
                self._initial_tack_chosen_for_leg = True
                log.debug(
                    "initial tack selected: %s", _TACK_NAMES[self._current_tack_is_port]
                )
            else:
                port_diff = abs(_signed_difference(port_hdg, azimuth_to_wpt))
                starboard_diff = abs(_signed_difference(starboard_hdg, azimuth_to_wpt))
                self._current_tack_is_port = port_diff < starboard_diff

            self._pending_tack_is_port = None
            self._tack_confirmation_count = 0
            self._last_decision_time = current_time
            return self._tack_heading(port_hdg, starboard_hdg)

        if self._leg_start is not None and self._initial_tack_chosen_for_leg:
            start_lat, start_lon, start_time = self._leg_start
            traveled = calculate_distance(boat_lat, boat_lon, start_lat, start_lon)
            elapsed = current_time - start_time
            if traveled < MINIMUM_INITIAL_DISTANCE or elapsed < MINIMUM_INITIAL_TIME:
                log.debug(
                    "beginning protection active - traveled: %.1fm, elapsed: %.1fs",
                    traveled,
                    elapsed,
                )
                return self._tack_heading(port_hdg, starboard_hdg)

        relative_bearing = _signed_difference(azimuth_to_wpt, wind_direction_abs)

        wind_push = min((wind_speed - 5.0) * 2.5, 20.0) if wind_speed > 5.0 else 0.0
        distance_factor = min(15.0, max(7.0, distance_to_wpt / 10.0))
        layline_angle = (
            vmg_tack_angle + TACK_HYSTERESIS_ANGLE_MARGIN + max(wind_push, distance_factor)
        )

        required = TACK_CONFIRMATION_THRESHOLD
        if distance_to_wpt > 50.0:
            required = int(TACK_CONFIRMATION_THRESHOLD * 1.5)

        proposed: bool | None = None
        if self._current_tack_is_port:
            if relative_bearing > layline_angle:
                proposed = False
        elif relative_bearing < -layline_angle:
            proposed = True

        if proposed is not None:
            if self._pending_tack_is_port is None or self._pending_tack_is_port != proposed:
                self._pending_tack_is_port = proposed
                self._tack_confirmation_count = 1
                log.debug(
                    "tack to %s proposed (conf %d/%d)",
                    _TACK_NAMES[proposed],
                    self._tack_confirmation_count,
                    required,
                )
            else:
                self._tack_confirmation_count += 1
                log.debug(
                    "tack proposal continues (conf %d/%d)",
                    self._tack_confirmation_count,
                    required,
                )

            if self._tack_confirmation_count >= required:
                log.debug("tack confirmed to %s", _TACK_NAMES[self._pending_tack_is_port])
                self._current_tack_is_port = self._pending_tack_is_port
                self._pending_tack_is_port = None
                self._tack_confirmation_count = 0
                self._last_decision_time = current_time
        elif self._pending_tack_is_port is not None:
            log.debug("tack conditions no longer met, resetting confirmation")
            self._pending_tack_is_port = None
            self._tack_confirmation_count = 0

        return self._tack_heading(port_hdg, starboard_hdg)