"""Geodesy helpers and the boat's no-go zone and speed polar."""

from __future__ import annotations

import math

EARTH_RADIUS_M = 6_371_000.0
NO_GO_ZONE_ANGLE = 45.0


def calculate_azimuth(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial great-circle bearing from point 1 to point 2, in [0, 360) degrees."""
    d_lon = math.radians(lon2 - lon1)
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)

    y = math.sin(d_lon) * math.cos(lat2_rad)
    x = math.cos(lat1_rad) * math.sin(lat2_rad) - math.sin(lat1_rad) * math.cos(
        lat2_rad
    ) * math.cos(d_lon)

    azimuth = math.degrees(math.atan2(y, x))
    return math.fmod(azimuth + 360.0, 360.0)


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in metres between two points."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(
        d_lon / 2
    ) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def define_no_go_zone(wind_direction: float, wind_speed: float) -> tuple[float, float]:
    """Return the (min_angle, max_angle) bounds of the no-go zone around the wind.

    The zone widens in strong wind (above 15 m/s) and narrows in light wind
    (below 5 m/s).
    """
    wind_abs = math.fmod(wind_direction + 360.0, 360.0)

    adjusted = NO_GO_ZONE_ANGLE
    if wind_speed > 15:
        adjusted = NO_GO_ZONE_ANGLE * 1.2
    elif wind_speed < 5:
        adjusted = NO_GO_ZONE_ANGLE * 0.8

    min_angle = math.fmod(wind_abs - adjusted + 360.0, 360.0)
    max_angle = math.fmod(wind_abs + adjusted, 360.0)
    return min_angle, max_angle


def is_in_no_go_zone(azimuth: float, min_angle: float, max_angle: float) -> bool:
    """Whether ``azimuth`` lies in the zone, which may wrap through north."""
    if min_angle < max_angle:
        return min_angle <= azimuth <= max_angle
    return azimuth >= min_angle or azimuth <= max_angle


def get_boat_speed_from_polars(wind_angle: float, wind_speed: float) -> float:
    """Expected boat speed for a true wind angle and wind speed."""
    angle = abs(wind_angle)
    while angle > 180:
        angle = 360 - angle

    if angle < 35:
        return 0.0
    if angle < 50:
        return 0.5 * wind_speed * 0.4
    if angle < 90:
        return 0.8 * wind_speed * 0.5
    if angle < 150:
        return 1.0 * wind_speed * 0.6
    return 0.7 * wind_speed * 0.5