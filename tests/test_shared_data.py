import dataclasses

import pytest

from sailnav.shared_data import SharedData


def test_every_field_starts_at_zero():
    values = dataclasses.asdict(SharedData())
    assert len(values) == 13
    assert all(value == 0 for value in values.values())


def test_integer_targets_default_to_int_zero():
    data = SharedData()
    assert (data.target_angle, data.target_tension, data.angle_from_north) == (0, 0, 0)
    assert all(
        isinstance(value, int)
        for value in (data.target_angle, data.target_tension, data.angle_from_north)
    )


def test_fields_are_mutable_and_compared_by_value():
    first = SharedData(latitude=48.8566, longitude=2.3522)
    second = SharedData()
    second.latitude = 48.8566
    second.longitude = 2.3522
    assert first == second
    second.target_angle = 90
    assert first.target_angle == 0
    assert second.target_angle == 90


def test_replace_round_trip_keeps_other_fields():
    original = SharedData(waypoint_lat=47.253699, waypoint_lon=-1.370199, wind_speed=5.0)
    moved = dataclasses.replace(original, compass=90.0)
    assert moved.compass == 90.0
    assert moved.waypoint_lat == original.waypoint_lat
    assert moved.waypoint_lon == original.waypoint_lon
    assert dataclasses.replace(moved, compass=original.compass) == original


def test_unknown_attribute_is_rejected():
    data = SharedData()
    with pytest.raises(AttributeError):
        data.heading = 12.0  # type: ignore[attr-defined]
    assert not hasattr(data, "heading")
    assert dataclasses.asdict(data) == dataclasses.asdict(SharedData())