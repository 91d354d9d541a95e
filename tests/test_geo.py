import pytest

from sailnav.geo import (
    calculate_azimuth,
    calculate_distance,
    define_no_go_zone,
    get_boat_speed_from_polars,
    is_in_no_go_zone,
)


def test_calculate_azimuth():
    azimuth = calculate_azimuth(48.8566, 2.3522, 48.8570, 2.3530)
    assert azimuth == pytest.approx(52.76, abs=0.5)


def test_azimuth_is_normalised_to_full_circle():
    westward = calculate_azimuth(48.8566, 2.3522, 48.8566, 2.3400)
    assert 0.0 <= westward < 360.0
    assert westward == pytest.approx(270.0, abs=0.5)


def test_distance_is_symmetric_and_zero_on_same_point():
    forward = calculate_distance(48.8566, 2.3522, 47.253699, -1.370199)
    backward = calculate_distance(47.253699, -1.370199, 48.8566, 2.3522)
    assert forward == pytest.approx(backward)
    assert calculate_distance(48.8566, 2.3522, 48.8566, 2.3522) == 0.0


def test_define_no_go_zone():
    min_angle, max_angle = define_no_go_zone(90.0, 5.0)
    assert min_angle == pytest.approx(45.0, abs=0.1)
    assert max_angle == pytest.approx(135.0, abs=0.1)


def test_no_go_zone_wraps_around_north():
    min_angle, max_angle = define_no_go_zone(0.0, 5.0)
    assert min_angle == pytest.approx(315.0)
    assert max_angle == pytest.approx(45.0)
    assert is_in_no_go_zone(0.0, min_angle, max_angle)


def test_no_go_zone_widens_in_strong_wind_and_narrows_in_light_wind():
    strong_min, strong_max = define_no_go_zone(90.0, 20.0)
    light_min, light_max = define_no_go_zone(90.0, 4.0)
    assert strong_max - strong_min == pytest.approx(108.0)
    assert light_max - light_min == pytest.approx(72.0)


def test_is_in_no_go_zone():
    assert is_in_no_go_zone(90.0, 45.0, 135.0)
    assert not is_in_no_go_zone(200.0, 45.0, 135.0)
    assert is_in_no_go_zone(350.0, 340.0, 10.0)
    assert not is_in_no_go_zone(20.0, 340.0, 10.0)


@pytest.mark.parametrize(
    ("angle", "expected"),
    [
        (20.0, 0.0),
        (40.0, 2.0),
        (60.0, 4.0),
        (120.0, 6.0),
        (170.0, 3.5),
    ],
)
def test_polar_speeds_at_ten_metres_per_second(angle, expected):
    assert get_boat_speed_from_polars(angle, 10.0) == pytest.approx(expected)


def test_polar_is_symmetric_about_the_wind():
    for angle in (40.0, 60.0, 120.0, 170.0):
        assert get_boat_speed_from_polars(-angle, 8.0) == pytest.approx(
            get_boat_speed_from_polars(angle, 8.0)
        )
        assert get_boat_speed_from_polars(360.0 - angle, 8.0) == pytest.approx(
            get_boat_speed_from_polars(angle, 8.0)
        )