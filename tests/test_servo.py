import pytest

from sailnav.servo import (
    RudderSailController,
    ServoCommand,
    calculate_shortest_path,
    map_range,
    sail_position_for_wind,
)
from sailnav.shared_data import SharedData


class FakeServo:
    def __init__(self):
        self.writes = []

    def write_microseconds(self, microseconds):
        self.writes.append(microseconds)


def test_map_range_endpoints():
    assert map_range(70, 70, 170, 1260, 1740) == 1260
    assert map_range(170, 70, 170, 1260, 1740) == 1740


def test_map_range_truncates_toward_zero():
    assert map_range(-1, 0, 100, 0, 10) == 0
    assert map_range(19, 0, 100, 0, 10) == 1


def test_map_range_rejects_empty_range():
    with pytest.raises(ValueError):
        map_range(5, 3, 3, 0, 10)


@pytest.mark.parametrize(
    ("wind", "expected"),
    [
        (0, 1200),
        (30, 1200),
        (330, 1200),
        (45, 1374),
        (300, 1374),
        (90, 1548),
        (299, 1548),
        (-90, 1548),
        (180, 1780),
    ],
)
def test_sail_position_for_wind(wind, expected):
    assert sail_position_for_wind(wind) == expected


def test_constructor_writes_initial_positions():
    rudder, sail = FakeServo(), FakeServo()
    RudderSailController(rudder, sail, SharedData())
    assert rudder.writes == [1500]
    assert sail.writes == [1700]


def test_control_proportional_step():
    rudder, sail = FakeServo(), FakeServo()
    shared = SharedData(target_angle=100, angle_from_north=90)
    controller = RudderSailController(rudder, sail, shared)

    command = controller.control(1.0, 0.0)

    assert command == ServoCommand(1476, 1200)
    assert controller.servo_angle_position == 115
    assert controller.adjustment == 10.0
    assert controller.cumulative_error == 10.0
    assert rudder.writes[-1] == 1476
    assert sail.writes[-1] == 1200


def test_control_accumulates_error():
    shared = SharedData(target_angle=100, angle_from_north=90)
    controller = RudderSailController(FakeServo(), FakeServo(), shared)

    controller.control(1.0, 0.0)
    command = controller.control(1.0, 0.0)

    assert controller.cumulative_error == 20.0
    assert controller.servo_angle_position == 105
    assert command.rudder_us == 1428


def test_control_clamps_rudder():
    shared = SharedData(target_angle=180, angle_from_north=0)
    controller = RudderSailController(FakeServo(), FakeServo(), shared)

    command = controller.control(1.0, 1.0)

    assert controller.servo_angle_position == 70
    assert command.rudder_us == 1260


def test_control_uses_wind_for_sail():
    shared = SharedData(wind_vane=180.0)
    controller = RudderSailController(FakeServo(), FakeServo(), shared)

    assert controller.control(1.0, 1.0).sail_us == 1780