import pytest

from sailnav.app import Boat, main
from sailnav.bus import I2CBus
from sailnav.cmps12 import CMPS12
from sailnav.planner import LaylinePathPlanner
from sailnav.shared_data import SharedData


class FakeBus(I2CBus):
    def __init__(self, memory):
        self.memory = memory
        self.pointer = 0

    def write(self, address, data):
        if data:
            self.pointer = data[0]

    def read(self, address, length):
        return bytes(self.memory.get(self.pointer + i, 0) for i in range(length))


def test_path_finding_uses_defaults_when_shared_is_empty():
    shared = SharedData()
    boat = Boat(shared, LaylinePathPlanner())
    direction = boat.path_finding_step(0.0)
    expected = LaylinePathPlanner().calculate_direction(
        48.8566, 2.3522, 47.253699, -1.370199, 90.0, 180.0, 5.0, 0.0
    )
    assert direction == pytest.approx(expected)


def test_path_finding_uses_shared_values():
    shared = SharedData(
        latitude=48.8566,
        longitude=2.3522,
        waypoint_lat=48.8600,
        waypoint_lon=2.3700,
        angle_from_north=90,
        wind_vane=270.0,
        wind_speed=5.0,
    )
    boat = Boat(shared, LaylinePathPlanner())
    direction = boat.path_finding_step(0.0)
    expected = LaylinePathPlanner().calculate_direction(
        48.8566, 2.3522, 48.8600, 2.3700, 90.0, 270.0, 5.0, 0.0
    )
    assert direction == pytest.approx(expected)


def test_target_angle_is_rounded_direction():
    shared = SharedData()
    boat = Boat(shared, LaylinePathPlanner())
    for step in range(5):
        direction = boat.path_finding_step(step * 0.5)
        assert abs(shared.target_angle - direction) <= 0.5
        assert 0 <= shared.target_angle <= 360
    assert boat.iteration == 5


def test_sensor_step_fills_shared_data():
    memory = {0x02: 0x04, 0x03: 0xD2, 0x04: 0xFE, 0x05: 0x05, 0x1E: 0xFF}
    shared = SharedData()
    boat = Boat(shared, LaylinePathPlanner(), CMPS12(FakeBus(memory)))
    reading = boat.sensor_step()
    assert reading.bearing == 0x04D2
    assert reading.pitch == -2
    assert reading.roll == 5
    assert reading.calibration_state == 0xFF
    assert shared.angle_from_north == 123
    assert shared.vertical_tilt == reading.pitch
    assert shared.horizontal_tilt == reading.roll


def test_sensor_step_without_compass_raises():
    boat = Boat(SharedData(), LaylinePathPlanner())
    with pytest.raises(RuntimeError):
        boat.sensor_step()


def test_main_prints_each_iteration(capsys):
    assert main(["--iterations", "2"]) == 0
    out = capsys.readouterr().out
    assert "=== Path Planning Iteration 1 ===" in out
    assert "=== Path Planning Iteration 2 ===" in out
    assert "Waypoint: 47.253699, -1.370199" in out
    assert out.count("Optimal direction:") == 2


def test_main_accepts_positions(capsys):
    assert main(["--iterations", "1", "--boat", "48.8566", "2.3522",
                 "--waypoint", "48.86", "2.37"]) == 0
    out = capsys.readouterr().out
    assert "Waypoint: 48.860000, 2.370000" in out


def test_main_rejects_bad_arguments():
    with pytest.raises(SystemExit):
        main(["--iterations", "many"])