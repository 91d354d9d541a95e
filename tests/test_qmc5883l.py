import struct
from unittest import mock

import pytest

from sailnav.bus import I2CBus
from sailnav.qmc5883l import QMC5883L


class FakeBus(I2CBus):
    def __init__(self, x=None, y=None):
        self.registers = {}
        if x is not None:
            self.registers[0x00] = struct.pack("<h", x)
        if y is not None:
            self.registers[0x02] = struct.pack("<h", y)
        self.pointer = 0
        self.writes = []

    def write(self, address, data):
        self.writes.append((address, bytes(data)))
        if data:
            self.pointer = data[0]

    def read(self, address, length):
        return self.registers.get(self.pointer, b"")[:length]


@mock.patch("time.sleep")
def test_begin_sets_continuous_mode(sleep):
    bus = FakeBus()
    QMC5883L(bus, 0x0D).begin()
    assert bus.writes == [(0x0D, bytes([0x09, 0x05]))]
    assert sleep.called


def test_heading_positive_y_axis():
    assert QMC5883L(FakeBus(x=0, y=100), 0x0D).heading() == pytest.approx(90.0)


def test_heading_negative_angle_wraps():
    assert QMC5883L(FakeBus(x=0, y=-100), 0x0D).heading() == pytest.approx(270.0)


def test_heading_reads_little_endian_signed():
    # Mirror-image vectors must be symmetric about the X axis.
    upper = QMC5883L(FakeBus(x=-300, y=1200), 0x0D).heading()
    lower = QMC5883L(FakeBus(x=-300, y=-1200), 0x0D).heading()
    assert upper + lower == pytest.approx(360.0)


@pytest.mark.parametrize(("x", "y"), [(1, 1), (-5, 3), (-7, -9), (20000, -32768)])
def test_heading_in_range(x, y):
    value = QMC5883L(FakeBus(x=x, y=y), 0x0D).heading()
    assert 0.0 <= value < 360.0


def test_heading_without_data_is_zero():
    assert QMC5883L(FakeBus(), 0x0D).heading() == 0.0