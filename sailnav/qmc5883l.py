"""Driver for the QMC5883L three-axis magnetometer."""

from __future__ import annotations

import math
import time

from sailnav.bus import I2CBus

DEFAULT_ADDRESS = 0x0D

X_REGISTER = 0x00
Y_REGISTER = 0x02
CONTROL_REGISTER = 0x09
# Continuous mode, 50 Hz output rate, 2 G range.
CONTROL_CONTINUOUS = 0x05

_STARTUP_DELAY = 0.01


class QMC5883L:
    """Computes a magnetic heading from the X and Y field components."""

    def __init__(self, bus: I2CBus, address: int = DEFAULT_ADDRESS) -> None:
        self.bus = bus
        self.address = address

    def begin(self) -> None:
        """Put the sensor in continuous measurement mode."""
        self.bus.write(self.address, bytes([CONTROL_REGISTER, CONTROL_CONTINUOUS]))
        time.sleep(_STARTUP_DELAY)

    def _read_s16(self, register: int) -> int:
        data = self.bus.read_register(self.address, register, 2)
        if len(data) < 2:
            return 0
        return int.from_bytes(data[:2], "little", signed=True)

    def heading(self) -> float:
        """Heading in degrees, in [0, 360)."""
        x = self._read_s16(X_REGISTER)
        y = self._read_s16(Y_REGISTER)
        angle = math.degrees(math.atan2(y, x))
        if angle < 0:
            angle += 360
        return angle