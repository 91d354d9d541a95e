"""Driver for the CMPS12 tilt-compensated compass."""

from __future__ import annotations

import logging
import time

from sailnav.bus import I2CBus, I2CError

log = logging.getLogger(__name__)

DEFAULT_ADDRESS = 0x60

COMMAND_REGISTER = 0x00
BEARING_REGISTER = 0x02
PITCH_REGISTER = 0x04
ROLL_REGISTER = 0x05
CALIBRATION_STATE_REGISTER = 0x1E

START_CALIBRATION = 0xF0
END_CALIBRATION = 0xF1
SAVE_CALIBRATION_SEQUENCE = (0xF0, 0xF5, 0xF6)

_STARTUP_DELAY = 1.0
_COMMAND_DELAY = 0.02


def _signed8(value: int) -> int:
    return value - 256 if value > 127 else value


class CMPS12:
    """Reads bearing, pitch, roll and calibration state from a CMPS12."""

    def __init__(self, bus: I2CBus, address: int = DEFAULT_ADDRESS) -> None:
        self.bus = bus
        self.address = address

    def begin(self) -> None:
        """Wait for the bus and sensor to settle."""
        time.sleep(_STARTUP_DELAY)

    def _read_u8(self, register: int) -> int:
        data = self.bus.read_register(self.address, register, 1)
        return data[0] if len(data) == 1 else 0

    def _read_u16(self, register: int) -> int:
        data = self.bus.read_register(self.address, register, 2)
        if len(data) < 2:
            return 0
        return int.from_bytes(data[:2], "big")

    def read_compass_bearing(self) -> int:
        """Bearing in tenths of a degree, or 0 when the sensor gave no data."""
        return self._read_u16(BEARING_REGISTER)

    def read_pitch(self) -> int:
        """Pitch in degrees, signed."""
        return _signed8(self._read_u8(PITCH_REGISTER))

    def read_roll(self) -> int:
        """Roll in degrees, signed."""
        return _signed8(self._read_u8(ROLL_REGISTER))

    def read_calibration_state(self) -> int:
        """Raw calibration state byte."""
        return self._read_u8(CALIBRATION_STATE_REGISTER)

    def _command(self, command: int, failure: str) -> None:
        try:
            self.bus.write(self.address, bytes([COMMAND_REGISTER, command]))
        except I2CError as error:
            raise I2CError(error.address, error.code, f"{failure}: {error}") from error

    def start_calibration(self) -> None:
        """Enter calibration mode. Raises I2CError if the sensor refuses."""
        self._command(START_CALIBRATION, "failed to activate calibration mode")
        log.info("calibration mode activated, rotate the sensor")

    def end_calibration(self) -> None:
        """Leave calibration mode and store the calibration."""
        self._command(END_CALIBRATION, "failed to end calibration")
        log.info("calibration completed")
        self.save_calibration()

    def save_calibration(self) -> None:
        """Send the store-calibration command sequence, stopping at the first failure."""
        for command in SAVE_CALIBRATION_SEQUENCE:
            self._command(command, f"failed to send command 0x{command:02X}")
            time.sleep(_COMMAND_DELAY)
        log.info("calibration saved")