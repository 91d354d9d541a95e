"""Minimal I2C bus abstraction used by the sensor drivers."""

from __future__ import annotations

from abc import ABC, abstractmethod


class I2CError(Exception):
    """A transfer on the bus was not acknowledged."""

    def __init__(self, address: int, code: int, message: str | None = None) -> None:
        self.address = address
        self.code = code
        super().__init__(
            message or f"I2C transfer to 0x{address:02X} failed with code {code}"
        )


class I2CBus(ABC):
    """An I2C controller: raw writes and reads plus register helpers."""

    @abstractmethod
    def write(self, address: int, data: bytes) -> None:
        """Send ``data`` to the device; raise I2CError if it is not acknowledged."""

    @abstractmethod
    def read(self, address: int, length: int) -> bytes:
        """Read up to ``length`` bytes from the device."""

    def read_register(self, address: int, register: int, length: int) -> bytes:
        """Select ``register`` and read up to ``length`` bytes from it."""
        self.write(address, bytes([register]))
        return self.read(address, length)

    def write_register(self, address: int, register: int, value: int) -> None:
        """Write one byte to a register."""
        self.write(address, bytes([register, value]))

    def probe(self, address: int) -> bool:
        """Whether a device acknowledges ``address``."""
        try:
            self.write(address, b"")
        except I2CError:
            return False
        return True

    def scan(self, first: int = 1, last: int = 126) -> list[int]:
        """Addresses in ``first..last`` that answer a probe."""
        return [address for address in range(first, last + 1) if self.probe(address)]