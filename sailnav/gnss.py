"""GNSS receiver setup over I2C, UBX framing and position reading."""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Protocol

from sailnav.bus import I2CBus
from sailnav.shared_data import SharedData

log = logging.getLogger(__name__)

ZED_F9P_I2C_ADDRESS = 0x42

UBX_SYNC = b"\xb5\x62"
UBX_CLASS_CFG = 0x06
UBX_CFG_PRT = 0x00

# CFG-PRT: UBX output only on the I2C port.
ENABLE_UBX_I2C_FRAME = bytes(
    [0xB5, 0x62, 0x06, 0x1A, 0x08, 0x00,
     0x01, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
     0x23, 0x71]
)
# CFG-MSG: UBX-RXM-RTCM (0x02 0x32) at rate 1 on I2C.
ENABLE_RXM_RTCM_I2C_FRAME = bytes(
    [0xB5, 0x62, 0x06, 0x01, 0x03, 0x00, 0x02, 0x32, 0x01, 0x3F, 0x4C]
)
# CFG-PRT payload for UART2: RTCM3 in, nothing out.
UART2_PORT_PAYLOAD = bytes(
    [0x01, 0x00, 0x00, 0x00,
     0xD0, 0x08, 0x00, 0x00,
     0x01, 0xC2, 0x00, 0x00,
     0x00, 0x02,
     0x00, 0x00,
     0x00, 0x00,
     0x00, 0x00]
)

_INIT_DELAY = 2.0
_AFTER_BEGIN_DELAY = 1.0
_BETWEEN_FRAMES_DELAY = 0.5


class FixQuality(enum.Enum):
    """RTK solution quality."""

    RTK_FIXED = "RTK Fixed"
    RTK_FLOAT = "RTK Float"
    NONE = "No RTK"


@dataclass(frozen=True)
class Pvt:
    """A navigation solution as the receiver reports it."""

    latitude: int  # 1e-7 degrees
    longitude: int  # 1e-7 degrees
    altitude: int  # millimetres
    fix_type: int


@dataclass(frozen=True)
class Position:
    """A position in degrees and metres, with its RTK quality if known."""

    latitude: float
    longitude: float
    altitude: float
    quality: FixQuality | None = None


class Receiver(Protocol):
    """The part of a GNSS receiver driver this module needs."""

    def begin(self, bus: I2CBus, address: int) -> bool: ...

    def read_pvt(self) -> Pvt | None: ...

    def read_carrier_solution(self) -> int | None: ...


def ubx_checksum(body: bytes) -> bytes:
    """Two-byte 8-bit Fletcher checksum of a UBX class, id, length and payload."""
    ck_a = ck_b = 0
    for byte in body:
        ck_a = (ck_a + byte) & 0xFF
        ck_b = (ck_b + ck_a) & 0xFF
    return bytes([ck_a, ck_b])


def build_ubx_frame(msg_class: int, msg_id: int, payload: bytes) -> bytes:
    """A complete UBX frame: sync, header, payload and checksum."""
    if len(payload) > 0xFFFF:
        raise ValueError("UBX payload longer than 65535 bytes")
    body = bytes([msg_class, msg_id]) + len(payload).to_bytes(2, "little") + bytes(payload)
    return UBX_SYNC + body + ubx_checksum(body)


def classify_fix(fix_type: int, carr_soln: int) -> FixQuality:
    """RTK quality from the PVT fix type and the carrier solution flag."""
    if fix_type == 5 and carr_soln == 2:
        return FixQuality.RTK_FIXED
    if fix_type >= 4 and carr_soln == 1:
        return FixQuality.RTK_FLOAT
    return FixQuality.NONE


class GNSS:
    """Configures the receiver for RTK corrections and reads positions."""

    def __init__(self, bus: I2CBus, receiver: Receiver) -> None:
        self.bus = bus
        self.receiver = receiver
        self.address = ZED_F9P_I2C_ADDRESS

    def begin(self) -> bool:
        """Start the receiver and configure it; returns whether it answered."""
        time.sleep(_INIT_DELAY)
        connected = self.receiver.begin(self.bus, self.address)
        if not connected:
            log.error("unable to communicate with the GNSS receiver")
        time.sleep(_AFTER_BEGIN_DELAY)
        self.scan()
        self.enable_ubx_rtk()
        self.configure_uart2()
        return connected

    def scan(self) -> list[int]:
        """Addresses of every device answering on the bus."""
        found = self.bus.scan()
        for address in found:
            log.info("device found at address 0x%02X", address)
        return found

    def enable_ubx_rtk(self) -> None:
        """Enable UBX output and UBX-RXM-RTCM messages on I2C."""
        self.bus.write(self.address, ENABLE_UBX_I2C_FRAME)
        time.sleep(_BETWEEN_FRAMES_DELAY)
        self.bus.write(self.address, ENABLE_RXM_RTCM_I2C_FRAME)
        log.info("UBX output and UBX-RXM-RTCM enabled on I2C")

    def configure_uart2(self) -> None:
        """Set UART2 to accept RTCM3 corrections."""
        frame = build_ubx_frame(UBX_CLASS_CFG, UBX_CFG_PRT, UART2_PORT_PAYLOAD)
        self.bus.write(self.address, frame)
        log.info("UART2 configured for RTCM reception")

    def read_position(self, shared: SharedData) -> Position | None:
        """Read the latest solution into ``shared``; None when none is available."""
        pvt = self.receiver.read_pvt()
        if pvt is None:
            log.info("no GNSS data available")
            return None

        quality = None
        carr_soln = self.receiver.read_carrier_solution()
        if carr_soln is not None:
            quality = classify_fix(pvt.fix_type, carr_soln)
            log.info(
                "fix type %d, carrier solution %d -> %s",
                pvt.fix_type,
                carr_soln,
                quality.value,
            )

        position = Position(
            latitude=pvt.latitude / 1e7,
            longitude=pvt.longitude / 1e7,
            altitude=pvt.altitude / 1e3,
            quality=quality,
        )
        shared.latitude = position.latitude
        shared.longitude = position.longitude
        shared.altitude = position.altitude
        log.info(
            "latitude %.7f, longitude %.7f, altitude %.2f m",
            position.latitude,
            position.longitude,
            position.altitude,
        )
        return position