"""Radio link: receives ``key:value`` commands and sends telemetry."""

from __future__ import annotations

import re
from typing import Protocol

from sailnav.shared_data import SharedData

_ENCODING = "latin-1"
_TERMINATOR = b"|"
_WHITESPACE = " \t\n\v\f\r"
_NUMBER_PREFIX = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)

_UNSET_FLOAT = -9999.0
_UNSET_INT = -1

# (telemetry label, SharedData attribute, decimals or None for integers)
_TELEMETRY = (
    ("latitude", "latitude", 6),
    ("longitude", "longitude", 6),
    ("compass", "compass", 2),
    ("wind_vane", "wind_vane", 2),
    ("horizontal_tilt", "horizontal_tilt", 2),
    ("vertical_tilt", "vertical_tilt", 2),
    ("target_angle", "target_angle", None),
    ("target_tension", "target_tension", None),
    ("angle_from_north", "angle_from_north", None),
)


class SerialPort(Protocol):
    """The part of a serial port the link needs."""

    @property
    def in_waiting(self) -> int: ...

    def read(self, size: int = 1) -> bytes: ...

    def write(self, data: bytes) -> int | None: ...


def _parse_number(text: str) -> float:
    """Parse a leading number the lenient way: no number at all gives 0.0."""
    match = _NUMBER_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


class XbeeLink:
    """Command and telemetry link over the radio serial port.

    Received messages are also forwarded to the RTK port, and position,
    heading and target values are written back only when they change.
    """

    def __init__(self, port: SerialPort, rtk_port: SerialPort, shared: SharedData) -> None:
        self.port = port
        self.rtk_port = rtk_port
        self.shared = shared
        self.kp = 1.0
        self.ki = 1.0
        self.waypoint_lat = 0.0
        self.waypoint_lon = 0.0
        self.rtk = ""
        self._previous: dict[str, float | int] = {
            attribute: _UNSET_INT if decimals is None else _UNSET_FLOAT
            for _, attribute, decimals in _TELEMETRY
        }

    def read(self) -> str | None:
        """Read one ``|``-terminated message if data is waiting, and apply it.

        Returns the trimmed message, or None when nothing was waiting.
        Raises EOFError if the port runs dry before the terminator.
        """
        if not self.port.in_waiting:
            return None

        received = bytearray()
        while True:
            chunk = self.port.read(1)
            if not chunk:
                raise EOFError("link closed before message terminator")
            if chunk == _TERMINATOR:
                break
            received += chunk

        message = received.decode(_ENCODING).strip(_WHITESPACE)
        self.rtk_port.write(message.encode(_ENCODING))
        self.handle_message(message)
        return message

    def handle_message(self, message: str) -> None:
        """Apply one ``key:value`` command.

        An empty message is ignored. Raises ValueError for a message without
        a colon or with an unknown key.
        """
        if not message:
            return

        key, separator, value = message.partition(":")
        if not separator:
            raise ValueError(f"invalid format {message!r}, expected 'key:value'")

        if key == "kp":
            self.kp = _parse_number(value)
        elif key == "ki":
            self.ki = _parse_number(value)
        elif key == "tension":
            self.shared.target_tension = int(_parse_number(value))
        elif key == "cap":
            self.shared.target_angle = int(_parse_number(value))
        elif key == "rtk":
            self.rtk = value
            self.rtk_port.write(value.encode(_ENCODING))
        elif key == "point_lon":
            self.waypoint_lon = _parse_number(value)
            self.shared.waypoint_lon = self.waypoint_lon
        elif key == "point_lat":
            self.waypoint_lat = _parse_number(value)
            self.shared.waypoint_lat = self.waypoint_lat
        else:
            raise ValueError(
                f"invalid key {key!r}, expected 'kp', 'ki', 'tension', 'cap', "
                "'point_lat', 'point_lon' or 'rtk'"
            )

    def send(self, data: SharedData) -> list[str]:
        """Write every telemetry value that changed since the last send.

        Returns the lines written, without their line endings.
        """
        sent = []
        for label, attribute, decimals in _TELEMETRY:
            value = getattr(data, attribute)
            if value == self._previous[attribute]:
                continue
            text = str(value) if decimals is None else f"{value:.{decimals}f}"
            line = f"{label}:{text}"
            self.port.write(f"{line}\r\n".encode(_ENCODING))
            self._previous[attribute] = value
            sent.append(line)
        return sent