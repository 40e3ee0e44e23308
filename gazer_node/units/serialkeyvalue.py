"""Reads ``key=value`` lines from a serial port."""

from typing import List, Optional, Tuple

import serial

from gazer_node.units.base import Unit

_READ_SIZE = 32


class SerialPortKeyValueUnit(Unit):
    """Publishes every ``key=value`` line received on a serial port."""

    def __init__(self, port_name: str = "COM3", baud: int = 9600):
        super().__init__("unit301serialportkeyvalue")
        self.config.set_parameter_string("0000_00_name_str", "Serial Port Key=Value")
        self.port_name = port_name
        self.baud = baud
        self._port: Optional[serial.Serial] = None
        self._buffer = bytearray()

    def _open(self) -> None:
        try:
            self._port = serial.Serial(
                port=self.port_name,
                baudrate=self.baud,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=0.1,
            )
        except serial.SerialException as err:
            self._port = None
            self.set_value("/status", "Status", str(err), "error")
        else:
            self.set_value("/status", "Status", "connected", "")

    def tick(self) -> None:
        if self._port is None:
            self._open()
        if self._port is None:
            return
        try:
            data = self._port.read(_READ_SIZE)
        except serial.SerialException as err:
            if "eof" not in str(err).lower():
                self._port.close()
                self._port = None
                self.set_value("/status", "Status", str(err), "error")
            return
        if data:
            self.feed(data)

    def feed(self, data: bytes) -> List[Tuple[str, str]]:
        """Add received bytes and publish each complete line; returns the pairs published."""
        self._buffer.extend(data)
        published: List[Tuple[str, str]] = []
        while True:
            end = next((i for i, b in enumerate(self._buffer) if b in (10, 13)), None)
            if end is None:
                break
            line = bytes(b for b in self._buffer[:end] if 32 <= b < 128).decode("ascii")
            del self._buffer[: end + 1]
            if not line:
                continue
            parts = line.split("=")
            if len(parts) > 1 and parts[0]:
                key, value = parts[0], parts[1]
                self.set_value("/" + key, key, value, "")
                self.set_value("/", key, value, "")
                published.append((key, value))
        return published