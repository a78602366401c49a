#!/usr/bin/env python3

"""
Serial Transport
================

pyserial implementation of the transport used to reach the RCX driver.
"""

from typing import List, Optional, Tuple

import serial
import serial.tools.list_ports

from core.exceptions import TableConnectionError
from core.logger import get_logger
from core.settings import ConnectionSettings
from hardware.transport import Transport

PARITY = {
    "none": serial.PARITY_NONE,
    "even": serial.PARITY_EVEN,
    "odd": serial.PARITY_ODD,
    "mark": serial.PARITY_MARK,
    "space": serial.PARITY_SPACE,
}

BYTESIZE = {
    5: serial.FIVEBITS,
    6: serial.SIXBITS,
    7: serial.SEVENBITS,
    8: serial.EIGHTBITS,
}

STOPBITS = {
    1: serial.STOPBITS_ONE,
    1.5: serial.STOPBITS_ONE_POINT_FIVE,
    2: serial.STOPBITS_TWO,
}


def list_serial_ports() -> List[Tuple[str, str]]:
    """Return (device, description) for every serial port the OS reports"""
    return [(port.device, port.description) for port in serial.tools.list_ports.comports()]


class SerialTransport(Transport):
    """
    Serial line to the RCX driver
    """

    def __init__(self):
        self.logger = get_logger()
        self.serial_connection: Optional[serial.Serial] = None

    @property
    def is_open(self) -> bool:
        return self.serial_connection is not None and self.serial_connection.is_open

    def open(self, settings: ConnectionSettings) -> bool:
        """
        Open the serial port described by ``settings``

        Returns:
            True if the port is open, False otherwise
        """
        if self.is_open:
            self.logger.debug("Serial port already open", category="transport")
            return True

        self.logger.debug(f"Opening serial port {settings.describe()}", category="transport")
        try:
            self.serial_connection = serial.Serial(
                port=settings.port,
                baudrate=settings.baud_rate,
                bytesize=BYTESIZE[settings.data_bits],
                parity=PARITY[settings.parity],
                stopbits=STOPBITS[settings.stop_bits],
                timeout=settings.timeout,
            )
        except serial.SerialException as e:
            if "Permission denied" in str(e):
                self.logger.error(f"PERMISSION DENIED - Cannot access port '{settings.port}'", category="transport")
                self.logger.error("Try: sudo usermod -a -G dialout $USER", category="transport")
            elif "Device is busy" in str(e) or "Resource busy" in str(e):
                self.logger.error(f"PORT IN USE - '{settings.port}' is already open by another program", category="transport")
            else:
                self.logger.error(f"SERIAL ERROR - {e}", category="transport")
            self.serial_connection = None
            return False

        self.logger.debug("Serial port opened", category="transport")
        return True

    def close(self) -> bool:
        if self.serial_connection is None:
            return True

        try:
            self.serial_connection.close()
        except serial.SerialException as e:
            self.logger.error(f"Error closing serial port: {e}", category="transport")
            return False

        self.serial_connection = None
        self.logger.debug("Serial port closed", category="transport")
        return True

    def send(self, line: bytes) -> bool:
        if not self.is_open:
            self.logger.debug("No serial connection available", category="transport")
            return False

        try:
            self.logger.debug(f"TABLE >> {line!r}", category="transport")
            written = self.serial_connection.write(line)
            self.serial_connection.flush()
        except serial.SerialException as e:
            self.logger.error(f"Error sending command: {e}", category="transport")
            return False

        if written != len(line):
            self.logger.error(f"Short write: {written} of {len(line)} bytes", category="transport")
            return False
        return True

    def receive_line(self, max_len: int) -> bytes:
        if not self.is_open:
            raise TableConnectionError("Serial port is not open", module="transport")

        try:
            reply = self.serial_connection.readline(max_len)
        except serial.SerialException as e:
            raise TableConnectionError(f"Error reading reply: {e}", module="transport")

        self.logger.debug(f"TABLE << {reply!r}", category="transport")
        return reply
