#!/usr/bin/env python3

"""
XY Table Controller
===================

Drives the two-axis positioning table (YAMAHA robot, RCX driver) over a
serial link. Commands are single ASCII lines; the only reply the controller
reads is the answer to the WHERE query.

Every public operation returns a plain result (bool, or Position for
get_position) and never raises. On failure the error is logged and kept in
``last_error``.
"""

from typing import Optional

from core.exceptions import (
    XYTableError,
    CoordinateRangeError,
    InvalidSpeedError,
    NotConnectedError,
    ProgramNotLoadedError,
    TableConnectionError,
)
from core.logger import get_logger
from core.program_bundle import load_program_bundle
from core.settings import ConnectionSettings
from hardware.position_reply import Position, parse_position_reply
from hardware.rcx_commands import (
    DEFAULT_SPEED,
    build_command,
    build_data,
    build_move,
    encode_line,
    select_program_command,
    static_command_lines,
)
from hardware.transport import Transport


class XYTableController:
    """
    Interface for the XY table via its RCX driver
    """

    def __init__(self, settings: Optional[ConnectionSettings] = None,
                 transport: Optional[Transport] = None,
                 default_speed: int = DEFAULT_SPEED):
        """
        Initialize the controller. No I/O happens until open_connection().

        Args:
            settings: Serial line settings, defaults to /dev/ttyUSB0 9600 8O1
            transport: Channel to the driver, defaults to a pyserial transport
            default_speed: Speed used by move() when none is given
        """
        self.logger = get_logger()
        self.settings = settings if settings is not None else ConnectionSettings()

        if transport is None:
            from hardware.serial_transport import SerialTransport
            transport = SerialTransport()
        self.transport = transport
        self.default_speed = default_speed

        # Static command lines, built once
        self.commands = static_command_lines()

        self.is_connected = False
        self.last_error: Optional[XYTableError] = None
        self.last_program: Optional[str] = None

    def __enter__(self):
        if not self.open_connection():
            raise self.last_error
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close_connection()
        return False

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _fail(self, error: XYTableError) -> bool:
        self.last_error = error
        if isinstance(error, (NotConnectedError, CoordinateRangeError, InvalidSpeedError, ProgramNotLoadedError)):
            self.logger.warning(str(error), category="table")
        else:
            self.logger.error(str(error), category="table")
        return False

    def _require_connection(self, action: str):
        if not self.is_connected:
            raise NotConnectedError(f"Cannot {action}: not connected to XY table", module="table")

    def _send_line(self, line: str):
        try:
            data = encode_line(line)
        except UnicodeEncodeError:
            raise XYTableError(f"Command {line.strip()!r} is not ASCII", error_code="ENCODING", module="table")
        if not self.transport.send(data):
            raise TableConnectionError(f"Transport rejected {line.strip()!r}", module="transport")

    def _send_static(self, key: str, action: str) -> bool:
        self.last_error = None
        try:
            self._require_connection(action)
            if not self.transport.send(self.commands[key]):
                raise TableConnectionError(f"Failed to {action}", module="transport")
        except XYTableError as e:
            return self._fail(e)

        self.logger.debug(f"Sent {key}", category="table")
        return True

    # ------------------------------------------------------------------
    # connection
    # ------------------------------------------------------------------

    def open_connection(self) -> bool:
        """
        Open the serial link to the driver

        Returns:
            True if connection successful, False otherwise
        """
        self.last_error = None
        if self.is_connected:
            self.logger.info("Already connected to XY table", category="table")
            return True

        self.logger.info(f"Connecting to XY table on {self.settings.describe()}", category="table")
        if not self.transport.open(self.settings):
            return self._fail(TableConnectionError(
                f"Could not open {self.settings.port}", module="transport"
            ))

        self.is_connected = True
        self.logger.success(f"Connected to XY table on {self.settings.port}", category="table")
        return True

    def close_connection(self) -> bool:
        """
        Close the serial link. Closing an already closed controller does nothing.

        Returns:
            True if the link is closed afterwards, False otherwise
        """
        self.last_error = None
        if not self.is_connected:
            self.logger.debug("XY table already disconnected", category="table")
            return True

        if not self.transport.close():
            return self._fail(TableConnectionError(
                f"Could not close {self.settings.port}", module="transport"
            ))

        self.is_connected = False
        self.logger.info(f"Disconnected from XY table on {self.settings.port}", category="table")
        return True

    # ------------------------------------------------------------------
    # static commands
    # ------------------------------------------------------------------

    def servo_on(self) -> bool:
        """Energize the servos"""
        return self._send_static("SERVO_ON", "switch servos on")

    def servo_off(self) -> bool:
        """De-energize the servos"""
        return self._send_static("SERVO_OFF", "switch servos off")

    def reset(self) -> bool:
        """Clear an emergency stop"""
        return self._send_static("RESET", "reset emergency stop")

    def manual(self) -> bool:
        return self._send_static("MANUAL", "enter manual mode")

    def where(self) -> bool:
        """
        Send the position query without reading the reply.
        Use get_position() to query and parse in one step.
        """
        return self._send_static("WHERE", "query position")

    # ------------------------------------------------------------------
    # position and motion
    # ------------------------------------------------------------------

    def get_position(self) -> Position:
        """
        Query and parse the current table position

        Returns:
            Position in mm, or Position.invalid() (NaN, NaN) if the query
            could not be sent, no reply arrived, or the reply was malformed
        """
        if not self.where():
            return Position.invalid()

        try:
            reply = self.transport.receive_line(self.settings.reply_length)
            position = parse_position_reply(reply)
        except XYTableError as e:
            self._fail(e)
            return Position.invalid()

        self.logger.debug(f"Position: X={position.x:.1f}mm, Y={position.y:.1f}mm", category="table")
        return position

    def move(self, x: float, y: float, speed: Optional[int] = None) -> bool:
        """
        Point-to-point move to absolute position

        Args:
            x: Target X in mm, 0.0 to 650.0
            y: Target Y in mm, 0.0 to 300.0
            speed: Driver speed setting, default_speed if omitted

        Returns:
            True if the move was sent, False if rejected or the send failed
        """
        self.last_error = None
        if speed is None:
            speed = self.default_speed

        try:
            self._require_connection("move")
            line = build_move(x, y, speed)
            self.logger.info(f"Moving to X={x:.1f}mm, Y={y:.1f}mm at S={speed}", category="table")
            self._send_line(line)
        except XYTableError as e:
            return self._fail(e)

        return True

    # ------------------------------------------------------------------
    # generic commands and program upload
    # ------------------------------------------------------------------

    def send_command(self, name: str) -> bool:
        """
        Send a named command, e.g. send_command("AUTO") writes '@AUTO \\r\\n'
        """
        self.last_error = None
        try:
            self._require_connection(f"send {name}")
            self._send_line(build_command(name))
        except XYTableError as e:
            return self._fail(e)
        return True

    def send_data(self, payload: str) -> bool:
        """Send a raw data line (program or parameter text) without '@'"""
        self.last_error = None
        try:
            self._require_connection("send data")
            self._send_line(build_data(payload))
        except XYTableError as e:
            return self._fail(e)
        return True

    def load_program(self, path: str) -> bool:
        """
        Upload prog.txt and pars.txt from the folder ``path`` into the driver

        The program is stored under the uppercased folder name (DATA for an
        empty path), which run_program() selects afterwards.

        Args:
            path: Folder holding prog.txt and pars.txt

        Returns:
            True if both files were read and every upload step was sent
        """
        self.last_error = None
        try:
            self._require_connection("load program")
            bundle = load_program_bundle(path)
        except XYTableError as e:
            return self._fail(e)

        self.logger.info(f"Uploading program {bundle.name}", category="program")
        steps = [
            (self.send_command, "SYSTEM"),
            (self.send_command, "WRITE PGM"),
            (self.send_data, bundle.program_payload),
            (self.send_command, "WRITE PNT"),
            (self.send_data, bundle.parameters),
        ]
        for send, text in steps:
            if not send(text):
                self.last_program = None
                self.logger.error(f"Upload of program {bundle.name} aborted", category="program")
                return False

        self.last_program = bundle.name
        self.logger.success(f"Program {bundle.name} uploaded", category="program")
        return True

    def run_program(self) -> bool:
        """
        Run the most recently uploaded program: AUTO, SWI <NAME>, RUN

        Returns:
            True only if all three commands were sent
        """
        self.last_error = None
        if self.last_program is None:
            return self._fail(ProgramNotLoadedError(
                "No program loaded; call load_program() first", module="program"
            ))

        self.logger.info(f"Running program {self.last_program}", category="program")
        for name in ("AUTO", select_program_command(self.last_program), "RUN"):
            if not self.send_command(name):
                return False

        self.logger.success(f"Program {self.last_program} started", category="program")
        return True
