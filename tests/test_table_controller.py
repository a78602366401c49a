import math
from unittest.mock import MagicMock

import pytest

from core.exceptions import (
    CoordinateRangeError,
    InvalidSpeedError,
    NotConnectedError,
    PositionParseError,
    ProgramFileError,
    ProgramNotLoadedError,
    TableConnectionError,
)
from core.settings import ConnectionSettings
from hardware.mock_transport import MockTransport
from hardware.table_controller import XYTableController


class TestConnection:
    """Open/close state handling"""

    def test_construction_does_no_io(self, transport):
        controller = XYTableController(transport=transport)
        assert controller.settings == ConnectionSettings()
        assert not controller.is_connected
        assert not transport.is_open
        assert transport.sent == []

    def test_open_passes_settings(self, transport):
        settings = ConnectionSettings(port="COM3", baud_rate=19200, parity="even")
        controller = XYTableController(settings, transport)
        assert controller.open_connection()
        assert controller.is_connected
        assert transport.settings is settings

    def test_open_twice(self, table):
        assert table.open_connection()
        assert table.is_connected

    def test_open_failure(self):
        controller = XYTableController(transport=MockTransport(fail_open=True))
        assert controller.open_connection() is False
        assert not controller.is_connected
        assert isinstance(controller.last_error, TableConnectionError)

    def test_close(self, table, transport):
        assert table.close_connection()
        assert not table.is_connected
        assert not transport.is_open
        assert table.close_connection()

    def test_connection_changes_are_logged(self, transport):
        controller = XYTableController(transport=transport)
        controller.logger = MagicMock()
        port = controller.settings.port

        controller.open_connection()
        controller.logger.success.assert_called_once_with(f"Connected to XY table on {port}", category="table")

        controller.close_connection()
        controller.logger.info.assert_called_with(f"Disconnected from XY table on {port}", category="table")

    @pytest.mark.parametrize("operation", [
        lambda t: t.servo_on(),
        lambda t: t.servo_off(),
        lambda t: t.reset(),
        lambda t: t.manual(),
        lambda t: t.where(),
        lambda t: t.move(10, 10),
        lambda t: t.send_command("AUTO"),
        lambda t: t.send_data("P1"),
        lambda t: t.load_program(""),
    ])
    def test_operations_require_connection(self, transport, operation):
        controller = XYTableController(transport=transport)
        assert operation(controller) is False
        assert isinstance(controller.last_error, NotConnectedError)
        assert transport.sent == []

    def test_get_position_requires_connection(self, transport):
        controller = XYTableController(transport=transport)
        position = controller.get_position()
        assert math.isnan(position.x) and math.isnan(position.y)
        assert isinstance(controller.last_error, NotConnectedError)

    def test_context_manager(self, transport):
        with XYTableController(transport=transport) as controller:
            assert controller.is_connected
            assert controller.servo_on()
        assert not controller.is_connected

    def test_context_manager_open_failure(self):
        with pytest.raises(TableConnectionError):
            with XYTableController(transport=MockTransport(fail_open=True)):
                pass


class TestCommands:
    """Static, generic and raw data lines"""

    @pytest.mark.parametrize("method, line", [
        ("servo_on", b"@SERVO ON \r"),
        ("servo_off", b"@SERVO OFF \r"),
        ("reset", b"@EMGRST \r"),
        ("manual", b"@MANUAL \r"),
        ("where", b"@?WHRXY \r"),
    ])
    def test_static_commands(self, table, transport, method, line):
        assert getattr(table, method)() is True
        assert transport.sent == [line]

    def test_servo_on_is_idempotent(self, table, transport):
        assert table.servo_on()
        assert table.servo_on()
        assert transport.sent[0] == transport.sent[1]

    def test_send_command(self, table, transport):
        assert table.send_command("AUTO")
        assert transport.sent == [b"@AUTO \r\n"]

    def test_send_data(self, table, transport):
        payload = "P1= 10.0 20.0\r\n"
        assert table.send_data(payload)
        assert transport.sent == [payload.encode("ascii") + b" \r\n"]
        assert not transport.sent[0].startswith(b"@")

    def test_send_failure(self, table, transport):
        transport.fail_send = True
        assert table.servo_on() is False
        assert isinstance(table.last_error, TableConnectionError)
        assert table.send_command("AUTO") is False

    def test_last_error_cleared_on_success(self, table, transport):
        transport.fail_send = True
        table.servo_on()
        transport.fail_send = False
        assert table.servo_on()
        assert table.last_error is None


class TestMotion:
    """Move and position queries"""

    @pytest.mark.parametrize("x, y, text", [
        (0.0, 0.0, "0.0 0.0"),
        (650.0, 300.0, "650.0 300.0"),
        (120.44, 33.3, "120.4 33.3"),
    ])
    def test_move_inside_envelope(self, table, transport, x, y, text):
        assert table.move(x, y) is True
        assert transport.sent_text() == [f"@MOVE P, {text} 0 0 0 0, S=2 \r"]

    def test_move_with_speed(self, table, transport):
        assert table.move(10, 20, 50) is True
        assert transport.sent_text() == ["@MOVE P, 10.0 20.0 0 0 0 0, S=50 \r"]

    def test_move_uses_default_speed(self, transport):
        controller = XYTableController(transport=transport, default_speed=7)
        controller.open_connection()
        assert controller.move(1, 1)
        assert transport.sent_text()[-1].endswith("S=7 \r")

    @pytest.mark.parametrize("x, y", [
        (-0.1, 0.0), (650.1, 0.0), (0.0, -0.1), (0.0, 300.1), (1000, 1000),
    ])
    def test_move_outside_envelope(self, table, transport, x, y):
        assert table.move(x, y) is False
        assert isinstance(table.last_error, CoordinateRangeError)
        assert transport.sent == []

    @pytest.mark.parametrize("speed", ["fast", 2.9, 0, -3, True])
    def test_move_rejects_invalid_speed(self, table, transport, speed):
        assert table.move(10, 10, speed) is False
        assert isinstance(table.last_error, InvalidSpeedError)
        assert transport.sent == []

    def test_move_send_failure(self, table, transport):
        transport.fail_send = True
        assert table.move(10, 10) is False
        assert isinstance(table.last_error, TableConnectionError)

    def test_get_position(self, table, transport):
        transport.queue_reply(b"@WHRXY  123.4   56.7\r\n")
        position = table.get_position()
        assert (position.x, position.y) == (123.4, 56.7)
        assert transport.sent == [b"@?WHRXY \r"]
        assert table.last_error is None

    def test_get_position_after_move(self, table):
        assert table.move(200.5, 100.0)
        x, y = table.get_position()
        assert (x, y) == (200.5, 100.0)

    def test_get_position_malformed_reply(self, table, transport):
        transport.queue_reply(b"@NG\r\n")
        position = table.get_position()
        assert not position.is_valid
        assert isinstance(table.last_error, PositionParseError)

    def test_get_position_rejects_non_numeric_fields(self, table, transport):
        transport.queue_reply(b"@WHRXY    nan     inf\r\n")
        position = table.get_position()
        assert not position.is_valid
        assert isinstance(table.last_error, PositionParseError)

    def test_get_position_send_failure(self, table, transport):
        transport.fail_send = True
        position = table.get_position()
        assert not position.is_valid
        assert isinstance(table.last_error, TableConnectionError)


class TestPrograms:
    """Program upload and execution"""

    def test_load_program_sequence(self, table, transport, program_dir):
        assert table.load_program(str(program_dir)) is True
        assert table.last_program == "MYPROG"
        assert transport.sent_text() == [
            "@SYSTEM \r\n",
            "@WRITE PGM \r\n",
            "NAME=MYPROG\r\nMOVE P,P1\r\nMOVE P,P2\r\n \r\n",
            "@WRITE PNT \r\n",
            "P1= 10.0 20.0\r\nP2= 30.0 40.0\r\n \r\n",
        ]

    def test_load_program_empty_path(self, table, transport, program_dir, monkeypatch):
        monkeypatch.chdir(program_dir)
        assert table.load_program("")
        assert table.last_program == "DATA"
        assert transport.sent_text()[2].startswith("NAME=DATA\r\n")

    def test_load_program_missing_files(self, table, transport, tmp_path):
        assert table.load_program(str(tmp_path / "Missing")) is False
        assert isinstance(table.last_error, ProgramFileError)
        assert transport.sent == []
        assert table.last_program is None

    def test_load_program_send_failure(self, table, transport, program_dir):
        transport.fail_send = True
        assert table.load_program(str(program_dir)) is False
        assert isinstance(table.last_error, TableConnectionError)
        assert table.last_program is None

    def test_run_program(self, table, transport, program_dir):
        table.load_program(str(program_dir))
        transport.sent.clear()
        assert table.run_program() is True
        assert transport.sent_text() == [
            "@AUTO \r\n",
            "@SWI <MYPROG> \r\n",
            "@RUN \r\n",
        ]

    def test_run_program_without_load(self, table, transport):
        assert table.run_program() is False
        assert isinstance(table.last_error, ProgramNotLoadedError)
        assert transport.sent == []

    def test_run_program_send_failure(self, table, transport, program_dir):
        table.load_program(str(program_dir))
        transport.fail_send = True
        assert table.run_program() is False
        assert isinstance(table.last_error, TableConnectionError)


def test_non_ascii_command_is_rejected(table, transport):
    assert table.send_command("MOVE °") is False
    assert table.last_error.error_code == "ENCODING"
    assert transport.sent == []


def test_nan_target_is_rejected(table, transport):
    assert table.move(float("nan"), 10) is False
    assert isinstance(table.last_error, CoordinateRangeError)
    assert transport.sent == []
