import pytest

from core.exceptions import PositionParseError
from hardware.mock_transport import format_position_reply
from hardware.position_reply import Position, parse_position_reply


def test_parse_reply_from_driver_layout():
    position = parse_position_reply("@WHRXY  123.4   56.7")
    assert position == Position(123.4, 56.7)


def test_parse_reply_bytes_with_line_end():
    position = parse_position_reply(b"@WHRXY  650.0  300.0\r\n")
    assert position.x == 650.0
    assert position.y == 300.0


def test_parse_reply_generated_by_mock():
    assert parse_position_reply(format_position_reply(12.5, 7.0)) == Position(12.5, 7.0)


def test_spaces_inside_field_are_ignored():
    assert parse_position_reply("@WHRXY 1 2.5    3 .5") == Position(12.5, 3.5)


@pytest.mark.parametrize("reply", [
    "",
    b"",
    "@WHRXY  123.4",
    "@WHRXY  123.4  ",
    "@WHRXY         56.7",
    "@WHRXY  abc.d   56.7",
    "@WHRXY  123.4   ?6.7",
    "@WHRXY    nan     inf",
    "@WHRXY  1e2    1_0.5",
    "@WHRXY  12.3.4  56.7",
    "@WHRXY  123.4   +-5.0",
    "   inf",
])
def test_malformed_replies(reply):
    with pytest.raises(PositionParseError):
        parse_position_reply(reply)


def test_position_sentinel():
    invalid = Position.invalid()
    assert not invalid.is_valid
    assert Position(0.0, 0.0).is_valid
    x, y = Position(1.0, 2.0)
    assert (x, y) == (1.0, 2.0)


@pytest.mark.parametrize("reply, expected", [
    ("@WHRXY  +12.5   -0.5", Position(12.5, -0.5)),
    ("@WHRXY    .5     10.", Position(0.5, 10.0)),
])
def test_signed_and_bare_decimal_values(reply, expected):
    assert parse_position_reply(reply) == expected
