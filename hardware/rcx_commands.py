#!/usr/bin/env python3

"""
RCX Command Library
===================

Command definitions for the YAMAHA RCX robot driver that moves the XY table.
Every command is one ASCII line starting with '@'. Online commands end with
" \\r", program-mode commands and raw data lines end with " \\r\\n".

Usage:
    from hardware.rcx_commands import STATIC_COMMANDS, build_move, build_command

    line = STATIC_COMMANDS['SERVO_ON']['line']     # '@SERVO ON \\r'
    line = build_move(120.0, 45.5, speed=10)       # '@MOVE P, 120.0 45.5 0 0 0 0, S=10 \\r'
    line = build_command('AUTO')                   # '@AUTO \\r\\n'
"""

from numbers import Real
from typing import Dict

from core.exceptions import CoordinateRangeError, InvalidSpeedError

COMMAND_PREFIX = "@"
ONLINE_TERMINATOR = " \r"
LINE_TERMINATOR = " \r\n"
ENCODING = "ascii"

# Working envelope of the table (mm)
X_MIN, X_MAX = 0.0, 650.0
Y_MIN, Y_MAX = 0.0, 300.0

DEFAULT_SPEED = 2


# ============================================================================
# STATIC COMMANDS
# ============================================================================

STATIC_COMMANDS = {
    'SERVO_ON': {
        'name': 'Servo On',
        'line': '@SERVO ON \r',
        'description': 'Energize the axis servos so the table can move',
    },
    'SERVO_OFF': {
        'name': 'Servo Off',
        'line': '@SERVO OFF \r',
        'description': 'De-energize the axis servos',
    },
    'WHERE': {
        'name': 'Position Query',
        'line': '@?WHRXY \r',
        'description': 'Ask for the current XY position; the driver answers with one line',
    },
    'MANUAL': {
        'name': 'Manual Mode',
        'line': '@MANUAL \r',
        'description': 'Switch the driver to manual (teach pendant) mode',
    },
    'RESET': {
        'name': 'Emergency Reset',
        'line': '@EMGRST \r',
        'description': 'Clear an emergency stop condition',
    },
}


def encode_line(line: str) -> bytes:
    """Encode a command line for the wire"""
    return line.encode(ENCODING)


def static_command_lines() -> Dict[str, bytes]:
    """Encoded lines for every static command, keyed like STATIC_COMMANDS"""
    return {key: encode_line(cmd['line']) for key, cmd in STATIC_COMMANDS.items()}


def check_envelope(x: float, y: float):
    """
    Raise CoordinateRangeError if (x, y) lies outside the table envelope.

    X is checked before Y, so a point outside on both axes reports X.
    """
    for axis, value, low, high in (("X", x, X_MIN, X_MAX), ("Y", y, Y_MIN, Y_MAX)):
        if isinstance(value, bool) or not isinstance(value, Real) or not low <= value <= high:
            raise CoordinateRangeError(axis, value, low, high)


def check_speed(speed):
    """Raise InvalidSpeedError unless speed is an int of at least 1"""
    if isinstance(speed, bool) or not isinstance(speed, int) or speed < 1:
        raise InvalidSpeedError(speed)


def build_move(x: float, y: float, speed: int = DEFAULT_SPEED) -> str:
    """
    Build a point-to-point MOVE line.

    Example:
        >>> build_move(100, 50.25)
        '@MOVE P, 100.0 50.2 0 0 0 0, S=2 \\r'
    """
    check_envelope(x, y)
    check_speed(speed)
    return f"{COMMAND_PREFIX}MOVE P, {x:.1f} {y:.1f} 0 0 0 0, S={speed}{ONLINE_TERMINATOR}"


def build_command(name: str) -> str:
    """
    Build a named command line.

    Example:
        >>> build_command('AUTO')
        '@AUTO \\r\\n'
    """
    return f"{COMMAND_PREFIX}{name}{LINE_TERMINATOR}"


def build_data(payload: str) -> str:
    """Build a raw data line (no '@' prefix), used for program upload"""
    return f"{payload}{LINE_TERMINATOR}"


def select_program_command(name: str) -> str:
    """Name of the program-select command for ``name``"""
    return f"SWI <{name}>"
