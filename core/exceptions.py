"""
Exception Classes for the XY Table Controller

Every failure the controller can report is one of these. Public controller
operations catch them at their boundary, log them, and keep the last one in
``XYTableController.last_error`` so the caller can inspect the kind.
"""

from typing import Optional


class XYTableError(Exception):
    """Base exception for all XY table errors"""

    def __init__(self, message: str, error_code: Optional[str] = None, module: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        self.module = module
        super().__init__(self.message)

    def __str__(self):
        parts = [self.message]
        if self.module:
            parts.append(f"Module: {self.module}")
        if self.error_code:
            parts.append(f"Code: {self.error_code}")
        return " | ".join(parts)


class ConfigurationError(XYTableError):
    """Raised when connection settings or config values are invalid"""
    pass


class TableConnectionError(XYTableError):
    """Raised when the transport fails to open, close, send or receive"""
    pass


class NotConnectedError(TableConnectionError):
    """Raised when an operation needs an open connection and there is none"""
    pass


class CoordinateRangeError(XYTableError):
    """Raised when a target lies outside the table's working envelope"""

    def __init__(self, axis: str, value: float, minimum: float, maximum: float):
        self.axis = axis
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"{axis}={value} outside {axis}Min:{minimum} {axis}Max:{maximum}",
            error_code="RANGE",
            module="table",
        )


class PositionParseError(XYTableError):
    """Raised when a WHERE reply does not match the position layout"""
    pass


class ProgramFileError(XYTableError):
    """Raised when prog.txt or pars.txt cannot be opened or read"""
    pass


class ProgramNotLoadedError(XYTableError):
    """Raised when a program run is requested before any program was uploaded"""
    pass


class InvalidSpeedError(XYTableError):
    """Raised when a MOVE speed is not a whole number of at least 1"""

    def __init__(self, speed):
        self.speed = speed
        super().__init__(f"Invalid speed {speed!r}, expected an integer >= 1", error_code="SPEED", module="table")
