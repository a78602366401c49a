"""
WHERE reply parsing.

The driver answers ``@?WHRXY`` with a single fixed-width line. The X value
occupies columns 7-12 and the Y value columns 15-20, right aligned and padded
with spaces, e.g.::

    @WHRXY  123.4   56.7
    0123456789012345678901
"""

import math
import re
from dataclasses import dataclass

from core.exceptions import PositionParseError


@dataclass(frozen=True)
class ReplyField:
    name: str
    offset: int
    width: int

    @property
    def end(self) -> int:
        return self.offset + self.width


X_FIELD = ReplyField("X", offset=7, width=6)
Y_FIELD = ReplyField("Y", offset=15, width=6)
POSITION_FIELDS = (X_FIELD, Y_FIELD)

# Sign, digits and at most one decimal point
NUMBER_PATTERN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)")


@dataclass(frozen=True)
class Position:
    """Table position in mm"""
    x: float
    y: float

    @classmethod
    def invalid(cls) -> "Position":
        """Sentinel returned when the position could not be read"""
        return cls(math.nan, math.nan)

    @property
    def is_valid(self) -> bool:
        return not (math.isnan(self.x) or math.isnan(self.y))

    def __iter__(self):
        yield self.x
        yield self.y


def _read_field(line: str, field: ReplyField) -> float:
    text = line[field.offset:field.end].replace(" ", "")
    if not text:
        raise PositionParseError(f"Empty {field.name} field in reply {line!r}", module="table")
    if not NUMBER_PATTERN.fullmatch(text):
        raise PositionParseError(f"Bad {field.name} value {text!r} in reply {line!r}", module="table")
    return float(text)


def parse_position_reply(reply) -> Position:
    """
    Parse a WHERE reply line into a Position.

    Accepts bytes or str. Trailing CR/LF is ignored. The last field may be cut
    short by the end of the line, but the line must reach into every field.

    Raises:
        PositionParseError: for short, empty or non-numeric replies
    """
    if isinstance(reply, bytes):
        line = reply.decode("ascii", errors="replace")
    else:
        line = reply
    line = line.rstrip("\r\n\x00")

    last = POSITION_FIELDS[-1]
    if len(line) <= last.offset:
        raise PositionParseError(
            f"Reply too short ({len(line)} chars, need more than {last.offset}): {line!r}",
            module="table"
        )

    return Position(_read_field(line, X_FIELD), _read_field(line, Y_FIELD))
