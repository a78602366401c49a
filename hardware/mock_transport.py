#!/usr/bin/env python3

"""
Mock Transport
==============

Simulated RCX driver link. Every written line is kept in ``sent`` and WHERE
queries are answered from a simulated table position, so the controller and
the console can run without a serial port.
"""

from collections import deque
from typing import Deque, List, Optional

from core.exceptions import TableConnectionError
from core.logger import get_logger
from core.settings import ConnectionSettings
from hardware.transport import Transport

WHERE_QUERY = b"@?WHRXY"


def format_position_reply(x: float, y: float) -> bytes:
    """Build a WHERE reply in the driver's fixed-width layout"""
    return f"@WHRXY {x:6.1f}  {y:6.1f}\r\n".encode("ascii")


class MockTransport(Transport):
    """
    In-memory transport. Queue explicit replies with ``queue_reply``;
    otherwise WHERE is answered with the last MOVE target.
    """

    def __init__(self, fail_open: bool = False, fail_send: bool = False):
        self.logger = get_logger()
        self.fail_open = fail_open
        self.fail_send = fail_send
        self.sent: List[bytes] = []
        self.replies: Deque[bytes] = deque()
        self.settings: Optional[ConnectionSettings] = None
        self.position_x = 0.0
        self.position_y = 0.0
        self._open = False
        self._pending_where = 0

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self, settings: ConnectionSettings) -> bool:
        if self.fail_open:
            self.logger.debug(f"MOCK SERIAL: refusing to open {settings.port}", category="transport")
            return False
        self.settings = settings
        self._open = True
        self.logger.debug(f"MOCK SERIAL: Opened {settings.describe()}", category="transport")
        return True

    def close(self) -> bool:
        self._open = False
        self.logger.debug("MOCK SERIAL: Connection closed", category="transport")
        return True

    def send(self, line: bytes) -> bool:
        if not self._open or self.fail_send:
            return False
        self.sent.append(line)
        self.logger.debug(f"MOCK SERIAL >> {line!r}", category="transport")

        if line.startswith(WHERE_QUERY):
            self._pending_where += 1
        elif line.startswith(b"@MOVE P, "):
            self._track_move(line)
        return True

    def _track_move(self, line: bytes):
        fields = line[len(b"@MOVE P, "):].split(b",")[0].split()
        self.position_x = float(fields[0])
        self.position_y = float(fields[1])

    def queue_reply(self, reply: bytes):
        """Queue a raw reply line for the next receive_line call"""
        self.replies.append(reply)

    def receive_line(self, max_len: int) -> bytes:
        if not self._open:
            raise TableConnectionError("Mock port is not open", module="transport")

        if self.replies:
            reply = self.replies.popleft()
        elif self._pending_where:
            reply = format_position_reply(self.position_x, self.position_y)
        else:
            reply = b""
        self._pending_where = max(0, self._pending_where - 1)
        return reply[:max_len]

    def sent_text(self) -> List[str]:
        """Sent lines decoded as ASCII"""
        return [line.decode("ascii") for line in self.sent]
