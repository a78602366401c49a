"""
Abstract Transport Interface

Line-oriented byte channel the table controller talks through. The real
implementation wraps a pyserial port; the mock records traffic for
simulation and tests.
"""

from abc import ABC, abstractmethod

from core.settings import ConnectionSettings


class Transport(ABC):
    """Open/close/send/receive-line channel to the RCX driver"""

    @abstractmethod
    def open(self, settings: ConnectionSettings) -> bool:
        """
        Open the channel with the given line settings

        Returns:
            True if the channel is open afterwards, False otherwise
        """
        pass

    @abstractmethod
    def close(self) -> bool:
        """Close the channel, True on success"""
        pass

    @abstractmethod
    def send(self, line: bytes) -> bool:
        """Write one complete command line, True if the whole line was written"""
        pass

    @abstractmethod
    def receive_line(self, max_len: int) -> bytes:
        """
        Blocking read of one reply line, at most ``max_len`` bytes

        Returns:
            The bytes read, possibly empty if the read timed out

        Raises:
            TableConnectionError: if the channel fails while reading
        """
        pass

    @property
    @abstractmethod
    def is_open(self) -> bool:
        pass
