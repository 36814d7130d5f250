"""
Exceptions raised while decoding a packet log.
"""
from typing import Optional


class LogFormatError(Exception):
    """Base class for structural problems in a packet log."""


class TruncatedHeader(LogFormatError):
    """Fewer bytes were available than a header read required."""

    def __init__(self, needed: int, available: int):
        super().__init__(f"need {needed} bytes, only {available} available")
        self.needed = needed
        self.available = available


class MalformedHeader(LogFormatError):
    """
    A packet violated a header invariant (IHL < 5, data offset < 5,
    negative payload length, or a packet cut short mid-way).

    Fatal to the walk that raised it.
    """

    def __init__(self, message: str, packet_index: int, offset: Optional[int] = None):
        if offset is not None:
            text = f"packet {packet_index} at offset {offset}: {message}"
        else:
            text = f"packet {packet_index}: {message}"
        super().__init__(text)
        self.packet_index = packet_index
        self.offset = offset
