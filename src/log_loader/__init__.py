"""
Packet log loading and stream walking.
"""

from .exceptions import IoUnavailable
from .log_reader import LogReader
from .stream_walker import PacketStreamWalker

__all__ = [
    'IoUnavailable',
    'LogReader',
    'PacketStreamWalker',
]
