"""
Decoded packet data models.
"""

from .packet import (
    Conversation,
    Direction,
    IPHeader,
    PacketDescriptor,
    TCPHeader,
    TcpFlags,
)

__all__ = [
    'Conversation',
    'Direction',
    'IPHeader',
    'PacketDescriptor',
    'TCPHeader',
    'TcpFlags',
]
