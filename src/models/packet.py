# Packet data model
"""
Packet data models for tcplog.

THESE MODELS ARE IMMUTABLE. Header records are decoded once from the log
and never modified afterwards; the walker hands out new objects for every
packet.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Any, Dict, Tuple

# Fixed part of both the IPv4 and the TCP header
FIXED_HEADER_LEN = 20

# Smallest legal IHL / data offset, in 32-bit words
MIN_HEADER_WORDS = 5

IP_PROTO_TCP = 6


class TcpFlags(IntFlag):
    FIN = 0x01
    SYN = 0x02
    RST = 0x04
    PSH = 0x08
    ACK = 0x10
    URG = 0x20


# Order used when labelling a packet, e.g. [SYN-ACK] or [ACK-PSH-FIN]
_FLAG_LABEL_ORDER = (
    TcpFlags.SYN,
    TcpFlags.ACK,
    TcpFlags.PSH,
    TcpFlags.URG,
    TcpFlags.RST,
    TcpFlags.FIN,
)


class Direction(Enum):
    SERVER_TO_CLIENT = "server_to_client"
    CLIENT_TO_SERVER = "client_to_server"
    UNRELATED = "unrelated"


@dataclass(frozen=True)
class IPHeader:
    """
    Fixed 20-byte IPv4 header.

    Multi-byte fields are stored as host integers after decoding. Addresses
    are the raw 32-bit values; use ``format_ipv4`` for display.
    """
    version_and_ihl: int
    type_of_service: int
    total_length: int
    identification: int
    flags_and_fragment_offset: int
    time_to_live: int
    protocol: int
    header_checksum: int
    source_address: int
    destination_address: int

    @property
    def version(self) -> int:
        return self.version_and_ihl >> 4

    @property
    def ihl(self) -> int:
        """Header length in 32-bit words (low nibble)."""
        return self.version_and_ihl & 0x0F

    @property
    def header_length(self) -> int:
        return 4 * self.ihl

    @property
    def options_length(self) -> int:
        """Option/padding bytes following the fixed header (negative if IHL < 5)."""
        return self.header_length - FIXED_HEADER_LEN


@dataclass(frozen=True)
class TCPHeader:
    """Fixed 20-byte TCP header."""
    source_port: int
    destination_port: int
    sequence_number: int
    acknowledgment_number: int
    data_offset_and_reserved: int
    control_bits: int
    window: int
    checksum: int
    urgent_pointer: int

    @property
    def data_offset(self) -> int:
        """Header length in 32-bit words (high nibble)."""
        return self.data_offset_and_reserved >> 4

    @property
    def header_length(self) -> int:
        return 4 * self.data_offset

    @property
    def options_length(self) -> int:
        return self.header_length - FIXED_HEADER_LEN

    @property
    def flags(self) -> TcpFlags:
        return TcpFlags(self.control_bits & 0x3F)

    @property
    def flag_bits(self) -> str:
        """Six control bits, URG first, e.g. '010010' for SYN+ACK."""
        return format(self.control_bits & 0x3F, "06b")

    @property
    def flag_names(self) -> Tuple[str, ...]:
        flags = self.flags
        return tuple(flag.name for flag in _FLAG_LABEL_ORDER if flags & flag)


@dataclass(frozen=True)
class Conversation:
    """
    Server/client pair latched from the first packet of the log.

    The first record is the client's SYN, so its destination is the server.
    """
    server_address: int
    client_address: int

    @classmethod
    def from_first_packet(cls, ip: IPHeader) -> "Conversation":
        return cls(server_address=ip.destination_address,
                   client_address=ip.source_address)

    def classify(self, ip: IPHeader) -> Direction:
        src = ip.source_address
        dst = ip.destination_address
        if src == self.server_address and dst == self.client_address:
            return Direction.SERVER_TO_CLIENT
        if src == self.client_address and dst == self.server_address:
            return Direction.CLIENT_TO_SERVER
        return Direction.UNRELATED


@dataclass(frozen=True)
class PacketDescriptor:
    """
    One decoded packet as yielded by the stream walker.

    ``payload_start``/``payload_end`` are absolute offsets into the log;
    ``payload`` holds a copy of those bytes.
    """
    index: int
    ip: IPHeader
    tcp: TCPHeader
    direction: Direction
    payload_start: int
    payload_end: int
    payload: bytes = b""

    @property
    def payload_length(self) -> int:
        return self.payload_end - self.payload_start

    @property
    def header_length(self) -> int:
        return self.ip.header_length + self.tcp.header_length

    def to_dict(self) -> Dict[str, Any]:
        # Imported here; decoder depends on models, not the other way round
        from decoder.header_codec import format_ipv4

        return {
            "index": self.index,
            "src_ip": format_ipv4(self.ip.source_address),
            "dst_ip": format_ipv4(self.ip.destination_address),
            "src_port": self.tcp.source_port,
            "dst_port": self.tcp.destination_port,
            "ihl": self.ip.ihl,
            "total_length": self.ip.total_length,
            "ttl": self.ip.time_to_live,
            "ip_protocol": self.ip.protocol,
            "data_offset": self.tcp.data_offset,
            "seq": self.tcp.sequence_number,
            "ack": self.tcp.acknowledgment_number,
            "tcp_flags": self.tcp.control_bits & 0x3F,
            "tcp_flags_names": list(self.tcp.flag_names),
            "window": self.tcp.window,
            "direction": self.direction.value,
            "payload_start": self.payload_start,
            "payload_end": self.payload_end,
            "payload_length": self.payload_length,
        }
